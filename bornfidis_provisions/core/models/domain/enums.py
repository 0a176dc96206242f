"""Domain enums for the marketplace models."""

from __future__ import annotations

from enum import Enum


class BookingStatus(str, Enum):
    """Lifecycle status of a booking inquiry."""

    new = "New"
    contacted = "Contacted"
    quoted = "Quoted"
    booked = "booked"  # Deposit received.
    completed = "completed"
    cancelled = "cancelled"


class ChefStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    active = "active"
    inactive = "inactive"
    rejected = "rejected"


class FarmerStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    inactive = "inactive"


class PayoutAccountStatus(str, Enum):
    """State of a provider's connected payout account."""

    not_connected = "not_connected"
    pending = "pending"
    restricted = "restricted"  # Details submitted but payouts disabled.
    connected = "connected"  # Charges and payouts enabled.


class ChefAssignmentStatus(str, Enum):
    assigned = "assigned"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class PayoutStatus(str, Enum):
    """Payout state shared by chef and farmer assignments and ingredient orders."""

    pending = "pending"
    on_hold = "on_hold"
    blocked = "blocked"
    failed = "failed"
    paid = "paid"


class LedgerStatus(str, Enum):
    """Status of a row in the chef payout ledger."""

    pending = "pending"
    paid = "paid"
    failed = "failed"


class FarmerRole(str, Enum):
    """What a farmer supplies for a booking."""

    produce = "produce"
    fish = "fish"
    meat = "meat"
    dairy = "dairy"
    spice = "spice"
    beverage = "beverage"


class FulfillmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    delivered = "delivered"
    paid = "paid"


class NeedFrequency(str, Enum):
    weekly = "weekly"
    biweekly = "biweekly"
    monthly = "monthly"
    custom = "custom"


class InviteRole(str, Enum):
    farmer = "FARMER"
    chef = "CHEF"
    educator = "EDUCATOR"
    partner = "PARTNER"


class InviteStatusFilter(str, Enum):
    pending = "pending"
    accepted = "accepted"
    expired = "expired"
    all = "all"


class ChefTier(str, Enum):
    """Chef rate tier; the order of declaration is the tier ordinal."""

    standard = "STANDARD"
    pro = "PRO"
    elite = "ELITE"


class ImpactType(str, Enum):
    soil = "soil"
    farmer = "farmer"
    chef = "chef"
    guest = "guest"
    community = "community"


class MemberRole(str, Enum):
    """Role of a cooperative member."""

    farmer = "farmer"
    chef = "chef"
    educator = "educator"
    builder = "builder"
    partner = "partner"


class StoryCategory(str, Enum):
    testimony = "testimony"
    impact = "impact"
    farmer = "farmer"
    chef = "chef"
    community = "community"
    partner = "partner"


class OrganizationType(str, Enum):
    media = "media"
    nonprofit = "nonprofit"
    business = "business"
    church = "church"
    government = "government"
    other = "other"


class PartnershipInterest(str, Enum):
    sponsorship = "sponsorship"
    collaboration = "collaboration"
    media = "media"
    distribution = "distribution"
    other = "other"


class FarmerLanguage(str, Enum):
    english = "en"
    patois = "pat"
