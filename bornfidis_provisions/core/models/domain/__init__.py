"""Domain-level types shared by entities, services and I/O schemas."""

from .enums import (
    BookingStatus,
    ChefAssignmentStatus,
    ChefStatus,
    ChefTier,
    FarmerLanguage,
    FarmerRole,
    FarmerStatus,
    FulfillmentStatus,
    ImpactType,
    InviteRole,
    InviteStatusFilter,
    LedgerStatus,
    MemberRole,
    NeedFrequency,
    OrganizationType,
    PartnershipInterest,
    PayoutAccountStatus,
    PayoutStatus,
    StoryCategory,
)

__all__ = [
    "BookingStatus",
    "ChefAssignmentStatus",
    "ChefStatus",
    "ChefTier",
    "FarmerLanguage",
    "FarmerRole",
    "FarmerStatus",
    "FulfillmentStatus",
    "ImpactType",
    "InviteRole",
    "InviteStatusFilter",
    "LedgerStatus",
    "MemberRole",
    "NeedFrequency",
    "OrganizationType",
    "PartnershipInterest",
    "PayoutAccountStatus",
    "PayoutStatus",
    "StoryCategory",
]
