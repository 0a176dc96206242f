"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
sharing one session, for easy dependency injection in services.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .assignments import ChefAssignmentRepository, FarmerAssignmentRepository
from .bookings import BookingRepository
from .chefs import ChefApplicationRepository, ChefRepository
from .content import PartnerInquiryRepository, StoryRepository
from .farmers import FarmerApplicationRepository, FarmerRepository
from .impact import CooperativeMemberRepository, ImpactEventRepository
from .ingredients import BookingIngredientRepository, IngredientRepository
from .invites import InviteRepository
from .payouts import ChefPayoutRepository


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    bookings: BookingRepository
    chefs: ChefRepository
    chef_applications: ChefApplicationRepository
    farmers: FarmerRepository
    farmer_applications: FarmerApplicationRepository
    ingredients: IngredientRepository
    booking_ingredients: BookingIngredientRepository
    chef_assignments: ChefAssignmentRepository
    farmer_assignments: FarmerAssignmentRepository
    chef_payouts: ChefPayoutRepository
    invites: InviteRepository
    impact_events: ImpactEventRepository
    members: CooperativeMemberRepository
    stories: StoryRepository
    partner_inquiries: PartnerInquiryRepository


def build_sql_repos_from_session(*, session: AsyncSession) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        bookings=BookingRepository(session),
        chefs=ChefRepository(session),
        chef_applications=ChefApplicationRepository(session),
        farmers=FarmerRepository(session),
        farmer_applications=FarmerApplicationRepository(session),
        ingredients=IngredientRepository(session),
        booking_ingredients=BookingIngredientRepository(session),
        chef_assignments=ChefAssignmentRepository(session),
        farmer_assignments=FarmerAssignmentRepository(session),
        chef_payouts=ChefPayoutRepository(session),
        invites=InviteRepository(session),
        impact_events=ImpactEventRepository(session),
        members=CooperativeMemberRepository(session),
        stories=StoryRepository(session),
        partner_inquiries=PartnerInquiryRepository(session),
    )
