"""
Database entity models.

This package contains all database entity models organized by business domain
and table relationships. Each module represents either:

1. A single database table and its related logic
2. A business domain that spans multiple related tables

Modules:
- bookings: Booking inquiries and their payment/payout state
- chefs: Chefs, chef applications, availability and ingredient needs
- farmers: Farmers, their crops and join-form applications
- ingredients: Ingredient catalogue and per-booking ingredient orders
- assignments: Chef and farmer assignments to bookings
- payouts: Chef payout ledger
- invites: Role-scoped account invites
- impact: Impact events and cooperative members
- content: Community stories and partner inquiries
"""

from . import (
    assignments,
    bookings,
    chefs,
    content,
    farmers,
    impact,
    ingredients,
    invites,
    payouts,
)

__all__ = [
    "assignments",
    "bookings",
    "chefs",
    "content",
    "farmers",
    "impact",
    "ingredients",
    "invites",
    "payouts",
]
