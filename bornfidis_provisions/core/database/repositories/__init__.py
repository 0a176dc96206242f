"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain
and table relationships. Each module provides type-safe async data access
operations for its corresponding SQLModel entity models.

Modules:
- base: SqlModelRepository, the shared CRUD every repository extends
- bookings: Booking inquiry operations
- chefs: Chef, application, availability and need operations
- farmers: Farmer, crop and application operations
- ingredients: Ingredient catalogue and booking ingredient operations
- assignments: Chef and farmer assignment operations
- payouts: Chef payout ledger operations
- invites: Invite operations
- impact: Impact events and cooperative member operations
- content: Story and partner inquiry operations
- bundle: SqlRepoBundle for dependency injection
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
from .bundle import SqlRepoBundle, build_sql_repos_from_session

__all__ = [
    "SqlRepoBundle",
    "assignments",
    "bookings",
    "build_sql_repos_from_session",
    "chefs",
    "content",
    "farmers",
    "impact",
    "ingredients",
    "invites",
    "payouts",
]
