"""
Rate limiting for public endpoints.

A single slowapi ``Limiter`` keyed by client IP. Counters live in memory,
so limits are per process.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

limiter = Limiter(key_func=get_remote_address)

FARMER_JOIN_LIMIT = settings.features.farmer_join_rate_limit
