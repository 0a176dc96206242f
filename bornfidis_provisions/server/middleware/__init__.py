"""HTTP middleware for the Bornfidis Provisions API."""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
