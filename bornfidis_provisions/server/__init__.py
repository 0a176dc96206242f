"""
Bornfidis Provisions Server Package.

This package contains the web server implementation for the Bornfidis Provisions marketplace.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration, constants, authentication and rate limiting.
    exception_handlers: Mapping of errors to JSON envelopes.
    middleware: Request timing and monitoring.
    services: Business rules (payouts, matching, tiers, impact, invites).
"""
