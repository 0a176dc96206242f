"""Bornfidis Provisions.

Backend for the Bornfidis Provisions marketplace, which connects farmers,
chefs, partners and administrators through booking, payout and
content-management workflows.

Core subpackages
----------------

- ``bornfidis_provisions.core``:

  - Logging and Logfire monitoring configuration.
  - The database layer (SQLModel entities and async repositories).
  - Request/response I/O schemas.
  - REST clients for the payments and messaging services.

- ``bornfidis_provisions.server``:

  - The FastAPI application, its routers, middleware and exception handlers.
  - The service layer holding payout, matching, tiering and impact rules.

Typical booking lifecycle
-------------------------

1. A client submits a booking inquiry.
2. An admin assigns a chef and one or more farmers.
3. The payments service reports the deposit and then the balance.
4. An admin confirms the job is complete.
5. Payouts run (idempotently) and impact events are recorded.
"""
