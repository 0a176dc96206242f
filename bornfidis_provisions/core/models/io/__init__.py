"""
I/O schemas for the HTTP API.

These Pydantic models define the contract between the API and its clients
for requests and responses. Entity models stay in ``core.database.entities``.
"""
