"""
Models shared across layers.

- domain: enums describing statuses, roles and categories.
- io: Pydantic request/response schemas for the HTTP API.
"""
