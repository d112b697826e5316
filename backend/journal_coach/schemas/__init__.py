"""Pydantic Schemas: request/response validation for the REST endpoints.

Invariants:
    - Schemas validate at the system boundary (user input, API responses)
    - No schema exposes an API key hash
"""
