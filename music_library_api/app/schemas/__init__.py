"""
Pydantic schema definitions for API payloads.

Schemas are separated from the storage layer to decouple API
representation from persistence.
"""
