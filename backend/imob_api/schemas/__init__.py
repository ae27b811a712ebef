"""Pydantic request/response contracts (separate from the ORM table)."""
