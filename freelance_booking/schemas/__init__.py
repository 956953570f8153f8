"""Pydantic request/response schemas for the booking API."""
