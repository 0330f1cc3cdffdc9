"""Pydantic models for serialized results."""
