"""Pydantic models and landmark enumeration."""
