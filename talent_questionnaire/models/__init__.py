"""Pydantic models exchanged between the logic layer and the HTTP surface."""
