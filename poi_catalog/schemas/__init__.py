"""Pydantic schemas for requests, responses and conversion results."""
