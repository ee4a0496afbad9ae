"""Pydantic models for normalized Reddit data and tool responses."""
