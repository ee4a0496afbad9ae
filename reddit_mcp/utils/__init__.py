"""Logging and output helpers."""
