"""Persistence and input providers."""
