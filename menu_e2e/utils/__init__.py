"""Shared helpers: logging, errors, retries and pure calculations."""
