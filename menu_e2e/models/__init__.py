"""Pydantic models shared by the page objects, gate and audits."""
