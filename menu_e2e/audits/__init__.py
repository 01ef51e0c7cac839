"""Accessibility audits over the rendered menu."""
