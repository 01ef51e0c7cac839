"""camelCase helpers for reading objects returned by in-page scripts.

``page.evaluate`` snapshots use JavaScript naming; the Pydantic
models bind them through :func:`snake_to_camel` aliases.
"""

from __future__ import annotations


def snake_to_camel(name: str) -> str:
    """Convert a snake_case identifier such as ``"image_alt"`` to ``"imageAlt"``."""
    head, *rest = name.split("_")
    return head + "".join(w.capitalize() for w in rest)
