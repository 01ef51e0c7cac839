"""Cookie-consent handling.

The gate itself lives in ``gate.py``; selector catalogues in
``constants.py``; storage and cookie seeding in ``preferences.py``.
Prefer importing from the specific submodule.
"""

from menu_e2e.consent.gate import (
    ConsentGate as ConsentGate,
    ensure_ready as ensure_ready,
)
