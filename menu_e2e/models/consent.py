"""Pydantic models for consent-gate outcomes and preferences."""

from __future__ import annotations

from typing import Literal

import pydantic

GateOutcome = Literal[
    "clear",
    "rejected",
    "accepted",
    "dismissed",
    "force-removed",
    "failed",
]

DismissalAction = Literal[
    "reject",
    "accept",
    "escape-key",
    "click-outside",
    "close-button",
    "force-remove",
]

ConsentPreference = Literal["reject", "accept"]


class GateTimeouts(pydantic.BaseModel):
    """Sub-step budgets (milliseconds) used by the consent gate.

    Each sub-step is clipped to whatever is left of the gate's
    total budget, so one missing selector cannot exhaust it.
    """

    detect: int = 3000
    control_visible: int = 1500
    click: int = 3000
    hidden: int = 5000
    settle: int = 1000
    close_visible: int = 500
    poll_interval: int = 250


class GateResult(pydantic.BaseModel):
    """Outcome of one consent-gate invocation.

    ``force-removed`` is a terminal state of its own: the banner
    vanished from the DOM but the site never saw a consent choice.
    """

    outcome: GateOutcome
    action: DismissalAction | None = None
    selector: str | None = None
    banner_selector: str | None = None
    removed_elements: int = 0
    neutralized_overlays: int = 0
    network_idle: bool = False
    error: str | None = None
    duration_ms: float = 0.0

    @property
    def consent_recorded(self) -> bool:
        """Whether the site received a real reject/accept click."""
        return self.outcome in ("rejected", "accepted")

    @property
    def ready(self) -> bool:
        """Network settled and no consent overlay is left blocking input."""
        return self.outcome != "failed" and self.network_idle
