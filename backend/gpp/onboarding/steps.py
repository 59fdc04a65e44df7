"""Onboarding step registry.

The wizard is a fixed, linear sequence of four steps:

  0 Welcome    → informational
  1 Profile    → bio / skills / interests / availability (all optional)
  2 Security   → three disclosures that must all be acknowledged
  3 Complete   → terminal, offers exit destinations only

Steps carry a `StepKind` tag instead of any presentation object; callers
dispatch on the kind to decide what to render.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class StepKind(str, enum.Enum):
    WELCOME = "welcome"
    PROFILE = "profile"
    SECURITY = "security"
    COMPLETION = "completion"


@dataclass(frozen=True)
class Step:
    id: int
    kind: StepKind
    title: str
    description: str


class StepRegistry:
    """Immutable ordered collection of steps.

    `step_at` raises IndexError outside `0..step_count - 1`; negative
    indexes do not wrap around.
    """

    def __init__(self, steps: list[Step] | tuple[Step, ...]):
        ids = [s.id for s in steps]
        if ids != list(range(len(steps))):
            raise ValueError(f"Step ids must be 0..{len(steps) - 1} in order, got {ids}")
        if not steps:
            raise ValueError("A registry needs at least one step")
        self._steps: tuple[Step, ...] = tuple(steps)

    @property
    def step_count(self) -> int:
        return len(self._steps)

    def step_at(self, index: int) -> Step:
        if index < 0:
            raise IndexError(index)
        return self._steps[index]

    def __iter__(self):
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)


ONBOARDING_STEPS = StepRegistry((
    Step(0, StepKind.WELCOME, "Welcome", "Get introduced to the platform"),
    Step(1, StepKind.PROFILE, "Profile", "Tell us about yourself"),
    Step(2, StepKind.SECURITY, "Security", "Review security practices"),
    Step(3, StepKind.COMPLETION, "Complete", "You're all set!"),
))


# ── Option catalogs for the profile step ────────────────────

SKILL_OPTIONS: tuple[str, ...] = (
    "Legal Research",
    "Community Organizing",
    "Documentation",
    "Technical Support",
    "Translation",
    "Media & Communications",
    "First Aid",
    "Security & Safety",
)

INTEREST_OPTIONS: tuple[str, ...] = (
    "Civil Rights",
    "Police Accountability",
    "Environmental Justice",
    "Housing Rights",
    "Worker Rights",
    "Immigration",
    "Criminal Justice Reform",
    "Education Equity",
)

# Named disclosures on the security step
DISCLOSURES: dict[str, str] = {
    "encryption": "End-to-End Encryption",
    "privacy": "Privacy First",
    "safety": "Digital Safety",
}
