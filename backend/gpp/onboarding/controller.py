"""Wizard session state and the progress controller that owns the step index."""

from __future__ import annotations

from dataclasses import dataclass, field

from gpp.models.user import Availability
from gpp.onboarding.steps import DISCLOSURES, Step, StepRegistry


def default_acknowledgements() -> dict[str, bool]:
    return {name: False for name in DISCLOSURES}


@dataclass
class ProfileFields:
    """Profile form state collected on the profile step."""

    bio: str = ""
    skills: list[str] = field(default_factory=list)
    interests: list[str] = field(default_factory=list)
    availability: Availability = Availability.OCCASIONALLY

    def to_dict(self) -> dict:
        return {
            "bio": self.bio,
            "skills": list(self.skills),
            "interests": list(self.interests),
            "availability": self.availability.value,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "ProfileFields":
        data = data or {}
        return cls(
            bio=data.get("bio", ""),
            skills=list(data.get("skills", [])),
            interests=list(data.get("interests", [])),
            availability=Availability(data.get("availability", Availability.OCCASIONALLY.value)),
        )


@dataclass
class WizardState:
    current_step_index: int = 0
    collected_fields: ProfileFields = field(default_factory=ProfileFields)
    acknowledgements: dict[str, bool] = field(default_factory=default_acknowledgements)
    # Outcome of the one profile write: None until attempted
    profile_saved: bool | None = None


class ProgressController:
    """Single authority for which step is active.

    `advance()` trusts that the caller has already checked the active
    step's gate. It moves exactly one step forward and stops at the
    terminal step; it never moves backward and never raises.
    """

    def __init__(self, registry: StepRegistry, state: WizardState):
        self.registry = registry
        self.state = state

    @property
    def index(self) -> int:
        return self.state.current_step_index

    @property
    def is_terminal(self) -> bool:
        return self.index >= self.registry.step_count - 1

    def current(self) -> tuple[int, Step]:
        return self.index, self.registry.step_at(self.index)

    def advance(self) -> int:
        if not self.is_terminal:
            self.state.current_step_index = self.index + 1
        return self.index
