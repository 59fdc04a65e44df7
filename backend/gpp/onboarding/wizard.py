"""Onboarding wizard: registry + controller + gates + profile writer.

`next()` is the wizard's only transition. On the profile step it first
awaits the profile write. A failed write is logged and the wizard moves
on anyway; the outcome is kept in `state.profile_saved` so a client can
show it, but the user is never held back by it.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Mapping

from gpp.middleware.exceptions import GateNotSatisfied, StepMismatch
from gpp.models.user import Availability, utcnow
from gpp.onboarding import gates
from gpp.onboarding.controller import ProgressController, WizardState
from gpp.onboarding.persistence import PersistenceFailure, ProfileWriter
from gpp.onboarding.steps import DISCLOSURES, ONBOARDING_STEPS, Step, StepKind, StepRegistry

logger = logging.getLogger("gpp.onboarding")


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


class OnboardingWizard:
    def __init__(
        self,
        state: WizardState,
        writer: ProfileWriter,
        user_id: str,
        registry: StepRegistry = ONBOARDING_STEPS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.state = state
        self.writer = writer
        self.user_id = user_id
        self.registry = registry
        self.controller = ProgressController(registry, state)
        self.clock = clock

    # ── Queries ──────────────────────────────────────────────

    @property
    def current_step(self) -> Step:
        return self.controller.current()[1]

    @property
    def is_complete(self) -> bool:
        return self.controller.is_terminal

    def can_advance(self) -> bool:
        return gates.can_advance(self.current_step.kind, self.state)

    def step_statuses(self) -> list[tuple[Step, str]]:
        index = self.controller.index
        statuses = []
        for step in self.registry:
            if step.id < index:
                statuses.append((step, "complete"))
            elif step.id == index:
                statuses.append((step, "current"))
            else:
                statuses.append((step, "upcoming"))
        return statuses

    # ── Step-local form state ────────────────────────────────

    def _require_step(self, kind: StepKind) -> None:
        current = self.current_step.kind
        if current is not kind:
            raise StepMismatch(expected=kind.value, current=current.value)

    def update_profile(
        self,
        *,
        bio: str | None = None,
        skills: Iterable[str] | None = None,
        interests: Iterable[str] | None = None,
        availability: Availability | None = None,
    ) -> None:
        """Replace the given profile form fields; omitted ones keep their value."""
        self._require_step(StepKind.PROFILE)
        fields = self.state.collected_fields
        if bio is not None:
            fields.bio = bio
        if skills is not None:
            fields.skills = _unique(skills)
        if interests is not None:
            fields.interests = _unique(interests)
        if availability is not None:
            fields.availability = Availability(availability)

    def set_acknowledgements(self, flags: Mapping[str, bool]) -> None:
        self._require_step(StepKind.SECURITY)
        unknown = sorted(set(flags) - set(DISCLOSURES))
        if unknown:
            raise ValueError(f"Unknown disclosures: {', '.join(unknown)}")
        self.state.acknowledgements = {**self.state.acknowledgements, **flags}

    # ── Transition ───────────────────────────────────────────

    async def _save_profile(self) -> None:
        try:
            await self.writer.write(self.user_id, self.state.collected_fields, self.clock())
        except PersistenceFailure:
            logger.exception("Error updating profile for user %s", self.user_id)
            self.state.profile_saved = False
        else:
            self.state.profile_saved = True

    async def next(self) -> Step:
        """Move to the following step if the active step's gate is open.

        A no-op on the terminal step.
        """
        if self.controller.is_terminal:
            return self.current_step

        step = self.current_step
        if not self.can_advance():
            raise GateNotSatisfied(step.kind.value)

        if step.kind is StepKind.PROFILE:
            await self._save_profile()

        self.controller.advance()
        logger.info(
            "User %s advanced onboarding %s -> %s",
            self.user_id,
            step.kind.value,
            self.current_step.kind.value,
        )
        return self.current_step
