"""Step gates: pure predicates deciding whether "next" is allowed.

Only the security step has a real condition (every disclosure
acknowledged). The welcome and profile steps are always open, and the
completion step has nothing to advance to.
"""

from __future__ import annotations

from typing import Callable, Mapping

from gpp.onboarding.controller import WizardState
from gpp.onboarding.steps import StepKind


def all_acknowledged(acknowledgements: Mapping[str, bool]) -> bool:
    return all(acknowledgements.values())


def _always(state: WizardState) -> bool:
    return True


def _never(state: WizardState) -> bool:
    return False


def _security(state: WizardState) -> bool:
    return all_acknowledged(state.acknowledgements)


GATES: dict[StepKind, Callable[[WizardState], bool]] = {
    StepKind.WELCOME: _always,
    StepKind.PROFILE: _always,
    StepKind.SECURITY: _security,
    StepKind.COMPLETION: _never,
}


def can_advance(kind: StepKind, state: WizardState) -> bool:
    """Evaluate the gate for `kind` against the current form state."""
    return GATES[kind](state)
