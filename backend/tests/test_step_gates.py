"""Step gate tests."""

import pytest

from gpp.onboarding.controller import WizardState
from gpp.onboarding.gates import all_acknowledged, can_advance
from gpp.onboarding.steps import DISCLOSURES, StepKind


@pytest.mark.unit
class TestStepGates:

    def test_welcome_and_profile_always_open(self):
        state = WizardState()
        assert can_advance(StepKind.WELCOME, state)
        assert can_advance(StepKind.PROFILE, state)

    def test_completion_has_nothing_to_advance_to(self):
        assert not can_advance(StepKind.COMPLETION, WizardState())

    def test_security_starts_closed(self):
        state = WizardState()
        assert set(state.acknowledgements) == set(DISCLOSURES)
        assert not any(state.acknowledgements.values())
        assert not can_advance(StepKind.SECURITY, state)

    def test_security_opens_only_when_all_acknowledged(self):
        state = WizardState()
        for name in ("encryption", "privacy"):
            state.acknowledgements[name] = True
            assert not can_advance(StepKind.SECURITY, state)
        state.acknowledgements["safety"] = True
        assert can_advance(StepKind.SECURITY, state)

    @pytest.mark.parametrize("name", sorted(DISCLOSURES))
    def test_unticking_any_disclosure_closes_gate(self, name):
        state = WizardState(acknowledgements={k: True for k in DISCLOSURES})
        assert can_advance(StepKind.SECURITY, state)
        state.acknowledgements[name] = False
        assert not can_advance(StepKind.SECURITY, state)

    def test_evaluation_is_repeatable(self):
        state = WizardState(acknowledgements={"encryption": True, "privacy": False, "safety": True})
        before = dict(state.acknowledgements)
        results = {can_advance(StepKind.SECURITY, state) for _ in range(3)}
        assert results == {False}
        assert state.acknowledgements == before

    def test_all_acknowledged(self):
        assert all_acknowledged({"a": True, "b": True})
        assert not all_acknowledged({"a": True, "b": False})
