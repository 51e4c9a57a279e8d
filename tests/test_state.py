"""Tests for pure session state transitions."""

from dataclasses import FrozenInstanceError

import pytest

from workflow.errors import PreconditionError
from workflow.models import (
    CaptchaChallenge,
    Credential,
    SearchOutcome,
    Selections,
    SessionState,
)
from workflow.state import (
    can_run,
    merge,
    missing_prerequisites,
    normalize_code,
    require,
    reset_downstream_of,
    select,
)


class TestNormalizeCode:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values(self, value):
        assert normalize_code(value) is None

    def test_strips(self):
        assert normalize_code(" 12 ") == "12"

    def test_numbers_become_strings(self):
        assert normalize_code(5) == "5"


class TestMerge:
    def test_does_not_mutate(self):
        state = SessionState()
        new_state = merge(state, state_code="1")

        assert state.selections.state_code is None
        assert new_state.selections.state_code == "1"

    def test_state_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            SessionState().error = "x"

    def test_top_level_fields(self):
        credential = Credential.token("t")
        assert merge(SessionState(), credential=credential).credential == credential

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="bogus"):
            merge(SessionState(), bogus=1)

    def test_no_downstream_reset(self, located_state):
        new_state = merge(located_state, state_code="2")
        assert new_state.location == located_state.location


class TestResetDownstream:
    def test_state_code_reset(self, captcha_state):
        state = reset_downstream_of(captcha_state, "state_code")

        assert state.selections == Selections(state_code="1")
        assert state.districts is None
        assert state.complexes is None
        assert state.location is None
        assert state.captcha is None
        assert state.credential == captcha_state.credential
        assert state.captcha_serial == captcha_state.captcha_serial

    def test_dist_code_reset_keeps_districts(self, captcha_state):
        state = reset_downstream_of(captcha_state, "dist_code")

        assert state.districts == captcha_state.districts
        assert state.selections.dist_code == "5"
        assert state.selections.complex_code is None
        assert state.complexes is None
        assert state.location is None

    def test_captcha_reset_keeps_location(self, captcha_state):
        state = reset_downstream_of(captcha_state, "captcha")

        assert state.captcha is None
        assert state.location == captcha_state.location

    def test_clears_results(self, captcha_state):
        searched = merge(captcha_state, results=SearchOutcome.from_results({"status": 1}))
        assert reset_downstream_of(searched, "captcha").results is None

    def test_unknown_selection(self):
        with pytest.raises(ValueError):
            reset_downstream_of(SessionState(), "districts")


class TestSelect:
    def test_change_resets_downstream(self, captcha_state):
        state = select(captcha_state, "dist_code", "6")

        assert state.selections.dist_code == "6"
        assert state.complexes is None
        assert state.location is None
        assert state.captcha is None

    def test_same_value_keeps_state(self, captcha_state):
        assert select(captcha_state, "dist_code", " 5 ") is captcha_state

    def test_new_state_code_clears_everything_below(self, captcha_state):
        state = select(captcha_state, "state_code", "2")

        assert state.selections == Selections(state_code="2")
        assert state.districts is None
        assert state.captcha is None

    def test_est_code_change_clears_location(self, captcha_state):
        state = select(captcha_state, "est_code", "E1")

        assert state.location is None
        assert state.captcha is None
        assert state.complexes == captcha_state.complexes


class TestPrerequisites:
    def test_complexes_need_districts(self, bootstrapped_state):
        state = merge(bootstrapped_state, state_code="1", dist_code="5")

        assert missing_prerequisites(state, "list_complexes") == ["districts"]
        assert not can_run(state, "list_complexes")

    def test_search_needs_captcha(self, located_state):
        assert missing_prerequisites(located_state, "search_party") == ["captcha"]

    def test_ready(self, captcha_state):
        for step in ("list_districts", "list_complexes", "set_location", "search_party"):
            assert can_run(captcha_state, step)

    def test_require_raises(self):
        with pytest.raises(PreconditionError) as exc_info:
            require(SessionState(), "list_districts")

        assert exc_info.value.step == "list_districts"
        assert exc_info.value.missing == ["credential", "state_code"]
        assert "state code" in str(exc_info.value)

    def test_require_passes(self, captcha_state):
        require(captcha_state, "search_party")


def test_to_dict(captcha_state):
    data = captcha_state.to_dict()

    assert data["credential"] == {"kind": "token", "value": "tok-4"}
    assert data["selections"]["complex_code"] == "10"
    assert data["districts"] == [{"dist_code": "5", "dist_name": "Pune"}]
    assert data["captcha"] == {"image_url": "/captcha/abc.png", "serial": 1}
    assert data["results"] is None


def test_captcha_serial_carried_on_challenge():
    assert CaptchaChallenge(image_url="x", serial=3).serial == 3
