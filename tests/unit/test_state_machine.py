"""Unit tests for SessionStateMachine."""

import pytest

from english_detector.models.session import SessionStatus
from english_detector.services.state_machine import SessionStateMachine


def machine_in(*path: SessionStatus) -> SessionStateMachine:
    """Build a state machine driven through the given statuses."""
    machine = SessionStateMachine()
    for status in path:
        assert machine.transition(status), f"could not reach {status}"
    return machine


PATHS = {
    SessionStatus.IDLE: (),
    SessionStatus.LISTENING: (SessionStatus.LISTENING,),
    SessionStatus.ANALYZING: (SessionStatus.LISTENING, SessionStatus.ANALYZING),
    SessionStatus.STOPPED: (SessionStatus.LISTENING, SessionStatus.ANALYZING, SessionStatus.STOPPED),
    SessionStatus.ERROR: (SessionStatus.LISTENING, SessionStatus.ERROR),
}


@pytest.mark.unit
class TestSessionStateMachine:
    """Test cases for SessionStateMachine."""

    def test_initial_status_is_idle(self):
        assert SessionStateMachine().status is SessionStatus.IDLE

    def test_full_happy_path(self):
        machine = SessionStateMachine()

        assert machine.transition(SessionStatus.LISTENING)
        assert machine.is_listening
        assert machine.transition(SessionStatus.ANALYZING)
        assert machine.is_analyzing
        assert machine.transition(SessionStatus.STOPPED)
        assert machine.status is SessionStatus.STOPPED

    @pytest.mark.parametrize("source", [s for s in SessionStatus if s is not SessionStatus.LISTENING])
    def test_start_reenters_listening_from_any_other_state(self, source):
        machine = machine_in(*PATHS[source])

        assert machine.transition(SessionStatus.LISTENING)
        assert machine.status is SessionStatus.LISTENING

    def test_listening_cannot_reenter_listening(self):
        machine = machine_in(SessionStatus.LISTENING)

        assert not machine.transition(SessionStatus.LISTENING)
        assert machine.status is SessionStatus.LISTENING

    @pytest.mark.parametrize("source", list(SessionStatus))
    def test_error_reachable_from_any_state(self, source):
        machine = machine_in(*PATHS[source])

        assert machine.transition(SessionStatus.ERROR)
        assert machine.status is SessionStatus.ERROR

    @pytest.mark.parametrize("source", [SessionStatus.IDLE, SessionStatus.ANALYZING,
                                        SessionStatus.STOPPED, SessionStatus.ERROR])
    def test_analyzing_only_from_listening(self, source):
        machine = machine_in(*PATHS[source])

        assert not machine.transition(SessionStatus.ANALYZING)
        assert machine.status is source

    @pytest.mark.parametrize("source", [SessionStatus.IDLE, SessionStatus.LISTENING,
                                        SessionStatus.STOPPED, SessionStatus.ERROR])
    def test_stopped_only_from_analyzing(self, source):
        machine = machine_in(*PATHS[source])

        assert not machine.transition(SessionStatus.STOPPED)
        assert machine.status is source

    @pytest.mark.parametrize("source", list(SessionStatus))
    def test_idle_is_never_reentered(self, source):
        machine = machine_in(*PATHS[source])

        assert not machine.transition(SessionStatus.IDLE)
        assert machine.status is source

    def test_refused_transition_is_logged(self, caplog):
        machine = SessionStateMachine()

        with caplog.at_level("WARNING"):
            machine.transition(SessionStatus.STOPPED)

        assert "Refused transition: idle -> stopped" in caplog.text
