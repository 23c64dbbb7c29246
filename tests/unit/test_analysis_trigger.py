"""Unit tests for AnalysisTrigger."""

import asyncio

import pytest

from english_detector.exceptions import AnalysisError
from english_detector.models.session import SessionStatus
from english_detector.services.analysis_trigger import AnalysisTrigger, round_percent
from english_detector.services.state_machine import SessionStateMachine
from tests.fakes import FakeScorer


def analyzing_machine() -> SessionStateMachine:
    machine = SessionStateMachine()
    machine.transition(SessionStatus.LISTENING)
    machine.transition(SessionStatus.ANALYZING)
    return machine


def make_trigger(scorer, machine=None, current="s1"):
    machine = machine or analyzing_machine()
    current_ids = {"id": current}
    trigger = AnalysisTrigger(scorer, machine, lambda session_id: session_id == current_ids["id"])
    return trigger, machine, current_ids


@pytest.mark.unit
class TestRoundPercent:

    @pytest.mark.parametrize("raw, expected", [
        (87.4, 87),
        (87.5, 88),
        (86.5, 87),
        (0.49, 0),
        (100, 100),
        (-2.5, -2),
        (150.2, 150),
    ])
    def test_rounds_half_up_without_clamping(self, raw, expected):
        assert round_percent(raw) == expected


@pytest.mark.unit
class TestAnalysisTrigger:
    """Test cases for AnalysisTrigger."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_transcript_skips_remote_call(self, text):
        scorer = FakeScorer()
        trigger, machine, _ = make_trigger(scorer)

        result = asyncio.run(trigger.analyze("s1", text))

        assert result.percent == 0
        assert result.remote_call is False
        assert scorer.calls == []
        assert machine.status is SessionStatus.STOPPED

    def test_success_rounds_and_stops(self):
        scorer = FakeScorer(percent=87.4)
        trigger, machine, _ = make_trigger(scorer)

        result = asyncio.run(trigger.analyze("s1", "Hello world"))

        assert result.session_id == "s1"
        assert result.percent == 87
        assert result.remote_call is True
        assert machine.status is SessionStatus.STOPPED

    def test_sends_trimmed_text_exactly_once(self):
        scorer = FakeScorer()
        trigger, _, _ = make_trigger(scorer)

        asyncio.run(trigger.analyze("s1", "  Bonjour hello  "))

        assert scorer.calls == ["Bonjour hello"]

    def test_out_of_range_percent_passes_through(self):
        trigger, _, _ = make_trigger(FakeScorer(percent=123.6))

        result = asyncio.run(trigger.analyze("s1", "text"))

        assert result.percent == 124

    def test_failure_moves_to_error_and_raises(self):
        error = AnalysisError("Analysis API error: 500", status=500)
        trigger, machine, _ = make_trigger(FakeScorer(error=error))

        with pytest.raises(AnalysisError) as exc_info:
            asyncio.run(trigger.analyze("s1", "text"))

        assert exc_info.value is error
        assert machine.status is SessionStatus.ERROR

    def test_unexpected_scorer_exception_is_wrapped(self):
        cause = ConnectionResetError("peer reset")
        trigger, machine, _ = make_trigger(FakeScorer(error=cause))

        with pytest.raises(AnalysisError) as exc_info:
            asyncio.run(trigger.analyze("s1", "text"))

        assert exc_info.value.cause is cause
        assert machine.status is SessionStatus.ERROR

    @pytest.mark.parametrize("raw", [float("nan"), float("inf"), None, "87", True])
    def test_non_numeric_score_is_an_analysis_error(self, raw):
        """Test that a scorer returning anything but a finite number fails the session."""
        trigger, machine, _ = make_trigger(FakeScorer(percent=raw))

        with pytest.raises(AnalysisError, match="non-numeric percent") as exc_info:
            asyncio.run(trigger.analyze("s1", "hello"))

        assert exc_info.value.cause is raw
        assert machine.status is SessionStatus.ERROR

    def test_stale_success_is_discarded(self):
        scorer = FakeScorer(percent=55.0)
        trigger, machine, current_ids = make_trigger(scorer)

        async def scenario():
            scorer.gate = asyncio.Event()
            task = asyncio.ensure_future(trigger.analyze("s1", "text"))
            await asyncio.sleep(0)
            current_ids["id"] = "s2"
            scorer.gate.set()
            return await task

        assert asyncio.run(scenario()) is None
        assert machine.status is SessionStatus.ANALYZING

    def test_stale_failure_is_discarded(self):
        scorer = FakeScorer(error=AnalysisError("boom"))
        trigger, machine, current_ids = make_trigger(scorer)
        current_ids["id"] = "s2"

        assert asyncio.run(trigger.analyze("s1", "text")) is None
        assert machine.status is SessionStatus.ANALYZING

    def test_result_discarded_when_no_longer_analyzing(self):
        machine = analyzing_machine()
        machine.transition(SessionStatus.ERROR)
        trigger, _, _ = make_trigger(FakeScorer(), machine=machine)

        assert asyncio.run(trigger.analyze("s1", "text")) is None
        assert machine.status is SessionStatus.ERROR

    def test_repeat_request_for_same_session_is_ignored(self):
        scorer = FakeScorer()
        trigger, _, _ = make_trigger(scorer)

        asyncio.run(trigger.analyze("s1", "text"))
        assert asyncio.run(trigger.analyze("s1", "text")) is None

        assert scorer.calls == ["text"]
