"""Tests for the turn engine: lifecycle, rounds, countdown and failure handling."""

from __future__ import annotations

import asyncio

import pytest

from debate_engine.core import DebateEngine
from debate_engine.exceptions import DurationLockedError, InvalidStartError
from debate_engine.types import TIE, EngineState, Stance
from judges.verdict import decide_winner
from fakes import EventRecorder, GatedGenerator, ScriptedGenerator, build_config, wait_until


class FixedCoin:
    """Stand-in for random.Random returning a fixed sequence of draws."""

    def __init__(self, *values: float):
        self.values = list(values)

    def random(self) -> float:
        return self.values.pop(0)


def test_empty_topic_is_rejected_without_state_change(manual_config) -> None:
    """An empty topic never creates a session or leaves the engine running."""

    async def scenario() -> DebateEngine:
        engine = DebateEngine(manual_config, ScriptedGenerator())
        for topic in ("", "   "):
            with pytest.raises(InvalidStartError):
                await engine.start(topic)
        return engine

    engine = asyncio.run(scenario())

    assert engine.session is None
    assert engine.is_running is False
    assert engine.state is EngineState.IDLE


def test_start_while_running_is_rejected(manual_config, sample_debate_topic) -> None:
    """A second start leaves the running session untouched."""

    async def scenario():
        engine = DebateEngine(manual_config, ScriptedGenerator())
        session = await engine.start(sample_debate_topic)
        await engine.run_round()
        with pytest.raises(InvalidStartError):
            await engine.start("Another topic entirely")
        still_same = engine.session is session
        message_count = len(session.messages)
        await engine.close()
        return engine, session, still_same, message_count

    engine, session, still_same, message_count = asyncio.run(scenario())

    assert still_same
    assert session.topic == sample_debate_topic
    assert message_count == 2


def test_start_resets_session_and_assigns_complementary_stances(manual_config) -> None:
    """Every start gets a fresh session with re-drawn, complementary stances."""
    recorder = EventRecorder()

    async def scenario():
        engine = DebateEngine(
            manual_config, ScriptedGenerator(), event_callback=recorder, rng=FixedCoin(0.9, 0.1)
        )
        first = await engine.start("Cats make better pets than dogs", duration_seconds=1)
        await engine.run_round()
        await engine.tick()
        second = await engine.start("Cats make better pets than dogs", duration_seconds=1)
        await engine.close()
        return first, second

    first, second = asyncio.run(scenario())

    assert first.stances == {"gemini": Stance.FAVOR, "groq": Stance.OPPOSE}
    assert second.stances == {"gemini": Stance.OPPOSE, "groq": Stance.FAVOR}
    assert second.session_id != first.session_id
    assert second.messages == []
    assert second.scores == {"gemini": 0, "groq": 0}
    assert second.winner is None
    assert second.time_remaining_seconds == 1

    started = recorder.of_type("debate_started")
    assert [event["stances"]["gemini"] for event in started] == ["favor", "oppose"]


def test_round_alternates_and_passes_full_history(manual_config, sample_debate_topic) -> None:
    """A speaks first; B sees A's committed message in its history."""
    generator = ScriptedGenerator("Opening from A.", "Reply from B.")

    async def scenario():
        engine = DebateEngine(manual_config, generator)
        session = await engine.start(sample_debate_topic)
        messages = await engine.run_round()
        await engine.close()
        return session, messages

    session, messages = asyncio.run(scenario())

    assert [m.participant for m in messages] == ["gemini", "groq"]
    assert [m.content for m in session.messages] == ["Opening from A.", "Reply from B."]
    assert all(m.round_number == 1 for m in messages)
    assert generator.calls[0]["history"] == []
    assert [m.content for m in generator.calls[1]["history"]] == ["Opening from A."]
    assert generator.calls[0]["stance"] is session.stances["gemini"]
    assert generator.calls[1]["stance"] is session.stances["groq"]


def test_message_is_scored_against_history_before_it(manual_config) -> None:
    """The opening message has no opponent to rebut and gets the neutral score."""

    async def scenario():
        engine = DebateEngine(manual_config, ScriptedGenerator())
        session = await engine.start("Remote work improves productivity")
        await engine.run_round()
        await engine.close()
        return session

    session = asyncio.run(scenario())

    opening, reply = session.messages
    assert opening.criteria["persuasiveness"] == 5
    assert reply.criteria["persuasiveness"] == 10
    assert all(0 <= m.score <= 50 for m in session.messages)


def test_scores_equal_sum_of_message_scores(manual_config, sample_debate_topic) -> None:
    """After N rounds each total is the sum of that participant's message scores."""

    async def scenario():
        engine = DebateEngine(manual_config, ScriptedGenerator())
        session = await engine.start(sample_debate_topic)
        for _ in range(3):
            await engine.run_round()
        await engine.close()
        return session

    session = asyncio.run(scenario())

    assert len(session.messages) == 6
    assert session.round_number == 3
    for participant in ("gemini", "groq"):
        expected = sum(m.score for m in session.messages_for(participant))
        assert session.scores[participant] == expected


def test_ticks_to_zero_deactivate_and_decide_winner_once(manual_config) -> None:
    """The winner is set exactly once, from the totals frozen at expiry."""
    recorder = EventRecorder()

    async def scenario():
        engine = DebateEngine(manual_config, ScriptedGenerator(), event_callback=recorder)
        session = await engine.start("X", duration_seconds=120)
        await engine.run_round()

        for _ in range(119):
            await engine.tick()
        assert session.is_active
        assert session.winner is None

        await engine.tick()
        frozen_scores = dict(session.scores)
        winner = session.winner

        # Further ticks and stop requests are no-ops once deactivated
        await engine.tick()
        await engine.stop()
        await asyncio.wait_for(engine.wait(), timeout=2.0)
        return engine, session, frozen_scores, winner

    engine, session, frozen_scores, winner = asyncio.run(scenario())

    assert session.is_active is False
    assert engine.state is EngineState.IDLE
    assert session.time_remaining_seconds == 0
    assert winner == decide_winner(frozen_scores)
    assert session.winner == winner
    assert session.scores == frozen_scores
    completed = recorder.of_type("debate_completed")
    assert len(completed) == 1
    assert completed[0]["winner"] == winner
    assert recorder.of_type("time_tick")[-1]["time_remaining_seconds"] == 0


def test_no_round_starts_after_deactivation(manual_config) -> None:
    """run_round is a no-op once time has expired."""
    generator = ScriptedGenerator()

    async def scenario():
        engine = DebateEngine(manual_config, generator)
        session = await engine.start("Nuclear power is essential", duration_seconds=1)
        await engine.tick()
        messages = await engine.run_round()
        await engine.close()
        return session, messages

    session, messages = asyncio.run(scenario())

    assert messages == []
    assert session.messages == []
    assert generator.calls == []
    assert session.winner == TIE


def test_collaborator_failure_skips_turn_and_keeps_running(manual_config) -> None:
    """A failed call leaves messages and scores unchanged; the debate goes on."""
    recorder = EventRecorder()
    generator = ScriptedGenerator(RuntimeError("provider exploded"))

    async def scenario():
        engine = DebateEngine(manual_config, generator, event_callback=recorder)
        session = await engine.start("Social media does more harm than good")
        failed_round = await engine.run_round()
        messages_after_failure = list(session.messages)
        scores_after_failure = dict(session.scores)
        running_after_failure = engine.is_running
        next_round = await engine.run_round()
        await engine.close()
        return (
            session,
            failed_round,
            messages_after_failure,
            scores_after_failure,
            running_after_failure,
            next_round,
        )

    (
        session,
        failed_round,
        messages_after_failure,
        scores_after_failure,
        running_after_failure,
        next_round,
    ) = asyncio.run(scenario())

    assert failed_round == []
    assert messages_after_failure == []
    assert scores_after_failure == {"gemini": 0, "groq": 0}
    assert running_after_failure is True
    # The failed round is abandoned, so B was not asked in round 1
    assert [call["participant"] for call in generator.calls] == ["gemini", "gemini", "groq"]
    assert len(next_round) == 2

    failures = recorder.of_type("turn_failed")
    assert len(failures) == 1
    assert failures[0]["participant"] == "gemini"
    assert failures[0]["exception_type"] == "RuntimeError"
    assert failures[0]["exception_message"] == "provider exploded"


def test_second_speaker_failure_keeps_first_message(manual_config) -> None:
    """If B fails, A's committed message and score stay."""

    async def scenario():
        engine = DebateEngine(
            manual_config, ScriptedGenerator("A opens.", ValueError("bad response"))
        )
        session = await engine.start("Homework should be banned")
        messages = await engine.run_round()
        await engine.close()
        return session, messages

    session, messages = asyncio.run(scenario())

    assert [m.participant for m in messages] == ["gemini"]
    assert session.scores["groq"] == 0
    assert session.scores["gemini"] == messages[0].score


def test_hung_collaborator_times_out_as_failed_turn(tmp_path) -> None:
    """A call exceeding turn_timeout is treated like any other failure."""
    config = build_config(str(tmp_path), turn_timeout=0.05)
    recorder = EventRecorder()

    async def scenario():
        engine = DebateEngine(config, ScriptedGenerator(delay=1.0), event_callback=recorder)
        session = await engine.start("Space exploration is worth the cost")
        messages = await engine.run_round()
        await engine.close()
        return session, messages

    session, messages = asyncio.run(scenario())

    assert messages == []
    assert session.messages == []
    failures = recorder.of_type("turn_failed")
    assert failures[0]["exception_type"] == "TurnTimeoutError"


def test_bounded_retry_recovers_failed_call(tmp_path) -> None:
    """With turn_retries set, a transient failure is retried before giving up."""
    config = build_config(str(tmp_path), turn_retries=1, retry_backoff=0.0)
    generator = ScriptedGenerator(RuntimeError("transient"), "Recovered argument.")
    recorder = EventRecorder()

    async def scenario():
        engine = DebateEngine(config, generator, event_callback=recorder)
        session = await engine.start("Public transport should be free")
        messages = await engine.run_round()
        await engine.close()
        return session, messages

    session, messages = asyncio.run(scenario())

    assert messages[0].content == "Recovered argument."
    assert len(messages) == 2
    assert recorder.of_type("turn_failed") == []
    assert len(generator.calls) == 3


def test_in_flight_turn_after_expiry_is_kept_but_not_scored(manual_config) -> None:
    """A reply landing after deactivation is recorded, unscored, and ends the round."""
    generator = GatedGenerator()
    recorder = EventRecorder()

    async def scenario():
        engine = DebateEngine(manual_config, generator, event_callback=recorder)
        session = await engine.start("Electric cars are the future", duration_seconds=1)

        round_task = asyncio.create_task(engine.run_round())
        await asyncio.wait_for(generator.entered.wait(), timeout=2.0)

        await engine.tick()
        winner = session.winner
        scores = dict(session.scores)

        generator.gate.set()
        messages = await asyncio.wait_for(round_task, timeout=2.0)
        await engine.close()
        return session, messages, winner, scores

    session, messages, winner, scores = asyncio.run(scenario())

    assert len(messages) == 1
    assert messages[0].counted is False
    assert session.messages == messages
    assert session.scores == scores == {"gemini": 0, "groq": 0}
    assert session.winner == winner == TIE
    assert len(generator.calls) == 1
    assert recorder.of_type("new_message")[0]["counted"] is False


def test_stop_ends_debate_with_current_scores(manual_config, sample_debate_topic) -> None:
    """An external stop request decides the winner like time expiry does."""
    recorder = EventRecorder()

    async def scenario():
        engine = DebateEngine(manual_config, ScriptedGenerator(), event_callback=recorder)
        session = await engine.start(sample_debate_topic)
        await engine.run_round()
        await engine.stop()
        await asyncio.wait_for(engine.wait(), timeout=2.0)
        return engine, session

    engine, session = asyncio.run(scenario())

    assert session.is_active is False
    assert engine.is_running is False
    assert session.winner == decide_winner(session.scores)
    assert session.time_remaining_seconds > 0
    assert len(recorder.of_type("debate_completed")) == 1
    assert engine.last_decision is not None
    assert engine.last_decision.winner_id == session.winner


def test_failing_event_callback_does_not_break_debate(manual_config) -> None:
    """Errors raised by the observer are logged; rounds, countdown and verdict go on."""
    seen: list[str] = []

    async def broken_callback(event_type, data) -> None:
        seen.append(event_type)
        raise RuntimeError("observer went away")

    async def scenario():
        engine = DebateEngine(manual_config, ScriptedGenerator(), event_callback=broken_callback)
        session = await engine.start("Homework should be abolished", duration_seconds=1)
        await engine.run_round()
        await engine.run_round()
        await engine.tick()
        await engine.close()
        return engine, session

    engine, session = asyncio.run(scenario())

    assert len(session.messages) == 4
    assert all(message.counted for message in session.messages)
    assert session.winner == decide_winner(session.scores)
    assert session.is_active is False
    assert engine.is_running is False
    assert seen[0] == "debate_started"
    assert seen.count("new_message") == 4
    assert seen[-1] == "debate_completed"


def test_close_collects_round_loop_left_from_previous_debate(tmp_path) -> None:
    """A loop still waiting on a reply when its debate ended is cancelled by close()."""
    config = build_config(str(tmp_path), warmup_delay=0.0)
    generator = GatedGenerator()

    async def scenario():
        engine = DebateEngine(config, generator)
        await engine.start("Libraries beat bookstores")
        old_loop = engine._loop_task
        await asyncio.wait_for(generator.entered.wait(), timeout=2.0)

        await engine.stop()
        await engine.start("Bookstores beat libraries")
        still_waiting = not old_loop.done()

        await engine.close()
        return engine, old_loop, still_waiting

    engine, old_loop, still_waiting = asyncio.run(scenario())

    assert still_waiting
    assert old_loop.done()
    assert engine._loop_task.done()
    assert engine._background_tasks == set()


def test_change_duration_only_while_idle(manual_config) -> None:
    """Duration changes are rejected while running and validated while idle."""

    async def scenario():
        engine = DebateEngine(manual_config, ScriptedGenerator())
        assert engine.time_remaining_seconds == 120

        assert engine.change_duration(5) == 300
        assert engine.time_remaining_seconds == 300
        with pytest.raises(ValueError):
            engine.change_duration(4)

        session = await engine.start("Zoos should be abolished")
        with pytest.raises(DurationLockedError):
            engine.change_duration(1)
        locked_minutes = engine.duration_minutes
        remaining = session.time_remaining_seconds

        await engine.stop()
        engine.change_duration(1)
        await engine.close()
        return engine, locked_minutes, remaining

    engine, locked_minutes, remaining = asyncio.run(scenario())

    assert locked_minutes == 5
    assert remaining == 300
    assert engine.duration_minutes == 1
    assert engine.time_remaining_seconds == 60


@pytest.mark.slow
def test_full_debate_runs_to_completion(fast_config) -> None:
    """With real timers the loop alternates speakers until the countdown expires."""
    recorder = EventRecorder()

    async def scenario():
        engine = DebateEngine(
            fast_config, ScriptedGenerator(delay=0.001), event_callback=recorder
        )
        session = await engine.start("Universal basic income should be adopted", duration_seconds=3)
        await wait_until(lambda: not session.is_active, timeout=5.0)
        await asyncio.wait_for(engine.wait(), timeout=5.0)
        return engine, session

    engine, session = asyncio.run(scenario())

    assert session.is_active is False
    assert session.time_remaining_seconds == 0
    assert session.messages
    for index, message in enumerate(session.messages):
        assert message.participant == ("gemini", "groq")[index % 2]

    for participant in ("gemini", "groq"):
        counted = [m.score for m in session.messages_for(participant) if m.counted]
        assert session.scores[participant] == sum(counted)

    assert session.winner == decide_winner(session.scores)
    assert len(recorder.of_type("debate_completed")) == 1
    assert [t["time_remaining_seconds"] for t in recorder.of_type("time_tick")] == [2, 1, 0]
