"""Core turn engine for time-boxed debates between two models."""

from typing import Any
import asyncio
import logging
import random
from collections.abc import Coroutine, Sequence
from datetime import datetime

from config.settings import AppConfig
from judges.base import BaseJudge, JudgeDecision
from judges.heuristic_judge import HeuristicJudge
from judges.verdict import decide_winner
from .exceptions import DurationLockedError, InvalidStartError, TurnTimeoutError
from .generator import ArgumentGenerator
from .models import DebateMessage, DebateSession
from .stances import assign_stances
from .types import (
    DebateCompletedEventData,
    DebateStartedEventData,
    EngineState,
    EventCallback,
    EventData,
    MessageKind,
    Stance,
    TimeTickEventData,
    TurnFailedEventData,
)

logger = logging.getLogger(__name__)


class DebateEngine:
    """Runs one debate at a time: alternating turns, a countdown, and the verdict.

    The engine is the only writer of its ``DebateSession``. The countdown timer
    and the round loop run as two asyncio tasks; every read-modify-write of
    the shared session fields happens under ``_state_lock``.
    """

    def __init__(
        self,
        config: AppConfig,
        generator: ArgumentGenerator,
        judge: BaseJudge | None = None,
        event_callback: EventCallback | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config
        self.timing = config.debate
        self.participants: tuple[str, ...] = tuple(config.participant_ids)
        self.generator = generator
        self.judge = judge or HeuristicJudge()
        self.event_callback = event_callback
        self._rng = rng

        self.state = EngineState.IDLE
        self.session: DebateSession | None = None
        self.last_decision: JudgeDecision | None = None
        self.duration_minutes = config.debate.duration_minutes
        self._idle_time_remaining = self.duration_minutes * 60

        self._state_lock = asyncio.Lock()
        self._stopped = asyncio.Event()
        self._timer_task: asyncio.Task[None] | None = None
        self._loop_task: asyncio.Task[None] | None = None
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def is_running(self) -> bool:
        return self.state is EngineState.RUNNING

    @property
    def time_remaining_seconds(self) -> int:
        """Countdown shown to observers: live while running, the duration when idle."""
        if self.is_running and self.session is not None:
            return self.session.time_remaining_seconds
        return self._idle_time_remaining

    async def start(self, topic: str, duration_seconds: int | None = None) -> DebateSession:
        """Start a new debate; raises InvalidStartError without touching state."""
        topic = (topic or "").strip()

        async with self._state_lock:
            if not topic:
                raise InvalidStartError("Debate topic cannot be empty")
            if self.is_running:
                raise InvalidStartError("A debate is already running")

            duration = (
                duration_seconds if duration_seconds is not None else self.duration_minutes * 60
            )
            if duration <= 0:
                raise InvalidStartError(f"Duration must be positive, got {duration}s")

            session = DebateSession(
                topic=topic,
                duration_seconds=duration,
                participants=self.participants,
            )
            session.stances = assign_stances(self.participants, self._rng)
            session.is_active = True
            session.started_at = datetime.now()

            self.session = session
            self.last_decision = None
            self.state = EngineState.RUNNING
            self._stopped = asyncio.Event()

        stance_summary = ", ".join(
            f"{pid}={stance.value}" for pid, stance in session.stances.items()
        )
        logger.info(f"Started debate {session.session_id}: '{topic}' ({duration}s, {stance_summary})")

        started: DebateStartedEventData = {
            "session_id": session.session_id,
            "topic": session.topic,
            "duration_seconds": session.duration_seconds,
            "stances": {pid: stance.value for pid, stance in session.stances.items()},
        }
        await self._emit("debate_started", started)

        self._timer_task = self._spawn(self._run_timer(session))
        self._loop_task = self._spawn(self._run_loop(session))
        return session

    def change_duration(self, minutes: int) -> int:
        """Set the default duration (minutes) for the next debate; idle only."""
        if self.is_running:
            raise DurationLockedError()

        choices = self.timing.duration_choices
        if minutes <= 0 or (choices and minutes not in choices):
            raise ValueError(f"Invalid duration {minutes} min. Available: {choices}")

        self.duration_minutes = minutes
        self._idle_time_remaining = minutes * 60
        logger.info(f"Debate duration set to {minutes} min")
        return self._idle_time_remaining

    async def tick(self) -> int:
        """Advance the countdown by one second; deactivates the debate at zero."""
        completed: DebateSession | None = None

        async with self._state_lock:
            session = self.session
            if session is None or not session.is_active:
                return self.time_remaining_seconds

            session.time_remaining_seconds = max(0, session.time_remaining_seconds - 1)
            remaining = session.time_remaining_seconds
            if remaining == 0:
                self._deactivate_locked(session)
                completed = session

        tick_data: TimeTickEventData = {"time_remaining_seconds": remaining}
        await self._emit("time_tick", tick_data)
        if completed is not None:
            logger.info(f"Time expired for debate {completed.session_id}")
            await self._complete(completed)
        return remaining

    async def stop(self) -> DebateSession | None:
        """End the running debate now; the verdict is decided as on time expiry."""
        async with self._state_lock:
            session = self.session
            if session is None or not session.is_active:
                return session
            self._deactivate_locked(session)

        logger.info(f"Debate {session.session_id} stopped with {session.time_remaining_seconds}s left")
        await self._complete(session)
        return session

    async def wait(self) -> None:
        """Wait for the timer and round loop of the current debate to finish."""
        tasks = [task for task in (self._timer_task, self._loop_task) if task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def close(self) -> None:
        """Stop any running debate and cancel background tasks.

        Covers tasks left over from earlier debates too, such as a round
        loop still waiting on a model call when its debate ended.
        """
        await self.stop()
        for task in list(self._background_tasks):
            if not task.done():
                task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._background_tasks.clear()

    async def run_round(self) -> list[DebateMessage]:
        """Run one round: participant A's turn, then participant B's turn."""
        session = self.session
        if session is None:
            raise RuntimeError("No debate session")

        async with self._state_lock:
            if not self._can_continue(session):
                return []
            session.round_number += 1
            round_number = session.round_number

        round_messages: list[DebateMessage] = []
        for index, participant in enumerate(self.participants):
            if index > 0:
                await self._pause(self.timing.turn_delay)

            async with self._state_lock:
                if not self._can_continue(session):
                    break

            message = await self._take_turn(session, participant, round_number)
            if message is None:
                logger.warning(f"Round {round_number} abandoned after {participant} failed")
                break
            round_messages.append(message)

        return round_messages

    def snapshot(self) -> dict[str, Any]:
        """Read-only view of the engine and its current session."""
        data: dict[str, Any] = {
            "state": self.state.value,
            "duration_minutes": self.duration_minutes,
            "time_remaining_seconds": self.time_remaining_seconds,
            "participants": list(self.participants),
            "session": self.session.to_dict() if self.session else None,
        }
        return data

    async def _run_timer(self, session: DebateSession) -> None:
        while True:
            await self._pause(self.timing.tick_interval)
            if self.session is not session or not session.is_active:
                return
            await self.tick()

    async def _run_loop(self, session: DebateSession) -> None:
        try:
            await self._pause(self.timing.warmup_delay)
            while True:
                async with self._state_lock:
                    if not self._can_continue(session):
                        break
                await self.run_round()
                await self._pause(self.timing.round_delay)
        except Exception as e:
            logger.error(f"Debate loop for {session.session_id} failed: {type(e).__name__}: {e}")
        logger.debug(f"Debate loop for {session.session_id} finished after {session.round_number} rounds")

    async def _take_turn(
        self, session: DebateSession, participant: str, round_number: int
    ) -> DebateMessage | None:
        stance = session.stances[participant]
        history = list(session.messages)

        try:
            text = await self._generate(session, participant, stance, history)
        except Exception as e:
            logger.error(
                f"Turn failed for {participant} in round {round_number}: {type(e).__name__}: {e}"
            )
            failure: TurnFailedEventData = {
                "participant": participant,
                "round_number": round_number,
                "exception_type": type(e).__name__,
                "exception_message": str(e),
            }
            await self._emit("turn_failed", failure)
            return None

        result = self.judge.score_message(text, history, session.topic, participant)

        async with self._state_lock:
            counted = session.is_active
            message = DebateMessage(
                participant=participant,
                content=text,
                kind=MessageKind.AI,
                stance=stance,
                round_number=round_number,
                score=result.total,
                criteria=result.as_dict(),
                counted=counted,
            )
            session.messages.append(message)
            if counted:
                session.scores[participant] += message.score

        if counted:
            logger.info(
                f"Round {round_number}: {participant} ({stance.value}) scored {message.score}, "
                f"total {session.scores[participant]}"
            )
        else:
            logger.info(f"Round {round_number}: {participant} answered after time expired; not scored")

        await self._emit("new_message", message.to_dict())
        return message

    async def _generate(
        self,
        session: DebateSession,
        participant: str,
        stance: Stance,
        history: Sequence[DebateMessage],
    ) -> str:
        """Call the generator with a timeout, retrying up to ``turn_retries`` times."""
        attempts = self.timing.turn_retries + 1
        attempt = 1

        while True:
            try:
                return await asyncio.wait_for(
                    self.generator(participant, stance, session.topic, history),
                    timeout=self.timing.turn_timeout,
                )
            except asyncio.TimeoutError:
                error: Exception = TurnTimeoutError(participant, self.timing.turn_timeout)
            except Exception as e:
                error = e

            if attempt >= attempts or not session.is_active:
                raise error

            logger.warning(f"{participant} attempt {attempt}/{attempts} failed: {error}; retrying")
            await self._pause(self.timing.retry_backoff * attempt)
            attempt += 1

    def _can_continue(self, session: DebateSession) -> bool:
        return (
            self.session is session
            and session.is_active
            and session.time_remaining_seconds > 0
        )

    def _deactivate_locked(self, session: DebateSession) -> None:
        """Flip the session to inactive and decide the winner; caller holds the lock."""
        session.is_active = False
        session.ended_at = datetime.now()
        session.winner = decide_winner(session.scores)
        self.state = EngineState.IDLE
        self._idle_time_remaining = self.duration_minutes * 60
        self._stopped.set()

    async def _complete(self, session: DebateSession) -> None:
        self.last_decision = self.judge.evaluate_debate(session)
        logger.info(
            f"Debate {session.session_id} finished: winner={session.winner}, scores={session.scores}"
        )
        completed: DebateCompletedEventData = {
            "session_id": session.session_id,
            "winner": self.last_decision.winner_id,
            "scores": dict(session.scores),
            "message_count": len(session.messages),
            "feedback": self.last_decision.overall_feedback,
        }
        await self._emit("debate_completed", completed)

    async def _pause(self, seconds: float) -> None:
        """Sleep for ``seconds``, returning early once the debate is deactivated."""
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._stopped.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def _emit(self, event_type: str, data: EventData) -> None:
        if self.event_callback is None:
            return
        try:
            await self.event_callback(event_type, data)
        except Exception as e:
            logger.error(f"Event callback failed for {event_type}: {e}")
