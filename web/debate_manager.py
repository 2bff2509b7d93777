"""Debate arenas hosted by the web server and their WebSocket audiences."""

import asyncio
import uuid
from dataclasses import replace
from collections.abc import Callable, Mapping
from typing import Dict, List, Any
import logging

from fastapi import HTTPException, WebSocket

from config.settings import AppConfig, get_default_config
from debate_engine.core import DebateEngine
from debate_engine.generator import ArgumentGenerator, build_model_generator
from debate_engine.transcript import TranscriptManager
from web.debate_setup_request import DebateSetupRequest

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[[AppConfig], ArgumentGenerator]


class DebateManager:
    """Manages debate arenas (one engine each) and WebSocket connections."""

    def __init__(
        self,
        config: AppConfig | None = None,
        generator_factory: GeneratorFactory | None = None,
    ):
        self._config = config
        self.generator_factory = generator_factory or build_model_generator
        self.active_debates: Dict[str, Dict[str, Any]] = {}
        self.connections: Dict[str, List[WebSocket]] = {}
        self._transcript_manager: TranscriptManager | None = None

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = get_default_config()
        return self._config

    @property
    def transcript_manager(self) -> TranscriptManager:
        if self._transcript_manager is None:
            self._transcript_manager = TranscriptManager.in_directory(
                self.config.system.transcript_dir
            )
        return self._transcript_manager

    async def create_debate(self, setup: DebateSetupRequest) -> str:
        """Create an idle arena; debates are started in it later."""
        debate_id = str(uuid.uuid4())

        config = self.config.model_copy(deep=True)
        if setup.models:
            config.models = setup.models
        if setup.duration_minutes is not None:
            config.debate.duration_minutes = setup.duration_minutes

        generator = self.generator_factory(config)
        engine = DebateEngine(
            config, generator, event_callback=self._make_event_callback(debate_id)
        )
        if setup.duration_minutes is not None:
            engine.change_duration(setup.duration_minutes)

        self.active_debates[debate_id] = {
            "id": debate_id,
            "config": config,
            "engine": engine,
            "transcript_id": None,
        }
        self.connections.setdefault(debate_id, [])

        logger.info(f"Created debate arena {debate_id} for {', '.join(config.participant_ids)}")
        return debate_id

    def get_debate(self, debate_id: str) -> Dict[str, Any]:
        if debate_id not in self.active_debates:
            raise HTTPException(status_code=404, detail="Debate not found")
        return self.active_debates[debate_id]

    def get_engine(self, debate_id: str) -> DebateEngine:
        return self.get_debate(debate_id)["engine"]

    def get_status(self, debate_id: str) -> str:
        engine = self.get_engine(debate_id)
        if engine.is_running:
            return "running"
        return "completed" if engine.session is not None else "created"

    async def start_debate(
        self, debate_id: str, topic: str, duration_minutes: int | None = None
    ) -> None:
        """Start a debate in an arena; engine errors propagate to the caller."""
        debate_info = self.get_debate(debate_id)
        engine: DebateEngine = debate_info["engine"]

        duration_seconds = duration_minutes * 60 if duration_minutes else None
        debate_info["transcript_id"] = None
        await engine.start(topic, duration_seconds)

    def change_duration(self, debate_id: str, minutes: int) -> int:
        return self.get_engine(debate_id).change_duration(minutes)

    async def stop_debate(self, debate_id: str) -> None:
        await self.get_engine(debate_id).stop()

    async def shutdown(self) -> None:
        """Stop every running debate."""
        for debate_id, debate_info in self.active_debates.items():
            try:
                await debate_info["engine"].close()
            except Exception as e:
                logger.error(f"Failed to close debate {debate_id}: {e}")

    def _make_event_callback(self, debate_id: str):
        async def on_event(event_type: str, data: Mapping[str, Any]) -> None:
            if event_type == "debate_completed":
                transcript_id = await self._save_transcript(debate_id)
                data = {**data, "transcript_id": transcript_id}

            if event_type == "new_message":
                message = {"type": event_type, "debate_id": debate_id, "message": data}
            else:
                message = {"type": event_type, "debate_id": debate_id, **data}
            await self._broadcast_to_debate(debate_id, message)

        return on_event

    async def _save_transcript(self, debate_id: str) -> int | None:
        debate_info = self.active_debates.get(debate_id)
        if debate_info is None or not debate_info["config"].system.save_transcripts:
            return None

        session = debate_info["engine"].session
        if session is None:
            return None

        # SQLite writes block, so they run in a worker thread on a frozen copy.
        snapshot = replace(session, messages=list(session.messages), scores=dict(session.scores))
        try:
            transcript_id = await asyncio.to_thread(self.transcript_manager.save_session, snapshot)
        except Exception as e:
            logger.error(f"Failed to save transcript for {debate_id}: {e}")
            return None

        debate_info["transcript_id"] = transcript_id
        return transcript_id

    async def _broadcast_to_debate(
        self, debate_id: str, message: Dict[str, Any]
    ) -> None:
        """Broadcast message to all connected clients for a debate."""
        if debate_id not in self.connections:
            return

        dead_connections = []
        for websocket in list(self.connections[debate_id]):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.debug(f"WebSocket send failed: {e}")
                dead_connections.append(websocket)

        for conn in dead_connections:
            self.remove_connection(debate_id, conn)

    def add_connection(self, debate_id: str, websocket: WebSocket) -> None:
        """Add WebSocket connection for a debate."""
        self.connections.setdefault(debate_id, []).append(websocket)

    def remove_connection(self, debate_id: str, websocket: WebSocket) -> None:
        """Remove WebSocket connection."""
        if debate_id in self.connections and websocket in self.connections[debate_id]:
            self.connections[debate_id].remove(websocket)
