"""Transcript management for debates using SQLite."""

from pathlib import Path
from typing import Any
import logging

from .database import DatabaseManager, DebateMetadata, FullTranscriptData
from .models import DebateSession
from .types import TIE

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "debates.db"


class TranscriptManager:
    """Manages saving and loading of debate transcripts in SQLite database."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_NAME):
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_manager = DatabaseManager(str(db_path))

    @classmethod
    def in_directory(cls, transcript_dir: str | Path) -> "TranscriptManager":
        return cls(Path(transcript_dir) / DEFAULT_DB_NAME)

    def save_session(self, session: DebateSession) -> int:
        """Save a finished debate session and return the transcript ID."""
        if session.is_active:
            raise ValueError("Cannot save a transcript while the debate is still active")

        transcript_data = self._session_to_dict(session)
        try:
            debate_id = self.db_manager.save_debate(transcript_data)
            logger.info(f"Saved transcript for session {session.session_id} with ID {debate_id}")
            return debate_id
        except Exception as e:
            logger.error(f"Failed to save transcript to database: {e}")
            raise

    def _session_to_dict(self, session: DebateSession) -> dict[str, Any]:
        return {
            "metadata": {
                "session_id": session.session_id,
                "topic": session.topic,
                "participants": list(session.participants),
                "stances": {pid: stance.value for pid, stance in session.stances.items()},
                "scores": dict(session.scores),
                "winner": session.winner or TIE,
                "duration_seconds": session.duration_seconds,
                "total_rounds": session.round_number,
                "message_count": len(session.messages),
                "word_count": sum(len(msg.content.split()) for msg in session.messages),
                "started_at": session.started_at.isoformat() if session.started_at else None,
                "ended_at": session.ended_at.isoformat() if session.ended_at else None,
            },
            "messages": [
                {
                    "participant": msg.participant,
                    "stance": msg.stance.value if msg.stance else None,
                    "kind": msg.kind.value,
                    "round_number": msg.round_number,
                    "content": msg.content,
                    "timestamp": msg.timestamp.isoformat(),
                    "score": msg.score,
                    "criteria": dict(msg.criteria),
                    "counted": msg.counted,
                }
                for msg in session.messages
            ],
        }

    def load_transcript(self, debate_id: int) -> FullTranscriptData | None:
        """Load a debate transcript by ID."""
        try:
            return self.db_manager.load_debate(debate_id)
        except Exception as e:
            logger.error(f"Failed to load transcript from database: {e}")
            return None

    def list_transcripts(
        self, limit: int | None = None, offset: int = 0
    ) -> list[DebateMetadata]:
        """List transcripts with pagination support."""
        try:
            return self.db_manager.list_debates(limit=limit, offset=offset)
        except Exception as e:
            logger.error(f"Failed to list debates from database: {e}")
            return []

    def format_transcript(self, transcript: FullTranscriptData) -> str:
        """Render a stored transcript as plain text."""
        metadata = transcript["metadata"]
        lines = [
            "DEBATE TRANSCRIPT",
            f"Topic: {metadata['topic']}",
            "Stances: "
            + ", ".join(f"{pid} ({stance})" for pid, stance in metadata["stances"].items()),
            f"Winner: {metadata['winner']}",
            "",
            "=" * 80,
        ]

        current_round = 0
        for msg in transcript["messages"]:
            if msg["round_number"] != current_round:
                lines.extend(["", f"ROUND {msg['round_number']}", "-" * 40])
                current_round = msg["round_number"]

            score = f"Score: {msg['score']}" if msg["counted"] else "Not scored"
            lines.extend(
                [
                    f"[{msg['participant'].upper()} ({(msg['stance'] or '').upper()})]",
                    msg["content"].strip(),
                    f"    {score}",
                    "",
                ]
            )

        scores = ", ".join(f"{pid}: {score}" for pid, score in metadata["scores"].items())
        lines.extend(["=" * 80, f"FINAL SCORES - {scores}"])
        return "\n".join(lines)

    def delete_transcript(self, debate_id: int) -> bool:
        """Delete a debate transcript by ID."""
        try:
            return self.db_manager.delete_debate(debate_id)
        except Exception as e:
            logger.error(f"Failed to delete transcript {debate_id}: {e}")
            return False

    def get_debate_count(self) -> int:
        try:
            return self.db_manager.get_debate_count()
        except Exception as e:
            logger.error(f"Failed to get debate count: {e}")
            return 0
