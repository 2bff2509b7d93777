"""SQLite storage for finished debates and their messages."""

import json
import sqlite3
import logging
from pathlib import Path
from typing import Optional, Dict, Any, List, TypedDict
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class DebateMetadata(TypedDict):
    id: int
    session_id: str
    topic: str
    participants: List[str]
    stances: Dict[str, str]
    scores: Dict[str, int]
    winner: str
    duration_seconds: int
    total_rounds: int
    message_count: int
    word_count: int
    started_at: Optional[str]
    ended_at: Optional[str]
    created_at: str


class MessageData(TypedDict):
    """One stored turn. ``counted`` is False for arguments that landed after time ran out."""

    participant: str
    stance: Optional[str]
    kind: str
    round_number: int
    content: str
    timestamp: str
    score: int
    criteria: Dict[str, int]
    counted: bool


class FullTranscriptData(TypedDict):
    metadata: DebateMetadata
    messages: List[MessageData]


SCHEMA = """
CREATE TABLE IF NOT EXISTS debates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT NOT NULL,
    topic TEXT NOT NULL,
    participants TEXT NOT NULL,
    stances TEXT NOT NULL,
    scores TEXT NOT NULL,
    winner TEXT NOT NULL,
    duration_seconds INTEGER NOT NULL,
    total_rounds INTEGER NOT NULL,
    message_count INTEGER NOT NULL,
    word_count INTEGER NOT NULL,
    started_at TEXT,
    ended_at TEXT,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    debate_id INTEGER NOT NULL REFERENCES debates (id) ON DELETE CASCADE,
    participant TEXT NOT NULL,
    stance TEXT,
    kind TEXT NOT NULL,
    round_number INTEGER NOT NULL,
    content TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    score INTEGER NOT NULL,
    criteria TEXT,
    counted INTEGER NOT NULL DEFAULT 1
);

CREATE INDEX IF NOT EXISTS idx_messages_debate_id ON messages (debate_id);
"""

# Columns written on insert; the JSON ones are serialized as text.
DEBATE_COLUMNS = (
    "session_id",
    "topic",
    "participants",
    "stances",
    "scores",
    "winner",
    "duration_seconds",
    "total_rounds",
    "message_count",
    "word_count",
    "started_at",
    "ended_at",
)
DEBATE_JSON_COLUMNS = frozenset({"participants", "stances", "scores"})

MESSAGE_COLUMNS = (
    "participant",
    "stance",
    "kind",
    "round_number",
    "content",
    "timestamp",
    "score",
    "criteria",
    "counted",
)


def _insert_sql(table: str, columns: tuple[str, ...]) -> str:
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"


class DatabaseManager:
    """Owns the SQLite file and its schema; one short-lived connection per call."""

    def __init__(self, db_path: str = "debates.db"):
        self.db_path = Path(db_path)
        with self._get_connection() as conn:
            conn.executescript(SCHEMA)
        logger.info(f"Debate database ready at {self.db_path}")

    @contextmanager
    def _get_connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Database error on {self.db_path}: {e}")
            raise
        finally:
            conn.close()

    def save_debate(self, debate_data: Dict[str, Any]) -> int:
        """Insert the debate row and all of its messages in one transaction."""
        metadata = debate_data["metadata"]
        messages = debate_data["messages"]

        debate_values = [
            json.dumps(metadata[column]) if column in DEBATE_JSON_COLUMNS else metadata[column]
            for column in DEBATE_COLUMNS
        ]

        with self._get_connection() as conn:
            cursor = conn.execute(_insert_sql("debates", DEBATE_COLUMNS), debate_values)
            debate_id = cursor.lastrowid
            if debate_id is None:
                raise RuntimeError("SQLite did not return an id for the saved debate")

            conn.executemany(
                _insert_sql("messages", ("debate_id",) + MESSAGE_COLUMNS),
                [
                    (
                        debate_id,
                        message["participant"],
                        message["stance"],
                        message["kind"],
                        message["round_number"],
                        message["content"],
                        message["timestamp"],
                        message["score"],
                        json.dumps(message["criteria"]),
                        int(bool(message["counted"])),
                    )
                    for message in messages
                ],
            )

        logger.info(f"Saved debate {debate_id} ({len(messages)} messages)")
        return debate_id

    def load_debate(self, debate_id: int) -> Optional[FullTranscriptData]:
        with self._get_connection() as conn:
            debate_row = conn.execute(
                "SELECT * FROM debates WHERE id = ?", (debate_id,)
            ).fetchone()
            if debate_row is None:
                return None

            message_rows = conn.execute(
                "SELECT * FROM messages WHERE debate_id = ? ORDER BY id", (debate_id,)
            ).fetchall()

        return {
            "metadata": self._row_to_metadata(debate_row),
            "messages": [self._row_to_message(row) for row in message_rows],
        }

    def list_debates(
        self, limit: Optional[int] = None, offset: int = 0
    ) -> List[DebateMetadata]:
        """Newest first; metadata only."""
        query = "SELECT * FROM debates ORDER BY created_at DESC, id DESC"
        params: tuple[int, ...] = ()
        if limit:
            query += " LIMIT ? OFFSET ?"
            params = (limit, offset)

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_metadata(row) for row in rows]

    def delete_debate(self, debate_id: int) -> bool:
        with self._get_connection() as conn:
            deleted = conn.execute(
                "DELETE FROM debates WHERE id = ?", (debate_id,)
            ).rowcount > 0

        if deleted:
            logger.info(f"Deleted debate {debate_id}")
        return deleted

    def get_debate_count(self) -> int:
        with self._get_connection() as conn:
            (count,) = conn.execute("SELECT COUNT(*) FROM debates").fetchone()
        return int(count)

    @staticmethod
    def _row_to_metadata(row: sqlite3.Row) -> DebateMetadata:
        record = dict(row)
        for column in DEBATE_JSON_COLUMNS:
            record[column] = json.loads(record[column])
        return record  # type: ignore[return-value]

    @staticmethod
    def _row_to_message(row: sqlite3.Row) -> MessageData:
        return {
            "participant": row["participant"],
            "stance": row["stance"],
            "kind": row["kind"],
            "round_number": row["round_number"],
            "content": row["content"],
            "timestamp": row["timestamp"],
            "score": row["score"],
            "criteria": json.loads(row["criteria"]) if row["criteria"] else {},
            "counted": bool(row["counted"]),
        }
