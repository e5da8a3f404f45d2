"""
Feedback Store — SQLite Persistence

Holds the two entities the feedback pipeline touches:
  - responses: the text a user posted (or is about to post)
  - feedback:  one row per persisted feedback item

Writes are single-row inserts or updates guarded by a lock.
Concurrent requests for the same response simply produce
independent rows; there is no upsert or merge.
"""

from __future__ import annotations

import json
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from reasonbridge.config import settings
from reasonbridge.models import Feedback, FeedbackType

# Columns a user action may change after creation.
_MUTABLE_FIELDS = {
    "user_acknowledged",
    "user_revised",
    "user_helpful_rating",
    "dismissed_at",
    "dismissal_reason",
}


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


class FeedbackStore:
    """Response and feedback rows backed by SQLite."""

    def __init__(self, db_path: str = "reasonbridge_feedback.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS responses (
                    id TEXT PRIMARY KEY,
                    content TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS feedback (
                    id TEXT PRIMARY KEY,
                    response_id TEXT NOT NULL REFERENCES responses(id),
                    type TEXT NOT NULL,
                    subtype TEXT,
                    suggestion_text TEXT NOT NULL,
                    reasoning TEXT NOT NULL,
                    confidence_score REAL NOT NULL,
                    educational_resources TEXT,
                    displayed_to_user INTEGER NOT NULL,
                    user_acknowledged INTEGER NOT NULL DEFAULT 0,
                    user_revised INTEGER NOT NULL DEFAULT 0,
                    user_helpful_rating TEXT,
                    dismissed_at TEXT,
                    dismissal_reason TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_feedback_response
                ON feedback(response_id)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_feedback_created
                ON feedback(created_at)
            """)
            conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------

    def add_response(self, content: str, response_id: Optional[str] = None) -> dict:
        row = {
            "id": response_id or new_id(),
            "content": content,
            "created_at": utc_now(),
        }
        with self._lock:
            with self._get_conn() as conn:
                conn.execute(
                    "INSERT INTO responses (id, content, created_at) VALUES (?, ?, ?)",
                    (row["id"], row["content"], row["created_at"]),
                )
                conn.commit()
        return row

    def get_response(self, response_id: str) -> Optional[dict]:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT id, content, created_at FROM responses WHERE id = ?",
                (response_id,),
            ).fetchone()
        return dict(row) if row else None

    # ------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------

    def insert_feedback(self, feedback: Feedback) -> Feedback:
        resources = (
            json.dumps(feedback.educational_resources)
            if feedback.educational_resources is not None else None
        )
        with self._lock:
            with self._get_conn() as conn:
                conn.execute(
                    """INSERT INTO feedback
                       (id, response_id, type, subtype, suggestion_text, reasoning,
                        confidence_score, educational_resources, displayed_to_user,
                        user_acknowledged, user_revised, user_helpful_rating,
                        dismissed_at, dismissal_reason, created_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        feedback.id, feedback.response_id, feedback.type.value,
                        feedback.subtype, feedback.suggestion_text, feedback.reasoning,
                        feedback.confidence_score, resources,
                        int(feedback.displayed_to_user),
                        int(feedback.user_acknowledged), int(feedback.user_revised),
                        feedback.user_helpful_rating.value if feedback.user_helpful_rating else None,
                        feedback.dismissed_at, feedback.dismissal_reason,
                        feedback.created_at,
                    ),
                )
                conn.commit()
        return feedback

    def get_feedback(self, feedback_id: str) -> Optional[Feedback]:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT * FROM feedback WHERE id = ?", (feedback_id,),
            ).fetchone()
        return Feedback.from_row(row) if row else None

    def update_feedback(self, feedback_id: str, **fields: Any) -> Optional[Feedback]:
        """Update lifecycle fields on one row. Detector output is immutable."""
        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Immutable or unknown feedback fields: {sorted(unknown)}")
        if not fields:
            return self.get_feedback(feedback_id)

        values = []
        for key, val in fields.items():
            if isinstance(val, bool):
                val = int(val)
            elif hasattr(val, "value"):
                val = val.value
            values.append(val)

        assignments = ", ".join(f"{key} = ?" for key in fields)
        with self._lock:
            with self._get_conn() as conn:
                conn.execute(
                    f"UPDATE feedback SET {assignments} WHERE id = ?",
                    (*values, feedback_id),
                )
                conn.commit()
        return self.get_feedback(feedback_id)

    def list_feedback(
        self,
        response_id: Optional[str] = None,
        feedback_type: Optional[FeedbackType] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> list[Feedback]:
        """Rows in creation order, filtered by response, type and ISO date range."""
        clauses, params = [], []
        if response_id:
            clauses.append("response_id = ?")
            params.append(response_id)
        if feedback_type:
            clauses.append("type = ?")
            params.append(FeedbackType(feedback_type).value)
        if start:
            clauses.append("created_at >= ?")
            params.append(start)
        if end:
            clauses.append("created_at <= ?")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._get_conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM feedback {where} ORDER BY created_at, rowid",
                params,
            ).fetchall()
        return [Feedback.from_row(r) for r in rows]

    def count_feedback(self) -> int:
        with self._get_conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM feedback").fetchone()[0]

    def count_responses(self) -> int:
        with self._get_conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM responses").fetchone()[0]


def _get_feedback_store() -> FeedbackStore:
    return FeedbackStore(db_path=settings.DB_PATH)


feedback_store = _get_feedback_store()
