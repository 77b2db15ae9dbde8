from contextlib import contextmanager
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import sqlite3
from threading import Lock, RLock
from typing import Any, Iterator

from tierstore.errors import BackendUnavailableError, InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)

CATALOG_RECORD = "catalog"
BILLING_RECORD = "billing"


class CatalogStore:
    """
    Per-user durable document store.

    Each (user_id, record_type) pair holds one JSON document that is always
    read and replaced whole. Callers that read-modify-write a user's
    documents hold ``user_lock(user_id)`` for the duration; locks for
    different users never contend.
    """

    def __init__(self, db_path: str = "data/catalog.db") -> None:
        self._registry_lock = Lock()
        self._user_locks: dict[str, RLock] = {}
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    @contextmanager
    def user_lock(self, user_id: str) -> Iterator[None]:
        with self._registry_lock:
            lock = self._user_locks.setdefault(user_id, RLock())
        with lock:
            yield

    def read_user_record(self, user_id: str, record_type: str) -> Any:
        self._require_user(user_id)
        try:
            with self._connect() as conn:
                row = conn.execute(
                    """
                    SELECT document_json
                    FROM user_records
                    WHERE user_id = ? AND record_type = ?
                    """,
                    (user_id, record_type),
                ).fetchone()
        except sqlite3.Error as exc:
            raise BackendUnavailableError(
                f"Catalog read failed for user '{user_id}'.", resource_id=user_id, cause=exc
            ) from exc

        if row is None:
            raise NotFoundError(
                f"No '{record_type}' record for user '{user_id}'.",
                resource_id=user_id,
                details={"record_type": record_type},
            )

        try:
            return json.loads(row["document_json"])
        except json.JSONDecodeError as exc:
            raise BackendUnavailableError(
                f"Stored '{record_type}' record for user '{user_id}' is not valid JSON.",
                resource_id=user_id,
                cause=exc,
            ) from exc

    def write_user_record(self, user_id: str, record_type: str, document: Any) -> None:
        self._require_user(user_id)
        payload = json.dumps(document, sort_keys=True)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO user_records (user_id, record_type, document_json, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(user_id, record_type) DO UPDATE SET
                        document_json = excluded.document_json,
                        updated_at = excluded.updated_at
                    """,
                    (user_id, record_type, payload, datetime.now(timezone.utc).isoformat()),
                )
        except sqlite3.Error as exc:
            raise BackendUnavailableError(
                f"Catalog write failed for user '{user_id}'.", resource_id=user_id, cause=exc
            ) from exc
        logger.debug("Wrote %s record for user %s (%d bytes)", record_type, user_id, len(payload))

    def list_user_ids(self) -> list[str]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT DISTINCT user_id FROM user_records ORDER BY user_id"
                ).fetchall()
        except sqlite3.Error as exc:
            raise BackendUnavailableError("Catalog user listing failed.", cause=exc) from exc
        return [row["user_id"] for row in rows]

    def _require_user(self, user_id: str) -> None:
        if not user_id or not user_id.strip():
            raise InvalidArgumentError("A user id is required.")

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS user_records (
                    user_id TEXT NOT NULL,
                    record_type TEXT NOT NULL,
                    document_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, record_type)
                )
                """
            )

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn
