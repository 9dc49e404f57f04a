"""SQLite-backed key-value store for the persisted token pair."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from chronos_client.services.token_cipher import TokenCipherService

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


class TokenStore:
    """Durable string key-value storage that survives process restarts.

    Storage failures never propagate: reads degrade to ``None`` and writes
    report ``False`` so a broken store only forces re-authentication.
    """

    def __init__(self, db_path: str, *, cipher: Optional[TokenCipherService] = None) -> None:
        self._db_path = Path(db_path)
        self._cipher = cipher
        try:
            if self._db_path.parent and not self._db_path.parent.exists():
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as exc:
            logger.error("Token store at %s is unavailable: %s", self._db_path, exc)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def get(self, key: str) -> Optional[str]:
        try:
            with closing(self._connect()) as conn, conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as exc:
            logger.error("Error reading %s from token store: %s", key, exc)
            return None
        if not row:
            return None
        value = row["value"]
        if self._cipher is None:
            return value
        try:
            return self._cipher.unseal(key, value)
        except ValueError as exc:
            logger.error("Error decrypting %s from token store: %s", key, exc)
            return None

    def multi_set(self, pairs: Sequence[Tuple[str, str]]) -> bool:
        """Write all pairs in one transaction."""
        rows = [(key, self._seal(key, value)) for key, value in pairs]
        try:
            with closing(self._connect()) as conn, conn:
                conn.executemany(
                    """
                    INSERT INTO kv_store (key, value)
                    VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    rows,
                )
        except sqlite3.Error as exc:
            logger.error("Error writing to token store: %s", exc)
            return False
        return True

    def multi_remove(self, keys: Iterable[str]) -> bool:
        try:
            with closing(self._connect()) as conn, conn:
                conn.executemany(
                    "DELETE FROM kv_store WHERE key = ?",
                    [(key,) for key in keys],
                )
        except sqlite3.Error as exc:
            logger.error("Error removing keys from token store: %s", exc)
            return False
        return True

    def _seal(self, key: str, value: str) -> str:
        if self._cipher is None:
            return value
        return self._cipher.seal(key, value)

    def get_access_token(self) -> Optional[str]:
        return self.get(ACCESS_TOKEN_KEY)

    def get_refresh_token(self) -> Optional[str]:
        return self.get(REFRESH_TOKEN_KEY)

    def set_tokens(self, access_token: str, refresh_token: str) -> bool:
        return self.multi_set(
            [(ACCESS_TOKEN_KEY, access_token), (REFRESH_TOKEN_KEY, refresh_token)]
        )

    def clear_tokens(self) -> bool:
        return self.multi_remove([ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY])


__all__ = ["ACCESS_TOKEN_KEY", "REFRESH_TOKEN_KEY", "TokenStore"]
