"""SQLite-backed store for mobile users, device tokens and partnership data."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS mobile_users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        hostaway_id INTEGER NOT NULL,
        first_name TEXT NOT NULL,
        last_name TEXT,
        email TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL,
        revenue_sharing INTEGER,
        user_id TEXT NOT NULL,
        referral_code TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS fcm_tokens (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        token TEXT NOT NULL,
        user_id INTEGER NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS hostaway_users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        ha_user_id INTEGER NOT NULL,
        listing_id INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE (ha_user_id, listing_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS partnership_info (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        listing_id INTEGER NOT NULL UNIQUE,
        total_earned REAL DEFAULT 0,
        pending_commission REAL DEFAULT 0,
        active_referral INTEGER DEFAULT 0,
        yearly_projection REAL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        created_by TEXT,
        updated_by TEXT
    )
    """,
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _placeholders(values: List[Any]) -> str:
    return ", ".join("?" for _ in values)


class PortalStore:
    """Single-row reads and writes over the portal's relational tables."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            for statement in _SCHEMA:
                conn.execute(statement)

    # Mobile users

    def get_mobile_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM mobile_users WHERE id = ?", (user_id,)
            ).fetchone()
        return dict(row) if row else None

    def get_mobile_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM mobile_users WHERE email = ?", (email,)
            ).fetchone()
        return dict(row) if row else None

    def create_mobile_user(
        self,
        *,
        hostaway_id: int,
        first_name: str,
        last_name: Optional[str],
        email: str,
        password_hash: str,
        user_id: str,
        revenue_sharing: Optional[int] = None,
        referral_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO mobile_users (
                    hostaway_id, first_name, last_name, email, password,
                    revenue_sharing, user_id, referral_code
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    hostaway_id,
                    first_name,
                    last_name,
                    email,
                    password_hash,
                    revenue_sharing,
                    user_id,
                    referral_code,
                ),
            )
            new_id = cursor.lastrowid
        user = self.get_mobile_user(new_id)
        assert user is not None
        return user

    def list_mobile_user_ids_for_hostaway_ids(
        self, hostaway_ids: Iterable[int]
    ) -> List[int]:
        ids = list(hostaway_ids)
        if not ids:
            return []
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT id FROM mobile_users WHERE hostaway_id IN ({_placeholders(ids)})",
                ids,
            ).fetchall()
        return [row["id"] for row in rows]

    # Device tokens

    def save_fcm_token(self, *, user_id: int, token: str) -> Dict[str, Any]:
        created_at = _now()
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO fcm_tokens (token, user_id, created_at) VALUES (?, ?, ?)",
                (token, user_id, created_at),
            )
        return {
            "id": cursor.lastrowid,
            "token": token,
            "user_id": user_id,
            "created_at": created_at,
        }

    def list_fcm_tokens(self, user_ids: Iterable[int]) -> List[str]:
        ids = list(user_ids)
        if not ids:
            return []
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT DISTINCT token FROM fcm_tokens WHERE user_id IN ({_placeholders(ids)}) "
                "ORDER BY token",
                ids,
            ).fetchall()
        return [row["token"] for row in rows]

    def delete_fcm_tokens(self, tokens: Iterable[str]) -> int:
        values = list(tokens)
        if not values:
            return 0
        with self._connect() as conn:
            cursor = conn.execute(
                f"DELETE FROM fcm_tokens WHERE token IN ({_placeholders(values)})",
                values,
            )
        return cursor.rowcount

    # Hostaway user to listing mapping

    def upsert_hostaway_user(self, *, ha_user_id: int, listing_id: int) -> None:
        now = _now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO hostaway_users (ha_user_id, listing_id, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(ha_user_id, listing_id) DO UPDATE SET updated_at = excluded.updated_at
                """,
                (ha_user_id, listing_id, now, now),
            )

    def list_hostaway_user_ids(self, listing_id: int) -> List[int]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT ha_user_id FROM hostaway_users WHERE listing_id = ?",
                (listing_id,),
            ).fetchall()
        return [row["ha_user_id"] for row in rows]

    # Partnership rollups

    def upsert_partnership_info(
        self,
        *,
        listing_id: int,
        total_earned: float = 0,
        pending_commission: float = 0,
        active_referral: int = 0,
        yearly_projection: float = 0,
        updated_by: Optional[str] = None,
    ) -> None:
        now = _now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO partnership_info (
                    listing_id, total_earned, pending_commission, active_referral,
                    yearly_projection, created_at, updated_at, created_by, updated_by
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(listing_id) DO UPDATE SET
                    total_earned = excluded.total_earned,
                    pending_commission = excluded.pending_commission,
                    active_referral = excluded.active_referral,
                    yearly_projection = excluded.yearly_projection,
                    updated_at = excluded.updated_at,
                    updated_by = excluded.updated_by
                """,
                (
                    listing_id,
                    total_earned,
                    pending_commission,
                    active_referral,
                    yearly_projection,
                    now,
                    now,
                    updated_by,
                    updated_by,
                ),
            )

    def list_partnership_info(self, listing_ids: Iterable[int]) -> List[Dict[str, Any]]:
        ids = list(listing_ids)
        if not ids:
            return []
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM partnership_info WHERE listing_id IN ({_placeholders(ids)}) "
                "ORDER BY listing_id",
                ids,
            ).fetchall()
        return [dict(row) for row in rows]


__all__ = ["PortalStore"]
