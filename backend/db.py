# db.py
import os
from typing import Optional

import psycopg
from psycopg import AsyncConnection
from psycopg.rows import dict_row

from notifications.models import User


DB_DSN = os.getenv(
    "DATABASE_URL",
    "postgresql://taskpush:taskpush@db:5432/taskpush",
)


async def get_conn():
    """FastAPI dependency: one async connection per request, closed afterwards."""
    conn = await psycopg.AsyncConnection.connect(DB_DSN, row_factory=dict_row)
    try:
        yield conn
    finally:
        await conn.close()


class PostgresUserDirectory:
    """User records (id -> device token) stored in the `users` table."""

    def __init__(self, conn: AsyncConnection):
        self.conn = conn

    async def get(self, user_id: str) -> Optional[User]:
        async with self.conn.cursor() as cur:
            await cur.execute(
                "SELECT id, fcm_token FROM users WHERE id = %s",
                (user_id,),
            )
            row = await cur.fetchone()
        if not row:
            return None
        return User(id=row["id"], fcm_token=row["fcm_token"])

    async def set_token(self, user_id: str, device_token: str) -> None:
        async with self.conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO users (id, fcm_token, updated_at)
                VALUES (%s, %s, now())
                ON CONFLICT (id)
                DO UPDATE SET fcm_token = EXCLUDED.fcm_token, updated_at = now()
                """,
                (user_id, device_token),
            )
        await self.conn.commit()

    async def clear_token(self, user_id: str) -> None:
        async with self.conn.cursor() as cur:
            await cur.execute(
                "UPDATE users SET fcm_token = NULL, updated_at = now() WHERE id = %s",
                (user_id,),
            )
        await self.conn.commit()
