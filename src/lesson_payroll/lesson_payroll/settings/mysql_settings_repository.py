from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_amd
from .model import PenaltyConfig
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    """system_settings is a single-row table."""

    def __init__(self, conn_factory: DatabaseConnection, *, default_amd: int):
        self._conn_factory = conn_factory
        self._default_amd = int(default_amd)

    def _amount(self, value) -> int:
        amount = to_amd(value)
        return self._default_amd if amount is None else amount

    def get_penalty_config(self) -> Optional[PenaltyConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT penalty_absence_amd, penalty_feedback_amd, penalty_voice_amd, penalty_text_amd
                FROM system_settings
                ORDER BY settings_id ASC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return PenaltyConfig(
                penalty_absence_amd=self._amount(r.get("penalty_absence_amd")),
                penalty_feedback_amd=self._amount(r.get("penalty_feedback_amd")),
                penalty_voice_amd=self._amount(r.get("penalty_voice_amd")),
                penalty_text_amd=self._amount(r.get("penalty_text_amd")),
            )

    def save_penalty_config(self, config: PenaltyConfig) -> None:
        values = (
            config.penalty_absence_amd,
            config.penalty_feedback_amd,
            config.penalty_voice_amd,
            config.penalty_text_amd,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT settings_id FROM system_settings ORDER BY settings_id ASC LIMIT 1 FOR UPDATE")
            existing = fetchone(cur)
            if existing:
                cur.execute(
                    """
                    UPDATE system_settings
                    SET penalty_absence_amd=%s, penalty_feedback_amd=%s, penalty_voice_amd=%s, penalty_text_amd=%s
                    WHERE settings_id=%s
                    """,
                    (*values, int(existing["settings_id"])),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO system_settings
                        (penalty_absence_amd, penalty_feedback_amd, penalty_voice_amd, penalty_text_amd)
                    VALUES (%s, %s, %s, %s)
                    """,
                    values,
                )
