from __future__ import annotations

from typing import Optional, Protocol

from .model import PenaltyConfig


class SettingsRepository(Protocol):
    def get_penalty_config(self) -> Optional[PenaltyConfig]:
        """Stored amounts, or None when the settings row does not exist yet."""

        raise NotImplementedError

    def save_penalty_config(self, config: PenaltyConfig) -> None:
        raise NotImplementedError
