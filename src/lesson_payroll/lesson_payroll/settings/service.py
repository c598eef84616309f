from __future__ import annotations

import logging
from typing import Any

from ..common.validators import require_non_negative_int
from ..core.constants import DEFAULT_PENALTY_AMD
from .model import PenaltyConfig
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, settings: SettingsRepository, *, default_penalty_amd: int = DEFAULT_PENALTY_AMD):
        self._settings = settings
        self._default = PenaltyConfig.uniform(int(default_penalty_amd))

    def get_penalty_config(self) -> PenaltyConfig:
        config = self._settings.get_penalty_config()
        if config is None:
            logger.warning("No system settings stored, using default penalty amounts")
            return self._default
        return config

    def update_penalty_config(
        self,
        *,
        penalty_absence_amd: Any,
        penalty_feedback_amd: Any,
        penalty_voice_amd: Any,
        penalty_text_amd: Any,
    ) -> PenaltyConfig:
        config = PenaltyConfig(
            penalty_absence_amd=require_non_negative_int(penalty_absence_amd, "penalty_absence_amd"),
            penalty_feedback_amd=require_non_negative_int(penalty_feedback_amd, "penalty_feedback_amd"),
            penalty_voice_amd=require_non_negative_int(penalty_voice_amd, "penalty_voice_amd"),
            penalty_text_amd=require_non_negative_int(penalty_text_amd, "penalty_text_amd"),
        )
        self._settings.save_penalty_config(config)
        logger.info("Penalty amounts updated: %s", config.to_dict())
        return config
