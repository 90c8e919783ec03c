"""Config-backed StudioPolicyProvider

Reads the STUDIO_POLICY section of env.yaml:

    STUDIO_POLICY:
      cancellation_window_hours: 24
      hold_minutes: 15
      opening_hours:
        "1": {enabled: true, slots: [{start: "06:00", end: "21:00"}]}
      trainers:
        trainer_456:
          hold_minutes: null

Per-trainer entries are merged over the studio defaults key by key.
"""

import logging
from typing import Any, Dict, Optional
from src.app.services.studio_policy_provider import StudioPolicyProvider
from src.domain.studio_policy import StudioPolicy

logger = logging.getLogger(__name__)


class ConfigStudioPolicyProvider(StudioPolicyProvider):
    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        settings = dict(settings or {})
        overrides = settings.pop("trainers", None) or {}

        self.default_policy = StudioPolicy(**settings)
        self.trainer_policies: Dict[str, StudioPolicy] = {
            trainer_id: StudioPolicy(**{**settings, **(values or {})})
            for trainer_id, values in overrides.items()
        }
        logger.debug(
            f"Studio policy loaded: hold_minutes={self.default_policy.hold_minutes}, "
            f"cancellation_window_hours={self.default_policy.cancellation_window_hours}, "
            f"{len(self.trainer_policies)} trainer override(s)"
        )

    async def get_policy(self, trainer_id: str) -> StudioPolicy:
        return self.trainer_policies.get(trainer_id, self.default_policy)
