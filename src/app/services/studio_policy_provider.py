"""Studio Policy Provider Interface

Studio configuration (operating hours, cancellation window, hold length) is
owned by another part of the platform; the engine only reads it.
"""

from abc import ABC, abstractmethod
from src.domain.studio_policy import StudioPolicy


class StudioPolicyProvider(ABC):
    """
    Source of the booking policy that applies to a trainer's calendar
    """

    @abstractmethod
    async def get_policy(self, trainer_id: str) -> StudioPolicy:
        """
        Retrieve the policy for the studio the trainer works in

        Args:
            trainer_id: Trainer identifier

        Returns:
            StudioPolicy (defaults when the studio has nothing configured)
        """
        pass
