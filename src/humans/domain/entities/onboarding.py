"""Onboarding progress entity.

Onboarding progress is stored per profile as a JSON document and loaded
once per request by the onboarding service.
"""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any


class OnboardingStep(str, Enum):
    """Named onboarding steps recorded in ``last_step_completed``."""

    WELCOME = "welcome"
    BIO_CREATION = "bio_creation"
    DASHBOARD_TOUR = "dashboard_tour"
    FIRST_PUBLISH = "first_publish"
    COMPLETED = "onboarding_complete"


@dataclass
class OnboardingState:
    """Progress of a user through onboarding.

    The four ``has_*`` flags are the steps counted by ``completion_percentage``.
    ``tour_dismissed`` is tracked but does not count as progress.
    """

    has_seen_welcome: bool = False
    has_created_bio: bool = False
    has_seen_dashboard_tour: bool = False
    has_published_first_block: bool = False
    tour_dismissed: bool = False
    last_step_completed: str | None = None
    completion_percentage: int = 0

    TOTAL_STEPS = 4

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "OnboardingState":
        """Build a state from a stored document, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def completed_steps(self) -> int:
        return sum(
            [
                self.has_seen_welcome,
                self.has_created_bio,
                self.has_seen_dashboard_tour,
                self.has_published_first_block,
            ]
        )

    def recompute_completion(self) -> None:
        """Recompute completion_percentage from the step flags."""
        # half-up rounding
        self.completion_percentage = int(self.completed_steps * 100 / self.TOTAL_STEPS + 0.5)

    @property
    def is_complete(self) -> bool:
        return self.completion_percentage == 100
