"""Configuration for matching, scoring and remediation."""

from dataclasses import dataclass, fields, asdict
from typing import Dict, Any


@dataclass(frozen=True)
class OrganizerConfig:
    """Tunable constants shared by the organizer services.

    Every service takes an instance in its constructor; there is no
    module-level default instance.
    """

    # Duplicate matching
    exact_name_confidence: float = 1.0
    shared_channel_confidence: float = 0.95  # same phone / same email
    similar_name_with_org_threshold: float = 0.85
    similar_name_threshold: float = 0.90

    # Data quality
    placeholder_name: str = "No Name"
    high_severity_penalty: float = 10.0
    medium_severity_penalty: float = 3.0
    low_severity_penalty: float = 0.5
    low_severity_penalty_cap: float = 5.0

    # Remediation groups
    phone_follow_up_group: str = "Follow Up"
    email_follow_up_group: str = "Email Follow-Up"
    general_follow_up_group: str = "General Follow-Up"
    reviewed_group: str = "Reviewed"
    archive_group: str = "Archive"

    # Activity log
    activity_log_size: int = 200

    def __post_init__(self):
        """Validate threshold ranges."""
        for name in (
            'exact_name_confidence',
            'shared_channel_confidence',
            'similar_name_with_org_threshold',
            'similar_name_threshold',
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

        if self.activity_log_size < 1:
            raise ValueError("activity_log_size must be at least 1")

    @property
    def min_similarity_threshold(self) -> float:
        """Lowest name similarity that can still produce a similar-name match."""
        return min(self.similar_name_with_org_threshold, self.similar_name_threshold)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrganizerConfig':
        """Create from dictionary, ignoring keys that are not config fields."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
