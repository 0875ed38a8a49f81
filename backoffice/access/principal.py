"""Resolved caller identity passed explicitly into every access-layer call."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """The authenticated caller. Carries exactly one stable user identifier."""

    user_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.user_id, str) or not self.user_id.strip():
            raise ValueError("Principal requires a non-empty user_id")
