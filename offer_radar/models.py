from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class Offer:
    title: Optional[str] = None
    link: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Both title and link must be present and non-empty."""
        return bool(self.title) and bool(self.link)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Offer":
        title = data.get("title")
        link = data.get("link")
        return cls(
            title=title if isinstance(title, str) else None,
            link=link if isinstance(link, str) else None,
        )


@dataclass
class DeliveryResult:
    target: str
    success: bool
    error_detail: Optional[str] = None


class RunOutcome(enum.Enum):
    no_targets = "no_targets"
    invalid_offer = "invalid_offer"
    unchanged = "unchanged"
    dispatched = "dispatched"
    dry_run = "dry_run"


@dataclass
class RunReport:
    outcome: RunOutcome
    targets_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    persisted: bool = False
    offer: Optional[Offer] = None

    def summary(self) -> str:
        return (
            f"outcome={self.outcome.value} targets={self.targets_count} "
            f"sent={self.success_count} failed={self.failure_count} "
            f"persisted={self.persisted}"
        )
