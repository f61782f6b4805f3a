#!/usr/bin/env python3
"""Per-repository and per-entity outcome records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class RepositoryResult:
    """Outcome of mirroring one repository."""
    name: str
    succeeded: bool
    reason: Optional[str] = None

    @classmethod
    def success(cls, name: str) -> "RepositoryResult":
        return cls(name=name, succeeded=True)

    @classmethod
    def failure(cls, name: str, reason: str) -> "RepositoryResult":
        return cls(name=name, succeeded=False, reason=reason)


@dataclass
class BatchResult:
    """Aggregated outcome for one entity.

    ``failed_names`` keeps the order in which repositories were discovered.
    """
    entity_name: str
    total: int = 0
    failed_names: List[str] = field(default_factory=list)

    @property
    def failures(self) -> int:
        return len(self.failed_names)

    def record(self, result: RepositoryResult) -> None:
        self.total += 1
        if not result.succeeded:
            self.failed_names.append(result.name)

    def summary(self) -> str:
        text = (
            f"[{self.entity_name}] {self.total} repositories mirrored, "
            f"{self.failures} error(s) occurred."
        )
        if self.failed_names:
            text += f"\nFailed repos: {', '.join(self.failed_names)}"
        return text
