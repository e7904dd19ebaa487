"""Aggregation of per-domain outcomes into a response."""

from dataclasses import dataclass, field
from typing import Any, Iterable

from .models import DomainOutcome, ErrorEntry, Result


@dataclass
class CheckReport:
    """Results and errors of one check request, in input order."""

    results: list[Result] = field(default_factory=list)
    errors: list[ErrorEntry] = field(default_factory=list)

    def add(self, outcome: DomainOutcome) -> None:
        if outcome.result is not None:
            self.results.append(outcome.result)
        self.errors.extend(outcome.errors)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[DomainOutcome]) -> "CheckReport":
        report = cls()
        for outcome in outcomes:
            report.add(outcome)
        return report

    @property
    def listed_count(self) -> int:
        """Number of results with at least one listing."""
        return sum(1 for r in self.results if r.listed)

    def to_dict(self) -> dict[str, Any]:
        # Both keys are always present so callers can tell "clean" from "not checked"
        return {
            "resultados": [r.to_dict() for r in self.results],
            "erros": [e.to_dict() for e in self.errors],
        }
