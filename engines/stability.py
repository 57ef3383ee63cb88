"""Per-subject score stability (volatility) across the exam history."""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from engines.phase import PhaseInfo
from engines.records import ExamRecord
from engines.rounding import round_half_up, round_tenths
from subject_catalog import SubjectCatalog


@dataclass(frozen=True)
class StabilityRow:
    subject: str
    label: str
    mean: int
    std_dev: float
    min: int
    max: int
    samples: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "label": self.label,
            "mean": self.mean,
            "std_dev": self.std_dev,
            "min": self.min,
            "max": self.max,
            "samples": self.samples,
        }


def collect_series(sorted_exams: Sequence[ExamRecord], phase_info: PhaseInfo) -> Dict[str, List[float]]:
    """Percentage series per subject, keyed in order of first appearance.

    A subject only contributes from exams where it was sat.
    """

    series: Dict[str, List[float]] = {}
    for exam in sorted_exams:
        for entry in exam.scores:
            if not phase_info.is_relevant(entry.subject):
                continue
            series.setdefault(entry.subject, []).append(entry.percentage)
    return series


def summarize(subject: str, values: List[float], catalog: SubjectCatalog) -> StabilityRow:
    # Population standard deviation; a single sitting has no spread.
    std_dev = round_tenths(statistics.pstdev(values)) if len(values) > 1 else 0.0
    return StabilityRow(
        subject=subject,
        label=catalog.label_for(subject),
        mean=round_half_up(statistics.fmean(values)),
        std_dev=std_dev,
        min=round_half_up(min(values)),
        max=round_half_up(max(values)),
        samples=len(values),
    )


def analyze_stability(
    sorted_exams: Sequence[ExamRecord],
    phase_info: PhaseInfo,
    catalog: SubjectCatalog,
) -> Tuple[StabilityRow, ...]:
    """Rows ordered most stable first; equal spreads keep first-appearance order."""

    rows = [
        summarize(subject, values, catalog)
        for subject, values in collect_series(sorted_exams, phase_info).items()
    ]
    rows.sort(key=lambda row: row.std_dev)
    return tuple(rows)


def best_subject(rows: Sequence[StabilityRow]) -> Optional[StabilityRow]:
    """Highest mean; ties go to the earlier (more stable) row."""

    best: Optional[StabilityRow] = None
    for row in rows:
        if best is None or row.mean > best.mean:
            best = row
    return best


def most_unstable_subject(rows: Sequence[StabilityRow]) -> Optional[StabilityRow]:
    return rows[-1] if rows else None


__all__ = [
    "StabilityRow",
    "collect_series",
    "summarize",
    "analyze_stability",
    "best_subject",
    "most_unstable_subject",
]
