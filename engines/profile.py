"""Latest-exam views: short-stave weakness bars and the normalized radar."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from engines.phase import PhaseInfo
from engines.records import ExamRecord, SubjectScore
from engines.rounding import round_half_up
from subject_catalog import SubjectCatalog

FULL_MARK = 100


@dataclass(frozen=True)
class WeaknessRow:
    subject: str
    label: str
    score: float
    gap: float
    is_weak: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "label": self.label,
            "score": self.score,
            "gap": self.gap,
            "is_weak": self.is_weak,
        }


@dataclass(frozen=True)
class RadarPoint:
    subject: str
    label: str
    value: int
    full_mark: int = FULL_MARK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "label": self.label,
            "value": self.value,
            "full_mark": self.full_mark,
        }


def relevant_scores(latest: ExamRecord, phase_info: PhaseInfo) -> Tuple[SubjectScore, ...]:
    return tuple(s for s in latest.scores if phase_info.is_relevant(s.subject))


def detect_weaknesses(scores: Tuple[SubjectScore, ...], catalog: SubjectCatalog) -> Tuple[WeaknessRow, ...]:
    """Rank subjects by how far they sit above the cohort average, lowest first.

    A missing cohort average counts as 0, so such a subject never shows as weak.
    """

    rows = []
    for entry in scores:
        gap = entry.score - (entry.grade_avg_score or 0)
        rows.append(
            WeaknessRow(
                subject=entry.subject,
                label=catalog.label_for(entry.subject),
                score=entry.score,
                gap=gap,
                is_weak=gap < 0,
            )
        )
    rows.sort(key=lambda row: row.gap)
    return tuple(rows)


def capability_radar(scores: Tuple[SubjectScore, ...], catalog: SubjectCatalog) -> Tuple[RadarPoint, ...]:
    return tuple(
        RadarPoint(
            subject=entry.subject,
            label=catalog.label_for(entry.subject),
            value=round_half_up(entry.percentage),
        )
        for entry in scores
    )


__all__ = [
    "FULL_MARK",
    "WeaknessRow",
    "RadarPoint",
    "relevant_scores",
    "detect_weaknesses",
    "capability_radar",
]
