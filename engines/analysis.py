"""Performance analysis entry point: assembles the overview and chart payloads.

``analyze`` is a pure function of its arguments. It never mutates the records
it is given, never raises on malformed selections or optional fields, and
returns ``None`` when there is no exam history yet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from engines.phase import PhaseInfo, classify_phase, parse_selected_subjects
from engines.profile import (
    RadarPoint,
    WeaknessRow,
    capability_radar,
    detect_weaknesses,
    relevant_scores,
)
from engines.recommender import CombinationSuggestion, recommend_combinations
from engines.records import ExamRecord, sanitize_exam, sort_chronologically
from engines.stability import (
    StabilityRow,
    analyze_stability,
    best_subject,
    most_unstable_subject,
)
from engines.timeline import TimelinePoint, build_timeline
from subject_catalog import DEFAULT_CATALOG, SubjectCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Overview:
    phase: str
    phase_label: str
    exam_count: int
    latest_total: float
    max_possible: Optional[float]
    best_subject: Optional[str]
    most_unstable: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "phase_label": self.phase_label,
            "exam_count": self.exam_count,
            "latest_total": self.latest_total,
            "max_possible": self.max_possible,
            "best_subject": self.best_subject,
            "most_unstable": self.most_unstable,
        }


@dataclass(frozen=True)
class Charts:
    timeline: Tuple[TimelinePoint, ...]
    weakness: Tuple[WeaknessRow, ...]
    radar: Tuple[RadarPoint, ...]
    stability: Tuple[StabilityRow, ...]
    suggestions: Tuple[CombinationSuggestion, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeline": [point.to_dict() for point in self.timeline],
            "weakness": [row.to_dict() for row in self.weakness],
            "radar": [point.to_dict() for point in self.radar],
            "stability": [row.to_dict() for row in self.stability],
            "suggestions": [item.to_dict() for item in self.suggestions],
        }


@dataclass(frozen=True)
class AnalysisReport:
    overview: Overview
    charts: Charts

    def to_dict(self) -> Dict[str, Any]:
        return {"overview": self.overview.to_dict(), "charts": self.charts.to_dict()}


def analyze(
    exam_records: Iterable[ExamRecord],
    selected_subjects: Any = None,
    catalog: Optional[SubjectCatalog] = None,
) -> Optional[AnalysisReport]:
    """Analyze a student's exam history.

    ``exam_records`` may arrive in any order. ``selected_subjects`` is the raw
    stored elective selection (set-like, JSON text or ``None``). ``catalog``
    defaults to :data:`subject_catalog.DEFAULT_CATALOG`.
    """

    catalog = catalog or DEFAULT_CATALOG
    exams = [sanitize_exam(exam) for exam in exam_records]
    if not exams:
        return None

    sorted_exams = sort_chronologically(exams)
    latest = sorted_exams[-1]

    selection = parse_selected_subjects(selected_subjects, catalog)
    phase_info: PhaseInfo = classify_phase(latest, selection, catalog)

    scores = relevant_scores(latest, phase_info)
    stability = analyze_stability(sorted_exams, phase_info, catalog)
    charts = Charts(
        timeline=build_timeline(sorted_exams, phase_info, catalog),
        weakness=detect_weaknesses(scores, catalog),
        radar=capability_radar(scores, catalog),
        stability=stability,
        suggestions=recommend_combinations(latest, phase_info, catalog),
    )

    best = best_subject(stability)
    unstable = most_unstable_subject(stability)
    overview = Overview(
        phase=phase_info.phase,
        phase_label=catalog.phase_label(phase_info.phase),
        exam_count=len(exams),
        latest_total=latest.recorded_total,
        max_possible=catalog.max_total(phase_info.phase),
        best_subject=best.label if best else None,
        most_unstable=unstable.label if unstable else None,
    )
    logger.debug(
        "Analyzed %d exams: phase=%s latest=%s", overview.exam_count, overview.phase, latest.exam_id
    )
    return AnalysisReport(overview=overview, charts=charts)


__all__ = ["Overview", "Charts", "AnalysisReport", "analyze"]
