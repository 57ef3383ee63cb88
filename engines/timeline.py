"""Chronological score/rank series with projection onto the core subjects."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from engines.phase import PhaseInfo
from engines.records import ExamRecord
from subject_catalog import SubjectCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelinePoint:
    exam_name: str
    date: str
    total_score: float
    grade_rank: Optional[int]
    is_virtual: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exam_name": self.exam_name,
            "date": self.date,
            "total_score": self.total_score,
            "grade_rank": self.grade_rank,
            "is_virtual": self.is_virtual,
        }


def project_exam(exam: ExamRecord, phase_info: PhaseInfo, catalog: SubjectCatalog) -> TimelinePoint:
    """Build one timeline point, re-totalling broad exams onto the core subjects.

    A broad exam (more subjects than the breadth threshold) viewed under a
    recorded specialization is shown as the sum of its core subject scores and
    flagged virtual. Every other exam keeps its recorded total.
    """

    core = phase_info.core_subjects
    if core and exam.subject_count > catalog.breadth_threshold:
        total = sum(s.score for s in exam.scores if s.subject in core)
        virtual = True
    else:
        total = exam.recorded_total
        virtual = False
    return TimelinePoint(
        exam_name=exam.name,
        date=exam.date.isoformat(),
        total_score=total,
        grade_rank=exam.grade_rank,
        is_virtual=virtual,
    )


def build_timeline(
    sorted_exams: Sequence[ExamRecord],
    phase_info: PhaseInfo,
    catalog: SubjectCatalog,
) -> Tuple[TimelinePoint, ...]:
    points: List[TimelinePoint] = [project_exam(exam, phase_info, catalog) for exam in sorted_exams]
    projected = sum(1 for point in points if point.is_virtual)
    if projected:
        logger.debug("Projected %d of %d exams onto core subjects", projected, len(points))
    return tuple(points)


__all__ = ["TimelinePoint", "project_exam", "build_timeline"]
