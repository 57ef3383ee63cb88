"""Immutable exam record types consumed by the analysis engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_SCORE = 100.0


@dataclass(frozen=True)
class SubjectScore:
    subject: str
    score: float
    max_score: float = DEFAULT_MAX_SCORE
    grade_avg_score: Optional[float] = None
    class_rank: Optional[int] = None
    grade_rank: Optional[int] = None

    @property
    def percentage(self) -> float:
        """Score as a percentage of ``max_score``."""

        return self.score / self.max_score * 100


@dataclass(frozen=True)
class ExamRecord:
    """One exam sitting with its per-subject scores."""

    exam_id: str
    name: str
    date: date
    exam_type: str = "Mock"
    total_score: Optional[float] = None
    class_rank: Optional[int] = None
    grade_rank: Optional[int] = None
    scores: Tuple[SubjectScore, ...] = field(default_factory=tuple)

    @property
    def subject_count(self) -> int:
        return len(self.scores)

    @property
    def recorded_total(self) -> float:
        """Declared total, or the plain sum of subject scores when none was given."""

        if self.total_score is not None:
            return self.total_score
        return sum(s.score for s in self.scores)

    def score_map(self) -> Dict[str, float]:
        return {s.subject: s.score for s in self.scores}


def sanitize_exam(exam: ExamRecord) -> ExamRecord:
    """Return ``exam`` with duplicate subjects dropped and bad maxima replaced.

    The first occurrence of a subject wins. A non-positive ``max_score`` is
    replaced by :data:`DEFAULT_MAX_SCORE`, and a ``datetime`` is truncated to
    its calendar date. The input record is returned as-is when nothing needs
    fixing.
    """

    cleaned: List[SubjectScore] = []
    seen: set[str] = set()
    changed = False
    exam_date = exam.date
    if isinstance(exam_date, datetime):
        exam_date = exam_date.date()
        changed = True
    for entry in exam.scores:
        if entry.subject in seen:
            logger.warning(
                "Exam %s lists subject %s more than once; keeping the first entry",
                exam.exam_id,
                entry.subject,
            )
            changed = True
            continue
        seen.add(entry.subject)
        if not entry.max_score or entry.max_score <= 0:
            logger.warning(
                "Exam %s subject %s has non-positive max_score %r; using %s",
                exam.exam_id,
                entry.subject,
                entry.max_score,
                DEFAULT_MAX_SCORE,
            )
            entry = replace(entry, max_score=DEFAULT_MAX_SCORE)
            changed = True
        cleaned.append(entry)

    if not changed:
        return exam
    return replace(exam, date=exam_date, scores=tuple(cleaned))


def sort_chronologically(exams: List[ExamRecord]) -> List[ExamRecord]:
    """Oldest first; exams sharing a date keep their input order."""

    return sorted(exams, key=lambda exam: exam.date)


__all__ = [
    "DEFAULT_MAX_SCORE",
    "SubjectScore",
    "ExamRecord",
    "sanitize_exam",
    "sort_chronologically",
]
