"""Subject combination ranking for students who have not specialized yet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from engines.phase import PhaseInfo
from engines.records import ExamRecord
from engines.rounding import round_half_up
from subject_catalog import SubjectCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombinationSuggestion:
    name: str
    total: int
    subjects: Tuple[str, ...]
    labels: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total": self.total,
            "subjects": list(self.subjects),
            "labels": list(self.labels),
        }


def recommend_combinations(
    latest: ExamRecord,
    phase_info: PhaseInfo,
    catalog: SubjectCatalog,
) -> Tuple[CombinationSuggestion, ...]:
    """Rank catalog combinations by projected total on the latest exam.

    Only active during the exploratory phase. Subjects absent from the exam
    count as 0. Equal totals keep catalog order.
    """

    if not phase_info.is_exploratory:
        return ()

    current = latest.score_map()
    compulsory_total = sum(current.get(subject, 0) for subject in catalog.compulsory_subjects)

    ranked: List[Tuple[float, CombinationSuggestion]] = []
    for combo in catalog.combinations:
        total = compulsory_total + sum(current.get(subject, 0) for subject in combo.subjects)
        suggestion = CombinationSuggestion(
            name=combo.name,
            total=round_half_up(total),
            subjects=tuple(combo.subjects),
            labels=catalog.labels_for(combo.subjects),
        )
        ranked.append((total, suggestion))

    ranked.sort(key=lambda item: item[0], reverse=True)
    top = tuple(suggestion for _, suggestion in ranked[: catalog.recommendation_limit])
    logger.debug("Top combinations for exam %s: %s", latest.exam_id, [s.name for s in top])
    return top


__all__ = ["CombinationSuggestion", "recommend_combinations"]
