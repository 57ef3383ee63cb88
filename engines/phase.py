"""Exploratory/focused phase detection and core subject derivation."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence, Set
from dataclasses import dataclass
from typing import Any, Tuple

from engines.records import ExamRecord
from subject_catalog import EXPLORATORY, FOCUSED, SubjectCatalog

logger = logging.getLogger(__name__)

SELECTION_SIZE = 3


@dataclass(frozen=True)
class PhaseInfo:
    phase: str
    core_subjects: Tuple[str, ...]

    @property
    def is_exploratory(self) -> bool:
        return self.phase == EXPLORATORY

    def is_relevant(self, subject: str) -> bool:
        """Whether ``subject`` takes part in the latest-exam and stability views.

        Everything is relevant while exploring. When focused without a recorded
        selection the core set is empty and nothing is filtered out.
        """

        if self.is_exploratory or not self.core_subjects:
            return True
        return subject in self.core_subjects


def parse_selected_subjects(raw: Any, catalog: SubjectCatalog) -> Tuple[str, ...]:
    """Parse the stored elective selection; never raises.

    Accepts any sequence (order kept), any set-like value (sorted) or a JSON
    array string. Anything other than three distinct, non-compulsory subject
    identifiers yields ``()``.
    """

    value = raw
    if isinstance(value, (bytes, bytearray)):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Selection bytes are not UTF-8; treating as no selection")
            return ()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ()
        try:
            value = json.loads(text)
        except ValueError:
            logger.debug("Selection %r is not valid JSON; treating as no selection", text)
            return ()

    if isinstance(value, Set):
        candidates = sorted(value, key=str)
    elif isinstance(value, Sequence) and not isinstance(value, str):
        candidates = list(value)
    else:
        if value is not None:
            logger.debug("Unsupported selection type %s; treating as no selection", type(value).__name__)
        return ()

    if not all(isinstance(item, str) and item.strip() for item in candidates):
        logger.debug("Selection %r contains non-string entries", candidates)
        return ()
    subjects = tuple(item.strip() for item in candidates)
    if len(subjects) != SELECTION_SIZE or len(set(subjects)) != SELECTION_SIZE:
        logger.debug("Selection %r is not %d distinct subjects", subjects, SELECTION_SIZE)
        return ()
    if set(subjects) & set(catalog.compulsory_subjects):
        logger.debug("Selection %r overlaps the compulsory subjects", subjects)
        return ()
    return subjects


def classify_phase(latest: ExamRecord, selected: Tuple[str, ...], catalog: SubjectCatalog) -> PhaseInfo:
    """Derive the phase from the latest exam and the core set from the selection.

    The two signals are independent of each other.
    """

    phase = EXPLORATORY if latest.subject_count > catalog.breadth_threshold else FOCUSED
    core: Tuple[str, ...] = ()
    if len(selected) == SELECTION_SIZE:
        core = tuple(catalog.compulsory_subjects) + tuple(selected)
    logger.debug(
        "Latest exam %s has %d subjects -> %s; core subjects %s",
        latest.exam_id,
        latest.subject_count,
        phase,
        core or "(none)",
    )
    return PhaseInfo(phase=phase, core_subjects=core)


__all__ = ["SELECTION_SIZE", "PhaseInfo", "parse_selected_subjects", "classify_phase"]
