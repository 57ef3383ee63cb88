"""Subject catalog configuration: labels, combinations and phase constants."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

CATALOG_PATH_ENV = "EXAM_CATALOG_PATH"

EXPLORATORY = "EXPLORATORY"
FOCUSED = "FOCUSED"
PHASES = (EXPLORATORY, FOCUSED)


class CatalogConfigError(ValueError):
    """Raised when a subject catalog file contains invalid data."""


@dataclass(frozen=True)
class SubjectCombination:
    """A named three-subject elective track."""

    name: str
    subjects: Tuple[str, str, str]


@dataclass(frozen=True)
class SubjectCatalog:
    """Immutable configuration injected into the analysis engine."""

    labels: Mapping[str, str]
    compulsory_subjects: Tuple[str, ...]
    combinations: Tuple[SubjectCombination, ...]
    breadth_threshold: int = 6
    max_totals: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType({EXPLORATORY: 1050, FOCUSED: 750})
    )
    phase_labels: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(
            {EXPLORATORY: "DISCOVERY (G10)", FOCUSED: "FOCUS (G11/12)"}
        )
    )
    recommendation_limit: int = 3

    def label_for(self, subject: str) -> str:
        """Return the display label, falling back to the raw identifier."""

        return self.labels.get(subject, subject)

    def labels_for(self, subjects: Iterable[str]) -> Tuple[str, ...]:
        return tuple(self.label_for(subject) for subject in subjects)

    def max_total(self, phase: str) -> Optional[float]:
        return self.max_totals.get(phase)

    def phase_label(self, phase: str) -> str:
        return self.phase_labels.get(phase, phase)


def _freeze(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


DEFAULT_CATALOG = SubjectCatalog(
    labels=_freeze(
        {
            "Chinese": "语文",
            "Math": "数学",
            "English": "英语",
            "Physics": "物理",
            "Chemistry": "化学",
            "Biology": "生物",
            "Politics": "政治",
            "History": "历史",
            "Geography": "地理",
        }
    ),
    compulsory_subjects=("Chinese", "Math", "English"),
    combinations=(
        SubjectCombination("物化生 (Pure Science)", ("Physics", "Chemistry", "Biology")),
        SubjectCombination("物化地 (Broad Scope)", ("Physics", "Chemistry", "Geography")),
        SubjectCombination("史政地 (Humanities)", ("History", "Politics", "Geography")),
        SubjectCombination("物生政 (Civil Service)", ("Physics", "Biology", "Politics")),
    ),
)
"""Catalog matching the standard 3+3 gaokao subject scheme."""


# ---------------------------------------------------------------------------
# JSON loading
# ---------------------------------------------------------------------------


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CatalogConfigError(f"{what} must be a non-empty string")
    return value.strip()


def _parse_positive_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise CatalogConfigError(f"{what} must be a positive integer")
    return value


def _parse_combinations(raw: Any) -> Tuple[SubjectCombination, ...]:
    if not isinstance(raw, list) or not raw:
        raise CatalogConfigError("'combinations' must be a non-empty JSON list")

    combos: List[SubjectCombination] = []
    seen: set[str] = set()
    for idx, entry in enumerate(raw, start=1):
        if not isinstance(entry, dict):
            raise CatalogConfigError(f"Combination #{idx} must be a JSON object")
        name = _require_str(entry.get("name"), f"Combination #{idx} 'name'")
        if name in seen:
            raise CatalogConfigError(f"Duplicate combination name detected: {name}")
        seen.add(name)

        subjects = entry.get("subjects")
        if not isinstance(subjects, list) or len(subjects) != 3:
            raise CatalogConfigError(f"Combination {name} must list exactly 3 subjects")
        cleaned = tuple(_require_str(sub, f"Combination {name} subject") for sub in subjects)
        if len(set(cleaned)) != 3:
            raise CatalogConfigError(f"Combination {name} repeats a subject")
        combos.append(SubjectCombination(name, cleaned))  # type: ignore[arg-type]
    return tuple(combos)


def _parse_phase_mapping(raw: Any, what: str, *, numeric: bool) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise CatalogConfigError(f"'{what}' must be a JSON object")
    parsed: Dict[str, Any] = {}
    for phase, value in raw.items():
        if phase not in PHASES:
            raise CatalogConfigError(f"'{what}' has unknown phase {phase!r}")
        if numeric:
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise CatalogConfigError(f"'{what}.{phase}' must be a positive number")
            parsed[phase] = value
        else:
            parsed[phase] = _require_str(value, f"'{what}.{phase}'")
    return parsed


def catalog_from_dict(raw: Any, *, base: SubjectCatalog = DEFAULT_CATALOG) -> SubjectCatalog:
    """Build a catalog from decoded JSON, inheriting omitted keys from ``base``."""

    if not isinstance(raw, dict):
        raise CatalogConfigError("Subject catalog must be a JSON object")

    labels: Mapping[str, str] = base.labels
    if "labels" in raw:
        if not isinstance(raw["labels"], dict):
            raise CatalogConfigError("'labels' must be a JSON object")
        labels = _freeze(
            {
                _require_str(key, "Label key"): _require_str(value, f"Label for {key}")
                for key, value in raw["labels"].items()
            }
        )

    compulsory = base.compulsory_subjects
    if "compulsory_subjects" in raw:
        values = raw["compulsory_subjects"]
        if not isinstance(values, list) or not values:
            raise CatalogConfigError("'compulsory_subjects' must be a non-empty JSON list")
        compulsory = tuple(_require_str(v, "Compulsory subject") for v in values)
        if len(set(compulsory)) != len(compulsory):
            raise CatalogConfigError("'compulsory_subjects' repeats a subject")

    combinations = base.combinations
    if "combinations" in raw:
        combinations = _parse_combinations(raw["combinations"])

    max_totals = base.max_totals
    if "max_totals" in raw:
        max_totals = _freeze(
            {**base.max_totals, **_parse_phase_mapping(raw["max_totals"], "max_totals", numeric=True)}
        )

    phase_labels = base.phase_labels
    if "phase_labels" in raw:
        phase_labels = _freeze(
            {**base.phase_labels, **_parse_phase_mapping(raw["phase_labels"], "phase_labels", numeric=False)}
        )

    threshold = base.breadth_threshold
    if "breadth_threshold" in raw:
        threshold = _parse_positive_int(raw["breadth_threshold"], "'breadth_threshold'")

    limit = base.recommendation_limit
    if "recommendation_limit" in raw:
        limit = _parse_positive_int(raw["recommendation_limit"], "'recommendation_limit'")

    return SubjectCatalog(
        labels=labels,
        compulsory_subjects=compulsory,
        combinations=combinations,
        breadth_threshold=threshold,
        max_totals=max_totals,
        phase_labels=phase_labels,
        recommendation_limit=limit,
    )


def load_catalog(path: str | Path) -> SubjectCatalog:
    """Load and validate a catalog JSON file."""

    catalog_path = Path(path)
    if not catalog_path.exists():
        raise FileNotFoundError(f"Subject catalog file not found: {catalog_path}")

    with catalog_path.open("r", encoding="utf-8") as fh:
        try:
            raw = json.load(fh)
        except json.JSONDecodeError as exc:
            raise CatalogConfigError(f"Subject catalog is not valid JSON: {exc}") from exc

    catalog = catalog_from_dict(raw)
    logger.info(
        "Loaded subject catalog from %s (%d labels, %d combinations)",
        catalog_path,
        len(catalog.labels),
        len(catalog.combinations),
    )
    return catalog


def catalog_from_env() -> SubjectCatalog:
    """Return the catalog named by ``EXAM_CATALOG_PATH`` or the default one."""

    path = os.getenv(CATALOG_PATH_ENV)
    if not path:
        return DEFAULT_CATALOG
    return load_catalog(path)


__all__ = [
    "EXPLORATORY",
    "FOCUSED",
    "PHASES",
    "CatalogConfigError",
    "SubjectCombination",
    "SubjectCatalog",
    "DEFAULT_CATALOG",
    "catalog_from_dict",
    "load_catalog",
    "catalog_from_env",
]
