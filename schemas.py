"""Pydantic schemas for validating exam import payloads."""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from engines.records import DEFAULT_MAX_SCORE, ExamRecord, SubjectScore

__all__ = [
    "ExamPayloadError",
    "SubjectScoreIn",
    "ExamRecordIn",
    "extract_exam_entries",
    "parse_exam_payload",
]


class ExamPayloadError(ValueError):
    """Raised when an exam import payload cannot be turned into records."""


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _require_finite(value: Optional[float]) -> Optional[float]:
    if value is not None and not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


class SubjectScoreIn(BaseModel):
    subject: str = Field(min_length=1, description="Subject identifier, e.g. Physics.")
    score: float = Field(ge=0, description="Raw score obtained in the subject.")
    max_score: float = Field(
        default=DEFAULT_MAX_SCORE,
        gt=0,
        alias="maxScore",
        description="Full marks for the subject paper; defaults to 100.",
    )
    grade_avg_score: Optional[float] = Field(
        default=None,
        alias="gradeAvgScore",
        description="Cohort (grade) average for the subject, if published.",
    )
    class_rank: Optional[int] = Field(default=None, alias="classRank")
    grade_rank: Optional[int] = Field(default=None, alias="gradeRank")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("max_score", mode="before")
    @classmethod
    def _default_max_score(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return DEFAULT_MAX_SCORE if value is None else value

    @field_validator("grade_avg_score", "class_rank", "grade_rank", mode="before")
    @classmethod
    def _optional_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("class_rank", "grade_rank", mode="before")
    @classmethod
    def _truncate_rank(cls, value: Any) -> Any:
        if isinstance(value, float) and math.isfinite(value):
            return math.trunc(value)
        return value

    @field_validator("score", "max_score", "grade_avg_score")
    @classmethod
    def _finite(cls, value: Optional[float]) -> Optional[float]:
        return _require_finite(value)

    def to_record(self) -> SubjectScore:
        return SubjectScore(
            subject=self.subject,
            score=self.score,
            max_score=self.max_score,
            grade_avg_score=self.grade_avg_score,
            class_rank=self.class_rank,
            grade_rank=self.grade_rank,
        )


class ExamRecordIn(BaseModel):
    exam_id: Optional[str] = Field(default=None, alias="id")
    name: str = Field(min_length=1, description="Display name of the exam sitting.")
    exam_date: date = Field(alias="date")
    exam_type: str = Field(default="Mock", alias="type")
    total_score: Optional[float] = Field(
        default=None,
        alias="totalScore",
        description="Declared total; the sum of subject scores when omitted.",
    )
    class_rank: Optional[int] = Field(default=None, alias="classRank")
    grade_rank: Optional[int] = Field(default=None, alias="gradeRank")
    scores: List[SubjectScoreIn] = Field(min_length=1)

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("exam_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("exam_date", mode="before")
    @classmethod
    def _calendar_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
            except ValueError:
                return value
        return value

    @field_validator("exam_type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return "Mock" if value is None else value

    @field_validator("total_score", "class_rank", "grade_rank", mode="before")
    @classmethod
    def _optional_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("total_score")
    @classmethod
    def _finite_total(cls, value: Optional[float]) -> Optional[float]:
        return _require_finite(value)

    @model_validator(mode="after")
    def _unique_subjects(self) -> "ExamRecordIn":
        seen: set[str] = set()
        for entry in self.scores:
            if entry.subject in seen:
                raise ValueError(f"Duplicate subject: {entry.subject}")
            seen.add(entry.subject)
        return self

    def to_record(self, fallback_id: str) -> ExamRecord:
        scores: Tuple[SubjectScore, ...] = tuple(entry.to_record() for entry in self.scores)
        total = self.total_score
        if total is None:
            total = sum(entry.score for entry in scores)
        return ExamRecord(
            exam_id=self.exam_id or fallback_id,
            name=self.name,
            date=self.exam_date,
            exam_type=self.exam_type,
            total_score=total,
            class_rank=self.class_rank,
            grade_rank=self.grade_rank,
            scores=scores,
        )


def extract_exam_entries(parsed: Any) -> List[Any]:
    """Locate the exam list inside a decoded payload.

    Accepts a bare list, ``{"exams": [...]}``, ``{"exam": {...}}`` or a single
    exam object.
    """

    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        if isinstance(parsed.get("exams"), list):
            return parsed["exams"]
        if isinstance(parsed.get("exam"), dict):
            return [parsed["exam"]]
        if parsed.get("name") or parsed.get("scores"):
            return [parsed]
    raise ExamPayloadError("Payload must be { exams: [...] } or a single exam object")


def parse_exam_payload(payload: Any) -> List[ExamRecord]:
    """Validate ``payload`` (JSON text or decoded JSON) into engine records."""

    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise ExamPayloadError(f"Payload is not valid JSON: {exc}") from exc

    records: List[ExamRecord] = []
    for idx, entry in enumerate(extract_exam_entries(payload)):
        try:
            model = ExamRecordIn.model_validate(entry)
        except ValidationError as exc:
            raise ExamPayloadError(f"exams[{idx}] is invalid: {exc}") from exc
        records.append(model.to_record(fallback_id=f"exam-{idx + 1}"))
    return records
