import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from engines.records import ExamRecord, SubjectScore


# (subject, score, max_score, grade_avg_score)
DISCOVERY_SCORES = [
    ("Chinese", 110, 150, None),
    ("Math", 120, 150, None),
    ("English", 115, 150, None),
    ("Physics", 80, 100, 70),
    ("Chemistry", 75, 100, 68),
    ("Biology", 70, 100, 65),
    ("History", 60, 100, 55),
    ("Politics", 65, 100, 60),
    ("Geography", 70, 100, 65),
]

FOCUS_SCORES = [
    ("Chinese", 115, 150, None),
    ("Math", 125, 150, None),
    ("English", 118, 150, None),
    ("Physics", 85, 100, 70),
    ("Chemistry", 78, 100, 68),
    ("Biology", 72, 100, 65),
]


def build_exam(exam_id, when, rows, *, name=None, total=None, grade_rank=None):
    return ExamRecord(
        exam_id=exam_id,
        name=name or exam_id,
        date=when,
        total_score=total,
        grade_rank=grade_rank,
        scores=tuple(
            SubjectScore(subject=subject, score=score, max_score=max_score, grade_avg_score=avg)
            for subject, score, max_score, avg in rows
        ),
    )


@pytest.fixture
def make_exam():
    return build_exam


@pytest.fixture
def discovery_exam():
    return build_exam("g10-mid", date(2023, 1, 15), DISCOVERY_SCORES, name="Grade 10 Midterm", grade_rank=120)


@pytest.fixture
def focus_exam():
    return build_exam("g11-mid", date(2023, 9, 15), FOCUS_SCORES, name="Grade 11 Midterm", grade_rank=95)
