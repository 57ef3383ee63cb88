from datetime import date

from engines.phase import PhaseInfo
from engines.profile import capability_radar, detect_weaknesses, relevant_scores
from subject_catalog import DEFAULT_CATALOG, EXPLORATORY, FOCUSED

CORE = ("Chinese", "Math", "English", "Physics", "Chemistry", "Biology")


def test_weakness_rows_sorted_by_gap_with_stable_ties(discovery_exam):
    rows = detect_weaknesses(discovery_exam.scores, DEFAULT_CATALOG)

    assert [row.subject for row in rows] == [
        "Biology",
        "History",
        "Politics",
        "Geography",
        "Chemistry",
        "Physics",
        "Chinese",
        "English",
        "Math",
    ]
    assert rows[0].gap == 5
    assert not any(row.is_weak for row in rows)
    # no cohort average published: the whole score counts as the gap
    assert rows[-1].gap == 120
    assert rows[0].label == "生物"


def test_weak_flag_marks_negative_gap_only(make_exam):
    exam = make_exam(
        "w",
        date(2023, 2, 1),
        [
            ("Physics", 60, 100, 70),
            ("Chemistry", 68, 100, 68),
            ("Biology", 50, 100, 65),
        ],
    )
    rows = detect_weaknesses(exam.scores, DEFAULT_CATALOG)

    assert [(row.subject, row.gap, row.is_weak) for row in rows] == [
        ("Biology", -15, True),
        ("Physics", -10, True),
        ("Chemistry", 0, False),
    ]


def test_radar_normalizes_and_keeps_input_order(discovery_exam):
    points = capability_radar(discovery_exam.scores, DEFAULT_CATALOG)

    assert [p.subject for p in points] == [s.subject for s in discovery_exam.scores]
    values = {p.subject: p.value for p in points}
    assert values["Chinese"] == 73
    assert values["Math"] == 80
    assert values["English"] == 77
    assert values["Physics"] == 80
    assert all(p.full_mark == 100 for p in points)


def test_radar_rounds_halves_up(make_exam):
    exam = make_exam("r", date(2023, 2, 1), [("Math", 1, 8, None), ("Physics", 12.5, 100, None)])
    values = [p.value for p in capability_radar(exam.scores, DEFAULT_CATALOG)]
    assert values == [13, 13]


def test_relevant_scores_filter_by_phase(discovery_exam, focus_exam):
    exploring = relevant_scores(discovery_exam, PhaseInfo(EXPLORATORY, CORE))
    assert len(exploring) == 9

    focused = relevant_scores(discovery_exam, PhaseInfo(FOCUSED, CORE))
    assert [s.subject for s in focused] == list(CORE)

    # focused but never selected: falls back to every subject in the exam
    fallback = relevant_scores(focus_exam, PhaseInfo(FOCUSED, ()))
    assert len(fallback) == 6


def test_unknown_subject_uses_raw_identifier(make_exam):
    exam = make_exam("u", date(2023, 2, 1), [("Robotics", 88, 100, 80)])
    assert detect_weaknesses(exam.scores, DEFAULT_CATALOG)[0].label == "Robotics"
    assert capability_radar(exam.scores, DEFAULT_CATALOG)[0].label == "Robotics"
