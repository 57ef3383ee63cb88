import json

import generate_test_data
from engines.analysis import analyze
from schemas import parse_exam_payload


def test_history_is_reproducible_for_a_seed():
    assert generate_test_data.build_history(seed=3) == generate_test_data.build_history(seed=3)


def test_history_shape_matches_grade_progression():
    payload = generate_test_data.build_history(seed=11)

    exams = payload["exams"]
    assert payload["selected_subjects"] == ["Physics", "Chemistry", "Biology"]
    assert [len(exam["scores"]) for exam in exams] == [9, 9, 9, 6, 6, 6, 6, 6]
    for exam in exams:
        assert exam["totalScore"] == sum(s["score"] for s in exam["scores"])
        assert all(0 <= s["score"] <= s["maxScore"] for s in exam["scores"])
        assert exam["gradeRank"] >= 1


def test_generated_payload_round_trips_through_ingestion():
    payload = generate_test_data.build_history(seed=5)

    records = parse_exam_payload(payload)
    report = analyze(records, payload["selected_subjects"])

    assert len(records) == 8
    assert report.overview.max_possible == 750
    assert report.charts.timeline[0].total_score == sum(
        s["score"] for s in payload["exams"][0]["scores"][:6]
    )


def test_main_writes_output_file(tmp_path, capsys):
    output = tmp_path / "history.json"
    assert generate_test_data.main(["--seed", "1", "--output", str(output)]) == 0
    assert "Wrote 8 exams" in capsys.readouterr().out
    assert json.loads(output.read_text(encoding="utf-8"))["exams"][0]["id"] == "exam-1"
