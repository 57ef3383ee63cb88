import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import generate_test_data
from scripts import analyze_exams


def _write_history(tmp_path: Path, **overrides) -> Path:
    payload = generate_test_data.build_history(seed=7)
    payload.update(overrides)
    path = tmp_path / "history.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def test_cli_prints_report_using_payload_selection(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("EXAM_CATALOG_PATH", raising=False)
    path = _write_history(tmp_path)

    exit_code = analyze_exams.main([str(path)])
    report = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert report["overview"]["phase"] == "FOCUSED"
    assert report["overview"]["exam_count"] == 8
    timeline = report["charts"]["timeline"]
    assert [point["is_virtual"] for point in timeline] == [True] * 3 + [False] * 5
    assert report["charts"]["suggestions"] == []


def test_cli_selection_flag_overrides_payload(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("EXAM_CATALOG_PATH", raising=False)
    path = _write_history(tmp_path)
    output = tmp_path / "report.json"

    exit_code = analyze_exams.main([str(path), "--selection", "[]", "--output", str(output)])
    capsys.readouterr()

    assert exit_code == 0
    report = json.loads(output.read_text(encoding="utf-8"))
    assert not any(point["is_virtual"] for point in report["charts"]["timeline"])
    assert len(report["charts"]["stability"]) == 9


def test_cli_prints_null_for_empty_history(tmp_path, capsys):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"exams": []}), encoding="utf-8")

    assert analyze_exams.main([str(path)]) == 0
    assert capsys.readouterr().out.strip() == "null"


def test_cli_rejects_invalid_payload(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"exams": [{"name": "No scores", "date": "2024-01-01", "scores": []}]}), encoding="utf-8")

    assert analyze_exams.main([str(path)]) == 2
    assert "Invalid exam payload" in capsys.readouterr().err


def test_cli_rejects_missing_input(tmp_path, capsys):
    assert analyze_exams.main([str(tmp_path / "missing.json")]) == 2
    assert "Input not found" in capsys.readouterr().err


def test_cli_rejects_bad_catalog(tmp_path, capsys):
    path = _write_history(tmp_path)
    catalog = tmp_path / "catalog.json"
    catalog.write_text(json.dumps({"breadth_threshold": -3}), encoding="utf-8")

    assert analyze_exams.main([str(path), "--catalog", str(catalog)]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_cli_rejects_binary_input(tmp_path, capsys):
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    assert analyze_exams.main([str(path)]) == 2
    assert "Invalid exam payload" in capsys.readouterr().err


def test_cli_rejects_directory_input(tmp_path, capsys):
    assert analyze_exams.main([str(tmp_path)]) == 2
    assert "Cannot read input" in capsys.readouterr().err
