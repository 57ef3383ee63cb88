"""Generate a sample exam history for trying out the analysis tools."""

import argparse
import json
import random
from datetime import date

# Full marks and baseline ability per subject
SUBJECTS = {
    "Chinese": {"max": 150, "base": 110},
    "Math": {"max": 150, "base": 120},
    "English": {"max": 150, "base": 115},
    "Physics": {"max": 100, "base": 80},
    "Chemistry": {"max": 100, "base": 75},
    "Biology": {"max": 100, "base": 70},
    "History": {"max": 100, "base": 60},
    "Politics": {"max": 100, "base": 65},
    "Geography": {"max": 100, "base": 70},
}

FINAL_SELECTION = ["Physics", "Chemistry", "Biology"]

# (name, grade 10?) -- three broad sittings, then five after specialization
EXAMS = [
    ("Grade 10 Midterm (Fall)", True),
    ("Grade 10 Final (Fall)", True),
    ("Grade 10 Placement (Spring)", True),
    ("Grade 11 Monthly", False),
    ("Grade 11 Midterm", False),
    ("Grade 11 Final", False),
    ("Grade 12 Mock 1", False),
    ("Grade 12 Mock 2", False),
]


def build_history(seed=None):
    rng = random.Random(seed)
    exams = []
    for i, (name, grade10) in enumerate(EXAMS):
        subjects = list(SUBJECTS) if grade10 else ["Chinese", "Math", "English"] + FINAL_SELECTION
        scores = []
        total = 0
        for subject in subjects:
            config = SUBJECTS[subject]
            # steady growth plus noise, clamped to the paper's range
            value = config["base"] + i * 1.2 + (rng.random() * 10 - 5)
            value = min(config["max"], max(0, round(value)))
            scores.append({
                "subject": subject,
                "score": value,
                "maxScore": config["max"],
                "gradeAvgScore": round(config["max"] * 0.65),
            })
            total += value

        max_possible = 1050 if grade10 else 750
        exams.append({
            "id": f"exam-{i + 1}",
            "name": name,
            "date": date(2023, i + 1, 15).isoformat(),
            "type": "Grade10" if grade10 else "Senior",
            "totalScore": total,
            "gradeRank": max(1, int(1 + (max_possible - total) * 0.5)),
            "scores": scores,
        })
    return {"selected_subjects": FINAL_SELECTION, "exams": exams}


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output")
    parser.add_argument("--output", type=str, default=None, help="Write the payload here instead of stdout")
    args = parser.parse_args(argv)

    payload = json.dumps(build_history(args.seed), indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(payload + "\n")
        print(f"Wrote {len(EXAMS)} exams to {args.output}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
