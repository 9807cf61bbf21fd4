from datetime import datetime, timezone
from typing import Dict, Any, List


STRENGTH_THRESHOLD = 70.0
WEAKNESS_THRESHOLD = 40.0

# Lower percentile bound -> label, highest first
PERCENTILE_BANDS = (
    (99, "Exceptional"),
    (95, "Very Superior"),
    (90, "Superior"),
    (75, "Above Average"),
    (50, "Average"),
    (25, "Below Average"),
)


def classify_percentile(percentile: float) -> str:
    for bound, label in PERCENTILE_BANDS:
        if percentile >= bound:
            return label
    return "Low"


def build_result_report(result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a printable report from a serialized result
    (see ``iqtest.services.results.serialize_result``).
    """
    breakdown: Dict[str, Dict[str, Any]] = result.get("category_breakdown") or {}

    total = result["total_questions"]
    correct = result["correct_answers"]
    raw_score = float(result.get("raw_score") or 0)

    # -------------------------
    # SUMMARY
    # -------------------------
    summary = [
        f"Estimated IQ: {result['iq_estimate']}",
        f"Percentile: {result['percentile']:.1f}th",
        f"Classification: {classify_percentile(result['percentile'])}",
        f"Correct Answers: {correct} / {total}",
        f"Raw Score: {raw_score:.1f}%",
        f"Time Spent: {_format_duration(result.get('time_spent') or 0)}",
    ]

    # -------------------------
    # CATEGORIES
    # -------------------------
    categories: List[str] = []
    strengths: List[str] = []
    weaknesses: List[str] = []

    for name, data in breakdown.items():
        label = name.capitalize()
        pct = float(data.get("percentage", 0.0))
        categories.append(f"{label}: {data['correct']}/{data['total']} ({pct:.1f}%)")

        if pct >= STRENGTH_THRESHOLD:
            strengths.append(f"Strong {label.lower()} reasoning ({pct:.0f}% correct).")
        elif pct <= WEAKNESS_THRESHOLD:
            weaknesses.append(f"{label} questions need more practice ({pct:.0f}% correct).")

    return {
        "result_id": result.get("id"),
        "title": "IQ Test Results",
        "summary": summary,
        "categories": categories,
        "strengths": strengths,
        "weaknesses": weaknesses,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }


def _format_duration(seconds: int) -> str:
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"
