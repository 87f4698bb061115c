"""
oralcheck.analyze.feedback - Rating bands and narrative feedback.

Rates each transcript metric as good, fair or poor against fixed target
bands and generates short narrative feedback sentences.
"""

from __future__ import annotations

from typing import Any

from oralcheck.analyze.transcript import TranscriptMetrics

# metric -> (good_low, good_high, fair_high); values above fair_high are poor
RATING_BANDS: dict[str, tuple[float, float, float]] = {
    "filler_rate": (0.0, 0.08, 0.12),
    "academic_matches": (3, 10, 15),
    "type_token_ratio": (0.45, 0.70, 0.80),
    "avg_sentence_length": (12, 18, 24),
    "readability": (50, 70, 80),
    "words_per_minute": (130, 165, 180),
}


def rate_value(value: float, good_low: float, good_high: float, fair_high: float) -> str:
    """Rate a value against a band.

    Values below the good range are still "fair" as long as they stay under
    fair_high.
    """
    if good_low <= value <= good_high:
        return "good"
    elif value <= fair_high:
        return "fair"
    return "poor"


def rate_metrics(metrics: TranscriptMetrics) -> dict[str, str]:
    """Rate every banded metric."""
    values = metrics.to_dict()
    return {name: rate_value(values[name], *band) for name, band in RATING_BANDS.items()}


def generate_narrative(metrics: TranscriptMetrics) -> list[str]:
    """Generate narrative feedback sentences for filler use and vocabulary."""
    feedback = []

    if metrics.filler_rate <= 0.08:
        feedback.append("Your speech demonstrates excellent control over filler words.")
    elif metrics.filler_rate <= 0.12:
        feedback.append(
            "You use filler words occasionally; reducing them slightly would help polish."
        )
    else:
        feedback.append("Filler use is high; practice pauses instead of fillers.")

    if 4 <= metrics.academic_matches <= 10:
        feedback.append("Your academic vocabulary reads natural and appropriate.")
    elif metrics.academic_matches <= 15:
        feedback.append("Your vocabulary is adequate though could be broadened.")
    else:
        feedback.append(
            "You rely heavily on academic terminology; "
            "consider balancing with accessible phrasing."
        )

    return feedback


def build_feedback(metrics: TranscriptMetrics) -> dict[str, Any]:
    """Combine ratings and narrative into one feedback dict."""
    return {
        "ratings": rate_metrics(metrics),
        "narrative": generate_narrative(metrics),
    }
