"""
leadscore/scoring/ai_adjustment.py — second pass driven by the AI qualitative analysis.

The delta is always applied to the pre-AI score and the result is re-clamped.
"""

from leadscore.scoring.models import AIAnalysis
from leadscore.scoring.rounding import clamp_score

URGENCY_POINTS = {
    "High": 10,
    "Medium": 4,
    "Low": -3,
}

QUALITY_POINTS = {
    "Urgent": 12,
    "High": 7,
    "Potential": 2,
    "Low": -8,
    "Junk": -25,
}


def apply_ai(pre_ai_score: int, analysis: AIAnalysis | None) -> tuple[int, dict[str, float]]:
    """
    Return (final score, AI ledger entries).

    Without an analysis the pre-AI score is returned untouched with an empty
    ledger. Unrecognized urgency/quality values add nothing and are left out
    of the ledger.
    """
    if analysis is None:
        return pre_ai_score, {}

    factors: dict[str, float] = {}
    urgency = URGENCY_POINTS.get(analysis.urgency_level, 0)
    quality = QUALITY_POINTS.get(analysis.lead_quality, 0)
    if urgency:
        factors["ai_urgency"] = float(urgency)
    if quality:
        factors["ai_quality"] = float(quality)

    return clamp_score(pre_ai_score + urgency + quality), factors
