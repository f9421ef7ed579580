"""
leadscore/scoring/demographic.py — WHO the lead is.

Each scorer reads one Lead field and returns raw (unweighted) points.
A missing field scores 0. Thresholds follow CBS neighbourhood statistics.
"""

from leadscore.scoring.models import Lead


def score_ownership(lead: Lead) -> float:
    """% owner-occupied homes → -5 … +10. NL average is ~57%."""
    pct = lead.ownership_pct
    if pct is None:
        return 0
    if pct >= 80:
        return 10
    elif pct >= 65:
        return 7
    elif pct >= 50:
        return 4
    elif pct >= 35:
        return 0
    else:
        return -5   # rental dominated


def score_wealth(lead: Lead) -> float:
    """Median household wealth (x1000 EUR) → -2 … +12."""
    val = lead.median_wealth_k
    if val is None:
        return 0
    if val >= 300:
        return 12
    elif val >= 150:
        return 8
    elif val >= 75:
        return 5
    elif val >= 25:
        return 2
    elif val > 0:
        return 0
    else:
        return -2   # negative median wealth (debt)


def score_income(lead: Lead) -> float:
    """Average income (x1000 EUR) → 0 … +6."""
    val = lead.average_income_k
    if val is None:
        return 0
    if val >= 55:
        return 6
    elif val >= 40:
        return 4
    elif val >= 30:
        return 2
    else:
        return 0


def score_household(lead: Lead) -> float:
    val = lead.household_size
    if val is None:
        return 0
    if val >= 3.0:
        return 4
    elif val >= 2.3:
        return 3
    elif val >= 1.8:
        return 1
    else:
        return 0


def score_children(lead: Lead) -> float:
    pct = lead.children_pct
    if pct is None:
        return 0
    if pct >= 45:
        return 4
    elif pct >= 30:
        return 2
    else:
        return 0


# stedelijkheid class → points; suburban to rural is the sweet spot
_URBANIZATION_POINTS = {
    1: -2,   # very urban: little roof space
    2: 0,
    3: 2,
    4: 3,
    5: 4,
}


def score_urbanization(lead: Lead) -> float:
    """Urban/rural class 1–5 → -2 … +4. Unknown classes score 0."""
    if lead.urbanization is None:
        return 0
    return _URBANIZATION_POINTS.get(lead.urbanization, 0)


def score_high_income(lead: Lead) -> float:
    """% high-income households → 0 … +5."""
    pct = lead.high_income_pct
    if pct is None:
        return 0
    if pct >= 30:
        return 5
    elif pct >= 20:
        return 3
    elif pct >= 10:
        return 1
    else:
        return 0


def score_low_income(lead: Lead) -> float:
    """% low-income households → -4 … 0. Penalty only."""
    pct = lead.low_income_pct
    if pct is None:
        return 0
    if pct >= 40:
        return -4
    elif pct >= 25:
        return -2
    elif pct >= 15:
        return -1
    else:
        return 0
