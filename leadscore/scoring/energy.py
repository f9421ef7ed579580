"""
leadscore/scoring/energy.py — the PROPERTY and its energy profile.

Energy label and construction year come from the EP-Online registry and are
treated as authoritative; gas, electricity and WOZ are area statistics.
Which of these get confidence-scaled is decided in engine.py, not here.
"""

from leadscore.scoring.models import Lead
from leadscore.scoring.rounding import clamp


# Worst label = biggest improvement opportunity
_LABEL_POINTS = {
    "G": 12,
    "F": 10,
    "E": 7,
    "D": 4,
    "C": 1,
    "B": -1,
    "A": -3,
    "A+": -3,
    "A++": -3,
    "A+++": -3,
    "A++++": -3,
}


def _label_letter_delta(energy_class: str | None) -> float:
    if energy_class is None:
        return 0
    return _LABEL_POINTS.get(energy_class.strip().upper(), 0)


def _label_index_delta(energy_index: float | None) -> float:
    if energy_index is None:
        return 0
    if energy_index > 2.5:
        return 4
    elif energy_index > 2.0:
        return 2
    elif energy_index >= 1.4:
        return 1
    elif energy_index < 0.8:
        return -1
    return 0


def score_energy_label(lead: Lead) -> float:
    """
    Label letter delta plus energy-index delta, summed before weighting.

    G scores +12 down to A-classes at -3; the index adds +4 (> 2.5) down to
    -1 (< 0.8). Unknown letters contribute nothing.
    """
    return _label_letter_delta(lead.energy_class) + _label_index_delta(lead.energy_index)


def score_gas(lead: Lead) -> float:
    """Average gas use (m³/year) → -4 … +8. CBS average is ~1200."""
    val = lead.gas_usage
    if val is None:
        return 0
    if val >= 2000:
        return 8
    elif val >= 1500:
        return 6
    elif val >= 1200:
        return 3
    elif val >= 800:
        return 1
    elif val >= 400:
        return -2
    else:
        return -4   # electric or district heating


def score_electricity(lead: Lead) -> float:
    """Average electricity use (kWh/year) → 0 … +8. CBS average is ~2700."""
    val = lead.electricity_usage
    if val is None:
        return 0
    if val >= 4500:
        return 8
    elif val >= 3500:
        return 6
    elif val >= 2700:
        return 3
    elif val >= 1800:
        return 1
    else:
        return 0


def score_building_age(lead: Lead) -> float:
    """
    Construction year → -1 … +6, adjusted by the area's share of post-2000
    buildings (≤ 15% → +2, ≥ 70% → -1). Result clamped to [-2, 8].
    """
    score = 0.0

    year = lead.construction_year
    if year is not None:
        if year < 1960:
            score += 6
        elif year < 1980:
            score += 4      # pre insulation mandate
        elif year < 1992:
            score += 2
        elif year < 2010:
            score += 1
        else:
            score -= 1

    pct = lead.built_after_2000_pct
    if pct is not None:
        if pct <= 15:
            score += 2
        elif pct >= 70:
            score -= 1

    return clamp(score, -2, 8)


def score_woz(lead: Lead) -> float:
    """Assessed property value (x1000 EUR) → 0 … +4."""
    val = lead.woz_value_k
    if val is None:
        return 0
    if val >= 500:
        return 4
    elif val >= 350:
        return 3
    elif val >= 250:
        return 2
    elif val >= 150:
        return 1
    else:
        return 0
