"""
leadscore/scoring/engine.py — turns a lead's facts into a 0–100 priority score.

Two stages:
  1. Pre-AI: BASE_SCORE + Σ(raw points × profile weight [× enrichment confidence]),
     clamped once at the end.
  2. AI:     optional categorical delta on top of the pre-AI score, clamped again.

Every non-negligible contribution is recorded in a factor ledger so the score
can be explained. The engine is pure: no I/O, no clock reads, no shared state.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from leadscore.scoring import behavioral, demographic, energy
from leadscore.scoring.ai_adjustment import apply_ai
from leadscore.scoring.models import (
    AIAnalysis,
    AppointmentStats,
    Lead,
    LeadService,
    Note,
    PhotoAnalysis,
    ScoringResult,
)
from leadscore.scoring.rounding import clamp, clamp_score, round_half_away
from leadscore.scoring.weights import WeightProfile, normalize_service_type, resolve

logger = logging.getLogger(__name__)

# Bump whenever factor keys, tables or weights change.
SCORE_VERSION = "2026-v2"

BASE_SCORE = 50.0

# Contributions smaller than this are treated as no signal at all.
NEGLIGIBLE = 0.01


@dataclass(frozen=True)
class ScoringInputs:
    """Everything one scoring request looks at, fetched by the caller."""

    lead: Lead
    now: datetime
    service: LeadService | None = None
    notes: list[Note] = field(default_factory=list)
    photo: PhotoAnalysis | None = None
    appointment_stats: AppointmentStats = field(default_factory=AppointmentStats)


@dataclass(frozen=True)
class Factor:
    key: str                                    # ledger key == WeightProfile field
    compute: Callable[[ScoringInputs], float]   # raw, unweighted points
    confidence_scaled: bool


# Evaluation order is ledger order. Label, building age and all behavioral
# factors are never scaled by enrichment confidence.
FACTORS: tuple[Factor, ...] = (
    # Demographic
    Factor("ownership", lambda i: demographic.score_ownership(i.lead), True),
    Factor("wealth", lambda i: demographic.score_wealth(i.lead), True),
    Factor("income", lambda i: demographic.score_income(i.lead), True),
    Factor("household", lambda i: demographic.score_household(i.lead), True),
    Factor("children", lambda i: demographic.score_children(i.lead), True),
    Factor("stedelijkheid", lambda i: demographic.score_urbanization(i.lead), True),
    Factor("income_high", lambda i: demographic.score_high_income(i.lead), True),
    Factor("income_low", lambda i: demographic.score_low_income(i.lead), True),
    # Property / energy
    Factor("energy_label", lambda i: energy.score_energy_label(i.lead), False),
    Factor("gas_usage", lambda i: energy.score_gas(i.lead), True),
    Factor("electricity", lambda i: energy.score_electricity(i.lead), True),
    Factor("building_age", lambda i: energy.score_building_age(i.lead), False),
    Factor("woz_value", lambda i: energy.score_woz(i.lead), True),
    # Behavioral
    Factor("lead_age", lambda i: behavioral.score_lead_age(i.lead, i.now), False),
    Factor("service_status", lambda i: behavioral.score_service_status(i.service), False),
    Factor("activity", lambda i: behavioral.score_notes(i.notes, i.now), False),
    Factor("photo", lambda i: behavioral.score_photo(i.photo), False),
    Factor("consumer_note", lambda i: behavioral.score_consumer_note(i.service), False),
    Factor("source", lambda i: behavioral.score_source(i.lead, i.service), False),
    Factor("assigned", lambda i: behavioral.score_assigned(i.lead), False),
    Factor("appointments", lambda i: behavioral.score_appointments(i.appointment_stats), False),
)


class FactorLedger:
    """Sparse, ordered record of named contributions (rounded to 0.1)."""

    def __init__(self) -> None:
        self._entries: dict[str, float] = {}

    def add(self, key: str, value: float) -> float:
        """Record `value` under `key`; return the amount to add to the total."""
        if abs(value) < NEGLIGIBLE:
            return 0.0
        rounded = round_half_away(value, 1)
        if rounded != 0:
            self._entries[key] = rounded
        return value

    def merge(self, entries: dict[str, float]) -> None:
        for key, value in entries.items():
            self.add(key, value)

    def as_dict(self) -> dict[str, float]:
        return dict(self._entries)


def enrichment_confidence(lead: Lead) -> float:
    """None means full confidence; anything else is held to [0, 1]."""
    if lead.enrichment_confidence is None:
        return 1.0
    return clamp(lead.enrichment_confidence, 0.0, 1.0)


def compute_pre_ai_score(inputs: ScoringInputs, profile: WeightProfile) -> tuple[int, FactorLedger]:
    """Sum weighted factors onto BASE_SCORE; clamp only the final total."""
    confidence = enrichment_confidence(inputs.lead)
    ledger = FactorLedger()
    total = BASE_SCORE

    for factor in FACTORS:
        value = factor.compute(inputs) * getattr(profile, factor.key)
        if factor.confidence_scaled:
            value *= confidence
        total += ledger.add(factor.key, value)

    return clamp_score(total), ledger


def recalculate(
    lead: Lead,
    service: LeadService | None = None,
    notes: list[Note] | None = None,
    photo: PhotoAnalysis | None = None,
    appointment_stats: AppointmentStats | None = None,
    ai_analysis: AIAnalysis | None = None,
    service_type: str | None = None,
    now: datetime | None = None,
) -> ScoringResult:
    """
    Score one lead.

    Args:
        lead:              Enrichment snapshot (required).
        service:           Current service request, if any.
        notes:             Notes on the lead; only count and recency matter.
        photo:             Latest photo analysis, if any.
        appointment_stats: Aggregate appointment counts.
        ai_analysis:       AI qualitative output; None skips the AI stage.
        service_type:      Weight profile key (case-insensitive). Unknown → default.
        now:               Reference time for age/recency factors. Pass it
                           explicitly for reproducible results.

    Returns:
        ScoringResult with final and pre-AI score, factor ledger and version.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    inputs = ScoringInputs(
        lead=lead,
        now=now,
        service=service,
        notes=list(notes or []),
        photo=photo,
        appointment_stats=appointment_stats or AppointmentStats(),
    )
    profile = resolve(service_type)

    pre_ai, ledger = compute_pre_ai_score(inputs, profile)
    final, ai_factors = apply_ai(pre_ai, ai_analysis)
    ledger.merge(ai_factors)

    logger.debug(
        "Lead %s scored %d (pre-AI %d, profile=%s)",
        lead.id, final, pre_ai, normalize_service_type(service_type),
    )

    return ScoringResult(
        score=final,
        score_pre_ai=pre_ai,
        factors=ledger.as_dict(),
        version=SCORE_VERSION,
        computed_at=now,
    )
