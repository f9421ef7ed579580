"""
leadscore/scoring/behavioral.py — lead ENGAGEMENT and TIMING.

Time-based scorers take an explicit `now` so a recalculation with the same
inputs always produces the same points. Naive datetimes are read as UTC.
"""

from datetime import datetime, timezone

from leadscore.config import SourceRule, settings
from leadscore.scoring.models import (
    AppointmentStats,
    Lead,
    LeadService,
    Note,
    PhotoAnalysis,
    ServiceStatus,
)
from leadscore.scoring.rounding import clamp

_HOURS_PER_DAY = 24


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def hours_between(earlier: datetime, now: datetime) -> float:
    return (_as_utc(now) - _as_utc(earlier)).total_seconds() / 3600


# ── Lead age ─────────────────────────────────────────────────────────────────

def score_lead_age(lead: Lead, now: datetime) -> float:
    """Fresh leads convert best: ≤ 24h → +8 … older than 30 days → -6."""
    hours = hours_between(lead.created_at, now)
    if hours <= 24:
        return 8
    elif hours <= 72:
        return 5
    elif hours <= 7 * _HOURS_PER_DAY:
        return 2
    elif hours <= 14 * _HOURS_PER_DAY:
        return 0
    elif hours <= 30 * _HOURS_PER_DAY:
        return -3
    else:
        return -6


# ── Funnel status ────────────────────────────────────────────────────────────

_STATUS_POINTS = {
    ServiceStatus.NEW.value: 5,
    ServiceStatus.ATTEMPTED_CONTACT.value: 2,
    ServiceStatus.CONTACTED.value: 1,
    ServiceStatus.SCHEDULED.value: -2,
    ServiceStatus.COMPLETED.value: -5,
    ServiceStatus.CLOSED.value: -5,
}


def score_service_status(service: LeadService | None) -> float:
    if service is None:
        return 0
    return _STATUS_POINTS.get(service.status, 0)


# ── Notes activity ───────────────────────────────────────────────────────────

def score_notes(notes: list[Note], now: datetime) -> float:
    """Note count (+1 … +3) plus recency of the latest note (+1 … +3), max 6."""
    if not notes:
        return 0

    score = 0.0
    if len(notes) >= 5:
        score += 3
    elif len(notes) >= 2:
        score += 2
    else:
        score += 1

    latest = max(_as_utc(note.created_at) for note in notes)
    hours_since = hours_between(latest, now)
    if hours_since <= 24:
        score += 3
    elif hours_since <= 72:
        score += 2
    elif hours_since <= 7 * _HOURS_PER_DAY:
        score += 1

    return clamp(score, 0, 6)


# ── Photo analysis ───────────────────────────────────────────────────────────

_PHOTO_CONFIDENCE_POINTS = {"High": 2, "Medium": 1}
_PHOTO_SCOPE_POINTS = {"Large": 2, "Medium": 1}


def score_photo(photo: PhotoAnalysis | None) -> float:
    if photo is None:
        return 0

    score = 2.0  # having photos at all shows intent
    score += _PHOTO_CONFIDENCE_POINTS.get(photo.confidence_level, 0)
    score += _PHOTO_SCOPE_POINTS.get(photo.scope_assessment, 0)
    if photo.safety_concerns:
        score += 2

    return clamp(score, 0, 8)


# ── Consumer note ────────────────────────────────────────────────────────────

def score_consumer_note(
    service: LeadService | None,
    urgency_keywords: list[str] | None = None,
) -> float:
    """
    Length of the customer's own description (+1 … +6) plus +2 once if it
    contains any urgency keyword. Capped at 8. Length counts characters, not
    encoded bytes, so accented text does not reach a bucket early.
    """
    if service is None or service.consumer_note is None:
        return 0

    note = service.consumer_note.strip()
    length = len(note)
    if length == 0:
        return 0

    if length >= 300:
        score = 6.0
    elif length >= 150:
        score = 4.0
    elif length >= 50:
        score = 2.0
    else:
        score = 1.0

    keywords = settings.urgency_keywords if urgency_keywords is None else urgency_keywords
    lower_note = note.lower()
    if any(kw.lower() in lower_note for kw in keywords):
        score += 2

    return clamp(score, 0, 8)


# ── Source quality ───────────────────────────────────────────────────────────

def score_source(
    lead: Lead,
    service: LeadService | None,
    rules: list[SourceRule] | None = None,
) -> float:
    """
    Acquisition-channel quality. The service source wins over the lead's when
    present; the first rule with a matching keyword decides.
    """
    if service is not None and service.source is not None:
        source = service.source.lower()
    elif lead.source is not None:
        source = lead.source.lower()
    else:
        source = ""

    if not source:
        return 0

    for rule in settings.source_rules if rules is None else rules:
        if any(kw.lower() in source for kw in rule.keywords):
            return rule.score
    return 0


# ── Assignment / appointments ────────────────────────────────────────────────

def score_assigned(lead: Lead) -> float:
    return 4 if lead.assigned_agent_id is not None else 0


def score_appointments(stats: AppointmentStats) -> float:
    """Upcoming/completed visits show commitment; cancellations cost. Range -3 … +10."""
    if stats.total <= 0:
        return 0

    score = 0.0
    if stats.has_upcoming:
        score += 4

    score += stats.completed * 2
    if stats.completed >= 2:
        score += 2  # multiple visits = serious

    score += stats.scheduled * 1.5

    if stats.cancelled > 0:
        if stats.cancelled / stats.total >= 0.5:
            score -= 3
        else:
            score -= stats.cancelled

    return clamp(score, -3, 10)
