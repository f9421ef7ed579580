"""
leadscore/db/repository.py — All database reads (and the score write-back).

Everything the scoring service needs goes through this module. Reads return
the engine's pydantic value objects, never ORM rows, so the engine stays
unaware of the database.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from leadscore.db import models as orm
from leadscore.scoring.models import (
    AIAnalysis,
    AppointmentStats,
    Lead,
    LeadService,
    Note,
    PhotoAnalysis,
    ScoringResult,
)

logger = logging.getLogger(__name__)


def _naive_utc(moment: datetime) -> datetime:
    """DateTime columns hold naive UTC."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


# ── Lead ─────────────────────────────────────────────────────────────────────

def get_lead(db: Session, lead_id: int) -> Lead | None:
    row = db.query(orm.Lead).filter(orm.Lead.id == lead_id).first()
    return Lead.model_validate(row) if row else None


def list_lead_ids(db: Session, limit: int = 100) -> list[int]:
    """Oldest leads first, so a capped batch works through the backlog in order."""
    rows = (
        db.query(orm.Lead.id)
        .order_by(orm.Lead.created_at.asc(), orm.Lead.id.asc())
        .limit(limit)
        .all()
    )
    return [row.id for row in rows]


def update_lead_score(db: Session, lead_id: int, result: ScoringResult) -> None:
    """Persist a computed score onto the lead row."""
    computed_at = result.computed_at or datetime.now(timezone.utc)
    db.query(orm.Lead).filter(orm.Lead.id == lead_id).update({
        "lead_score": result.score,
        "lead_score_pre_ai": result.score_pre_ai,
        "lead_score_factors": result.factors_json,
        "lead_score_version": result.version,
        "lead_score_updated_at": _naive_utc(computed_at),
    })
    logger.debug("Lead %d score → %d (pre-AI %d)", lead_id, result.score, result.score_pre_ai)


# ── Lead Service ─────────────────────────────────────────────────────────────

def get_lead_service(db: Session, service_id: int) -> LeadService | None:
    row = db.query(orm.LeadService).filter(orm.LeadService.id == service_id).first()
    return LeadService.model_validate(row) if row else None


def get_current_lead_service(db: Session, lead_id: int) -> LeadService | None:
    """The most recently created service for a lead."""
    row = (
        db.query(orm.LeadService)
        .filter(orm.LeadService.lead_id == lead_id)
        .order_by(orm.LeadService.created_at.desc(), orm.LeadService.id.desc())
        .first()
    )
    return LeadService.model_validate(row) if row else None


# ── Notes / Appointments ─────────────────────────────────────────────────────

def list_lead_notes(db: Session, lead_id: int) -> list[Note]:
    rows = (
        db.query(orm.LeadNote)
        .filter(orm.LeadNote.lead_id == lead_id)
        .order_by(orm.LeadNote.created_at.desc())
        .all()
    )
    return [Note.model_validate(row) for row in rows]


def get_lead_appointment_stats(db: Session, lead_id: int, now: datetime) -> AppointmentStats:
    """Appointment counts by status; upcoming = Scheduled and starting after `now`."""
    counts = dict(
        db.query(orm.Appointment.status, func.count(orm.Appointment.id))
        .filter(orm.Appointment.lead_id == lead_id)
        .group_by(orm.Appointment.status)
        .all()
    )
    upcoming = (
        db.query(orm.Appointment.id)
        .filter(
            orm.Appointment.lead_id == lead_id,
            orm.Appointment.status == "Scheduled",
            orm.Appointment.start_time > _naive_utc(now),
        )
        .first()
    )
    return AppointmentStats(
        total=sum(counts.values()),
        scheduled=counts.get("Scheduled", 0),
        completed=counts.get("Completed", 0),
        cancelled=counts.get("Cancelled", 0),
        has_upcoming=upcoming is not None,
    )


# ── AI outputs ───────────────────────────────────────────────────────────────

def get_latest_photo_analysis(db: Session, service_id: int) -> PhotoAnalysis | None:
    row = (
        db.query(orm.PhotoAnalysis)
        .filter(orm.PhotoAnalysis.service_id == service_id)
        .order_by(orm.PhotoAnalysis.created_at.desc(), orm.PhotoAnalysis.id.desc())
        .first()
    )
    return PhotoAnalysis.model_validate(row) if row else None


def get_latest_ai_analysis(db: Session, service_id: int) -> AIAnalysis | None:
    row = (
        db.query(orm.AIAnalysis)
        .filter(orm.AIAnalysis.service_id == service_id)
        .order_by(orm.AIAnalysis.created_at.desc(), orm.AIAnalysis.id.desc())
        .first()
    )
    return AIAnalysis.model_validate(row) if row else None
