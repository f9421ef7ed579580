"""
leadscore/services/scoring_service.py — Fetches everything a lead score needs
and runs the scoring engine.

This is the "glue" layer that coordinates:
  - Loading the lead and resolving which service request to score against
  - Fetching notes, appointment stats, photo and AI analyses
  - Downgrading failed optional lookups to "no data" instead of failing
  - Rescoring leads in batches and (optionally) writing scores back
"""

import logging
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leadscore.config import settings
from leadscore.db import repository
from leadscore.scoring.engine import recalculate
from leadscore.scoring.models import AppointmentStats, LeadService, ScoringResult

logger = logging.getLogger(__name__)


# ── Errors ───────────────────────────────────────────────────────────────────

class ScoringServiceError(Exception):
    """Base class for errors raised while preparing a score."""


class LeadNotFoundError(ScoringServiceError):
    def __init__(self, lead_id: int):
        super().__init__(f"Lead {lead_id} not found.")
        self.lead_id = lead_id


class ServiceNotFoundError(ScoringServiceError):
    def __init__(self, service_id: int):
        super().__init__(f"Lead service {service_id} not found.")
        self.service_id = service_id


# ── Single lead ──────────────────────────────────────────────────────────────

def _resolve_service(db: Session, lead_id: int, service_id: int | None) -> LeadService | None:
    """An explicit service must exist; otherwise fall back to the current one (if any)."""
    if service_id is not None:
        service = repository.get_lead_service(db, service_id)
        if service is None:
            raise ServiceNotFoundError(service_id)
        return service

    try:
        return repository.get_current_lead_service(db, lead_id)
    except SQLAlchemyError as e:
        logger.warning("Current service lookup failed for lead %d: %s", lead_id, e)
        return None


def recalculate_lead(
    db: Session,
    lead_id: int,
    service_id: int | None = None,
    include_ai: bool | None = None,
    now: datetime | None = None,
) -> ScoringResult:
    """
    Compute a fresh score for one lead. Nothing is written.

    Args:
        db:         Open session.
        lead_id:    Lead to score.
        service_id: Score against this service; defaults to the lead's current one.
        include_ai: Apply the AI adjustment. Defaults to settings.include_ai.
        now:        Reference time; defaults to the current UTC time.

    Raises:
        LeadNotFoundError:    The lead does not exist.
        ServiceNotFoundError: An explicit service_id does not exist.
    """
    if include_ai is None:
        include_ai = settings.include_ai
    if now is None:
        now = datetime.now(timezone.utc)

    lead = repository.get_lead(db, lead_id)
    if lead is None:
        raise LeadNotFoundError(lead_id)

    service = _resolve_service(db, lead_id, service_id)

    try:
        notes = repository.list_lead_notes(db, lead_id)
    except SQLAlchemyError as e:
        logger.warning("Notes lookup failed for lead %d, scoring without notes: %s", lead_id, e)
        notes = []

    try:
        appointment_stats = repository.get_lead_appointment_stats(db, lead_id, now)
    except SQLAlchemyError as e:
        logger.warning("Appointment stats failed for lead %d, scoring without them: %s", lead_id, e)
        appointment_stats = AppointmentStats()

    photo = None
    ai_analysis = None
    if service is not None:
        try:
            photo = repository.get_latest_photo_analysis(db, service.id)
        except (SQLAlchemyError, ValidationError) as e:
            logger.warning("Photo analysis lookup failed for service %d: %s", service.id, e)
        if include_ai:
            try:
                ai_analysis = repository.get_latest_ai_analysis(db, service.id)
            except (SQLAlchemyError, ValidationError) as e:
                logger.warning("AI analysis lookup failed for service %d: %s", service.id, e)

    return recalculate(
        lead=lead,
        service=service,
        notes=notes,
        photo=photo,
        appointment_stats=appointment_stats,
        ai_analysis=ai_analysis,
        service_type=service.service_type if service else None,
        now=now,
    )


# ── Batch ────────────────────────────────────────────────────────────────────

def rescore_leads(
    db: Session,
    lead_ids: list[int],
    include_ai: bool | None = None,
    now: datetime | None = None,
    persist: bool = False,
) -> dict:
    """
    Score each lead independently; one failing lead never stops the batch.

    Returns:
        A summary dict: {"scored": int, "failed": int, "persisted": int}
    """
    stats = {"scored": 0, "failed": 0, "persisted": 0}
    if now is None:
        now = datetime.now(timezone.utc)

    if not lead_ids:
        logger.info("No leads to rescore.")
        return stats

    logger.info("Rescoring %d leads...", len(lead_ids))

    for lead_id in lead_ids:
        try:
            result = recalculate_lead(db, lead_id, include_ai=include_ai, now=now)
            stats["scored"] += 1
            if persist:
                # Commit per lead so a later failure can't roll this one back
                repository.update_lead_score(db, lead_id, result)
                db.commit()
                stats["persisted"] += 1
            logger.info(
                "Lead %d → score=%d pre_ai=%d", lead_id, result.score, result.score_pre_ai,
            )
        except Exception as e:
            logger.error("Error scoring lead %d: %s", lead_id, e)
            db.rollback()
            stats["failed"] += 1

    logger.info("Rescoring done: %s", stats)
    return stats
