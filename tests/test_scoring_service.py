"""
tests/test_scoring_service.py — Tests for the glue between the read model and
the scoring engine.

Uses the in-memory SQLite `db` fixture from conftest.py; repository failures
are simulated by patching single lookups to raise SQLAlchemyError.
"""

import json
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from leadscore.db import models as orm
from leadscore.scoring.models import AIAnalysis, PhotoAnalysis
from leadscore.services.scoring_service import (
    LeadNotFoundError,
    ScoringServiceError,
    ServiceNotFoundError,
    recalculate_lead,
    rescore_leads,
)

T0 = datetime(2026, 3, 1, 12, 0)


# ── Helpers ───────────────────────────────────────────────────────────────────

def seed_lead(db, **kwargs) -> orm.Lead:
    kwargs.setdefault("created_at", T0)
    lead = orm.Lead(**kwargs)
    db.add(lead)
    db.flush()
    return lead


def seed_service(db, lead, **kwargs) -> orm.LeadService:
    kwargs.setdefault("created_at", T0)
    service = orm.LeadService(lead_id=lead.id, **kwargs)
    db.add(service)
    db.flush()
    return service


# ── Errors ───────────────────────────────────────────────────────────────────

class TestErrors:
    def test_unknown_lead(self, db, now):
        with pytest.raises(LeadNotFoundError) as exc:
            recalculate_lead(db, 12345, now=now)
        assert exc.value.lead_id == 12345
        assert "12345" in str(exc.value)

    def test_unknown_explicit_service(self, db, now):
        lead = seed_lead(db)
        with pytest.raises(ServiceNotFoundError) as exc:
            recalculate_lead(db, lead.id, service_id=777, now=now)
        assert exc.value.service_id == 777

    def test_errors_share_a_base_class(self):
        assert issubclass(LeadNotFoundError, ScoringServiceError)
        assert issubclass(ServiceNotFoundError, ScoringServiceError)


# ── recalculate_lead ─────────────────────────────────────────────────────────

class TestRecalculateLead:
    def test_lead_without_service(self, db, now):
        lead = seed_lead(db)
        result = recalculate_lead(db, lead.id, now=now)
        assert result.score == 58
        assert result.factors == {"lead_age": 8.0}
        assert result.computed_at == now

    def test_uses_current_service_and_its_profile(self, db, now):
        lead = seed_lead(db, energy_class="G")
        seed_service(db, lead, service_type="solar", created_at=T0 - timedelta(days=1))
        seed_service(db, lead, service_type="insulation", created_at=T0)

        result = recalculate_lead(db, lead.id, now=now)
        assert result.factors["energy_label"] == 18.0      # 12 × 1.5
        assert result.factors["service_status"] == 5.0

    def test_explicit_service_overrides_current(self, db, now):
        lead = seed_lead(db, energy_class="G")
        solar = seed_service(db, lead, service_type="solar", created_at=T0 - timedelta(days=1))
        seed_service(db, lead, service_type="insulation", created_at=T0)

        result = recalculate_lead(db, lead.id, service_id=solar.id, now=now)
        assert result.factors["energy_label"] == 9.6       # 12 × 0.8

    def test_ai_analysis_applied(self, db, now):
        lead = seed_lead(db)
        service = seed_service(db, lead, service_type="plumbing")
        db.add(orm.AIAnalysis(service_id=service.id, urgency_level="High", lead_quality="Urgent",
                              created_at=T0))
        db.flush()

        result = recalculate_lead(db, lead.id, include_ai=True, now=now)
        assert result.score == result.score_pre_ai + 22
        assert result.factors["ai_urgency"] == 10
        assert result.factors["ai_quality"] == 12

    def test_include_ai_false_skips_analysis(self, db, now):
        lead = seed_lead(db)
        service = seed_service(db, lead)
        db.add(orm.AIAnalysis(service_id=service.id, lead_quality="Junk", created_at=T0))
        db.flush()

        with patch("leadscore.db.repository.get_latest_ai_analysis") as mock_ai:
            result = recalculate_lead(db, lead.id, include_ai=False, now=now)
            mock_ai.assert_not_called()
        assert result.score == result.score_pre_ai
        assert "ai_quality" not in result.factors

    def test_include_ai_defaults_to_settings(self, db, now):
        lead = seed_lead(db)
        service = seed_service(db, lead)
        db.add(orm.AIAnalysis(service_id=service.id, lead_quality="Junk", created_at=T0))
        db.flush()

        with patch("leadscore.services.scoring_service.settings") as mock_settings:
            mock_settings.include_ai = False
            result = recalculate_lead(db, lead.id, now=now)
        assert result.score == result.score_pre_ai

    def test_notes_appointments_and_photo_flow_through(self, db, now):
        lead = seed_lead(db)
        service = seed_service(db, lead)
        db.add_all([
            orm.LeadNote(lead_id=lead.id, body="Spoke to owner", created_at=T0 - timedelta(hours=2)),
            orm.Appointment(lead_id=lead.id, status="Scheduled", start_time=T0 + timedelta(days=3)),
            orm.PhotoAnalysis(service_id=service.id, confidence_level="High", scope_assessment="Medium",
                              safety_concerns=json.dumps([]), created_at=T0),
        ])
        db.flush()

        result = recalculate_lead(db, lead.id, now=now)
        assert result.factors["activity"] == 4.0           # 1 note + recent
        assert result.factors["appointments"] == 5.5       # upcoming + 1 scheduled
        assert result.factors["photo"] == 5.0              # 2 + High + Medium

    def test_nothing_is_written(self, db, now):
        lead = seed_lead(db)
        recalculate_lead(db, lead.id, now=now)
        db.expire_all()
        assert db.get(orm.Lead, lead.id).lead_score is None


# ── Degraded lookups ─────────────────────────────────────────────────────────

class TestOptionalLookupFailures:
    def test_notes_failure_scores_without_notes(self, db, now, caplog):
        lead = seed_lead(db)
        db.add(orm.LeadNote(lead_id=lead.id, body="x", created_at=T0))
        db.flush()

        with patch("leadscore.db.repository.list_lead_notes", side_effect=OperationalError("q", {}, Exception("gone"))):
            result = recalculate_lead(db, lead.id, now=now)

        assert "activity" not in result.factors
        assert result.score == 58
        assert "Notes lookup failed" in caplog.text

    def test_appointment_failure_scores_without_appointments(self, db, now):
        lead = seed_lead(db)
        with patch("leadscore.db.repository.get_lead_appointment_stats", side_effect=SQLAlchemyError("boom")):
            result = recalculate_lead(db, lead.id, now=now)
        assert "appointments" not in result.factors

    def test_photo_failure_scores_without_photo(self, db, now):
        lead = seed_lead(db)
        service = seed_service(db, lead)
        db.add(orm.PhotoAnalysis(service_id=service.id, confidence_level="High", created_at=T0))
        db.flush()

        with patch("leadscore.db.repository.get_latest_photo_analysis", side_effect=SQLAlchemyError("boom")):
            result = recalculate_lead(db, lead.id, now=now)
        assert "photo" not in result.factors
        assert result.factors["service_status"] == 5.0

    def test_ai_failure_skips_adjustment(self, db, now):
        lead = seed_lead(db)
        seed_service(db, lead)
        with patch("leadscore.db.repository.get_latest_ai_analysis", side_effect=SQLAlchemyError("boom")):
            result = recalculate_lead(db, lead.id, include_ai=True, now=now)
        assert result.score == result.score_pre_ai

    def test_current_service_failure_scores_without_service(self, db, now):
        lead = seed_lead(db)
        seed_service(db, lead)
        with patch("leadscore.db.repository.get_current_lead_service", side_effect=SQLAlchemyError("boom")):
            result = recalculate_lead(db, lead.id, now=now)
        assert "service_status" not in result.factors

    def test_lead_lookup_failure_propagates(self, db, now):
        with patch("leadscore.db.repository.get_lead", side_effect=SQLAlchemyError("boom")):
            with pytest.raises(SQLAlchemyError):
                recalculate_lead(db, 1, now=now)


# ── Stored photo / AI rows ───────────────────────────────────────────────────

class TestStoredAnalysisRows:
    @pytest.mark.parametrize("stored", ["{bad", "gas smell, loose wires", "[1, 2]"])
    def test_odd_safety_concerns_still_count(self, db, now, stored):
        lead = seed_lead(db)
        service = seed_service(db, lead)
        db.add(orm.PhotoAnalysis(service_id=service.id, safety_concerns=stored, created_at=T0))
        db.flush()

        result = recalculate_lead(db, lead.id, now=now)
        assert result.factors["photo"] == 4.0          # presence + concern

    @pytest.mark.parametrize("stored", ["{bad", "[1, 2]"])
    def test_odd_safety_concerns_do_not_fail_batch(self, db, now, stored):
        lead = seed_lead(db)
        service = seed_service(db, lead)
        db.add(orm.PhotoAnalysis(service_id=service.id, safety_concerns=stored, created_at=T0))
        db.commit()

        summary = rescore_leads(db, [lead.id], now=now)
        assert summary == {"scored": 1, "failed": 0, "persisted": 0}

    def test_invalid_photo_row_scores_as_absent(self, db, now, caplog):
        lead = seed_lead(db)
        seed_service(db, lead)

        def invalid_row(*args):
            return PhotoAnalysis.model_validate({"confidence_level": 3})

        with patch("leadscore.db.repository.get_latest_photo_analysis", side_effect=invalid_row):
            result = recalculate_lead(db, lead.id, now=now)
        assert "photo" not in result.factors
        assert "Photo analysis lookup failed" in caplog.text

    def test_invalid_ai_row_skips_adjustment(self, db, now):
        lead = seed_lead(db)
        seed_service(db, lead)

        def invalid_row(*args):
            return AIAnalysis.model_validate({"urgency_level": ["High"]})

        with patch("leadscore.db.repository.get_latest_ai_analysis", side_effect=invalid_row):
            result = recalculate_lead(db, lead.id, include_ai=True, now=now)
        assert result.score == result.score_pre_ai


# ── rescore_leads ────────────────────────────────────────────────────────────

class TestRescoreLeads:
    def test_empty_batch(self, db, now):
        assert rescore_leads(db, [], now=now) == {"scored": 0, "failed": 0, "persisted": 0}

    def test_scores_without_persisting(self, db, now):
        a = seed_lead(db)
        b = seed_lead(db)
        db.commit()

        summary = rescore_leads(db, [a.id, b.id], now=now)
        assert summary == {"scored": 2, "failed": 0, "persisted": 0}
        db.expire_all()
        assert db.get(orm.Lead, a.id).lead_score is None

    def test_failing_lead_does_not_stop_batch(self, db, now):
        a = seed_lead(db)
        b = seed_lead(db, created_at=T0 - timedelta(days=45))
        db.commit()

        summary = rescore_leads(db, [a.id, 99999, b.id], persist=True, now=now)
        assert summary == {"scored": 2, "failed": 1, "persisted": 2}

        db.expire_all()
        stored_a = db.get(orm.Lead, a.id)
        stored_b = db.get(orm.Lead, b.id)
        assert stored_a.lead_score == 58
        assert stored_b.lead_score == 44
        assert json.loads(stored_b.lead_score_factors) == {"lead_age": -6.0}
        assert stored_b.lead_score_version == "2026-v2"
        assert stored_b.lead_score_updated_at == T0

    def test_unexpected_error_is_counted(self, db, now, caplog):
        a = seed_lead(db)
        db.commit()
        with patch("leadscore.services.scoring_service.recalculate", side_effect=ValueError("bad data")):
            summary = rescore_leads(db, [a.id], now=now)
        assert summary["failed"] == 1
        assert "bad data" in caplog.text
