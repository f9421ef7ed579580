"""
leadscore/db/models.py — SQLAlchemy ORM models for the lead read model.

Tables:
  - Lead          → address-level enrichment snapshot + persisted score
  - LeadService   → one requested work item for a Lead
  - LeadNote      → free-text notes on a Lead
  - PhotoAnalysis → AI assessment of uploaded photos for a LeadService
  - AIAnalysis    → AI urgency/quality classification for a LeadService
  - Appointment   → site visits for a Lead
"""

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, relationship


# ── Base ─────────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


# ── Models ───────────────────────────────────────────────────────────────────

class Lead(Base):
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source = Column(String(100), nullable=True)           # e.g. "website", "referral"
    assigned_agent_id = Column(Integer, nullable=True)

    # Neighbourhood enrichment (CBS) — NULL means "no signal"
    ownership_pct = Column(Float, nullable=True)
    median_wealth_k = Column(Float, nullable=True)
    average_income_k = Column(Float, nullable=True)
    high_income_pct = Column(Float, nullable=True)
    low_income_pct = Column(Float, nullable=True)
    household_size = Column(Float, nullable=True)
    children_pct = Column(Float, nullable=True)
    urbanization = Column(Integer, nullable=True)         # 1 (very urban) – 5 (rural)
    built_after_2000_pct = Column(Float, nullable=True)
    woz_value_k = Column(Float, nullable=True)
    gas_usage = Column(Float, nullable=True)
    electricity_usage = Column(Float, nullable=True)
    enrichment_confidence = Column(Float, nullable=True)  # 0.0 – 1.0

    # Energy label registry
    energy_class = Column(String(8), nullable=True)
    energy_index = Column(Float, nullable=True)
    construction_year = Column(Integer, nullable=True)

    # Score write-back (owned by callers of the engine)
    lead_score = Column(Integer, nullable=True)
    lead_score_pre_ai = Column(Integer, nullable=True)
    lead_score_factors = Column(Text, nullable=True)      # JSON object stored as text
    lead_score_version = Column(String(32), nullable=True)
    lead_score_updated_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    # Relationships
    services = relationship("LeadService", back_populates="lead", cascade="all, delete-orphan")
    notes = relationship("LeadNote", back_populates="lead", cascade="all, delete-orphan")
    appointments = relationship("Appointment", back_populates="lead", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Lead id={self.id} score={self.lead_score}>"


class LeadService(Base):
    __tablename__ = "lead_services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False)
    service_type = Column(String(100), nullable=True)     # e.g. "solar", "plumbing"
    status = Column(String(50), nullable=False, default="New")
    consumer_note = Column(Text, nullable=True)
    source = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    # Relationships
    lead = relationship("Lead", back_populates="services")
    photo_analyses = relationship("PhotoAnalysis", back_populates="service", cascade="all, delete-orphan")
    ai_analyses = relationship("AIAnalysis", back_populates="service", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<LeadService id={self.id} type={self.service_type!r} status={self.status}>"


class LeadNote(Base):
    __tablename__ = "lead_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False)
    body = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    lead = relationship("Lead", back_populates="notes")

    def __repr__(self) -> str:
        return f"<LeadNote id={self.id} lead_id={self.lead_id}>"


class PhotoAnalysis(Base):
    __tablename__ = "photo_analyses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_id = Column(Integer, ForeignKey("lead_services.id", ondelete="CASCADE"), nullable=False)
    confidence_level = Column(String(20), nullable=False, default="")
    scope_assessment = Column(String(20), nullable=False, default="")
    safety_concerns = Column(Text, nullable=True)         # JSON list stored as text
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    service = relationship("LeadService", back_populates="photo_analyses")

    def __repr__(self) -> str:
        return f"<PhotoAnalysis id={self.id} service_id={self.service_id}>"


class AIAnalysis(Base):
    __tablename__ = "ai_analyses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_id = Column(Integer, ForeignKey("lead_services.id", ondelete="CASCADE"), nullable=False)
    urgency_level = Column(String(20), nullable=False, default="")
    lead_quality = Column(String(20), nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    service = relationship("LeadService", back_populates="ai_analyses")

    def __repr__(self) -> str:
        return f"<AIAnalysis id={self.id} urgency={self.urgency_level} quality={self.lead_quality}>"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), nullable=False, default="Scheduled")  # Scheduled / Completed / Cancelled
    start_time = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    lead = relationship("Lead", back_populates="appointments")

    def __repr__(self) -> str:
        return f"<Appointment id={self.id} status={self.status}>"
