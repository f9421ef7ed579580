"""
leadscore/scoring/models.py — Value objects consumed and produced by the scoring engine.

Inputs are read-only pydantic models fetched by the caller. Every enrichment
field is optional: None means "no signal", never "zero".
Output is a plain frozen dataclass, like the other result types in this package.
"""

import enum
import json
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


# ── Enums ────────────────────────────────────────────────────────────────────

class ServiceStatus(str, enum.Enum):
    NEW = "New"
    ATTEMPTED_CONTACT = "Attempted_Contact"
    CONTACTED = "Contacted"
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CLOSED = "Closed"


# ── Inputs ───────────────────────────────────────────────────────────────────

class Lead(BaseModel):
    """Demographic / property enrichment snapshot for one address."""

    id: int | None = None
    created_at: datetime
    source: str | None = None
    assigned_agent_id: int | None = None

    # Neighbourhood statistics (CBS)
    ownership_pct: float | None = None              # % owner-occupied homes
    median_wealth_k: float | None = None            # median household wealth, x1000 EUR
    average_income_k: float | None = None           # average income, x1000 EUR
    high_income_pct: float | None = None
    low_income_pct: float | None = None
    household_size: float | None = None
    children_pct: float | None = None               # % households with children
    urbanization: int | None = None                 # stedelijkheid: 1 = very urban … 5 = rural
    built_after_2000_pct: float | None = None
    woz_value_k: float | None = None                # assessed value, x1000 EUR
    gas_usage: float | None = None                  # m³/year
    electricity_usage: float | None = None          # kWh/year
    enrichment_confidence: float | None = None      # 0.0 – 1.0

    # Registry data (EP-Online)
    energy_class: str | None = None
    energy_index: float | None = None
    construction_year: int | None = None

    model_config = {"from_attributes": True}


class LeadService(BaseModel):
    """One requested work item for a lead."""

    id: int | None = None
    service_type: str | None = None
    status: str = ServiceStatus.NEW.value
    consumer_note: str | None = None
    source: str | None = None

    model_config = {"from_attributes": True}


class Note(BaseModel):
    created_at: datetime
    body: str = ""

    model_config = {"from_attributes": True}


class PhotoAnalysis(BaseModel):
    confidence_level: str = ""      # High / Medium / Low
    scope_assessment: str = ""      # Large / Medium / Small
    safety_concerns: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @field_validator("safety_concerns", mode="before")
    @classmethod
    def _decode_concerns(cls, value):
        # The read model stores the list as JSON text
        if value is None:
            return []
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return []
            try:
                value = json.loads(text)
            except ValueError:
                # Free text instead of a JSON list still names a concern
                return [text]
        if isinstance(value, list):
            return [str(item) for item in value if item is not None]
        return [str(value)] if value else []


class AppointmentStats(BaseModel):
    total: int = 0
    scheduled: int = 0
    completed: int = 0
    cancelled: int = 0
    has_upcoming: bool = False


class AIAnalysis(BaseModel):
    """Output of the separate AI classification step."""

    urgency_level: str = ""         # High / Medium / Low
    lead_quality: str = ""          # Urgent / High / Potential / Low / Junk

    model_config = {"from_attributes": True}


# ── Output ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoringResult:
    score: int                                  # 0 – 100, after AI adjustment
    score_pre_ai: int                           # 0 – 100
    factors: dict[str, float] = field(default_factory=dict)
    version: str = ""
    computed_at: datetime | None = None

    @property
    def factors_json(self) -> str:
        """Factor ledger serialized for storage / UI display."""
        return json.dumps(self.factors)
