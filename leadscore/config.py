"""
leadscore/config.py — Central configuration loaded from environment variables.
All modules import settings from here; never read os.environ directly elsewhere.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SourceRule(BaseModel):
    """One row of the lead-source quality table: any keyword hit → score."""

    keywords: list[str]
    score: float


# Observed rule-set is Dutch/English; order matters (first match wins).
DEFAULT_URGENCY_KEYWORDS = [
    "urgent", "dringend", "snel", "asap", "lekkage",
    "kapot", "broken", "emergency", "noodgeval",
]

DEFAULT_SOURCE_RULES = [
    # Best: direct/referrals show high intent
    SourceRule(keywords=["referral", "verwijzing"], score=6),
    SourceRule(keywords=["direct", "inbound"], score=5),
    SourceRule(keywords=["website", "organic"], score=4),
    # Good: targeted campaigns
    SourceRule(keywords=["email", "newsletter"], score=3),
    SourceRule(keywords=["social", "facebook", "linkedin"], score=2),
    # Average: paid acquisition
    SourceRule(keywords=["google", "search"], score=2),
    SourceRule(keywords=["partner", "affiliate"], score=1),
    # Lower: mass market
    SourceRule(keywords=["cold", "outbound"], score=-1),
    SourceRule(keywords=["purchased", "bought"], score=-2),
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Database ──────────────────────────────────────────────────────────────
    database_url: str = Field(
        default="sqlite:///./leads.db",
        description="SQLAlchemy URL of the lead read model",
    )

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Log level for CLI scripts")

    # ── Scoring keywords ──────────────────────────────────────────────────────
    urgency_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_URGENCY_KEYWORDS),
        description="Lowercase substrings that mark a consumer note as urgent",
    )
    source_rules: list[SourceRule] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_RULES),
        description="Lead-source quality table, checked in order",
    )

    # ── Service / batch ───────────────────────────────────────────────────────
    include_ai: bool = Field(
        default=True,
        description="Apply the AI adjustment when an AI analysis is available",
    )
    batch_size: int = Field(
        default=100,
        gt=0,
        le=1000,
        description="Max leads rescored per batch run",
    )


# Singleton — import this everywhere
settings = Settings()
