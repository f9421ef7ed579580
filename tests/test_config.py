"""
tests/test_config.py — Settings loading and environment overrides.

Each test builds a fresh Settings() so the module-level singleton is untouched.
"""

import pytest
from pydantic import ValidationError

from leadscore.config import DEFAULT_SOURCE_RULES, DEFAULT_URGENCY_KEYWORDS, Settings
from leadscore.scoring.behavioral import score_consumer_note, score_source
from leadscore.scoring.models import Lead, LeadService


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("URGENCY_KEYWORDS", "SOURCE_RULES", "INCLUDE_AI", "BATCH_SIZE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    def test_keyword_tables(self, clean_env):
        s = Settings(_env_file=None)
        assert s.urgency_keywords == DEFAULT_URGENCY_KEYWORDS
        assert s.source_rules == DEFAULT_SOURCE_RULES
        assert s.include_ai is True
        assert s.batch_size == 100

    def test_referral_rule_comes_first(self):
        assert DEFAULT_SOURCE_RULES[0].keywords == ["referral", "verwijzing"]
        assert DEFAULT_SOURCE_RULES[0].score == 6

    def test_defaults_are_not_shared(self, clean_env):
        a = Settings(_env_file=None)
        a.urgency_keywords.append("spoed")
        assert "spoed" not in Settings(_env_file=None).urgency_keywords


class TestEnvOverrides:
    def test_urgency_keywords_from_json(self, clean_env):
        clean_env.setenv("URGENCY_KEYWORDS", '["spoed", "direct"]')
        s = Settings(_env_file=None)
        assert s.urgency_keywords == ["spoed", "direct"]

        service = LeadService(consumer_note="Graag met spoed langskomen")
        assert score_consumer_note(service, s.urgency_keywords) == 3.0
        assert score_consumer_note(service, DEFAULT_URGENCY_KEYWORDS) == 1.0

    def test_source_rules_from_json(self, clean_env, now):
        clean_env.setenv("SOURCE_RULES", '[{"keywords": ["werkspot"], "score": 3.5}]')
        s = Settings(_env_file=None)
        assert len(s.source_rules) == 1
        assert s.source_rules[0].score == 3.5

        lead = Lead(created_at=now, source="Werkspot campaign")
        assert score_source(lead, None, s.source_rules) == 3.5
        assert score_source(lead, None, DEFAULT_SOURCE_RULES) == 0

    def test_include_ai_flag(self, clean_env):
        clean_env.setenv("INCLUDE_AI", "false")
        assert Settings(_env_file=None).include_ai is False

    @pytest.mark.parametrize("value", ["0", "1001"])
    def test_batch_size_bounds(self, clean_env, value):
        clean_env.setenv("BATCH_SIZE", value)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
