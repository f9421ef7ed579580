"""
scripts/score_leads.py — CLI to (re)compute lead scores.

Single lead: prints the score and its factor breakdown.
Batch:       rescores the oldest N leads and prints a summary.

Usage:
    python scripts/score_leads.py --lead-id 42
    python scripts/score_leads.py --limit 200 --persist
    python scripts/score_leads.py --no-ai
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from leadscore.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("score_leads")

from leadscore.db.repository import list_lead_ids, update_lead_score
from leadscore.db.session import get_session
from leadscore.services.scoring_service import (
    ScoringServiceError,
    recalculate_lead,
    rescore_leads,
)


def score_one(lead_id: int, include_ai: bool, persist: bool) -> int:
    with get_session() as db:
        try:
            result = recalculate_lead(db, lead_id, include_ai=include_ai)
        except ScoringServiceError as e:
            print(f"❌ {e}")
            return 1

        if persist:
            update_lead_score(db, lead_id, result)

    print(f"\nLead {lead_id}: score={result.score} (pre-AI {result.score_pre_ai}) "
          f"version={result.version}")
    for key, value in sorted(result.factors.items(), key=lambda kv: -abs(kv[1])):
        print(f"  {key:<16} {value:+6.1f}")
    if persist:
        print("💾 Score saved.")
    return 0


def score_batch(limit: int, include_ai: bool, persist: bool) -> int:
    with get_session() as db:
        lead_ids = list_lead_ids(db, limit=limit)
        logger.info("Batch mode: %d leads (limit=%d, ai=%s)", len(lead_ids), limit, include_ai)
        summary = rescore_leads(db, lead_ids, include_ai=include_ai, persist=persist)

    print(f"\n✅ Scored {summary['scored']} leads, {summary['failed']} failed, "
          f"{summary['persisted']} saved.")
    return 1 if summary["failed"] else 0


def main():
    parser = argparse.ArgumentParser(description="Recalculate lead scores.")
    parser.add_argument(
        "--lead-id", type=int, default=None,
        help="Score a single lead and print its factor breakdown",
    )
    parser.add_argument(
        "--limit", type=int, default=settings.batch_size,
        help="Max leads to rescore in batch mode (default from .env)",
    )
    parser.add_argument(
        "--no-ai", action="store_true",
        help="Skip the AI adjustment even when an AI analysis exists",
    )
    parser.add_argument(
        "--persist", action="store_true",
        help="Write the computed scores back to the leads table",
    )
    args = parser.parse_args()

    include_ai = not args.no_ai
    if args.lead_id is not None:
        sys.exit(score_one(args.lead_id, include_ai=include_ai, persist=args.persist))
    sys.exit(score_batch(args.limit, include_ai=include_ai, persist=args.persist))


if __name__ == "__main__":
    main()
