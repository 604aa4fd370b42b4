"""
Command-line entry point for the cyber claims analytics report.

Usage (from project root):

    python -m cyber_claims.cli                       # synthetic dataset
    python -m cyber_claims.cli --input claims.csv    # real export

This script:
1) Loads a claims CSV (or generates a synthetic one) and cleans it once
2) Runs every analysis through the engine
3) Prints a report; money is rounded to 2 decimals here and only here
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .engine import AnalysisConfig, ClaimsAnalyticsEngine
from .errors import ClaimsAnalyticsError
from .generators import generate_dataset
from .loader import clean_claims, load_claims_csv, validate_claims

logger = logging.getLogger(__name__)

TOP_TREND_LINES = 10


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def money(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:,.2f}"


def section(title: str) -> None:
    print()
    print(f"---------------- {title} ----------------")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Cyber insurance claims anomaly & trend report")
    p.add_argument("--input", type=Path, help="Claims CSV export (omit to generate synthetic claims)")
    p.add_argument("--n-claims", type=int, default=config.N_CLAIMS, help="Synthetic claims to generate")
    p.add_argument("--n-companies", type=int, default=config.N_COMPANIES, help="Synthetic companies")
    p.add_argument("--seed", type=int, default=config.SEED_CLAIMS, help="Synthetic data seed")
    p.add_argument("--save-dataset", type=Path, help="Write the cleaned dataset to this CSV path")
    p.add_argument("--limit", type=int, default=config.DEFAULT_DETECTION_LIMIT, help="Max flagged companies per mode")
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return p.parse_args(argv)


# -------------------------------------------------------------------
# Report
# -------------------------------------------------------------------

def print_report(results: dict) -> None:
    overview = results["overview"]
    section("Dataset overview")
    print(f"Claims:            {overview['total_rows']}")
    print(f"Companies:         {overview['unique_companies']}")
    print(f"Unique policies:   {overview['unique_policies']}")
    print(f"Incident dates:    {overview['earliest_date']} .. {overview['latest_date']}")

    loss = results["loss_summary"]
    section("Incurred loss")
    print(f"min {money(loss.min)} | max {money(loss.max)} | avg {money(loss.mean)} | median {money(loss.median)}")

    section("Top companies by claim count")
    for name, count in results["top_companies"]:
        print(f"{count:>5}  {name}")

    section("Threat types")
    for threat, count in results["threat_counts"].items():
        print(f"{count:>5}  {threat}")

    section("Average discrepancy by threat")
    for threat, value in results["discrepancy_by_threat"].items():
        print(f"{money(value):>18}  {threat}")

    section("Possible overstatement (above p90)")
    for rec in results["overstatement"]:
        print(f"{money(rec.discrepancy_score):>18}  {rec.company_name}")
    if not results["overstatement"]:
        print("none flagged")

    section("Possible understatement (below p10)")
    for rec in results["understatement"]:
        print(f"{money(rec.discrepancy_score):>18}  {rec.company_name}")
    if not results["understatement"]:
        print("none flagged")

    attention = results["payout_status"]
    n_attention = int((attention["payout_status"] == config.PAYOUT_NEEDS_ATTENTION).sum())
    print(f"\nℹ Claims paying out more than reported loss: {n_attention}")

    section("Year over year (all claims)")
    for rec in results["trend_global"]:
        delta = "first year" if rec.is_first else f"{rec.claim_count_delta:+d} claims, avg payout {money(rec.avg_payout_delta)}"
        print(f"{rec.year}: {rec.claim_count} claims, total {money(rec.total_payout)}, avg {money(rec.avg_payout)} ({delta})")

    section("Largest claim-count changes (company + threat)")
    changed = [r for r in results["trend_company_threat"] if not r.is_first]
    changed.sort(key=lambda r: (-abs(r.claim_count_delta), r.company_name, r.threat_type, r.year))
    for rec in changed[:TOP_TREND_LINES]:
        print(
            f"{rec.company_name} / {rec.threat_type}: "
            f"{rec.prev_claim_count} -> {rec.claim_count} in {rec.year} ({rec.claim_count_delta:+d})"
        )

    section("Correlation")
    for key, label in (("corr_deductible_payout", "deductible vs payout"), ("corr_loss_payout", "loss vs payout")):
        value = results[key]
        print(f"{label}: {'n/a' if value is None else f'{value:.3f}'}")


# -------------------------------------------------------------------
# Main entrypoint
# -------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.input:
            print(f"▶ Loading claims from {args.input}...")
            claims = load_claims_csv(args.input)
        else:
            print("▶ Generating synthetic cyber claims...")
            claims = clean_claims(generate_dataset(args.n_claims, args.n_companies, args.seed))
            validate_claims(claims)

        if args.save_dataset:
            args.save_dataset.parent.mkdir(parents=True, exist_ok=True)
            claims.to_csv(args.save_dataset, index=False)
            print(f"✔ Dataset written to {args.save_dataset}")

        engine = ClaimsAnalyticsEngine(claims, AnalysisConfig(detection_limit=args.limit))
        results = engine.run_all()
    except (ClaimsAnalyticsError, FileNotFoundError) as exc:
        logger.error("Analysis failed: %s", exc)
        return 1

    print_report(results)
    print("\n✅ Analysis complete")
    return 0


# -------------------------------------------------------------------
# CLI hook
# -------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
