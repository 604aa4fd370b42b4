"""
Dataset loading and one-time cleaning.

This is the boundary in front of the analytics engine: it reads a claims
export, applies the cleaning rules once and hands back a frame the engine
can use as-is. The engine itself never re-cleans.

Cleaning rules:
1) Null ``final_payout`` becomes 0.
2) ``company_name`` is trimmed and lower-cased so formatting variants
   collapse into one company.
3) Policy numbers must be unique.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from . import config
from .dataset import require_columns
from .errors import DataQualityError

logger = logging.getLogger(__name__)


def normalize_columns(claims: pd.DataFrame) -> pd.DataFrame:
    """``Policy_Number`` / ``Final Payout`` style headers -> snake_case."""
    out = claims.copy()
    out.columns = [str(c).strip().lower().replace(" ", "_") for c in out.columns]
    return out


def clean_claims(claims: pd.DataFrame) -> pd.DataFrame:
    """Apply the cleaning rules to a copy of ``claims``."""
    require_columns(claims, ["company_name", "final_payout", "date_of_incident"])
    out = claims.copy()

    n_null_payout = int(out["final_payout"].isna().sum())
    out["final_payout"] = out["final_payout"].fillna(0.0)

    out["company_name"] = out["company_name"].map(
        lambda name: str(name).strip().lower() if pd.notna(name) else None
    )
    out["date_of_incident"] = pd.to_datetime(out["date_of_incident"])

    if n_null_payout:
        logger.info("Replaced %d null final_payout values with 0", n_null_payout)
    return out


def validate_claims(claims: pd.DataFrame) -> None:
    """Check table invariants; raise DataQualityError on violation.

    Payouts above the coverage limit are logged, not rejected: they are
    exactly what the analysis is meant to surface.
    """
    require_columns(claims, config.REQUIRED_COLUMNS)

    if claims["policy_number"].isna().any():
        raise DataQualityError("policy_number must not be null")

    for col in ("company_name", "date_of_incident"):
        n_null = int(claims[col].isna().sum())
        if n_null:
            raise DataQualityError(f"{n_null} claim(s) with null {col}")

    dupes = claims.loc[claims["policy_number"].duplicated(), "policy_number"].unique()
    if len(dupes):
        raise DataQualityError(
            f"{len(dupes)} duplicate policy number(s), e.g. {', '.join(map(str, dupes[:5]))}"
        )

    for col in ("incurred_loss_amount", "verified_incurred_loss_amount"):
        n_negative = int((claims[col] < 0).sum())
        if n_negative:
            raise DataQualityError(f"{n_negative} claim(s) with negative {col}")

    over_limit = int((claims["final_payout"] > claims["coverage_limit"]).sum())
    if over_limit:
        logger.warning("%d claim(s) pay out more than their coverage limit", over_limit)


def load_claims_csv(path: Union[str, Path], validate: bool = True) -> pd.DataFrame:
    """Read a claims CSV export and return a cleaned frame."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"claims file not found: {path}")

    raw = pd.read_csv(path)
    claims = clean_claims(normalize_columns(raw))
    if validate:
        validate_claims(claims)

    logger.info("Loaded %d claims from %s", len(claims), path)
    return claims
