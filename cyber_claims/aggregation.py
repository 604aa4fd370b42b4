"""
Grouped descriptive statistics over the claims table.

All functions take a cleaned claims DataFrame, derive what they need on a
copy (see ``dataset.prepare_claims``) and return plain Python structures or
new DataFrames. Nothing here rounds or formats values.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from . import config
from .dataset import (
    check_group_keys,
    check_no_null_keys,
    check_numeric_field,
    prepare_claims,
    require_columns,
    to_builtin,
)
from .errors import InvalidFieldError, NoDataError
from .schemas import StatsRecord
from .stats import describe, percentile_cont

logger = logging.getLogger(__name__)

GroupBy = Union[str, Sequence[str]]


# ---------------- Core grouped statistics ---------------- #

def aggregate(claims: pd.DataFrame, by: GroupBy, field: str) -> Dict[Hashable, StatsRecord]:
    """Statistics of ``field`` per group.

    Args:
        claims: cleaned claims frame.
        by: one of ``company_name``, ``threat_type``, ``year`` or a sequence of them.
        field: numeric column to aggregate, e.g. ``incurred_loss_amount``.

    Returns:
        Mapping of group key to StatsRecord. Single-key groupings use the bare
        value as key; multi-key groupings use a tuple in the order given.

    Raises:
        InvalidFieldError: unknown grouping key or non-numeric field.
        NoDataError: the input (or a group's values) is empty.
    """
    keys = check_group_keys(by)
    frame = prepare_claims(claims)
    require_columns(frame, keys)
    check_numeric_field(frame, field)

    if frame.empty:
        raise NoDataError(f"no claims to aggregate {field!r} over")
    check_no_null_keys(frame, keys)

    result: Dict[Hashable, StatsRecord] = {}
    for key, group in frame.groupby(keys, sort=True):
        key = key if isinstance(key, tuple) else (key,)
        key = tuple(to_builtin(k) for k in key)
        result[key[0] if len(keys) == 1 else key] = describe(group[field])

    logger.debug("Aggregated %s by %s into %d groups", field, keys, len(result))
    return result


def summarize(claims: pd.DataFrame, field: str) -> StatsRecord:
    """Statistics of ``field`` over the whole table."""
    frame = prepare_claims(claims)
    check_numeric_field(frame, field)
    return describe(frame[field])


# ---------------- Dataset overview ---------------- #

def dataset_overview(claims: pd.DataFrame) -> Dict[str, object]:
    """Row/company/policy counts and the incident date range."""
    require_columns(claims, ["policy_number", "company_name", "date_of_incident"])
    if claims.empty:
        raise NoDataError("dataset is empty")

    dates = pd.to_datetime(claims["date_of_incident"])
    policy_counts = claims["policy_number"].value_counts()
    duplicates = sorted(policy_counts[policy_counts > 1].index.tolist())

    return {
        "total_rows": int(len(claims)),
        "unique_companies": int(claims["company_name"].nunique()),
        "unique_policies": int(claims["policy_number"].nunique()),
        "duplicate_policy_numbers": duplicates,
        "earliest_date": dates.min().date(),
        "latest_date": dates.max().date(),
    }


def missing_values(claims: pd.DataFrame, columns: Optional[Sequence[str]] = None) -> Dict[str, int]:
    """Null counts per column (all columns when ``columns`` is None)."""
    columns = list(claims.columns) if columns is None else list(columns)
    require_columns(claims, columns)
    return {col: int(claims[col].isna().sum()) for col in columns}


# ---------------- Company rankings ---------------- #

def top_companies_by_claims(
    claims: pd.DataFrame, limit: int = config.TOP_COMPANIES_LIMIT
) -> List[Tuple[str, int]]:
    """Companies with the most claims, ties broken by name."""
    require_columns(claims, ["company_name"])
    if claims.empty:
        raise NoDataError("no claims to rank")

    counts = claims.groupby("company_name").size().reset_index(name="claim_count")
    counts = counts.sort_values(["claim_count", "company_name"], ascending=[False, True])
    return [(row.company_name, int(row.claim_count)) for row in counts.head(limit).itertuples()]


def payout_status(claims: pd.DataFrame) -> pd.DataFrame:
    """Flag claims whose payout exceeds the reported loss.

    Returns a frame with policy_number, reported_loss, actual_payout and
    payout_status ("Need Attention" where reported < payout, else "Sorted").
    """
    require_columns(claims, ["policy_number", "incurred_loss_amount", "final_payout"])

    out = pd.DataFrame(
        {
            "policy_number": claims["policy_number"],
            "reported_loss": claims["incurred_loss_amount"],
            "actual_payout": claims["final_payout"],
        }
    )
    out["payout_status"] = np.where(
        out["reported_loss"] < out["actual_payout"],
        config.PAYOUT_NEEDS_ATTENTION,
        config.PAYOUT_SORTED,
    )
    return out.reset_index(drop=True)


def high_payout_companies(
    claims: pd.DataFrame,
    percentile: float = config.HIGH_PAYOUT_PERCENTILE,
    baseline: str = "companies",
) -> List[Tuple[str, float]]:
    """Companies whose median payout exceeds a high-percentile cut-off.

    ``baseline="companies"`` compares each company median with the given
    percentile of all company medians. ``baseline="claims"`` compares it with
    the percentile of every individual claim payout, which reproduces the
    legacy SQL report's figures.
    """
    require_columns(claims, ["company_name", "final_payout"])
    if claims.empty:
        raise NoDataError("no claims to rank")

    medians = {
        to_builtin(company): percentile_cont(group, 0.50)
        for company, group in claims.groupby("company_name", sort=True)["final_payout"]
    }

    if baseline == "companies":
        cutoff = percentile_cont(list(medians.values()), percentile)
    elif baseline == "claims":
        cutoff = percentile_cont(claims["final_payout"], percentile)
    else:
        raise InvalidFieldError(f"unknown baseline {baseline!r}; expected 'companies' or 'claims'")

    logger.debug("High payout cut-off (%s, p%.0f): %s", baseline, percentile * 100, cutoff)
    flagged = [(name, median) for name, median in medians.items() if median > cutoff]
    return sorted(flagged, key=lambda item: (-item[1], item[0]))


# ---------------- Threat breakdowns ---------------- #

def threat_counts(claims: pd.DataFrame) -> Dict[str, int]:
    """Number of claims per threat type, most common first."""
    frame = prepare_claims(claims)
    counts = frame["threat_type"].value_counts()
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return {threat: int(n) for threat, n in ordered}


def threat_by_year(claims: pd.DataFrame) -> pd.DataFrame:
    """Claim count and total reported losses per (threat_type, year).

    Sorted by total losses, largest first.
    """
    frame = prepare_claims(claims)
    require_columns(frame, ["year", "incurred_loss_amount"])

    out = (
        frame.groupby(["threat_type", "year"], sort=True)
        .agg(
            claim_count=("incurred_loss_amount", "size"),
            total_losses=("incurred_loss_amount", "sum"),
        )
        .reset_index()
    )
    return out.sort_values(
        ["total_losses", "threat_type", "year"], ascending=[False, True, True]
    ).reset_index(drop=True)


def repeat_filers(claims: pd.DataFrame, min_count: int = 1) -> pd.DataFrame:
    """Claim counts per (company, threat, year), busiest first."""
    frame = prepare_claims(claims)
    require_columns(frame, ["company_name", "year"])

    out = (
        frame.groupby(["company_name", "threat_type", "year"], sort=True)
        .size()
        .reset_index(name="claim_count")
    )
    out = out[out["claim_count"] >= min_count]
    return out.sort_values(
        ["claim_count", "company_name", "threat_type", "year"],
        ascending=[False, True, True, True],
    ).reset_index(drop=True)


# ---------------- Correlation ---------------- #

def correlation(claims: pd.DataFrame, x: str, y: str) -> Optional[float]:
    """Pearson correlation of two numeric fields.

    Returns None when either field is constant (correlation undefined).
    """
    frame = prepare_claims(claims)
    check_numeric_field(frame, x)
    check_numeric_field(frame, y)

    pair = frame[[x, y]].dropna()
    if len(pair) < 2:
        raise NoDataError(f"correlation of {x!r} and {y!r} needs at least two claims")

    value = pair[x].astype(float).corr(pair[y].astype(float))
    return None if pd.isna(value) else float(value)
