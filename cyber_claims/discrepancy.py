"""
Reported-vs-verified loss discrepancy detection.

Each company's score is the mean of ``incurred_loss_amount -
verified_incurred_loss_amount`` over its claims. Companies above the 90th
percentile of all scores are overstatement outliers, those below the 10th
percentile understatement outliers. This is a statistical deviation flag,
not a fraud verdict.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple, Union

import pandas as pd

from . import config
from .dataset import prepare_claims, require_columns
from .errors import InsufficientGroupsError, InvalidFieldError
from .schemas import DetectionMode, DiscrepancyRecord
from .stats import percentile_cont

logger = logging.getLogger(__name__)


def _as_mode(mode: Union[DetectionMode, str]) -> DetectionMode:
    try:
        return DetectionMode(mode)
    except ValueError:
        raise InvalidFieldError(
            f"unknown detection mode {mode!r}; expected one of {[m.value for m in DetectionMode]}"
        ) from None


def company_discrepancies(claims: pd.DataFrame) -> pd.Series:
    """Average discrepancy per company, indexed by company name."""
    frame = prepare_claims(claims)
    require_columns(frame, ["company_name", "discrepancy"])
    return frame.groupby("company_name", sort=True)["discrepancy"].mean().rename("avg_discrepancy")


def thresholds(scores: pd.Series) -> Tuple[float, float]:
    """(understatement, overstatement) cut-offs over per-company scores."""
    values = scores.dropna()
    return (
        percentile_cont(values, config.UNDERSTATEMENT_PERCENTILE),
        percentile_cont(values, config.OVERSTATEMENT_PERCENTILE),
    )


def detect(
    claims: pd.DataFrame,
    mode: Union[DetectionMode, str] = DetectionMode.OVERSTATEMENT,
    limit: int = config.DEFAULT_DETECTION_LIMIT,
    strict: bool = False,
) -> List[DiscrepancyRecord]:
    """Flag companies whose average discrepancy is a decile outlier.

    Args:
        claims: cleaned claims frame.
        mode: ``overstatement`` (strictly above p90, largest first) or
            ``understatement`` (strictly below p10, smallest first).
        limit: maximum number of companies returned.
        strict: raise InsufficientGroupsError instead of returning an empty
            list when fewer than two companies are present.

    Returns:
        Ordered list of DiscrepancyRecord.
    """
    mode = _as_mode(mode)
    if limit < 0:
        raise InvalidFieldError(f"limit must be non-negative, got {limit}")

    scores = company_discrepancies(claims).dropna()

    if len(scores) < config.MIN_DETECTION_GROUPS:
        if strict:
            raise InsufficientGroupsError(len(scores), config.MIN_DETECTION_GROUPS)
        logger.warning(
            "Discrepancy detection skipped: %d company(ies), need at least %d",
            len(scores),
            config.MIN_DETECTION_GROUPS,
        )
        return []

    # Both cut-offs come from the full population before any filtering
    low, high = thresholds(scores)
    logger.debug("Discrepancy thresholds: p10=%s p90=%s over %d companies", low, high, len(scores))

    if mode is DetectionMode.OVERSTATEMENT:
        flagged = scores[scores > high]
        ordered = sorted(flagged.items(), key=lambda item: (-item[1], item[0]))
    else:
        flagged = scores[scores < low]
        ordered = sorted(flagged.items(), key=lambda item: (item[1], item[0]))

    records = [
        DiscrepancyRecord(company_name=name, discrepancy_score=float(score))
        for name, score in ordered[:limit]
    ]
    logger.info("%s: %d of %d companies flagged", mode.value, len(records), len(scores))
    return records


def discrepancy_by_threat(claims: pd.DataFrame) -> Dict[str, float]:
    """Average reported-minus-verified loss per threat type."""
    frame = prepare_claims(claims)
    require_columns(frame, ["discrepancy"])
    means = frame.groupby("threat_type", sort=True)["discrepancy"].mean()
    return {threat: float(value) for threat, value in means.items()}
