"""
Analytics engine facade.

Prepares a claims frame once (threat classification, incident year,
discrepancy) and runs every analysis against that same immutable frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import pandas as pd

from . import aggregation, config, discrepancy, trends
from .dataset import prepare_claims, require_columns
from .errors import InvalidFieldError
from .schemas import DetectionMode, DiscrepancyRecord, StatsRecord, TrendGrouping, YearRecord

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Per-run analysis parameters."""

    detection_limit: int = config.DEFAULT_DETECTION_LIMIT
    top_companies_limit: int = config.TOP_COMPANIES_LIMIT
    high_payout_percentile: float = config.HIGH_PAYOUT_PERCENTILE
    high_payout_baseline: str = "companies"
    strict_detection: bool = False

    def validate(self) -> Tuple[bool, List[str]]:
        errors = []

        if self.detection_limit < 0:
            errors.append(f"detection_limit must be non-negative, got {self.detection_limit}")

        if self.top_companies_limit < 1:
            errors.append(f"top_companies_limit must be at least 1, got {self.top_companies_limit}")

        if not 0 < self.high_payout_percentile < 1:
            errors.append(
                f"high_payout_percentile must be between 0 and 1, got {self.high_payout_percentile}"
            )

        if self.high_payout_baseline not in ("companies", "claims"):
            errors.append(
                f"high_payout_baseline must be 'companies' or 'claims', got {self.high_payout_baseline!r}"
            )

        return len(errors) == 0, errors


class ClaimsAnalyticsEngine:
    """Runs the claims analyses over one prepared, read-only frame."""

    def __init__(self, claims: pd.DataFrame, analysis_config: AnalysisConfig | None = None):
        self.config = analysis_config or AnalysisConfig()
        ok, errors = self.config.validate()
        if not ok:
            raise InvalidFieldError("; ".join(errors))

        require_columns(claims, config.REQUIRED_COLUMNS)
        self.claims = prepare_claims(claims)
        logger.info(
            "Engine ready: %d claims, %d companies",
            len(self.claims),
            self.claims["company_name"].nunique(),
        )

    # ---------------- Aggregation ---------------- #

    def aggregate(self, by, field: str) -> Dict[Any, StatsRecord]:
        return aggregation.aggregate(self.claims, by, field)

    def summarize(self, field: str) -> StatsRecord:
        return aggregation.summarize(self.claims, field)

    def overview(self) -> Dict[str, object]:
        return aggregation.dataset_overview(self.claims)

    def top_companies(self) -> List[Tuple[str, int]]:
        return aggregation.top_companies_by_claims(self.claims, self.config.top_companies_limit)

    def high_payout_companies(self) -> List[Tuple[str, float]]:
        return aggregation.high_payout_companies(
            self.claims,
            percentile=self.config.high_payout_percentile,
            baseline=self.config.high_payout_baseline,
        )

    # ---------------- Discrepancy ---------------- #

    def detect(self, mode=DetectionMode.OVERSTATEMENT) -> List[DiscrepancyRecord]:
        return discrepancy.detect(
            self.claims,
            mode=mode,
            limit=self.config.detection_limit,
            strict=self.config.strict_detection,
        )

    # ---------------- Trends ---------------- #

    def yearly_delta(self, group_by=TrendGrouping.GLOBAL) -> List[YearRecord]:
        return trends.yearly_delta(self.claims, group_by)

    # ---------------- Everything ---------------- #

    def run_all(self) -> Dict[str, Any]:
        """Every result set keyed by analysis name."""
        logger.info("Running all analyses")
        return {
            "overview": self.overview(),
            "missing_values": aggregation.missing_values(self.claims, config.REQUIRED_COLUMNS),
            "loss_summary": self.summarize("incurred_loss_amount"),
            "loss_by_company": self.aggregate("company_name", "incurred_loss_amount"),
            "top_companies": self.top_companies(),
            "payout_status": aggregation.payout_status(self.claims),
            "high_payout_companies": self.high_payout_companies(),
            "threat_counts": aggregation.threat_counts(self.claims),
            "threat_by_year": aggregation.threat_by_year(self.claims),
            "overstatement": self.detect(DetectionMode.OVERSTATEMENT),
            "understatement": self.detect(DetectionMode.UNDERSTATEMENT),
            "discrepancy_by_threat": discrepancy.discrepancy_by_threat(self.claims),
            "repeat_filers": aggregation.repeat_filers(self.claims),
            "trend_global": self.yearly_delta(TrendGrouping.GLOBAL),
            "trend_company_threat": self.yearly_delta(TrendGrouping.COMPANY_THREAT),
            "corr_deductible_payout": aggregation.correlation(
                self.claims, "deductible", "final_payout"
            ),
            "corr_loss_payout": aggregation.correlation(
                self.claims, "incurred_loss_amount", "final_payout"
            ),
        }
