"""
Schema definitions for claims and analytics results.

These schemas define the **contract** between:
- the dataset loader (one ClaimSchema per row of the claims table)
- the analytics engine (input frame columns)
- report consumers (result records)

They mirror the pandas DataFrame structures used throughout the project.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date
from enum import Enum
from typing import Iterable, Mapping, Optional, Union

import pandas as pd


# ---------------- Enumerations ---------------- #

class ThreatType(str, Enum):
    RANSOMWARE = "Ransomware"
    PHISHING = "Phishing"
    DATA_BREACH = "Data Breach"
    OTHER = "Other"


class DetectionMode(str, Enum):
    OVERSTATEMENT = "overstatement"
    UNDERSTATEMENT = "understatement"


class TrendGrouping(str, Enum):
    GLOBAL = "global"
    COMPANY = "company"
    COMPANY_THREAT = "company+threat"


# ---------------- Claim ---------------- #

@dataclass
class ClaimSchema:
    policy_number: str
    company_name: str          # trimmed + lower-cased by the loader
    date_of_incident: date
    description_of_incident: Optional[str]
    incurred_loss_amount: float
    verified_incurred_loss_amount: float
    deductible: float
    coverage_limit: float
    coverage_percentage: float
    final_payout: float        # 0 when the source value was null
    email: Optional[str] = None
    phone: Optional[int] = None
    requested_coverage_percentage: Optional[int] = None
    additional_information: Optional[str] = None
    loss_after_deductible: Optional[float] = None
    capped_loss: Optional[float] = None
    final_claim_fee: Optional[float] = None


# ---------------- Grouping key ---------------- #

@dataclass(frozen=True)
class CompanyYearGroup:
    company_name: str
    threat_type: str
    year: int


# ---------------- Results ---------------- #

@dataclass(frozen=True)
class StatsRecord:
    count: int
    sum: float
    mean: float
    min: float
    max: float
    median: float
    p10: float
    p90: float
    p95: float


@dataclass(frozen=True)
class DiscrepancyRecord:
    company_name: str
    discrepancy_score: float   # mean(incurred - verified) over the company's claims


@dataclass(frozen=True)
class YearRecord:
    """One observed year within a trend partition.

    ``prev_*`` and ``*_delta`` are None for the first year of a partition:
    "no previous value" is distinct from "no change".
    """

    year: int
    claim_count: int
    total_payout: float
    avg_payout: float
    prev_claim_count: Optional[int] = None
    claim_count_delta: Optional[int] = None
    prev_total_payout: Optional[float] = None
    total_payout_delta: Optional[float] = None
    prev_avg_payout: Optional[float] = None
    avg_payout_delta: Optional[float] = None
    company_name: Optional[str] = None
    threat_type: Optional[str] = None

    @property
    def is_first(self) -> bool:
        return self.prev_claim_count is None

    @property
    def group(self) -> Optional[CompanyYearGroup]:
        """(company, threat, year) key for company+threat trend rows."""
        if self.company_name is None or self.threat_type is None:
            return None
        return CompanyYearGroup(self.company_name, self.threat_type, self.year)


# ---------------- Conversion ---------------- #

ClaimLike = Union[ClaimSchema, Mapping]


def claims_to_frame(claims: Iterable[ClaimLike]) -> pd.DataFrame:
    """Build a claims DataFrame from ClaimSchema objects or plain mappings."""
    rows = [asdict(c) if isinstance(c, ClaimSchema) else dict(c) for c in claims]
    if not rows:
        return pd.DataFrame(columns=[f.name for f in fields(ClaimSchema)])
    return pd.DataFrame(rows)
