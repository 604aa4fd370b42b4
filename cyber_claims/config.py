"""
Configuration for cyber insurance claims analytics.

Thresholds and keyword lists match the legacy SQL reports over the
claims table; generator parameters are sized for a quick local run.
"""

# ---------------- Threat classification ---------------- #

# Evaluated in order: first keyword found in the description wins.
THREAT_KEYWORDS = [
    ("Ransomware", "ransomware"),
    ("Phishing", "phishing"),
    ("Data Breach", "data breach"),
]
THREAT_FALLBACK: str = "Other"


# ---------------- Columns ---------------- #

REQUIRED_COLUMNS = [
    "policy_number",
    "company_name",
    "date_of_incident",
    "description_of_incident",
    "incurred_loss_amount",
    "verified_incurred_loss_amount",
    "deductible",
    "coverage_limit",
    "coverage_percentage",
    "final_payout",
]

OPTIONAL_COLUMNS = [
    "email",
    "phone",
    "requested_coverage_percentage",
    "additional_information",
    "loss_after_deductible",
    "capped_loss",
    "final_claim_fee",
]

# Fields that may be aggregated (discrepancy is derived on demand)
NUMERIC_FIELDS = [
    "incurred_loss_amount",
    "verified_incurred_loss_amount",
    "deductible",
    "coverage_limit",
    "coverage_percentage",
    "final_payout",
    "requested_coverage_percentage",
    "loss_after_deductible",
    "capped_loss",
    "final_claim_fee",
    "discrepancy",
]

GROUP_KEYS = ["company_name", "threat_type", "year"]


# ---------------- Discrepancy detection ---------------- #

OVERSTATEMENT_PERCENTILE: float = 0.90
UNDERSTATEMENT_PERCENTILE: float = 0.10
DEFAULT_DETECTION_LIMIT: int = 10
MIN_DETECTION_GROUPS: int = 2


# ---------------- Descriptive analysis ---------------- #

TOP_COMPANIES_LIMIT: int = 5
HIGH_PAYOUT_PERCENTILE: float = 0.95

PAYOUT_NEEDS_ATTENTION: str = "Need Attention"
PAYOUT_SORTED: str = "Sorted"


# ---------------- Synthetic claims ---------------- #

N_CLAIMS: int = 5_000
N_COMPANIES: int = 400

START_YEAR: int = 2019
END_YEAR: int = 2024  # inclusive

# Approximate mix of incident descriptions by threat
THREAT_MIX = {
    "ransomware": 0.30,
    "phishing": 0.30,
    "data breach": 0.25,
    "other": 0.15,
}

# Share of companies that systematically overstate / understate losses
OVERSTATER_SHARE: float = 0.08
UNDERSTATER_SHARE: float = 0.05


# ---------------- Random seeds ---------------- #

SEED_CLAIMS: int = 44
SEED_COMPANIES: int = 42
