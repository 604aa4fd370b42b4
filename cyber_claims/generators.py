"""
Synthetic cyber insurance claims in the shape of the claims table.

Design goals:
- Same columns as the source table, so the loader and engine run unchanged.
- Payouts follow the policy terms: verified loss minus deductible, capped at
  the coverage limit, scaled by the coverage percentage.
- A small share of companies systematically overstate or understate losses,
  giving the discrepancy detector something to find.
- ``inject_anomalies`` adds the data issues the loader is meant to clean.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import numpy as np
import pandas as pd

from . import config


SURNAMES = [
    "Rodriguez", "Figueroa", "Sanchez", "Doyle", "Mcclain", "Miller", "Henderson",
    "Davis", "Guzman", "Hoffman", "Baldwin", "Nguyen", "Patel", "Okafor", "Larsen",
    "Schmidt", "Rossi", "Kowalski", "Tanaka", "Moreau", "Fischer", "Bennett",
    "Castillo", "Walsh", "Ibrahim", "Lindqvist", "Novak", "Reyes", "Chen", "Murphy",
]
SUFFIXES = ["Inc", "LLC", "Ltd", "Group", "PLC", "and Sons", "Holdings"]

THREAT_PHRASES = {
    "ransomware": ["ransomware attack"],
    "phishing": ["phishing attempt", "phishing campaign"],
    "data breach": ["data breach"],
    "other": ["DDoS attack", "malware infection", "insider misuse", "business email compromise"],
}
SEVERITY_WORDS = ["Minor", "Moderate", "Major", "Severe"]
BUZZWORDS = [
    "productize workflows", "benchmark transparency", "enable e-business",
    "deliver dynamic", "mesh ubiquity", "cloud payroll", "legacy VPN", "vendor portal",
]

# Mean reported loss per threat, USD
THREAT_SEVERITY = {
    "ransomware": 6_000_000,
    "phishing": 2_500_000,
    "data breach": 4_000_000,
    "other": 1_500_000,
}


# ---------------- Utility helpers ---------------- #

def _random_dates(n: int, start_year: int, end_year: int, rng: np.random.Generator) -> list[datetime]:
    start = datetime(start_year, 1, 1)
    end = datetime(end_year, 12, 31)
    delta_days = (end - start).days
    return [
        start + timedelta(days=int(d))
        for d in rng.integers(0, delta_days + 1, size=n)
    ]


def generate_companies(n: int, rng: np.random.Generator) -> list[str]:
    """Unique company names like "Guzman Hoffman and Baldwin Group"."""
    names: list[str] = []
    seen: set[str] = set()
    while len(names) < n:
        a, b = rng.choice(SURNAMES, size=2, replace=False)
        name = f"{a} {b} {rng.choice(SUFFIXES)}"
        if name in seen:
            name = f"{name} {len(names) + 1}"
        seen.add(name)
        names.append(name)
    return names


# ---------------- Claims ---------------- #

def generate_claims(
    n_claims: Optional[int] = None,
    n_companies: Optional[int] = None,
    random_state: Optional[int] = None,
) -> pd.DataFrame:
    """Generate clean claims with realistic policy terms and payouts."""
    n_claims = config.N_CLAIMS if n_claims is None else n_claims
    n_companies = config.N_COMPANIES if n_companies is None else n_companies
    seed = random_state if random_state is not None else config.SEED_CLAIMS
    rng = np.random.default_rng(seed)

    companies = generate_companies(n_companies, np.random.default_rng(config.SEED_COMPANIES + seed))

    # Company-level reporting bias: verified / reported loss ratio
    bias = np.ones(n_companies)
    n_over = int(round(config.OVERSTATER_SHARE * n_companies))
    n_under = int(round(config.UNDERSTATER_SHARE * n_companies))
    shuffled = rng.permutation(n_companies)
    bias[shuffled[:n_over]] = rng.uniform(0.55, 0.80, size=n_over)
    bias[shuffled[n_over:n_over + n_under]] = rng.uniform(1.20, 1.45, size=n_under)

    threats = list(config.THREAT_MIX)
    threat_draws = rng.choice(threats, size=n_claims, p=[config.THREAT_MIX[t] for t in threats])
    company_idx = rng.integers(0, n_companies, size=n_claims)
    dates = _random_dates(n_claims, config.START_YEAR, config.END_YEAR, rng)

    rows: list[dict] = []
    for i in range(n_claims):
        threat = threat_draws[i]
        c = company_idx[i]

        phrase = rng.choice(THREAT_PHRASES[threat])
        description = f"{rng.choice(SEVERITY_WORDS)} {phrase} involving {rng.choice(BUZZWORDS)}."

        sigma = 0.7  # heavy right tail
        mu = np.log(THREAT_SEVERITY[threat]) - 0.5 * sigma ** 2
        incurred = int(rng.lognormal(mean=mu, sigma=sigma))

        verified = max(incurred * bias[c] * rng.normal(1.0, 0.03), 0.0)
        deductible = int(incurred * rng.uniform(0.05, 0.20))
        coverage_limit = int(incurred * rng.uniform(0.8, 2.5))
        coverage_pct = float(rng.choice([0.70, 0.75, 0.80, 0.85, 0.90, 1.00]))

        loss_after_deductible = max(verified - deductible, 0.0)
        capped = min(loss_after_deductible, coverage_limit)
        payout = capped * coverage_pct

        rows.append(
            {
                "policy_number": f"POL-{'ABC'[i % 3]}{i + 1:05d}",
                "company_name": companies[c],
                "email": f"claims{i + 1}@example.com",
                "phone": int(rng.integers(1_000_000_000, 9_999_999_999)),
                "date_of_incident": dates[i],
                "description_of_incident": description,
                "incurred_loss_amount": incurred,
                "requested_coverage_percentage": int(rng.choice([70, 75, 80, 85, 90, 100])),
                "additional_information": None,
                "deductible": deductible,
                "coverage_limit": coverage_limit,
                "coverage_percentage": coverage_pct,
                "verified_incurred_loss_amount": round(verified, 2),
                "loss_after_deductible": round(loss_after_deductible, 2),
                "capped_loss": round(capped, 2),
                "final_payout": round(payout, 2),
                "final_claim_fee": round(payout, 2),
            }
        )

    claims = pd.DataFrame(rows)
    if claims.empty:
        claims = pd.DataFrame(columns=config.REQUIRED_COLUMNS + config.OPTIONAL_COLUMNS)
    return claims


# ---------------- Anomalies ---------------- #

def inject_anomalies(claims: pd.DataFrame, random_state: Optional[int] = None) -> pd.DataFrame:
    """
    Inject the data issues the loader cleans up:
    - Missing final payouts
    - Company names with stray whitespace and mixed case
    """
    seed = random_state if random_state is not None else config.SEED_CLAIMS
    rng = np.random.default_rng(seed + 1)
    claims = claims.copy()

    if len(claims) == 0:
        return claims

    # ~1% missing payouts
    n_missing = max(1, int(0.01 * len(claims)))
    idx_missing = rng.choice(claims.index, size=n_missing, replace=False)
    claims.loc[idx_missing, "final_payout"] = None

    # ~5% inconsistently formatted company names
    n_messy = max(1, int(0.05 * len(claims)))
    idx_messy = rng.choice(claims.index, size=n_messy, replace=False)
    claims.loc[idx_messy, "company_name"] = [
        f"  {name.upper()} " if j % 2 else f"{name.lower()}  "
        for j, name in enumerate(claims.loc[idx_messy, "company_name"])
    ]

    return claims


def generate_dataset(
    n_claims: Optional[int] = None,
    n_companies: Optional[int] = None,
    random_state: Optional[int] = None,
) -> pd.DataFrame:
    """Raw (uncleaned) synthetic claims export: clean claims plus anomalies."""
    claims = generate_claims(n_claims, n_companies, random_state)
    return inject_anomalies(claims, random_state)
