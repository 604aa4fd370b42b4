"""Shared fixtures: small hand-built claims tables with known answers."""

import pandas as pd
import pytest


def make_claim(
    policy_number,
    company_name="acme",
    date="2021-03-01",
    description="Major ransomware attack",
    incurred=100_000.0,
    verified=100_000.0,
    payout=50_000.0,
    deductible=5_000.0,
    coverage_limit=500_000.0,
    coverage_percentage=0.8,
):
    return {
        "policy_number": policy_number,
        "company_name": company_name,
        "date_of_incident": pd.Timestamp(date),
        "description_of_incident": description,
        "incurred_loss_amount": float(incurred),
        "verified_incurred_loss_amount": float(verified),
        "deductible": float(deductible),
        "coverage_limit": float(coverage_limit),
        "coverage_percentage": float(coverage_percentage),
        "final_payout": float(payout),
    }


def build_frame(rows):
    return pd.DataFrame(rows)


@pytest.fixture
def sample_claims():
    """Four companies over 2019-2021.

    Per-company mean discrepancy: acme 20k, globex -5k, initech -2.5k, umbrella 200k.
    """
    return build_frame(
        [
            make_claim("P1", "acme", "2019-02-01", "Major ransomware attack", 100_000, 90_000, 60_000),
            make_claim("P2", "acme", "2019-05-10", "Minor phishing attempt", 50_000, 50_000, 30_000),
            make_claim("P3", "acme", "2020-07-15", "Ransomware encrypted servers", 200_000, 150_000, 100_000),
            make_claim("P4", "globex", "2019-09-01", "Major data breach involving CRM", 80_000, 80_000, 40_000),
            make_claim("P5", "globex", "2021-01-20", "DATA BREACH of payroll", 120_000, 130_000, 70_000),
            make_claim("P6", "initech", "2020-03-03", "DDoS attack on web shop", 30_000, 30_000, 0),
            make_claim("P7", "initech", "2021-11-11", "Phishing campaign", 40_000, 45_000, 20_000),
            make_claim(
                "P8", "umbrella", "2021-06-30",
                "Major ransomware attack involving phishing elements", 500_000, 300_000, 250_000,
            ),
        ]
    )


@pytest.fixture
def many_companies():
    """Twenty single-claim companies; only company_00 overstates (by 50k)."""
    rows = [
        make_claim(f"P{i:02d}", f"company_{i:02d}", incurred=10_000, verified=10_000)
        for i in range(1, 20)
    ]
    rows.append(make_claim("P00", "company_00", incurred=100_000, verified=50_000))
    return build_frame(rows)
