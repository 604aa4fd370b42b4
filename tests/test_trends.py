import pandas as pd
import pytest

from conftest import build_frame, make_claim
from cyber_claims import trends
from cyber_claims.errors import InvalidFieldError
from cyber_claims.generators import generate_claims
from cyber_claims.schemas import TrendGrouping, YearRecord


def test_global_yearly_delta(sample_claims):
    records = trends.yearly_delta(sample_claims, TrendGrouping.GLOBAL)

    assert [r.year for r in records] == [2019, 2020, 2021]
    first, second, third = records

    assert (first.claim_count, first.total_payout) == (3, 130_000.0)
    assert first.avg_payout == pytest.approx(130_000 / 3)
    assert first.prev_claim_count is None
    assert first.claim_count_delta is None
    assert first.total_payout_delta is None
    assert first.avg_payout_delta is None
    assert first.is_first

    assert second.prev_claim_count == 3
    assert second.claim_count_delta == -1
    assert second.total_payout_delta == -30_000.0
    assert second.avg_payout_delta == pytest.approx(50_000 - 130_000 / 3)

    assert third.claim_count == 3
    assert third.claim_count_delta == 1
    assert third.prev_total_payout == 100_000.0
    assert third.total_payout_delta == 240_000.0
    assert third.company_name is None and third.threat_type is None


def test_company_grouping_skips_gap_years(sample_claims):
    records = trends.yearly_delta(sample_claims, "company")
    globex = [r for r in records if r.company_name == "globex"]

    assert [r.year for r in globex] == [2019, 2021]
    assert globex[0].claim_count_delta is None
    # 2021 compares with 2019; 2020 is not synthesised as a zero year
    assert globex[1].prev_claim_count == 1
    assert globex[1].claim_count_delta == 0


def test_company_threat_partitions_are_sorted(sample_claims):
    records = trends.yearly_delta(sample_claims, "company+threat")
    keys = [(r.company_name, r.threat_type) for r in records]

    assert keys == sorted(keys)
    assert sorted(set(keys)) == [
        ("acme", "Phishing"),
        ("acme", "Ransomware"),
        ("globex", "Data Breach"),
        ("initech", "Other"),
        ("initech", "Phishing"),
        ("umbrella", "Ransomware"),
    ]
    acme_ransomware = [r for r in records if r.company_name == "acme" and r.threat_type == "Ransomware"]
    assert [(r.year, r.claim_count, r.claim_count_delta) for r in acme_ransomware] == [
        (2019, 1, None),
        (2020, 1, 0),
    ]


def test_acme_ransomware_two_then_five_claims():
    rows = [make_claim(f"A19-{i}", "acme", "2019-04-01", "ransomware") for i in range(2)]
    rows += [make_claim(f"A21-{i}", "acme", "2021-08-01", "Ransomware") for i in range(5)]
    rows += [make_claim("X1", "acme", "2020-01-01", "phishing")]
    records = trends.yearly_delta(build_frame(rows), TrendGrouping.COMPANY_THREAT)

    ransomware = [r for r in records if r.threat_type == "Ransomware"]
    assert [(r.year, r.claim_count, r.prev_claim_count, r.claim_count_delta) for r in ransomware] == [
        (2019, 2, None, None),
        (2021, 5, 2, 3),
    ]


def test_first_record_of_every_partition_has_no_previous_value():
    claims = generate_claims(n_claims=500, n_companies=20, random_state=9)
    for grouping in TrendGrouping:
        records = trends.yearly_delta(claims, grouping)
        seen = set()
        for r in records:
            key = (r.company_name, r.threat_type)
            if key not in seen:
                assert r.prev_claim_count is None
                assert r.claim_count_delta is None
                assert r.prev_total_payout is None
                assert r.avg_payout_delta is None
                seen.add(key)
            else:
                assert r.claim_count_delta is not None


def test_partition_counts_add_up(sample_claims):
    for grouping in TrendGrouping:
        records = trends.yearly_delta(sample_claims, grouping)
        assert sum(r.claim_count for r in records) == len(sample_claims)


def test_input_order_does_not_matter(sample_claims):
    shuffled = sample_claims.sample(frac=1.0, random_state=1)
    assert trends.yearly_delta(shuffled, "company+threat") == trends.yearly_delta(
        sample_claims, "company+threat"
    )


def test_empty_input_yields_no_records(sample_claims):
    assert trends.yearly_delta(sample_claims.iloc[0:0]) == []


def test_null_company_name_is_rejected(sample_claims):
    claims = sample_claims.copy()
    claims.loc[0, "company_name"] = None
    with pytest.raises(InvalidFieldError, match="company_name"):
        trends.yearly_delta(claims, "company")


def test_missing_incident_date_is_rejected(sample_claims):
    claims = sample_claims.copy()
    claims.loc[0, "date_of_incident"] = pd.NaT
    with pytest.raises(InvalidFieldError, match="year"):
        trends.yearly_delta(claims)


def test_unknown_grouping(sample_claims):
    with pytest.raises(InvalidFieldError):
        trends.yearly_delta(sample_claims, "region")


def test_ordered_groups():
    frame = pd.DataFrame({"k": ["b", "a", "b", "a"], "year": [2021, 2020, 2019, 2022]})
    groups = list(trends.ordered_groups(frame, ["k"], "year"))

    assert [key for key, _ in groups] == [("a",), ("b",)]
    assert list(groups[0][1]["year"]) == [2020, 2022]
    assert list(groups[1][1]["year"]) == [2019, 2021]

    (key, rows), = trends.ordered_groups(frame, [], "year")
    assert key == ()
    assert list(rows["year"]) == [2019, 2020, 2021, 2022]


def test_yearly_delta_frame(sample_claims):
    frame = trends.yearly_delta_frame(sample_claims)
    assert list(frame.columns) == [f for f in YearRecord.__dataclass_fields__]
    assert frame["year"].tolist() == [2019, 2020, 2021]
    assert pd.isna(frame.loc[0, "claim_count_delta"])
    assert frame.loc[1, "claim_count_delta"] == -1
