"""
Year-over-year trend computation.

Claims are rolled up to one row per (partition, year), each partition is
walked in ascending year order and every row is compared with the row
before it in the same partition. Years with no claims are skipped, not
filled with zeros, so a 2019 -> 2021 history compares 2021 with 2019.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, fields
from typing import Iterator, List, Sequence, Tuple, Union

import pandas as pd

from .dataset import check_no_null_keys, prepare_claims, require_columns, to_builtin
from .errors import InvalidFieldError
from .schemas import TrendGrouping, YearRecord

logger = logging.getLogger(__name__)

PARTITION_KEYS = {
    TrendGrouping.GLOBAL: [],
    TrendGrouping.COMPANY: ["company_name"],
    TrendGrouping.COMPANY_THREAT: ["company_name", "threat_type"],
}


def _as_grouping(group_by: Union[TrendGrouping, str]) -> TrendGrouping:
    try:
        return TrendGrouping(group_by)
    except ValueError:
        raise InvalidFieldError(
            f"unknown trend grouping {group_by!r}; "
            f"expected one of {[g.value for g in TrendGrouping]}"
        ) from None


def ordered_groups(
    frame: pd.DataFrame, keys: Sequence[str], order_by: str
) -> Iterator[Tuple[tuple, pd.DataFrame]]:
    """Yield (partition key, rows sorted by ``order_by``) for each partition.

    Partitions come out sorted by key; an empty ``keys`` yields the whole
    frame as a single partition with key ``()``.
    """
    keys = list(keys)
    if not keys:
        if not frame.empty:
            yield (), frame.sort_values(order_by, kind="stable")
        return

    for key, group in frame.groupby(keys, sort=True):
        key = key if isinstance(key, tuple) else (key,)
        yield tuple(to_builtin(k) for k in key), group.sort_values(order_by, kind="stable")


def _yearly_rollup(frame: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    return (
        frame.assign(final_payout=frame["final_payout"].astype(float))
        .groupby(keys + ["year"], sort=True)["final_payout"]
        .agg(claim_count="size", total_payout="sum", avg_payout="mean")
        .reset_index()
    )


def yearly_delta(
    claims: pd.DataFrame, group_by: Union[TrendGrouping, str] = TrendGrouping.GLOBAL
) -> List[YearRecord]:
    """Per-year claim and payout figures with deltas against the previous observed year.

    Args:
        claims: cleaned claims frame.
        group_by: ``global``, ``company`` or ``company+threat``.

    Returns:
        YearRecords ordered by partition key, then ascending year. The first
        record of each partition has None in every ``prev_*`` and ``*_delta``
        field.
    """
    grouping = _as_grouping(group_by)
    keys = PARTITION_KEYS[grouping]

    frame = prepare_claims(claims)
    require_columns(frame, ["year", "final_payout"] + keys)
    check_no_null_keys(frame, keys + ["year"])

    yearly = _yearly_rollup(frame, keys)
    records: List[YearRecord] = []
    n_partitions = 0

    for key, rows in ordered_groups(yearly, keys, order_by="year"):
        n_partitions += 1
        labels = dict(zip(keys, key))
        prev = None
        for row in rows.itertuples(index=False):
            count = int(row.claim_count)
            total = float(row.total_payout)
            avg = float(row.avg_payout)
            deltas = {}
            if prev is not None:
                deltas = dict(
                    prev_claim_count=prev.claim_count,
                    claim_count_delta=count - prev.claim_count,
                    prev_total_payout=prev.total_payout,
                    total_payout_delta=total - prev.total_payout,
                    prev_avg_payout=prev.avg_payout,
                    avg_payout_delta=avg - prev.avg_payout,
                )
            record = YearRecord(
                year=int(row.year),
                claim_count=count,
                total_payout=total,
                avg_payout=avg,
                company_name=labels.get("company_name"),
                threat_type=labels.get("threat_type"),
                **deltas,
            )
            records.append(record)
            prev = record

    logger.debug(
        "Trend %s: %d partitions, %d year records", grouping.value, n_partitions, len(records)
    )
    return records


def yearly_delta_frame(
    claims: pd.DataFrame, group_by: Union[TrendGrouping, str] = TrendGrouping.GLOBAL
) -> pd.DataFrame:
    """``yearly_delta`` as a DataFrame; missing previous values stay null."""
    records = yearly_delta(claims, group_by)
    columns = [f.name for f in fields(YearRecord)]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)
