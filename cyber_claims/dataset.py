"""
Derived columns shared by every analysis.

The engine never re-cleans data; it only adds the columns it derives
(``year``, ``threat_type``, ``discrepancy``) to a copy of the input frame.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from . import config
from .classifier import add_threat_type
from .errors import InvalidFieldError, MissingColumnsError


def require_columns(claims: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = set(columns) - set(claims.columns)
    if missing:
        raise MissingColumnsError(missing)


def prepare_claims(claims: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``claims`` with year, threat_type and discrepancy added.

    Columns that are already present are left as they are, so an
    already-prepared frame passes through unchanged (apart from the copy).
    A supplied ``threat_type`` column is trusted as-is; drop it first to
    reclassify from the descriptions.
    """
    if not isinstance(claims, pd.DataFrame):
        raise TypeError(f"expected a pandas DataFrame, got {type(claims).__name__}")

    out = claims.copy()

    if "threat_type" not in out.columns:
        out = add_threat_type(out)

    if "year" not in out.columns and "date_of_incident" in out.columns:
        out["year"] = pd.to_datetime(out["date_of_incident"]).dt.year

    if (
        "discrepancy" not in out.columns
        and "incurred_loss_amount" in out.columns
        and "verified_incurred_loss_amount" in out.columns
    ):
        out["discrepancy"] = (
            out["incurred_loss_amount"].astype(float)
            - out["verified_incurred_loss_amount"].astype(float)
        )

    return out


def check_group_keys(by) -> list[str]:
    """Normalise a grouping selector to a list of known key columns."""
    keys = [by] if isinstance(by, str) else list(by)
    if not keys:
        raise InvalidFieldError("at least one grouping key is required")
    unknown = [k for k in keys if k not in config.GROUP_KEYS]
    if unknown:
        raise InvalidFieldError(
            f"unknown grouping key(s) {unknown}; expected any of {config.GROUP_KEYS}"
        )
    return keys


def check_numeric_field(claims: pd.DataFrame, field: str) -> None:
    if field not in config.NUMERIC_FIELDS:
        raise InvalidFieldError(
            f"{field!r} is not an aggregatable field; expected one of {config.NUMERIC_FIELDS}"
        )
    require_columns(claims, [field])
    # empty frames built from no rows carry object columns; leave them to NoDataError
    if not claims.empty and not pd.api.types.is_numeric_dtype(claims[field]):
        raise InvalidFieldError(f"column {field!r} is not numeric")


def to_builtin(value):
    """numpy scalar -> builtin, so result keys compare and hash like plain values."""
    return value.item() if isinstance(value, np.generic) else value


def check_no_null_keys(claims: pd.DataFrame, keys: Iterable[str]) -> None:
    """Grouping columns must be fully populated; null keys would drop claims."""
    for key in keys:
        n_null = int(claims[key].isna().sum())
        if n_null:
            raise InvalidFieldError(f"grouping column {key!r} has {n_null} null value(s)")
