"""
Threat classification from free-text incident descriptions.

A description is matched case-insensitively against the keywords in
``config.THREAT_KEYWORDS``; the first keyword found decides the threat type,
so "ransomware ... phishing" is Ransomware.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from . import config
from .errors import MissingColumnsError
from .schemas import ThreatType

logger = logging.getLogger(__name__)


def classify(description: Optional[str]) -> ThreatType:
    """Return the single threat type for one incident description."""
    if not isinstance(description, str) or not description:
        return ThreatType.OTHER

    text = description.casefold()
    for label, keyword in config.THREAT_KEYWORDS:
        if keyword in text:
            return ThreatType(label)
    return ThreatType.OTHER


def classify_series(descriptions: Iterable[Optional[str]]) -> pd.Series:
    """Vectorised ``classify`` returning threat labels as strings."""
    if not isinstance(descriptions, pd.Series):
        descriptions = pd.Series(list(descriptions), dtype=object)

    text = descriptions.map(lambda d: d.casefold() if isinstance(d, str) else "").astype(str)

    # np.select picks the first true condition, preserving keyword priority
    conditions = [
        text.str.contains(keyword, regex=False).to_numpy()
        for _, keyword in config.THREAT_KEYWORDS
    ]
    labels = [label for label, _ in config.THREAT_KEYWORDS]
    threat = np.select(conditions, labels, default=config.THREAT_FALLBACK)

    return pd.Series(threat, index=descriptions.index, name="threat_type", dtype=object)


def add_threat_type(claims: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``claims`` with a derived ``threat_type`` column."""
    if "description_of_incident" not in claims.columns:
        raise MissingColumnsError({"description_of_incident"})

    out = claims.copy()
    out["threat_type"] = classify_series(out["description_of_incident"])
    logger.debug(
        "Classified %d claims: %s",
        len(out),
        out["threat_type"].value_counts().to_dict(),
    )
    return out
