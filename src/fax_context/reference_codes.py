"""
Reference codes printed on outgoing faxes.

Format: FX-YYYY-NNNNNN (year, then a six digit sequence).
"""
import random
import re
from datetime import datetime, timezone
from typing import List, Optional, Pattern

REFERENCE_PREFIX = "FX"

_CODE = r"FX-\d{4}-\d{6}"

REFERENCE_ID_PATTERN: Pattern = re.compile(rf"^{_CODE}$", re.IGNORECASE)

# Checked in order, first match wins.
REFERENCE_SEARCH_PATTERNS: List[Pattern] = [
    re.compile(rf"(?:ref|reference)\s*(?:#|:|no\.?)?\s*({_CODE})\b", re.IGNORECASE),
    re.compile(rf"(?:order|ticket|case)\s*(?:#|:|no\.?)?\s*({_CODE})\b", re.IGNORECASE),
    re.compile(rf"\b({_CODE})\b", re.IGNORECASE),
]


def normalize_reference_id(code: str) -> str:
    return code.strip().upper()


def is_valid_reference_id(code: Optional[str]) -> bool:
    """Check that a code is a complete FX-YYYY-NNNNNN identifier."""
    if not code:
        return False
    return REFERENCE_ID_PATTERN.match(code.strip()) is not None


def extract_reference_id(text: str) -> Optional[str]:
    """
    Find the first reference code in free text.

    Labelled codes ("Ref: FX-2024-000123", "order # FX-...") are preferred
    over bare ones.

    :param text: Extracted fax text
    :return: Normalised code, or None if the text has none
    """
    if not text:
        return None

    for pattern in REFERENCE_SEARCH_PATTERNS:
        match = pattern.search(text)
        if match:
            return normalize_reference_id(match.group(1))

    return None


def generate_reference_id(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    """
    Generate a new reference code for an outgoing fax.

    :param now: Timestamp supplying the year (defaults to current UTC time)
    :param rng: Random source, injectable for tests
    :return: Code in FX-YYYY-NNNNNN format
    """
    year = (now or datetime.now(timezone.utc)).year
    sequence = (rng or random).randint(0, 999999)
    return f"{REFERENCE_PREFIX}-{year:04d}-{sequence:06d}"
