"""Normalizer - validate and canonicalize raw price reports

Pure functions, no I/O. Every string field is stripped of disallowed
characters, cut to its column width and whitespace-trimmed. Prices are
clamped rather than rejected. A version number selects the remapping rule
so future clients can send differently shaped reports.
"""
import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from pricereports.core.config import settings
from pricereports.core.errors import UnsupportedVersionError, ValidationError
from pricereports.schemas.report import RawReport

SKU_ID_MAX_LENGTH = 32
STORE_ID_MAX_LENGTH = 8
NAME_MAX_LENGTH = 96

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")
_NON_NAME_CHARACTER = re.compile(r"[^A-Za-z0-9\s]")


@dataclass(frozen=True)
class NormalizedReport:
    """A validated report ready for the dedup decision"""
    sku_id: str
    store_id: str
    name: Optional[str]
    price: float

    @property
    def is_skip(self) -> bool:
        """Negative price is the client's explicit "do not persist" signal."""
        return self.price < 0


def _clean(value: str, pattern: re.Pattern, max_length: int) -> str:
    return pattern.sub("", value)[:max_length].strip()


def normalize_sku_id(value: Optional[str], field: str = "itemId") -> str:
    cleaned = _clean(value or "", _NON_ALPHANUMERIC, SKU_ID_MAX_LENGTH)
    if not cleaned:
        raise ValidationError(data=[f"{field} is a required field"])
    return cleaned


def normalize_store_id(value: Optional[str], field: str = "storeId") -> str:
    cleaned = _clean(value or "", _NON_ALPHANUMERIC, STORE_ID_MAX_LENGTH)
    if not cleaned:
        raise ValidationError(data=[f"{field} is a required field"])
    return cleaned


def normalize_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return _clean(value, _NON_NAME_CHARACTER, NAME_MAX_LENGTH) or None


def clamp_price(value, field: str = "price") -> float:
    """Clamp into [PRICE_MIN, PRICE_MAX]; out-of-range is not an error."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(data=[f"{field} must be a number"])
    if not math.isfinite(value):
        raise ValidationError(data=[f"{field} must be a finite number"])
    return float(min(max(value, settings.PRICE_MIN), settings.PRICE_MAX))


def _remap_v1(raw: RawReport, prefix: str) -> NormalizedReport:
    errors: List[str] = []
    fields = {}
    rules = (
        ("sku_id", lambda: normalize_sku_id(raw.itemId, f"{prefix}.itemId")),
        ("store_id", lambda: normalize_store_id(raw.storeId, f"{prefix}.storeId")),
        ("name", lambda: normalize_name(raw.itemName)),
        ("price", lambda: clamp_price(raw.price, f"{prefix}.price")),
    )
    for name, rule in rules:
        try:
            fields[name] = rule()
        except ValidationError as exc:
            errors.extend(exc.data or [])
    if errors:
        raise ValidationError(data=errors)
    return NormalizedReport(**fields)


# Version -> remapping rule
VERSION_RULES: Dict[int, Callable[[RawReport, str], NormalizedReport]] = {
    1: _remap_v1,
}


def normalize_report(raw: RawReport, version: int = 1, prefix: str = "report") -> NormalizedReport:
    rule = VERSION_RULES.get(version)
    if rule is None:
        raise UnsupportedVersionError(data=[f"version {version} is not supported"])
    return rule(raw, prefix)


def normalize_batch(reports: Sequence[RawReport], version: int = 1) -> List[NormalizedReport]:
    """
    Normalize a whole batch or fail it as a unit.

    Errors from every report are collected before raising, so the client
    sees all field problems at once.
    """
    if version not in VERSION_RULES:
        raise UnsupportedVersionError(data=[f"version {version} is not supported"])

    limit = settings.MAX_REPORTS_PER_BATCH
    if len(reports) > limit:
        raise ValidationError(data=[f"reports field must have less than or equal to {limit} items"])

    normalized: List[NormalizedReport] = []
    errors: List[str] = []
    for index, raw in enumerate(reports):
        try:
            normalized.append(normalize_report(raw, version, prefix=f"reports[{index}]"))
        except ValidationError as exc:
            errors.extend(exc.data or [])

    if errors:
        raise ValidationError(data=errors)
    return normalized
