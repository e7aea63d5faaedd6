"""Query Filter - turn a read request into a bounded range query"""
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from pricereports.core.config import settings
from pricereports.core.errors import ValidationError
from pricereports.services.normalizer import normalize_sku_id, normalize_store_id


@dataclass(frozen=True)
class ReportQuery:
    store_id: str
    sku_ids: Tuple[str, ...]
    offset: int
    limit: int


def build_query(
    store_id: Optional[str],
    item_ids: Optional[Iterable[str]] = None,
    page: Optional[int] = 0,
) -> ReportQuery:
    """
    Validate read parameters and compute the page window.

    Item ids follow the same cleaning rule as ingested item ids; an empty
    item list means "every item at the store".
    """
    errors = []

    try:
        store_id = normalize_store_id(store_id)
    except ValidationError as exc:
        errors.extend(exc.data)

    sku_ids = []
    for index, item_id in enumerate(item_ids or ()):
        try:
            sku_ids.append(normalize_sku_id(item_id, f"itemIds[{index}]"))
        except ValidationError as exc:
            errors.extend(exc.data)

    page = 0 if page is None else page
    if page < 0 or page > settings.MAX_PAGE:
        errors.append(f"page must be between 0 and {settings.MAX_PAGE}")

    if errors:
        raise ValidationError("Bad request: Invalid query parameters", data=errors)

    return ReportQuery(
        store_id=store_id,
        sku_ids=tuple(dict.fromkeys(sku_ids)),
        offset=page * settings.PAGE_SIZE,
        limit=settings.PAGE_SIZE,
    )
