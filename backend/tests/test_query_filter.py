import pytest

from pricereports.core.errors import ValidationError
from pricereports.services.query_filter import build_query


def test_page_zero_defaults():
    query = build_query("S1")
    assert query.store_id == "S1"
    assert query.sku_ids == ()
    assert query.offset == 0
    assert query.limit == 10_000


def test_page_offsets_by_page_size():
    assert build_query("S1", page=1).offset == 10_000
    assert build_query("S1", page=100).offset == 1_000_000
    assert build_query("S1", page=None).offset == 0


def test_ids_are_normalized_like_ingestion():
    query = build_query(" S-1 ", ["abc-123", "XYZ 9", "abc123"])
    assert query.store_id == "S1"
    assert query.sku_ids == ("abc123", "XYZ9")


@pytest.mark.parametrize("page", [-1, 101])
def test_page_out_of_bounds(page):
    with pytest.raises(ValidationError):
        build_query("S1", page=page)


def test_store_is_required_and_errors_are_collected():
    with pytest.raises(ValidationError) as exc_info:
        build_query(None, ["!!"], page=500)
    assert exc_info.value.message == "Bad request: Invalid query parameters"
    assert exc_info.value.data == [
        "storeId is a required field",
        "itemIds[0] is a required field",
        "page must be between 0 and 100",
    ]
