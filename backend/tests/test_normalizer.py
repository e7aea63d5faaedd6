import pytest

from pricereports.core.errors import UnsupportedVersionError, ValidationError
from pricereports.schemas.report import RawReport
from pricereports.services.normalizer import (
    NormalizedReport,
    clamp_price,
    normalize_batch,
    normalize_name,
    normalize_report,
    normalize_sku_id,
    normalize_store_id,
)


def raw(item_id="ABC123", store_id="S1", name=None, price=4.99):
    return RawReport(itemId=item_id, storeId=store_id, itemName=name, price=price)


def test_ids_are_stripped_to_alphanumerics_and_cut():
    assert normalize_sku_id("  abc-123_!x ") == "abc123x"
    assert normalize_sku_id("A" * 40) == "A" * 32
    assert normalize_store_id("store #0042-west") == "store004"


def test_id_that_strips_to_nothing_is_required():
    with pytest.raises(ValidationError) as exc_info:
        normalize_store_id("--- ", "storeId")
    assert exc_info.value.data == ["storeId is a required field"]


def test_name_keeps_spaces_and_drops_symbols():
    assert normalize_name("  Olive Oil, 2L! ") == "Olive Oil 2L"
    assert normalize_name("x" * 120) == "x" * 96
    assert normalize_name(None) is None
    assert normalize_name("!!!") is None


@pytest.mark.parametrize(
    "price, expected",
    [
        (-50, -1.0),
        (-1, -1.0),
        (-0.5, -0.5),
        (0, 0.0),
        (4.99, 4.99),
        (100_000, 100_000.0),
        (250_000.5, 100_000.0),
    ],
)
def test_price_is_clamped(price, expected):
    assert clamp_price(price) == expected


def test_price_must_be_finite_number():
    with pytest.raises(ValidationError):
        clamp_price(float("nan"))
    with pytest.raises(ValidationError):
        clamp_price("4.99")
    with pytest.raises(ValidationError):
        clamp_price(True)


def test_normalize_report_v1():
    report = normalize_report(raw(item_id="abc-123", store_id="S-1", name=" Eggs 24ct ", price=7.49))
    assert report == NormalizedReport(sku_id="abc123", store_id="S1", name="Eggs 24ct", price=7.49)
    assert not report.is_skip


def test_normalization_is_idempotent():
    first = normalize_report(raw(item_id=" sku--9 ", store_id="store number 7", name=" a  b! ", price=999_999))
    again = normalize_report(raw(item_id=first.sku_id, store_id=first.store_id, name=first.name, price=first.price))
    assert again == first


def test_negative_price_is_skip_sentinel():
    assert normalize_report(raw(price=-20)).is_skip


def test_batch_over_limit_fails_as_a_whole():
    with pytest.raises(ValidationError) as exc_info:
        normalize_batch([raw() for _ in range(101)])
    assert "100" in exc_info.value.data[0]


def test_batch_at_limit_is_accepted():
    assert len(normalize_batch([raw() for _ in range(100)])) == 100


def test_batch_collects_errors_from_every_report():
    with pytest.raises(ValidationError) as exc_info:
        normalize_batch([raw(item_id="!!"), raw(), raw(store_id="")])
    assert exc_info.value.data == [
        "reports[0].itemId is a required field",
        "reports[2].storeId is a required field",
    ]


def test_unsupported_version():
    with pytest.raises(UnsupportedVersionError):
        normalize_batch([raw()], version=2)
    with pytest.raises(UnsupportedVersionError):
        normalize_report(raw(), version=0)
