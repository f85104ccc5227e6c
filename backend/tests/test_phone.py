import pytest

from intranet.services.phone import is_valid_phone, mask_phone, normalize_phone


@pytest.mark.parametrize(
    "raw",
    ["0241234567", "241234567", "+233241234567", "233241234567", "+233 24 123 4567", "024-123-4567"],
)
def test_normalize_accepts_every_ghana_format(raw):
    assert normalize_phone(raw) == "233241234567"
    assert is_valid_phone(raw)


def test_normalize_is_idempotent():
    for raw in ("0241234567", "+233 50 000 0001", "233123456", "12345", "123456", "0123456"):
        once = normalize_phone(raw)
        assert normalize_phone(once) == once


@pytest.mark.parametrize("raw", ["0233123456", "233123456", "+233233123456", "233 23 312 3456"])
def test_glo_numbers_starting_with_233_keep_their_country_code(raw):
    assert normalize_phone(raw) == "233233123456"
    assert is_valid_phone(raw)


@pytest.mark.parametrize("raw", ["", None, "12345", "02412345678901", "abc"])
def test_invalid_numbers_are_rejected(raw):
    assert not is_valid_phone(raw)


def test_mask_phone_hides_the_middle_digits():
    assert mask_phone("233241234567") == "233******567"
    assert mask_phone("1234") == "****"
