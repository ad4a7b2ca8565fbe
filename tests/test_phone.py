import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
import pytest
from guardian_bot.domain.errors import InvalidPhone, MissingCountryCode, NotificationError
from guardian_bot.utils.phone import normalize_phone

@pytest.mark.parametrize("raw,expected", [
    ("0101234567", "20101234567"),
    ("012-1117 2756", "201211172756"),
    ("(011) 555 0000", "20115550000"),
    ("0155550000", "20155550000"),
    ("20101234567", "20101234567"),
    ("+20 101 234 567", "20101234567"),
])
def test_normalizes_known_formats(raw, expected):
    assert normalize_phone(raw) == expected

@pytest.mark.parametrize("raw", [None, "", "   ", "ab-cd", "12", "+1"])
def test_too_short_is_invalid(raw):
    with pytest.raises(InvalidPhone):
        normalize_phone(raw)

@pytest.mark.parametrize("raw", ["44123456", "0191234567", "123", "02123456"])
def test_ambiguous_numbers_need_country_code(raw):
    with pytest.raises(MissingCountryCode):
        normalize_phone(raw)

def test_failures_do_not_echo_the_number():
    with pytest.raises(NotificationError) as exc:
        normalize_phone("44123456")
    assert "44123456" not in str(exc.value)
