from datetime import date

from app.core.nepali_date import (
    NEPALI_MONTHS,
    english_to_nepali_digits,
    format_bilingual_date,
    is_valid_nepali_date,
    nepali_date_string,
    nepali_month_of,
    nepali_to_english_digits,
    parse_nepali_date,
    to_english_date,
    to_nepali_date,
)


def test_to_nepali_date_uses_year_and_month_offset():
    nd = to_nepali_date(date(2024, 5, 15))
    assert (nd.year, nd.month, nd.day) == (2081, 1, 15)
    assert nd.month_name == NEPALI_MONTHS[0]


def test_month_wraps_without_changing_year_offset():
    nd = to_nepali_date(date(2024, 1, 10))
    assert (nd.year, nd.month) == (2081, 9)


def test_day_name_starts_on_sunday():
    # 2024-05-12 was a Sunday
    assert to_nepali_date(date(2024, 5, 12)).day_name == "आइतबार"


def test_to_english_date_inverts_the_mapping():
    for d in (date(2024, 1, 31), date(2024, 5, 15), date(2023, 12, 1)):
        nd = to_nepali_date(d)
        assert to_english_date(nd.year, nd.month, nd.day) == d


def test_storage_string_is_zero_padded():
    assert nepali_date_string(date(2024, 5, 6)) == "2081-01-06"


def test_digit_conversion_both_ways():
    assert english_to_nepali_digits(2081) == "२०८१"
    assert nepali_to_english_digits("२०८१-०४-१०") == "2081-04-10"


def test_parse_accepts_ascii_and_devanagari():
    assert parse_nepali_date("2081-04-10").month == 4
    assert parse_nepali_date("२०८१-०४-१०").day == 10


def test_parse_rejects_bad_values():
    assert parse_nepali_date("2081-13-01") is None
    assert parse_nepali_date("1999-01-01") is None
    assert parse_nepali_date("2081-01-33") is None
    assert parse_nepali_date("2081/01/01") is None
    assert parse_nepali_date("abc") is None


def test_validity_range():
    assert is_valid_nepali_date(2081, 1, 32)
    assert not is_valid_nepali_date(2201, 1, 1)
    assert not is_valid_nepali_date(2081, 0, 1)


def test_month_of_stored_date():
    assert nepali_month_of("2081-04-10") == "04"
    assert nepali_month_of(None) is None
    assert nepali_month_of("2081") is None


def test_bilingual_display():
    assert format_bilingual_date(date(2024, 8, 14)) == "14/08/2024 (२०८१/४/१४ बि.स.)"
