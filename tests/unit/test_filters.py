"""
tests/unit/test_filters.py
==========================
Area / measure / year predicates and the CLI argument parsers.
"""

import pytest

from bethyw.errors import InvalidArgumentError
from bethyw.filters import (
    ALL_YEARS,
    YearRange,
    area_matches,
    measure_matches,
    parse_string_filter,
    parse_years_arg,
    year_matches,
)


@pytest.mark.parametrize("empty", [None, set(), frozenset()])
def test_empty_filters_accept_everything(empty):
    assert area_matches(empty, "W06000011", ["Swansea"])
    assert area_matches(empty, "", [])
    assert measure_matches(empty, "pop", "Population")


@pytest.mark.parametrize("year", [1, 1999, 2024, 9999])
def test_all_years(year):
    assert year_matches(ALL_YEARS, year)
    assert year_matches(None, year)


def test_single_year():
    years = YearRange(1999, 0)
    assert year_matches(years, 1999)
    assert not year_matches(years, 1998)
    assert not year_matches(years, 2000)


def test_year_range_is_inclusive():
    years = YearRange(1990, 1995)
    assert year_matches(years, 1990)
    assert year_matches(years, 1995)
    assert not year_matches(years, 1989)
    assert not year_matches(years, 1996)


def test_area_filter_exact_code():
    assert area_matches({"W06000011"}, "W06000011")


def test_area_filter_substring_is_case_insensitive():
    assert area_matches({"w0600001"}, "W06000011")
    assert area_matches({"swan"}, "W06000011", ["Swansea", "Abertawe"])
    assert area_matches({"tawe"}, "W06000011", ["Swansea", "Abertawe"])
    assert not area_matches({"cardiff"}, "W06000011", ["Swansea", "Abertawe"])


def test_measure_filter_code_and_label():
    assert measure_matches({"pop"}, "pop", "Population")
    assert measure_matches({"density"}, "dens", "Population density")
    assert not measure_matches({"rail"}, "dens", "Population density")
    assert not measure_matches({"x"}, "pop", "")


def test_inverted_range_rejected():
    with pytest.raises(InvalidArgumentError):
        YearRange.of(2000, 1990)
    with pytest.raises(InvalidArgumentError):
        YearRange.of(0, 1990)
    assert YearRange.of(1990, 2000) == (1990, 2000)


@pytest.mark.parametrize("arg, expected", [
    (None, (0, 0)),
    ("0", (0, 0)),
    ("2010", (2010, 0)),
    ("2010-2015", (2010, 2015)),
    (" 2010 - 2015 ", (2010, 2015)),
    ("2010-0", (2010, 0)),
])
def test_parse_years_arg(arg, expected):
    assert parse_years_arg(arg) == expected


@pytest.mark.parametrize("arg", ["999", "9999", "abc", "2015-2010", "2010-99999", "1990-x"])
def test_parse_years_arg_invalid(arg):
    with pytest.raises(InvalidArgumentError):
        parse_years_arg(arg)


@pytest.mark.parametrize("values, expected", [
    (None, frozenset()),
    ([], frozenset()),
    (["all"], frozenset()),
    (["W06000011,Swansea"], {"w06000011", "swansea"}),
    (["POP", "Dens"], {"pop", "dens"}),
])
def test_parse_string_filter(values, expected):
    assert parse_string_filter(values) == expected
