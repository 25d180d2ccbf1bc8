"""
Filters
=======

Three stateless predicates decide whether a record read from a dataset is
kept:

- `area_matches(filter, code, names)`      area code / area names
- `measure_matches(filter, code, label)`   measure code / label
- `year_matches(years, year)`              year range

An empty (or None) filter keeps everything. String filters are sets of
lowercase strings; an entry matches when it equals the code or is a substring
of the lowercased code or of any lowercased name.

The `parse_*` helpers turn the CLI arguments into filters.
"""

from __future__ import annotations
from typing import AbstractSet, FrozenSet, Iterable, NamedTuple, Optional, Sequence

from .errors import InvalidArgumentError

StringFilter = AbstractSet[str]

# a year argument outside this range is a typo, not a year of data
MIN_YEAR = 1000
MAX_YEAR = 9998


class YearRange(NamedTuple):
    """(start, end) year filter.

    (0, 0) keeps all years, (y, 0) keeps only year y, (a, b) keeps a..b.
    """
    start: int = 0
    end: int = 0

    @classmethod
    def of(cls, start: int = 0, end: int = 0) -> "YearRange":
        """Build a validated range; an inverted range is rejected."""
        if start and end and end < start:
            raise InvalidArgumentError(f"Invalid year range: {end} is before {start}")
        if end and not start:
            raise InvalidArgumentError(f"Invalid year range: end year {end} without a start year")
        return cls(start, end)


ALL_YEARS = YearRange(0, 0)


def matches(filter_set: Optional[StringFilter], code: str, candidates: Iterable[str] = ()) -> bool:
    """Case-insensitive exact-or-substring match of `code` and `candidates`."""
    if not filter_set:
        return True
    if code in filter_set:
        return True
    haystack = [code.lower()] + [c.lower() for c in candidates if c]
    for needle in filter_set:
        for text in haystack:
            if needle in text:
                return True
    return False


def area_matches(filter_set: Optional[StringFilter], code: str, names: Iterable[str] = ()) -> bool:
    return matches(filter_set, code, names)


def measure_matches(filter_set: Optional[StringFilter], code: str, label: str = "") -> bool:
    return matches(filter_set, code, (label,))


def year_matches(years: Optional[YearRange], year: int) -> bool:
    if years is None:
        return True
    start, end = years
    if not start:
        return True
    if not end:
        return year == start
    return start <= year <= end


# ---------------- CLI argument parsing ----------------
def parse_string_filter(values: Optional[Sequence[str]]) -> FrozenSet[str]:
    """Turn ['W06000023', 'Cardiff'] into a lowercase filter; 'all' means none.

    Each value may itself be a comma separated list.
    """
    if not values:
        return frozenset()
    items = [v.strip() for value in values for v in value.split(",") if v.strip()]
    if not items or items[0].lower() == "all":
        return frozenset()
    return frozenset(v.lower() for v in items)


def _parse_year(token: str, arg: str) -> int:
    try:
        year = int(token)
    except ValueError:
        raise InvalidArgumentError(f"Invalid input for years argument: {arg!r}") from None
    if year != 0 and not (MIN_YEAR <= year <= MAX_YEAR):
        raise InvalidArgumentError(f"Invalid input for years argument: {arg!r}")
    return year


def parse_years_arg(arg: Optional[str]) -> YearRange:
    """Parse '0', 'YYYY' or 'YYYY-ZZZZ'."""
    if arg is None or not arg.strip():
        return ALL_YEARS
    text = arg.strip()
    if "-" in text:
        first, _, second = text.partition("-")
        return YearRange.of(_parse_year(first.strip(), arg), _parse_year(second.strip(), arg))
    return YearRange.of(_parse_year(text, arg), 0)
