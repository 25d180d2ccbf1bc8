"""
Data model (Measure, Area)
==========================

Statistics are stored in a three-level hierarchy:

    Areas  (authority code -> Area)           see `areas.py`
      Area  (language -> name, codename -> Measure)
        Measure  (year -> value)

The important behaviour lives in the setters. Data for one area arrives in
pieces from several files (names from one CSV, population from another, ...),
so `Area.set_measure` never replaces an existing Measure: it copies the new
year/value pairs into it instead.
"""

from __future__ import annotations
import re
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .errors import InvalidArgumentError, NotFoundError

_LANG_RE = re.compile(r"[a-z]{3}")


class Measure:
    """One statistical indicator for one area, as a year -> value series.

    `earliest_year` / `latest_year` are kept up to date by `set_value` and are
    None while the measure has no readings.
    """

    def __init__(self, codename: str = "", label: str = "") -> None:
        self._codename = codename.lower()
        self.label = label
        self._readings: Dict[int, float] = {}
        self.earliest_year: Optional[int] = None
        self.latest_year: Optional[int] = None

    @property
    def codename(self) -> str:
        return self._codename

    @property
    def readings(self) -> Mapping[int, float]:
        """Read-only view of the year -> value mapping."""
        return MappingProxyType(self._readings)

    def set_value(self, year: int, value: float) -> None:
        """Insert or overwrite the value for `year`."""
        year = int(year)
        if self.earliest_year is None or year < self.earliest_year:
            self.earliest_year = year
        if self.latest_year is None or year > self.latest_year:
            self.latest_year = year
        self._readings[year] = float(value)

    def get_value(self, year: int) -> float:
        try:
            return self._readings[year]
        except KeyError:
            raise NotFoundError(f"Year '{year}' was not found in measure '{self._codename}'") from None

    def years(self) -> List[int]:
        return sorted(self._readings)

    def get_average(self) -> float:
        """Mean of all readings, 0 when there are none."""
        if not self._readings:
            return 0.0
        return sum(self._readings.values()) / len(self._readings)

    def get_difference(self) -> float:
        """Latest-year value minus earliest-year value, 0 when empty."""
        if not self._readings:
            return 0.0
        return self._readings[self.latest_year] - self._readings[self.earliest_year]

    def get_difference_as_percentage(self) -> float:
        """Difference as a percentage of the earliest-year value.

        Returns 0 when there are no readings, and also when the earliest-year
        value is 0 (the percentage is undefined there).
        """
        if not self._readings:
            return 0.0
        first = self._readings[self.earliest_year]
        if first == 0:
            return 0.0
        return 100.0 * self.get_difference() / first

    def copy(self) -> "Measure":
        m = Measure(self._codename, self.label)
        for year, value in self._readings.items():
            m.set_value(year, value)
        return m

    def to_dict(self) -> Dict[str, float]:
        """Year-ordered mapping with string keys (JSON object keys)."""
        return {str(y): self._readings[y] for y in self.years()}

    def __len__(self) -> int:
        return len(self._readings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Measure):
            return NotImplemented
        return (self._codename == other._codename
                and self.label == other.label
                and self._readings == other._readings)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Measure(codename={self._codename!r}, label={self.label!r}, readings={self._readings!r})"

    def __str__(self) -> str:
        from .report import render_measure
        return render_measure(self)


class Area:
    """A local authority: its names (by language) and its measures."""

    def __init__(self, authority_code: str) -> None:
        self._authority_code = authority_code
        self._names: Dict[str, str] = {}
        self._measures: Dict[str, Measure] = {}

    @property
    def authority_code(self) -> str:
        return self._authority_code

    @property
    def names(self) -> Mapping[str, str]:
        return MappingProxyType(self._names)

    @property
    def measures(self) -> Mapping[str, Measure]:
        return MappingProxyType(self._measures)

    # ---------------- Names ----------------
    def set_name(self, lang: str, name: str) -> None:
        """Set the name in language `lang` (a 3-letter code such as 'eng')."""
        code = lang.lower()
        if not _LANG_RE.fullmatch(code):
            raise InvalidArgumentError(f"Invalid language code: {lang!r}")
        self._names[code] = name

    def get_name(self, lang: str) -> str:
        # lookup is exact: callers pass an already lowercase code
        try:
            return self._names[lang]
        except KeyError:
            raise NotFoundError(f"Language '{lang}' was not found in area '{self._authority_code}'") from None

    # ---------------- Measures ----------------
    def set_measure(self, codename: str, measure: Measure) -> None:
        """Store `measure` under `codename`, merging into any existing one.

        On a merge only the readings of `measure` are used; the existing
        measure keeps its own codename and label.
        """
        key = codename.lower()
        current = self._measures.get(key)
        if current is None:
            self._measures[key] = measure.copy()
            return
        for year, value in measure.readings.items():
            current.set_value(year, value)

    def get_measure(self, codename: str) -> Measure:
        key = codename.lower()
        try:
            return self._measures[key]
        except KeyError:
            raise NotFoundError(f"Measure '{key}' was not found in area '{self._authority_code}'") from None

    def to_dict(self) -> Dict[str, dict]:
        return {
            "names": dict(self._names),
            "measures": {k: self._measures[k].to_dict() for k in sorted(self._measures)},
        }

    def __len__(self) -> int:
        return len(self._measures)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Area):
            return NotImplemented
        return (self._authority_code == other._authority_code
                and self._names == other._names
                and self._measures == other._measures)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Area({self._authority_code!r}, names={self._names!r}, measures={sorted(self._measures)!r})"

    def __str__(self) -> str:
        from .report import render_area
        return render_area(self)
