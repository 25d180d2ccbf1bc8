"""
Dataset loader (stream -> Area/Measure objects)
===============================================

One function per source format. Each reads its stream to the end, builds a
small transient `Area` (and `Measure`) per record, runs the record through the
area / measure / year filters and hands it to `Areas.set_area`, which merges
it into whatever is already known about that area.

Formats:
- authority-code CSV: `code,English name,Welsh name` with one header line.
- authority-by-year CSV: `code,YYYY,YYYY,...`; one measure per file, whose
  code and label come from the column mapping.
- Welsh statistics JSON: `{"value": [{...}, ...]}`; the column mapping says
  which key holds the area code, the year, the value, and so on.
- Beth Yw? JSON: the output of `Areas.to_json()`, so a saved result can be
  loaded again.

Structural problems raise `ParseError`.
"""

from __future__ import annotations
import csv
import json
import math
import numbers
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Dict, List, Optional, Union

import pandas as pd

from .datasets import SourceColumn, SourceColumnMapping
from .errors import InvalidArgumentError, ParseError
from .filters import StringFilter, YearRange, area_matches, measure_matches, year_matches
from .logger import get_logger
from .models import Area, Measure

if TYPE_CHECKING:
    from .areas import Areas

logger = get_logger(__name__)


def open_source(path: Union[str, Path]) -> IO[str]:
    """Open a dataset file for reading as text."""
    return open(path, "r", encoding="utf-8", newline="")


# ---------------- Value decoding ----------------
def _is_missing(x: Any) -> bool:
    if isinstance(x, (list, dict)):
        return False
    return x is None or bool(pd.isna(x))


def _to_str(x: Any, role: SourceColumn) -> Optional[str]:
    """Decode a string field; None when absent, ParseError on other types."""
    if _is_missing(x):
        return None
    if not isinstance(x, str):
        raise ParseError(f"Expected a string for {role.name}, got {x!r}")
    return x.strip()


def _to_year(x: Any) -> int:
    """Decode a year: '2011' (as sent by the statistics feed) or 2011."""
    if isinstance(x, bool):
        raise ParseError(f"Expected a year, got {x!r}")
    if isinstance(x, str):
        try:
            return int(x.strip())
        except ValueError:
            raise ParseError(f"Invalid year: {x!r}") from None
    if isinstance(x, numbers.Integral):
        return int(x)
    raise ParseError(f"Expected a year, got {x!r}")


def _to_float(x: Any) -> Optional[float]:
    """Decode a numeric value; None when absent."""
    if _is_missing(x):
        return None
    if isinstance(x, bool) or not isinstance(x, numbers.Real):
        raise ParseError(f"Expected a number, got {x!r}")
    value = float(x)
    if not math.isfinite(value):
        raise ParseError(f"Expected a finite number, got {x!r}")
    return value


def _parse_number(token: str, line: int) -> float:
    try:
        value = float(token)
    except ValueError:
        raise ParseError(f"Line {line}: invalid number {token!r}") from None
    if not math.isfinite(value):
        raise ParseError(f"Line {line}: not a finite number {token!r}")
    return value


def _known_names(areas: "Areas", code: str, area: Area) -> List[str]:
    """Names to match the area filter against: the record's plus any already loaded."""
    names = list(area.names.values())
    if code in areas:
        names.extend(areas.get_area(code).names.values())
    return names


def _required_col(cols: SourceColumnMapping, role: SourceColumn) -> str:
    try:
        return cols[role]
    except KeyError:
        raise ParseError(f"Column mapping has no {role.name} entry") from None


# ---------------- Authority code CSV ----------------
def populate_from_authority_code_csv(
    areas: "Areas",
    stream: IO[str],
    cols: SourceColumnMapping,
    areas_filter: Optional[StringFilter] = None,
) -> int:
    """Load `code,English name,Welsh name` rows. Returns the number of areas kept."""
    reader = csv.reader(stream)
    kept = 0
    try:
        header = next(reader, None)
        if header is None:
            raise ParseError("Empty areas file")
        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            if len(row) != 3:
                raise ParseError(f"Line {reader.line_num}: expected 3 columns, found {len(row)}")
            code, eng, cym = (cell.strip() for cell in row)
            area = Area(code)
            area.set_name("eng", eng)
            area.set_name("cym", cym)
            if area_matches(areas_filter, code, area.names.values()):
                areas.set_area(code, area)
                kept += 1
    except csv.Error as e:
        raise ParseError(f"Malformed CSV: {e}") from e
    return kept


# ---------------- Authority by year CSV ----------------
def populate_from_authority_by_year_csv(
    areas: "Areas",
    stream: IO[str],
    cols: SourceColumnMapping,
    areas_filter: Optional[StringFilter] = None,
    measures_filter: Optional[StringFilter] = None,
    years_filter: Optional[YearRange] = None,
) -> int:
    """Load one measure laid out as `code,YYYY,YYYY,...` rows.

    Rows may carry extra trailing columns (ignored) but never fewer values
    than there are years in the header. Returns the number of rows kept.
    """
    measure_code = _required_col(cols, SourceColumn.SINGLE_MEASURE_CODE)
    measure_label = cols.get(SourceColumn.SINGLE_MEASURE_NAME, "")
    keep_measure = measure_matches(measures_filter, measure_code, measure_label)

    reader = csv.reader(stream)
    kept = 0
    try:
        header = next(reader, None)
        if not header:
            raise ParseError("Missing header row")
        year_cells = [cell.strip() for cell in header[1:]]
        while year_cells and not year_cells[-1]:
            year_cells.pop()
        if not year_cells:
            raise ParseError("Header row has no year columns")
        years = []
        for cell in year_cells:
            try:
                years.append(int(cell))
            except ValueError:
                raise ParseError(f"Invalid year in header: {cell!r}") from None

        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            code = row[0].strip()
            values = row[1:]
            if len(values) < len(years):
                raise ParseError(
                    f"Line {reader.line_num}: expected {len(years)} values, found {len(values)}")
            readings = [(y, _parse_number(v.strip(), reader.line_num)) for y, v in zip(years, values)]

            area = Area(code)
            if not keep_measure or not area_matches(areas_filter, code, _known_names(areas, code, area)):
                continue
            measure = Measure(measure_code, measure_label)
            for year, value in readings:
                if year_matches(years_filter, year):
                    measure.set_value(year, value)
            if not len(measure):
                continue
            area.set_measure(measure.codename, measure)
            areas.set_area(code, area)
            kept += 1
    except csv.Error as e:
        raise ParseError(f"Malformed CSV: {e}") from e
    return kept


# ---------------- Welsh statistics JSON ----------------
def _read_json(stream: IO[str]) -> Any:
    try:
        return json.load(stream)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}") from e


def populate_from_welsh_stats_json(
    areas: "Areas",
    stream: IO[str],
    cols: SourceColumnMapping,
    areas_filter: Optional[StringFilter] = None,
    measures_filter: Optional[StringFilter] = None,
    years_filter: Optional[YearRange] = None,
) -> int:
    """Load the `value` records of a statistics feed. Returns the number kept."""
    payload = _read_json(stream)
    if not isinstance(payload, dict) or not isinstance(payload.get("value"), list):
        raise ParseError("Expected a JSON object with a 'value' array")
    records = payload["value"]
    if not all(isinstance(r, dict) for r in records):
        raise ParseError("Every entry of 'value' must be a JSON object")
    if not records:
        return 0

    code_key = _required_col(cols, SourceColumn.AUTH_CODE)
    year_key = _required_col(cols, SourceColumn.YEAR)
    value_key = _required_col(cols, SourceColumn.VALUE)
    single_code = cols.get(SourceColumn.SINGLE_MEASURE_CODE)
    measure_key = None if single_code is not None else _required_col(cols, SourceColumn.MEASURE_CODE)
    single_label = cols.get(SourceColumn.SINGLE_MEASURE_NAME)
    label_key = None if single_label is not None else cols.get(SourceColumn.MEASURE_NAME)
    eng_key = cols.get(SourceColumn.AUTH_NAME_ENG)
    cym_key = cols.get(SourceColumn.AUTH_NAME_CYM)

    # missing keys become NaN columns, so every record can be read the same way
    df = pd.DataFrame.from_records(records)
    for key in (code_key, year_key, value_key, measure_key):
        if key is not None and key not in df.columns:
            raise ParseError(f"Missing required field {key!r}")

    def field(rec: Dict[str, Any], key: Optional[str]) -> Any:
        return rec.get(key) if key is not None else None

    kept = 0
    for i, rec in enumerate(df.to_dict(orient="records")):
        code = _to_str(rec[code_key], SourceColumn.AUTH_CODE)
        if not code:
            raise ParseError(f"Record {i}: missing {code_key!r}")
        if _is_missing(rec[year_key]):
            raise ParseError(f"Record {i}: missing {year_key!r}")
        year = _to_year(rec[year_key])
        if single_code is not None:
            measure_code = single_code
        else:
            measure_code = _to_str(rec[measure_key], SourceColumn.MEASURE_CODE)
            if not measure_code:
                raise ParseError(f"Record {i}: missing {measure_key!r}")
        if single_label is not None:
            label = single_label
        else:
            label = _to_str(field(rec, label_key), SourceColumn.MEASURE_NAME) or ""
        value = _to_float(rec[value_key])
        if value is None:
            logger.debug("Record %d (%s, %s, %d) has no value, skipped", i, code, measure_code, year)
            continue

        area = Area(code)
        eng = _to_str(field(rec, eng_key), SourceColumn.AUTH_NAME_ENG)
        cym = _to_str(field(rec, cym_key), SourceColumn.AUTH_NAME_CYM)
        if eng:
            area.set_name("eng", eng)
        if cym:
            area.set_name("cym", cym)

        if not area_matches(areas_filter, code, _known_names(areas, code, area)):
            continue
        if not measure_matches(measures_filter, measure_code, label):
            continue
        if not year_matches(years_filter, year):
            continue

        measure = Measure(measure_code, label)
        measure.set_value(year, value)
        area.set_measure(measure.codename, measure)
        areas.set_area(code, area)
        kept += 1
    return kept


# ---------------- Beth Yw? JSON (our own output) ----------------
def _check_object(x: Any, what: str) -> Dict[str, Any]:
    if not isinstance(x, dict):
        raise ParseError(f"Expected a JSON object for {what}")
    return x


def populate_from_bethyw_json(
    areas: "Areas",
    stream: IO[str],
    cols: Optional[SourceColumnMapping] = None,
    areas_filter: Optional[StringFilter] = None,
    measures_filter: Optional[StringFilter] = None,
    years_filter: Optional[YearRange] = None,
) -> int:
    """Load `{code: {"names": {...}, "measures": {codename: {year: value}}}}`.

    Measure labels are not part of this format and come back empty.
    Returns the number of areas kept.
    """
    payload = _check_object(_read_json(stream), "the document")
    kept = 0
    for code, body in payload.items():
        body = _check_object(body, f"area {code!r}")
        area = Area(code)
        for lang, name in _check_object(body.get("names", {}), f"names of {code!r}").items():
            if not isinstance(name, str):
                raise ParseError(f"Expected a string name for {code!r}/{lang!r}, got {name!r}")
            try:
                area.set_name(lang, name)
            except InvalidArgumentError as e:
                raise ParseError(f"Area {code!r}: {e}") from e
        if not area_matches(areas_filter, code, _known_names(areas, code, area)):
            continue

        measures = _check_object(body.get("measures", {}), f"measures of {code!r}")
        for codename, series in measures.items():
            if not measure_matches(measures_filter, codename):
                continue
            measure = Measure(codename)
            for year_text, raw in _check_object(series, f"measure {codename!r}").items():
                year = _to_year(year_text)
                if raw is None:
                    continue
                value = _to_float(raw)
                if value is None:
                    # NaN in the document
                    raise ParseError(f"Measure {codename!r}, year {year}: not a finite number")
                if not year_matches(years_filter, year):
                    continue
                measure.set_value(year, value)
            if len(measure) or not series:
                area.set_measure(measure.codename, measure)
        areas.set_area(code, area)
        kept += 1
    return kept
