"""
Areas collection
================

`Areas` is the top of the data model: one `Area` per local authority code.

Adding an area whose code is already present never replaces it. Instead the
new names are copied over the old ones (new wins on the same language) and the
new measures are merged year by year via `Area.set_measure`. This is what lets
the areas file, the by-year CSVs and the JSON feeds be loaded in any order and
still end up with one consistent record per area.

`populate()` picks the right parser from `loader.py` for a source type.
"""

from __future__ import annotations
import copy
import json
from pathlib import Path
from typing import IO, Dict, Iterator, List, Optional, Union

import pandas as pd

from . import loader
from .datasets import SourceColumnMapping, SourceDataType
from .errors import InvalidArgumentError, NotFoundError, ParseError
from .filters import StringFilter, YearRange
from .logger import get_logger
from .models import Area

logger = get_logger(__name__)

FRAME_COLUMNS = ["authority_code", "name_eng", "name_cym", "measure", "label", "year", "value"]


class Areas:
    """All loaded areas, keyed by authority code; iterates in code order."""

    def __init__(self) -> None:
        self._areas: Dict[str, Area] = {}

    def set_area(self, code: str, area: Area) -> None:
        """Insert `area`, or merge it into the area already stored under `code`."""
        current = self._areas.get(code)
        if current is None:
            self._areas[code] = copy.deepcopy(area)
            return
        for lang, name in area.names.items():
            current.set_name(lang, name)
        for codename, measure in area.measures.items():
            current.set_measure(codename, measure)

    def get_area(self, code: str) -> Area:
        try:
            return self._areas[code]
        except KeyError:
            raise NotFoundError(f"Area '{code}' was not found") from None

    def codes(self) -> List[str]:
        return sorted(self._areas)

    def __len__(self) -> int:
        return len(self._areas)

    def __iter__(self) -> Iterator[Area]:
        for code in self.codes():
            yield self._areas[code]

    def __contains__(self, code: object) -> bool:
        return code in self._areas

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Areas):
            return NotImplemented
        return self._areas == other._areas

    __hash__ = None  # mutable

    def __str__(self) -> str:
        from .report import render_areas
        return render_areas(self)

    # ---------------- Import ----------------
    def populate(
        self,
        stream: IO[str],
        source_type: SourceDataType,
        cols: SourceColumnMapping,
        areas_filter: Optional[StringFilter] = None,
        measures_filter: Optional[StringFilter] = None,
        years_filter: Optional[YearRange] = None,
    ) -> int:
        """Read `stream` in the given format into this collection.

        Filters left as None keep everything. Returns the number of records kept.
        """
        try:
            if source_type == SourceDataType.AUTHORITY_CODE_CSV:
                kept = loader.populate_from_authority_code_csv(self, stream, cols, areas_filter)
            elif source_type == SourceDataType.AUTHORITY_BY_YEAR_CSV:
                kept = loader.populate_from_authority_by_year_csv(
                    self, stream, cols, areas_filter, measures_filter, years_filter)
            elif source_type == SourceDataType.WELSH_STATS_JSON:
                kept = loader.populate_from_welsh_stats_json(
                    self, stream, cols, areas_filter, measures_filter, years_filter)
            elif source_type == SourceDataType.BETHYW_JSON:
                kept = loader.populate_from_bethyw_json(
                    self, stream, cols, areas_filter, measures_filter, years_filter)
            else:
                raise InvalidArgumentError(f"Unexpected source type: {source_type!r}")
        except UnicodeDecodeError as e:
            raise ParseError(f"Invalid UTF-8: {e}") from e
        logger.info("Imported %d %s records (%d areas total)", kept, source_type.value, len(self))
        return kept

    # ---------------- Export ----------------
    def to_dict(self) -> Dict[str, dict]:
        return {code: self._areas[code].to_dict() for code in self.codes()}

    def to_json(self) -> str:
        """`{code: {"names": {...}, "measures": {codename: {year: value}}}}`."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_frame(self) -> pd.DataFrame:
        """Long table: one row per (area, measure, year); areas without measures get one empty row."""
        rows = []
        for area in self:
            eng = area.names.get("eng")
            cym = area.names.get("cym")
            if not len(area):
                rows.append([area.authority_code, eng, cym, None, None, None, None])
                continue
            for codename in sorted(area.measures):
                m = area.measures[codename]
                for year in m.years():
                    rows.append([area.authority_code, eng, cym, codename, m.label, year, m.get_value(year)])
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)

    def to_csv(self, path: Union[str, Path]) -> None:
        df = self.to_frame()
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False, encoding="utf-8")
        logger.info("CSV written: %s (%d rows)", path, len(df))
