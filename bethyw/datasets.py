"""
Dataset registry
================

Every dataset Beth Yw? knows how to import is described by an
`InputFileSource`: a file name, the parser for its format and a column
mapping. The column mapping tells the parser which column (CSV) or key
(JSON) plays which role, e.g. which JSON key holds the year.

Two roles are different: for SINGLE_MEASURE_CODE and SINGLE_MEASURE_NAME the
mapped value is the measure code / label itself. They are used by files that
contain a single measure and therefore never name it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from .errors import InvalidArgumentError


class SourceColumn(Enum):
    AUTH_CODE = "auth_code"
    AUTH_NAME_ENG = "auth_name_eng"
    AUTH_NAME_CYM = "auth_name_cym"
    MEASURE_CODE = "measure_code"
    MEASURE_NAME = "measure_name"
    SINGLE_MEASURE_CODE = "single_measure_code"
    SINGLE_MEASURE_NAME = "single_measure_name"
    YEAR = "year"
    VALUE = "value"


class SourceDataType(Enum):
    AUTHORITY_CODE_CSV = "authority_code_csv"
    AUTHORITY_BY_YEAR_CSV = "authority_by_year_csv"
    WELSH_STATS_JSON = "welsh_stats_json"
    BETHYW_JSON = "bethyw_json"


SourceColumnMapping = Mapping[SourceColumn, str]


@dataclass(frozen=True)
class InputFileSource:
    """One importable dataset file."""
    name: str
    code: str
    file: str
    parser: SourceDataType
    cols: Dict[SourceColumn, str] = field(default_factory=dict)


AREAS = InputFileSource(
    name="Areas",
    code="areas",
    file="areas.csv",
    parser=SourceDataType.AUTHORITY_CODE_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.AUTH_NAME_ENG: "Name (eng)",
        SourceColumn.AUTH_NAME_CYM: "Name (cym)",
    },
)

POPDEN = InputFileSource(
    name="Population density",
    code="popden",
    file="popu1009.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Localauthority_Code",
        SourceColumn.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Measure_Code",
        SourceColumn.MEASURE_NAME: "Measure_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

BIZ = InputFileSource(
    name="Active Businesses",
    code="biz",
    file="econ0080.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Area_Code",
        SourceColumn.AUTH_NAME_ENG: "Area_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Variable_Code",
        SourceColumn.MEASURE_NAME: "Variable_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

AQI = InputFileSource(
    name="Air Quality Indicators",
    code="aqi",
    file="envi0201.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Area_Code",
        SourceColumn.AUTH_NAME_ENG: "Area_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Pollutant_ItemName_ENG",
        SourceColumn.MEASURE_NAME: "Pollutant_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

TRAINS = InputFileSource(
    name="Rail passenger journeys",
    code="trains",
    file="tran0152.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "LocalAuthority_Code",
        SourceColumn.AUTH_NAME_ENG: "LocalAuthority_ItemName_ENG",
        SourceColumn.SINGLE_MEASURE_CODE: "rail",
        SourceColumn.SINGLE_MEASURE_NAME: "Rail passenger journeys",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

COMPLETE_AREA = InputFileSource(
    name="Land area (complete)",
    code="complete-area",
    file="complete-popu1009-area.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.SINGLE_MEASURE_CODE: "area",
        SourceColumn.SINGLE_MEASURE_NAME: "Land area (sq. km)",
    },
)

COMPLETE_POP = InputFileSource(
    name="Population (complete)",
    code="complete-pop",
    file="complete-popu1009-pop.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.SINGLE_MEASURE_CODE: "pop",
        SourceColumn.SINGLE_MEASURE_NAME: "Population",
    },
)

COMPLETE_POPDEN = InputFileSource(
    name="Population density (complete)",
    code="complete-popden",
    file="complete-popu1009-opden.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.SINGLE_MEASURE_CODE: "dens",
        SourceColumn.SINGLE_MEASURE_NAME: "Population density (persons per sq. km)",
    },
)

DATASETS: List[InputFileSource] = [
    POPDEN, BIZ, AQI, TRAINS, COMPLETE_AREA, COMPLETE_POP, COMPLETE_POPDEN,
]


def find_dataset(code: str) -> InputFileSource:
    for src in DATASETS:
        if src.code == code:
            return src
    raise InvalidArgumentError(f"No dataset matches key: {code}")


def parse_datasets_arg(values: Optional[Sequence[str]]) -> List[InputFileSource]:
    """Resolve the --datasets argument; omitted or 'all' selects every dataset."""
    if not values:
        return list(DATASETS)
    codes = [v.strip() for value in values for v in value.split(",") if v.strip()]
    if not codes or codes[0].lower() == "all":
        return list(DATASETS)
    return [find_dataset(c) for c in codes]
