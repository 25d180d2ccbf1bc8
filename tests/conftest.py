"""
tests/conftest.py
=================
Shared pytest fixtures: small in-memory versions of each dataset format and
a helper that writes them into a temporary data directory.
"""

import json
import sys
from pathlib import Path

import pytest

# make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from bethyw.config import get_settings  # noqa: E402


AREAS_CSV = (
    "Local authority code,Name (eng),Name (cym)\n"
    "W06000011,Swansea,Abertawe\n"
    "W06000015,Cardiff,Caerdydd\n"
    "W06000023,Powys,Powys\n"
)

POP_CSV = (
    "Local authority code,1991,1992,1993\n"
    "W06000011,230000,231000,232500\n"
    "W06000015,300000,305000,310000\n"
)


def _record(code, name, measure, label, year, value):
    return {
        "Localauthority_Code": code,
        "Localauthority_ItemName_ENG": name,
        "Measure_Code": measure,
        "Measure_ItemName_ENG": label,
        "Year_Code": year,
        "Data": value,
    }


POPDEN_JSON = {
    "odata.metadata": "http://open.statswales.gov.wales/en-gb/dataset/popu1009",
    "value": [
        _record("W06000011", "Swansea", "Dens", "Population density", "1991", 610.5),
        _record("W06000011", "Swansea", "Dens", "Population density", "1992", 612.0),
        _record("W06000015", "Cardiff", "Dens", "Population density", "1991", 2100.0),
        _record("W06000015", "Cardiff", "Area", "Land area", "1991", 140.0),
    ],
}


@pytest.fixture
def areas_csv() -> str:
    return AREAS_CSV


@pytest.fixture
def pop_csv() -> str:
    return POP_CSV


@pytest.fixture
def popden_json() -> str:
    return json.dumps(POPDEN_JSON)


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """Temporary data directory with areas.csv, popu1009.json and the population CSV."""
    (tmp_path / "areas.csv").write_text(AREAS_CSV, encoding="utf-8")
    (tmp_path / "popu1009.json").write_text(json.dumps(POPDEN_JSON), encoding="utf-8")
    (tmp_path / "complete-popu1009-pop.csv").write_text(POP_CSV, encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
