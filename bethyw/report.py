"""
Text report
-----------
Renders the loaded data as plain-text tables, one block per area:

    Powys / Powys (W06000023)

    Population (pop)
           1999        2000     Average      Diff.    % Diff.
     100.000000  110.000000  105.000000  10.000000  10.000000

The year table of each measure is laid out by pandas (`DataFrame.to_string`).
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List

import pandas as pd

from .models import Area, Measure

if TYPE_CHECKING:
    from .areas import Areas

NO_AREAS = "<No areas>"
NO_MEASURES = "<no measures>"
NO_DATA = "<no data>"
UNNAMED = "Unnamed"

COL_SPACE = 12


def _fmt(v: float) -> str:
    return f"{v:.6f}"


def measure_frame(measure: Measure) -> pd.DataFrame:
    """One-row frame: a column per year, then Average, Diff. and % Diff."""
    years = measure.years()
    row = [measure.get_value(y) for y in years]
    row += [measure.get_average(), measure.get_difference(), measure.get_difference_as_percentage()]
    columns = [str(y) for y in years] + ["Average", "Diff.", "% Diff."]
    return pd.DataFrame([row], columns=columns)


def render_measure(measure: Measure) -> str:
    lines = [f"{measure.label} ({measure.codename})"]
    if not len(measure):
        lines.append(NO_DATA)
    else:
        lines.append(measure_frame(measure).to_string(index=False, col_space=COL_SPACE, float_format=_fmt))
    return "\n".join(lines)


def area_header(area: Area) -> str:
    names = " / ".join(area.names.values()) or UNNAMED
    return f"{names} ({area.authority_code})"


def render_area(area: Area) -> str:
    lines: List[str] = [area_header(area)]
    if not len(area):
        lines.append(NO_MEASURES)
        return "\n".join(lines)
    for codename in sorted(area.measures):
        lines.append("")
        lines.append(render_measure(area.measures[codename]))
    return "\n".join(lines)


def render_areas(areas: "Areas") -> str:
    if not len(areas):
        return NO_AREAS
    return "\n\n".join(render_area(a) for a in areas)
