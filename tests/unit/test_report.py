"""
tests/unit/test_report.py
=========================
Plain-text rendering of measures, areas and the whole collection.
"""

from bethyw.areas import Areas
from bethyw.models import Area, Measure
from bethyw.report import area_header, render_area, render_areas, render_measure


def _powys() -> Area:
    area = Area("W06000023")
    area.set_name("eng", "Powys")
    area.set_name("cym", "Powys")
    pop = Measure("pop", "Population")
    pop.set_value(1999, 100)
    pop.set_value(2000, 110)
    area.set_measure("pop", pop)
    dens = Measure("dens", "Density")
    dens.set_value(1999, 25)
    area.set_measure("dens", dens)
    return area


def test_render_measure_table():
    text = render_measure(_powys().get_measure("pop"))
    lines = text.splitlines()
    assert lines[0] == "Population (pop)"
    assert lines[1].split() == ["1999", "2000", "Average", "Diff.", "%", "Diff."]
    assert lines[2].split() == ["100.000000", "110.000000", "105.000000", "10.000000", "10.000000"]


def test_render_empty_measure():
    assert render_measure(Measure("pop", "Population")) == "Population (pop)\n<no data>"


def test_area_header_and_fallbacks():
    assert area_header(_powys()) == "Powys / Powys (W06000023)"
    empty = Area("W06000099")
    assert area_header(empty) == "Unnamed (W06000099)"
    assert render_area(empty) == "Unnamed (W06000099)\n<no measures>"


def test_measures_rendered_in_codename_order():
    text = render_area(_powys())
    assert text.index("(dens)") < text.index("(pop)")
    assert str(_powys()) == text


def test_render_areas():
    areas = Areas()
    assert render_areas(areas) == "<No areas>"
    areas.set_area("W06000023", _powys())
    areas.set_area("W06000011", Area("W06000011"))
    text = render_areas(areas)
    assert text.index("W06000011") < text.index("W06000023")
    assert str(areas) == text
