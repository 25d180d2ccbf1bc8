"""
tests/integration/test_cli.py
=============================
Full runs of the CLI against a temporary data directory.

Run: pytest tests/integration -v
"""

import json
import logging

import pandas as pd

from bethyw.cli import main


def test_json_output(data_dir, capsys):
    code = main(["--dir", str(data_dir), "-d", "popden,complete-pop", "-j"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)

    assert sorted(out) == ["W06000011", "W06000015", "W06000023"]
    swansea = out["W06000011"]
    assert swansea["names"] == {"eng": "Swansea", "cym": "Abertawe"}
    assert swansea["measures"]["dens"] == {"1991": 610.5, "1992": 612.0}
    assert swansea["measures"]["pop"]["1993"] == 232500.0
    assert out["W06000023"]["measures"] == {}


def test_table_output_with_filters(data_dir, capsys):
    code = main(["--dir", str(data_dir), "-d", "complete-pop", "-a", "cardiff", "-y", "1992-1993"])
    assert code == 0
    out = capsys.readouterr().out
    assert out.startswith("Cardiff / Caerdydd (W06000015)")
    assert "Population (pop)" in out
    assert "1991" not in out
    assert "Swansea" not in out


def test_measure_filter(data_dir, capsys):
    main(["--dir", str(data_dir), "-d", "all", "-m", "dens", "-j"])
    out = json.loads(capsys.readouterr().out)
    assert sorted(out["W06000015"]["measures"]) == ["dens"]


def test_bad_dataset_is_skipped(data_dir, capsys, caplog):
    (data_dir / "popu1009.json").write_text("{broken", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="bethyw"):
        code = main(["--dir", str(data_dir), "-d", "popden,complete-pop,trains", "-j"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert "pop" in out["W06000011"]["measures"]
    errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    # popden is malformed, trains has no file
    assert len(errors) == 2
    assert all(m.startswith("Error importing dataset: ") for m in errors)


def test_invalid_arguments(data_dir, capsys):
    assert main(["--dir", str(data_dir), "-y", "2015-2010"]) == 1
    assert "Error:" in capsys.readouterr().err
    assert main(["--dir", str(data_dir), "-d", "nope"]) == 1
    assert "nope" in capsys.readouterr().err


def test_missing_areas_file(tmp_path, capsys):
    assert main(["--dir", str(tmp_path)]) == 1
    assert "Error:" in capsys.readouterr().err


def test_csv_export(data_dir, tmp_path, capsys):
    out_path = tmp_path / "export" / "result.csv"
    assert main(["--dir", str(data_dir), "-d", "complete-pop", "--csv", str(out_path)]) == 0
    df = pd.read_csv(out_path)
    pop = df[df["measure"] == "pop"]
    assert len(pop) == 6
    assert set(pop["authority_code"]) == {"W06000011", "W06000015"}


def test_data_dir_from_environment(data_dir, monkeypatch, capsys):
    monkeypatch.setenv("BETHYW_DATA_DIR", str(data_dir))
    assert main(["-d", "complete-pop", "-j"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert "pop" in out["W06000015"]["measures"]


def test_undecodable_dataset_is_skipped(data_dir, capsys, caplog):
    (data_dir / "popu1009.json").write_bytes(b'{"value": [{"Localauthority_Code": "W\xff"}]}')
    with caplog.at_level(logging.WARNING, logger="bethyw"):
        code = main(["--dir", str(data_dir), "-d", "popden,complete-pop", "-j"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert "pop" in out["W06000015"]["measures"]
    assert "dens" not in out["W06000015"]["measures"]
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Error importing dataset: Invalid UTF-8") for m in messages)
    assert any("1 of 2 datasets failed to import: popden" in m for m in messages)


def test_undecodable_areas_file(data_dir, capsys):
    (data_dir / "areas.csv").write_bytes(b"Local authority code,Name (eng),Name (cym)\nW1,\xff,x\n")
    assert main(["--dir", str(data_dir), "-d", "complete-pop"]) == 1
    assert "Error: Invalid UTF-8" in capsys.readouterr().err
