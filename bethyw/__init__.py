"""
Beth Yw? package
================

Beth Yw? ("What is?") loads Welsh Government statistics files and merges
them into one record per local authority.

- The CLI entry point is in `bethyw/cli.py`.
- The data model is in `bethyw/models.py` (Measure, Area) and
  `bethyw/areas.py` (Areas).
- Dataset parsing is in `bethyw/loader.py`; known datasets in
  `bethyw/datasets.py`.
"""

__version__ = '0.3.0'
