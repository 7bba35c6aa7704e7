"""Root conftest.py: the local src tree wins over any installed actionkit."""

from __future__ import annotations

import sys
from pathlib import Path

_src_root = str(Path(__file__).parent / "src")
if _src_root not in sys.path:
    sys.path.insert(0, _src_root)
