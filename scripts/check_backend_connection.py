"""
CLI helper that checks a deployed frontend can reach the EDRS backend.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from edrs.cli import check_connection_main


if __name__ == "__main__":
    sys.exit(check_connection_main())
