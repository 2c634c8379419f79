"""
CLI helper running the end-to-end deployment checks (backend, frontend, CORS, auth).
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from edrs.cli import check_deployment_main


if __name__ == "__main__":
    sys.exit(check_deployment_main())
