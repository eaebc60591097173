"""Minimal repo-local smoke test.

Imports the CLI and HTTP entry points, then scans this checkout with the
same engine tutorials are built from. No network calls, model calls, git
operations or writes.

Run:
  python scripts/smoke_test.py
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path


def main() -> int:
    print("[smoke_test.py] python:", sys.version)

    if sys.version_info < (3, 12):
        raise SystemExit("Python >= 3.12 is required")

    pkg = importlib.import_module("autotutor")
    print("[smoke_test.py] autotutor.__version__ =", pkg.__version__)

    importlib.import_module("autotutor.cli.main")
    importlib.import_module("autotutor.server.app")

    pipeline = importlib.import_module("autotutor.lib.pipeline")
    summary = pipeline.summarize_repository(Path(__file__).resolve().parent.parent)
    print(
        "[smoke_test.py] scanned",
        summary["structure"]["total_files"],
        "files; top:",
        ", ".join(summary["main_files"][:5]),
    )
    if not summary["main_files"]:
        raise SystemExit("scan found no files")

    print("[smoke_test.py] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
