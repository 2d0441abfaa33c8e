"""
Run the whist test suite from a fresh checkout.

Usage (from project root):

    python tests.py                 # whole suite
    python tests.py -k bidding -x   # extra arguments go straight to pytest

Installs the package with its dev extra first when pytest or numpy cannot be
found, so the suite always runs against the editable install.
"""
from __future__ import annotations

import importlib.util
import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent
REQUIRED = ("pytest", "numpy", "whist")


def missing_modules() -> list[str]:
    return [name for name in REQUIRED if importlib.util.find_spec(name) is None]


def install_dev() -> None:
    missing = ", ".join(missing_modules())
    print(f"Missing {missing}; installing whist-rules with .[dev] ...")
    subprocess.check_call(
        [sys.executable, "-m", "pip", "install", "-e", ".[dev]"],
        cwd=str(ROOT),
    )


def main(argv: list[str]) -> int:
    if missing_modules():
        install_dev()
    return subprocess.call([sys.executable, "-m", "pytest", *argv], cwd=str(ROOT))


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
