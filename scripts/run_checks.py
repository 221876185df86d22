#!/usr/bin/env python3
"""Run repository checks: ruff, pyright, and the pytest suite.

Exits non-zero as soon as one check fails so CI can observe the status.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys

PATHS = ["image_reencoder", "tests", "scripts"]


def run(cmd: list[str], env: dict[str, str] | None = None) -> int:
    print("=>", " ".join(cmd))
    res = subprocess.run(cmd, check=False, env=env)
    return res.returncode


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--fix", action="store_true", help="Let ruff apply fixes")
    parser.add_argument("--no-types", action="store_true", help="Skip pyright")
    parser.add_argument("--no-tests", action="store_true", help="Skip running pytest")
    args = parser.parse_args()

    ruff = [sys.executable, "-m", "ruff", "check", *PATHS]
    if args.fix:
        ruff.append("--fix")
    rc = run(ruff)
    if rc != 0:
        print("ruff failed")
        return rc

    if not args.no_types:
        rc = run([sys.executable, "-m", "pyright", "image_reencoder"])
        if rc != 0:
            print("pyright failed")
            return rc

    if not args.no_tests:
        # Qt worker tests must not need a display
        env = dict(os.environ, QT_QPA_PLATFORM=os.environ.get("QT_QPA_PLATFORM", "offscreen"))
        rc = run([sys.executable, "-m", "pytest", "-q", "tests"], env=env)
        if rc != 0:
            print("pytest failed")
            return rc

    print("All checks passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
