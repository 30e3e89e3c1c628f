#!/usr/bin/env python3
from __future__ import annotations

import json
import os
import subprocess
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def run(cmd: list[str], env: dict[str, str]) -> int:
    print("$", " ".join(cmd))
    return subprocess.run(cmd, check=False, cwd=ROOT, env=env).returncode


def main() -> int:
    env = dict(os.environ)
    # Qt widget tests need no display.
    env.setdefault("QT_QPA_PLATFORM", "offscreen")

    code = run([sys.executable, "-m", "unittest", "discover", "-s", "tests", "-p", "test_*.py"], env)
    if code != 0:
        print("\n❌ dev_check failed (tests)")
        return code

    with tempfile.TemporaryDirectory() as tmp:
        sizes = Path(tmp) / "sizes.json"
        sizes.write_text(json.dumps([[1600, 1200], [1200, 1600], [1920, 1080], [640, 480]]), encoding="utf-8")
        code = run([sys.executable, "-m", "app.fluidgrid.main", "--sizes", str(sizes), "--width", "1200"], env)
    if code != 0:
        print("\n❌ dev_check failed (layout smoke)")
        return code

    print("\n✅ dev_check passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
