#!/usr/bin/env python3

from __future__ import annotations

import os
import subprocess
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

EXAMPLES = [
    {
        "file": "examples/00_hello_world.bf",
        "input": None,
        "stdout": b"Hello, world!",
        "returncode": 0,
    },
    {
        "file": "examples/01_echo.bf",
        "input": "65\n",
        "stdout": b"A",
        "returncode": 0,
    },
    {
        "file": "examples/02_add.bf",
        "input": "30\n12\n",
        "stdout": b"*",
        "returncode": 0,
    },
    {
        "file": "examples/03_multiply.bf",
        "input": None,
        "stdout": b"@",
        "returncode": 0,
    },
    {
        "file": "examples/04_underflow.bf",
        "input": None,
        "stdout": b"\x01\x00",
        "returncode": 2,
    },
]


def _run_example(path: str, *, input_data: str | None, timeout_s: float = 10.0) -> dict:
    cmd = [sys.executable, "-m", "bfvm.cli", path]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [os.path.join(ROOT, "src"), env.get("PYTHONPATH")]))
    try:
        p = subprocess.run(
            cmd,
            input=(input_data or "").encode(),
            capture_output=True,
            cwd=ROOT,
            env=env,
            timeout=timeout_s,
        )
        return {
            "returncode": p.returncode,
            "stdout": p.stdout,
            "stderr": p.stderr.decode(errors="replace"),
            "timeout": False,
        }
    except subprocess.TimeoutExpired as e:
        return {
            "returncode": None,
            "stdout": e.stdout or b"",
            "stderr": (e.stderr or b"").decode(errors="replace") + "\n[TIMEOUT]",
            "timeout": True,
        }


def main() -> int:
    print("=== bfvm Examples Verification ===")

    any_fail = False
    for ex in EXAMPLES:
        r = _run_example(ex["file"], input_data=ex["input"])
        passed = r["returncode"] == ex["returncode"] and r["stdout"] == ex["stdout"]
        status = "PASS" if passed else "FAIL"
        print(f"\n[{status}] {ex['file']}")

        if passed:
            continue

        any_fail = True
        print(f"Expected: {ex['stdout']!r} (exit {ex['returncode']})")
        print(f"Got:      {r['stdout']!r} (exit {r['returncode']})  Timeout: {r['timeout']}")
        print("--- stderr ---")
        print(r["stderr"][:2000])

    if any_fail:
        print("\nSome examples FAILED.")
        return 1

    print("\nAll examples passed (output checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
