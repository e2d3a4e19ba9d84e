"""Exit code contract tests — enforce stable CLI exit semantics.

Code  Meaning
----  -------
  0   Success — a result was produced
  1   No result — nothing to construct, URL not parsable, input rejected
  2   Error — usage error, missing file, runtime failure
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from prefill_kit.utils.exit_codes import ExitCode

REPO_ROOT = Path(__file__).resolve().parents[1]
FORM = "https://form.gov.sg/67488b8b1210a416d2d7cb5b"


def _run(*args: str, stdin: str | None = None) -> subprocess.CompletedProcess[str]:
    env = {**os.environ}
    env["PYTHONPATH"] = str(REPO_ROOT / "src") + (
        ":" + env.get("PYTHONPATH", "") if env.get("PYTHONPATH") else ""
    )
    return subprocess.run(
        [sys.executable, "-m", "prefill_kit", *args],
        capture_output=True,
        text=True,
        input=stdin,
        env=env,
    )


class TestExitCodeValues:
    def test_values_are_frozen(self) -> None:
        assert [int(c) for c in ExitCode] == [0, 1, 2]


# ── Success ─────────────────────────────────────────────────────────

class TestSuccessReturns0:
    def test_construct(self) -> None:
        r = _run("construct", FORM, "--field", "a=1")
        assert r.returncode == 0, r.stderr
        assert r.stdout.strip() == f"{FORM}?a=1"

    def test_to_row_from_stdin(self) -> None:
        r = _run("to-row", stdin="a\n\nb\n")
        assert r.returncode == 0, r.stderr
        assert r.stdout == "a,b\n"


# ── No result ───────────────────────────────────────────────────────

class TestNoResultReturns1:
    def test_construct_without_fields(self) -> None:
        assert _run("construct", FORM).returncode == 1

    def test_parse_invalid_url(self) -> None:
        assert _run("parse", "not a url").returncode == 1

    def test_batch_rejected_template(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.csv"
        bad.write_text("FieldID,values\nnothex,a\n", encoding="utf-8")
        r = _run("batch", str(bad), "--form-url", FORM)
        assert r.returncode == 1
        assert "Invalid FieldID format" in r.stderr


# ── Errors ──────────────────────────────────────────────────────────

class TestErrorsReturn2:
    def test_unknown_subcommand(self) -> None:
        assert _run("frobnicate").returncode == 2

    def test_missing_required_option(self, tmp_path: Path) -> None:
        assert _run("batch", str(tmp_path / "t.csv")).returncode == 2

    def test_missing_input_file(self, tmp_path: Path) -> None:
        assert _run("to-row", str(tmp_path / "missing.txt")).returncode == 2
