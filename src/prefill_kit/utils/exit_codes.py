"""Centralized exit-code contract for all CLI commands.

Code  Meaning
----  -------
  0   Success — a result was produced
  1   No result — nothing to construct, URL not parsable, input rejected
  2   Error — usage error, missing file, runtime failure
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    NO_RESULT = 1
    ERROR = 2
