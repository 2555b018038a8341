from __future__ import annotations

from pathlib import Path

RULE_CONFIG_SCHEMA_VERSION = "1"
REPORT_SCHEMA_VERSION = "1"

# Window changes carrying this name during a TO_FRONT are the transient
# starting window, not the app being launched.
SPLASH_SCREEN_PATTERN = r"Splash Screen ([a-z]|\.)+"

TRANSITION_TYPES = {
    "NONE",
    "OPEN",
    "CLOSE",
    "TO_FRONT",
    "TO_BACK",
    "RELAUNCH",
    "CHANGE",
    "KEYGUARD_GOING_AWAY",
    "KEYGUARD_OCCLUDE",
    "KEYGUARD_UNOCCLUDE",
    "PIP",
    "WAKE",
    "SLEEP",
}

# Config key whose rules apply to every transition type.
ALL_TRANSITIONS_KEY = "ALL"

WM_TRACE_FILE = "wm_trace.jsonl"
LAYERS_TRACE_FILE = "layers_trace.jsonl"
TRANSITIONS_TRACE_FILE = "transition_trace.jsonl"

DEFAULT_REPORT_JSON = Path("report.json")
DEFAULT_REPORT_MD = Path("report.md")

EXIT_SUCCESS = 0
EXIT_ASSERTION_FAILURE = 1
EXIT_INTERNAL_ERROR = 2
