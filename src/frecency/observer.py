"""
Frecency Access Observer - PostToolUse Hook

Reads an editor tool-use event from stdin and records every file it
touched. Fire-and-forget: never blocks or fails the editor.

Hook config:
    {"command": "frecency-capture"}
"""

import json
import os
import sys
from typing import List

from .config import FrecencyConfig
from .errors import FrecencyError
from .tracker import FrecencyTracker

# Tool input fields holding a single path
PATH_FIELDS = ['file_path', 'path', 'file', 'notebook_path']

# Limit per event
MAX_FILES = 20


def extract_files(data: dict) -> List[str]:
    """
    Extract normalized absolute file paths from a tool event.

    Glob patterns and relative paths are skipped.
    """
    tool_input = data.get('tool_input') or {}
    if not isinstance(tool_input, dict):
        return []

    candidates = []
    for key in PATH_FIELDS:
        val = tool_input.get(key)
        if val and isinstance(val, str):
            candidates.append(val)

    # Array of paths
    for p in tool_input.get('paths') or []:
        if p and isinstance(p, str):
            candidates.append(p)

    files = []
    for path in candidates:
        if '*' in path or not os.path.isabs(path):
            continue
        path = os.path.normpath(path)
        if path not in files:
            files.append(path)

    return files[:MAX_FILES]


def capture(data: dict, tracker: FrecencyTracker) -> List[str]:
    """
    Record the files of one tool event and persist.

    Returns:
        Files that were recorded (excluded ones are dropped)
    """
    recorded = [path for path in extract_files(data) if tracker.record_access(path)]
    if recorded:
        tracker.save()
    return recorded


def main():
    # Debug mode: FRECENCY_DEBUG=1 frecency-capture < event.json
    debug = os.environ.get("FRECENCY_DEBUG", "0") == "1"

    try:
        data = json.loads(sys.stdin.read())
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        if debug:
            print(f"[frecency] JSON parse error: {e}", file=sys.stderr)
        return
    if not isinstance(data, dict):
        return

    try:
        tracker = FrecencyTracker.from_config(FrecencyConfig.from_env())
        tracker.load()
        recorded = capture(data, tracker)
    except (FrecencyError, ValueError) as e:
        if debug:
            print(f"[frecency] {type(e).__name__}: {e}", file=sys.stderr)
        return  # Never block the editor

    if debug:
        print(f"[frecency] Recorded: {recorded}", file=sys.stderr)


if __name__ == "__main__":
    main()
