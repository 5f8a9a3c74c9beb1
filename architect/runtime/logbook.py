"""Operation log and the persistent architect logbook."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import re
import sys
from typing import Callable, Iterator, Optional

from ..constants import LOG_TEMPLATE, LOG_TIME_FORMAT, LOGBOOK_FILE, LOGBOOK_LIMIT
from . import crypto as _crypto

_LEADING_WS = re.compile(r"^[ \t]+", re.MULTILINE)


def format_entry(message: str, moment: datetime) -> str:
    """Render *message* as ``at HH:MM:SS:`` followed by a blank line."""

    stamp = moment.strftime(LOG_TIME_FORMAT)
    return _LEADING_WS.sub("", LOG_TEMPLATE.format(stamp=stamp, message=message))


class OperationLog:
    """Append-only, in-memory list of timestamped operation messages."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now
        self.entries: list[str] = []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"OperationLog({len(self.entries)} entries)"

    def log(self, message: str) -> str:
        entry = format_entry(message, self.clock())
        self.entries.append(entry)
        return entry

    def clear(self) -> None:
        self.entries = []

    def messages(self) -> list[str]:
        """Return the entries without their timestamp header."""

        return [entry.split("\n\n", 1)[-1] for entry in self.entries]


def _logbook_path(filename=None):
    if filename is not None:
        return filename
    return getattr(sys.modules.get("architect.runtime"), "LOGBOOK_FILE", LOGBOOK_FILE)


def build_record(architect) -> dict:
    """Summarise the units an architect has loaded so far."""

    units = [
        {
            "path": unit.path,
            "url": unit.url,
            "hash": unit.source_hash,
            "chained": unit.chained,
            "executed": unit.executed,
        }
        for unit in architect.units
    ]
    digest_source = json.dumps(units, sort_keys=True, separators=(",", ":"))
    return {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "repository": architect.repository,
        "files": list(architect.files),
        "exclusions": sorted(architect.exclusions),
        "units": units,
        "hash": _crypto.digest(digest_source),
        "signature": None,
    }


def record_build(architect, filename=None, *, sign=False) -> dict:
    """Append the architect's loaded units to the logbook, optionally signed."""

    entry = build_record(architect)
    if sign:
        runtime_mod = sys.modules.get("architect.runtime")
        signer = getattr(runtime_mod, "sign_hash", _crypto.sign_hash)
        entry["signature"] = signer(entry["hash"])

    logbook_path = _logbook_path(filename)
    with open(logbook_path, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry) + "\n")

    print(f"  📜 Recorded {len(entry['units'])} unit(s) → {logbook_path}")
    return entry


def read_logbook(filename=None, limit=LOGBOOK_LIMIT) -> list[dict]:
    with open(_logbook_path(filename), "r", encoding="utf-8") as f:
        lines = [line for line in f.readlines() if line.strip()]
    return [json.loads(line) for line in lines[-limit:]]


def show_logbook(filename=None, limit=LOGBOOK_LIMIT):
    """Display recent logbook entries."""

    try:
        entries = read_logbook(filename, limit)
    except FileNotFoundError:
        print("No logbook yet.")
        return []

    print(f"\nArchitect Logbook — last {len(entries)} entries:")
    for e in reversed(entries):
        signed = "signed" if e.get("signature") else "unsigned"
        print(
            f"• {e['timestamp']}  {e['repository'] or '(no repository)'}  "
            f"[{len(e['units'])} unit(s), {signed}]  {e['hash'][:12]}…"
        )
        if e["files"]:
            print(f"    files: {', '.join(e['files'])}")
    return entries


__all__ = [
    "OperationLog",
    "build_record",
    "format_entry",
    "read_logbook",
    "record_build",
    "show_logbook",
]
