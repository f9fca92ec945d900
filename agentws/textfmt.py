"""Text formatting for the dashboard: ages, dates, glyphs and the sidebar."""

from __future__ import annotations

import time

from agentws.model import PaneState, Snapshot, Status

PARKED_GLYPH = "⏸"
PINNED_GLYPH = "★"
DORMANT_GLYPH = "◇"
NO_VALUE = "—"

_STATUS_GLYPHS = {
    Status.WORKING: "◐",
    Status.WAITING: "●",
    Status.IDLE: "○",
}

_RULE = " " + "─" * 31 + "\n"


def truncate(text: str, limit: int) -> str:
    """Shorten ``text`` to at most ``limit`` characters, ending in an ellipsis."""
    if len(text) <= limit:
        return text
    if limit < 1:
        raise ValueError("limit must be at least 1 to truncate")
    return text[: limit - 1] + "…"


def days_from_civil(year: int, month: int, day: int) -> int | None:
    """Days since the Unix epoch for a proleptic Gregorian date.

    Returns None when the month or day is out of range.
    """
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    if month <= 2:
        year -= 1
    era = year // 400
    yoe = year - era * 400
    shifted = month - 3 if month > 2 else month + 9
    doy = (153 * shifted + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146_097 + doe - 719_468


def _parse_int(chunk: bytes, *, signed: bool = False) -> int | None:
    text = chunk.decode("ascii", errors="replace")
    digits = text
    if digits[:1] == "+" or (signed and digits[:1] == "-"):
        digits = digits[1:]
    if not digits or not all("0" <= c <= "9" for c in digits):
        return None
    return int(text)


def parse_iso_like(text: str) -> int | None:
    """Parse ``YYYY-MM-DDTHH:MM:SS`` or ``YYYY-MM-DD HH:MM:SS`` as UTC epoch seconds.

    Anything after the seconds is ignored. Returns None when the text does
    not have that shape or names an invalid or pre-epoch moment.
    """
    raw = text.encode("utf-8")
    if len(raw) < 19:
        return None
    if raw[4:5] != b"-" or raw[7:8] != b"-" or raw[10:11] not in (b"T", b" "):
        return None
    if raw[13:14] != b":" or raw[16:17] != b":":
        return None
    year = _parse_int(raw[0:4], signed=True)
    month = _parse_int(raw[5:7])
    day = _parse_int(raw[8:10])
    hour = _parse_int(raw[11:13])
    minute = _parse_int(raw[14:16])
    second = _parse_int(raw[17:19])
    if None in (year, month, day, hour, minute, second):
        return None
    days = days_from_civil(year, month, day)
    if days is None:
        return None
    seconds = days * 86_400 + hour * 3600 + minute * 60 + second
    return seconds if seconds >= 0 else None


def humanize_age(epoch: int, now: float | None = None) -> str:
    """Compact age of an epoch timestamp, such as ``5s``, ``3m``, ``2h`` or ``4d``.

    An epoch of 0 or less means "never" and gives a dash.
    """
    if epoch <= 0:
        return NO_VALUE
    current = int(time.time() if now is None else now)
    delta = max(current - epoch, 0)
    if delta < 60:
        return f"{delta}s"
    if delta < 3600:
        return f"{delta // 60}m"
    if delta < 86_400:
        return f"{delta // 3600}h"
    return f"{delta // 86_400}d"


def humanize_created(raw: str) -> str:
    """Relative age of a workspace's free-form creation date.

    ISO-like dates become an age; anything else is shown truncated.
    """
    raw = raw.strip()
    if not raw or raw == "unknown":
        return NO_VALUE
    epoch = parse_iso_like(raw)
    if epoch is not None:
        return humanize_age(epoch)
    return truncate(raw, 16)


def status_glyph(status: Status) -> str:
    """Single-character marker for a status."""
    return _STATUS_GLYPHS[Status(status)]


def status_label(status: Status) -> str:
    """Lower-case word for a status."""
    return Status(status).value


def _sidebar_pane_line(pane: PaneState) -> str:
    parked = f" {PARKED_GLYPH}" if pane.parked else ""
    agent = truncate(pane.agent, 7).ljust(7)
    age = humanize_age(pane.last_activity).ljust(4)
    return f"    {status_glyph(pane.status)} {agent} {age}{parked}\n"


def render_sidebar_text(snapshot: Snapshot) -> str:
    """Plain-text sidebar: status counts, panes grouped by workspace, key hints."""
    working, waiting, idle = snapshot.counts()
    parts = [
        f" {status_glyph(Status.WORKING)} {working}"
        f"  {status_glyph(Status.WAITING)} {waiting}"
        f"  {status_glyph(Status.IDLE)} {idle}\n",
        _RULE,
    ]
    if not snapshot.entries:
        parts.append(" no agents tracked\n")
    else:
        by_workspace: dict[str, list[PaneState]] = {}
        for entry in snapshot.entries:
            by_workspace.setdefault(entry.workspace, []).append(entry)
        for workspace in sorted(by_workspace):
            parts.append(f" ▾ {workspace or '(no workspace)'}\n")
            parts.extend(_sidebar_pane_line(p) for p in by_workspace[workspace])
    parts.append("\n")
    parts.append(_RULE)
    parts.append(" prefix+a → popup (j/k jump)\n")
    parts.append(" prefix+N → next waiting agent\n")
    return "".join(parts)