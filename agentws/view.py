"""Plain-text rendering of the dashboard popup: header, agent list, details and footer."""

from __future__ import annotations

import subprocess
import textwrap
from dataclasses import dataclass

from agentws.app import (
    App,
    CreateField,
    DormantDividerRow,
    DormantRow,
    HeaderRow,
    Mode,
    PaneRow,
    Row,
    displayed_line_index,
    injects_blank_before,
    is_selectable,
    total_displayed_lines,
)
from agentws.model import Status
from agentws.textfmt import (
    DORMANT_GLYPH,
    NO_VALUE,
    PARKED_GLYPH,
    PINNED_GLYPH,
    humanize_age,
    humanize_created,
    status_glyph,
    status_label,
    truncate,
)

_SELECTED_EDGE = "▌"
_SEPARATOR = "  ·  "
_EMPTY_LIST_TEXT = (
    "No agents tracked yet. "
    "Wire hooks via `aw install hooks` and start an agent inside a tmux pane."
)


@dataclass(frozen=True)
class _Rect:
    x: int
    y: int
    w: int
    h: int

    @property
    def empty(self) -> bool:
        return self.w <= 0 or self.h <= 0


class _Canvas:
    """A grid of single-cell characters."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)
        self.grid = [[" "] * self.width for _ in range(self.height)]

    def text(self, x: int, y: int, text: str, limit: int) -> None:
        if not 0 <= y < self.height or limit <= 0:
            return
        for offset, char in enumerate(text[:limit]):
            col = x + offset
            if 0 <= col < self.width:
                self.grid[y][col] = char

    def to_text(self) -> str:
        return "\n".join("".join(row).rstrip() for row in self.grid)


def _draw_block(canvas: _Canvas, rect: _Rect, title: str, padding: int) -> _Rect:
    """Draw a rounded, titled border and return the padded inner area."""
    if rect.w < 2 or rect.h < 2:
        return _Rect(rect.x, rect.y, 0, 0)
    inner_w = rect.w - 2
    canvas.text(rect.x, rect.y, "╭" + "─" * inner_w + "╮", rect.w)
    for row in range(rect.y + 1, rect.y + rect.h - 1):
        canvas.text(rect.x, row, "│", 1)
        canvas.text(rect.x + rect.w - 1, row, "│", 1)
    canvas.text(rect.x, rect.y + rect.h - 1, "╰" + "─" * inner_w + "╯", rect.w)
    canvas.text(rect.x + 1, rect.y, title, inner_w)
    return _Rect(
        rect.x + 1 + padding,
        rect.y + 1,
        max(inner_w - 2 * padding, 0),
        rect.h - 2,
    )


def _wrap(lines: list[str], width: int, trim: bool) -> list[str]:
    out: list[str] = []
    for line in lines:
        if trim:
            line = line.strip()
        if len(line) <= width:
            out.append(line)
            continue
        pieces = textwrap.wrap(
            line, width, replace_whitespace=False, break_long_words=True
        )
        out.extend(pieces or [""])
    return out


def _paragraph(
    canvas: _Canvas,
    rect: _Rect,
    lines: list[str],
    *,
    wrap: bool = False,
    trim: bool = False,
    scroll: int = 0,
) -> None:
    if rect.empty:
        return
    if wrap:
        lines = _wrap(lines, rect.w, trim)
    for row, line in enumerate(lines[scroll:scroll + rect.h]):
        canvas.text(rect.x, rect.y + row, line, rect.w)


def render(app: App, width: int, height: int) -> str:
    """Render the popup into ``height`` lines of at most ``width`` cells.

    Trailing blanks are stripped from each line. Updates ``app.scroll_offset``
    so the selected row stays in view.
    """
    canvas = _Canvas(width, height)
    inner_x, inner_w = 1, max(width - 2, 0)
    if height >= 1:
        canvas.text(inner_x, 0, _header_text(app), inner_w)
    if height >= 2:
        canvas.text(inner_x, height - 1, footer_text(app), inner_w)
    body = _Rect(inner_x, 1, inner_w, max(height - 2, 0))
    _render_body(canvas, body, app)
    return canvas.to_text()


def _header_text(app: App) -> str:
    working, waiting, idle = app.snapshot.counts()
    text = "aw dash    "
    if working > 0:
        text += f"{status_glyph(Status.WORKING)} {working} working   "
    if waiting > 0:
        text += f"{status_glyph(Status.WAITING)} {waiting} waiting   "
    if idle > 0:
        text += f"{status_glyph(Status.IDLE)} {idle} idle"
    if working == 0 and waiting == 0 and idle == 0:
        text += "no agents tracked"
    return text


def _render_body(canvas: _Canvas, area: _Rect, app: App) -> None:
    if area.empty:
        return
    if app.mode is Mode.CREATE:
        _render_create(canvas, area, app)
        return
    left_pct = 45 if app.show_preview else 60
    left_w = area.w * left_pct // 100
    _render_list(canvas, _Rect(area.x, area.y, left_w, area.h), app)
    _render_detail(canvas, _Rect(area.x + left_w, area.y, area.w - left_w, area.h), app)


def _render_create(canvas: _Canvas, area: _Rect, app: App) -> None:
    form = app.create
    if form is None:
        return
    inner = _draw_block(canvas, area, " New workspace ", 2)
    cursor = "│" if form.field is CreateField.NAME else " "
    lines = ["", f"Name:  {form.name}{cursor}", ""]
    if not form.bases:
        lines.append("Base:  (no bases configured — run `aw init` first)")
    else:
        chosen = form.bases[form.base_idx] if 0 <= form.base_idx < len(form.bases) else ""
        lines.append(f"Base:  ▾ {chosen}")
        if form.field is CreateField.BASE:
            for idx, base in enumerate(form.bases):
                marker = "▌ " if idx == form.base_idx else "  "
                lines.append(f"       {marker}{base}")
    if form.error is not None:
        lines.extend(["", f"❌ {form.error}"])
    _paragraph(canvas, inner, lines, wrap=True)


def _render_list(canvas: _Canvas, area: _Rect, app: App) -> None:
    inner = _draw_block(canvas, area, " Agents ", 1)
    if not app.rows:
        _paragraph(canvas, inner, [_EMPTY_LIST_TEXT], wrap=True, trim=True)
        return

    lines: list[str] = []
    prior_selectable = False
    for idx, row in enumerate(app.rows):
        if injects_blank_before(prior_selectable, row):
            lines.append("")
        lines.append(line_for_row(row, idx == app.selected))
        prior_selectable = is_selectable(row)

    viewport = inner.h
    total = total_displayed_lines(app.rows)
    selected_line = displayed_line_index(app.rows, app.selected)
    offset = min(app.scroll_offset, total - viewport) if total > viewport else 0
    if selected_line < offset:
        offset = selected_line
    elif viewport > 0 and selected_line >= offset + viewport:
        offset = selected_line + 1 - viewport
    app.scroll_offset = offset

    _paragraph(canvas, inner, lines, scroll=offset)


def line_for_row(row: Row, selected: bool) -> str:
    """Text of one list row; a selected row starts with an accent bar."""
    edge = _SELECTED_EDGE if selected else " "
    if isinstance(row, HeaderRow):
        arrow = "▸" if row.collapsed else "▾"
        pin = f" {PINNED_GLYPH}" if row.pinned else ""
        return f"{edge} {arrow} {row.workspace}{pin}   {row.session_hint}"
    if isinstance(row, DormantDividerRow):
        return f"{edge} ─ Dormant ───────────────────"
    if isinstance(row, DormantRow):
        ws = row.workspace
        pin = f"  {PINNED_GLYPH}" if ws.pinned else ""
        return (
            f"{edge}   {DORMANT_GLYPH}  {truncate(ws.name, 20):<20} "
            f"{truncate(ws.base, 10):<10}  {humanize_created(ws.created)}{pin}"
        )
    pane = row.pane
    prompt = truncate(pane.last_prompt, 40) if pane.last_prompt else ""
    label = pane.label or pane.agent
    parked = f" {PARKED_GLYPH} parked" if pane.parked else ""
    return (
        f"{edge}   {status_glyph(pane.status)}  {truncate(label, 18):<18} "
        f"{humanize_age(pane.last_activity):<4}  {prompt}{parked}"
    )


def _kv(key: str, value: str) -> str:
    return f"{key:<14}{value}"


def _or_dash(value: str) -> str:
    return value or NO_VALUE


def _capture_pane(pane_id: str, lines: int) -> str:
    try:
        completed = subprocess.run(
            ["tmux", "capture-pane", "-p", "-t", pane_id, "-S", f"-{lines}"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return ""
    if completed.returncode != 0:
        return ""
    return completed.stdout.decode("utf-8", errors="replace")


def _render_detail(canvas: _Canvas, area: _Rect, app: App) -> None:
    dormant = app.selected_dormant()
    if dormant is not None:
        title = " Workspace "
    elif app.show_preview:
        title = " Preview "
    else:
        title = " Details "
    inner = _draw_block(canvas, area, title, 1)

    if dormant is not None:
        lines = [
            _kv("name", dormant.name),
            _kv("base", dormant.base),
            _kv("created", _or_dash(dormant.created)),
            _kv("cwd", NO_VALUE),
            _kv("session", f"aw-{dormant.name} (will be created)"),
            "",
            "↵ open this workspace in a new tmux session",
        ]
        _paragraph(canvas, inner, lines, wrap=True)
        return

    pane = app.selected_pane()
    if pane is None:
        return

    if app.show_preview:
        content = _capture_pane(pane.pane_id, max(inner.h, 20))
        _paragraph(canvas, inner, content.splitlines())
        return

    lines = [
        _kv("pane", pane.pane_id),
        _kv("agent", pane.agent),
        _kv("status", status_label(pane.status)),
        _kv("workspace", _or_dash(pane.workspace)),
        _kv("session", _or_dash(pane.session)),
        _kv("cwd", _or_dash(pane.cwd)),
        _kv("last event", _or_dash(pane.last_event)),
        _kv("last activity", humanize_age(pane.last_activity)),
        _kv("last prompt", _or_dash(pane.last_prompt)),
        _kv("parked", "yes" if pane.parked else "no"),
    ]
    _paragraph(canvas, inner, lines, wrap=True)


def _key_hints(pairs: list[tuple[str, str]]) -> str:
    return _SEPARATOR.join(f"{key} {action}" for key, action in pairs)


def footer_text(app: App) -> str:
    """Bottom line: the filter prompt or the key hints for the current mode."""
    if app.mode is Mode.FILTER:
        return f"/{app.filter}  ↵ confirm · esc clear"
    if app.mode is Mode.CREATE:
        return _key_hints([("↵", "create"), ("⇥", "switch field"), ("esc", "cancel")])
    enter_action = "open" if app.selected_dormant() is not None else "jump"
    return _key_hints(
        [
            ("↵", enter_action),
            ("⇥", "preview"),
            ("/", "filter"),
            ("c", "new"),
            ("p", "park"),
            ("P", "pin"),
            ("n", "next-ready"),
            ("r", "refresh"),
            ("H", "dormant"),
            ("␣", "(un)collapse"),
            ("q", "quit"),
        ]
    )