"""Dashboard state machine: visible rows, selection, filter and the create form."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from agentws.fuzzy import fuzzy_score
from agentws.model import DormantWorkspace, PaneState, Snapshot


@dataclass
class HeaderRow:
    """Workspace group header; not selectable."""

    workspace: str
    session_hint: str = ""
    collapsed: bool = False
    pinned: bool = False


@dataclass
class PaneRow:
    """A single live agent pane."""

    pane: PaneState


@dataclass
class DormantDividerRow:
    """Divider above the dormant block; not selectable."""


@dataclass
class DormantRow:
    """A workspace on disk without a live tmux session."""

    workspace: DormantWorkspace


Row = Union[HeaderRow, PaneRow, DormantDividerRow, DormantRow]


class Mode(Enum):
    NORMAL = "normal"
    FILTER = "filter"
    CREATE = "create"


class CreateField(Enum):
    NAME = "name"
    BASE = "base"


@dataclass
class CreateForm:
    """State of the "new workspace" form."""

    name: str = ""
    bases: list[str] = field(default_factory=list)
    base_idx: int = 0
    existing: set[str] = field(default_factory=set)
    field: CreateField = CreateField.NAME
    error: str | None = None


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Jump:
    pane_id: str


@dataclass(frozen=True)
class Park:
    pane_id: str


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class NextReady:
    pass


@dataclass(frozen=True)
class OpenWorkspace:
    name: str


@dataclass(frozen=True)
class CreateWorkspace:
    name: str
    base: str


@dataclass(frozen=True)
class TogglePin:
    workspace: str


Action = Union[
    Continue, Quit, Jump, Park, Refresh, NextReady, OpenWorkspace, CreateWorkspace, TogglePin
]


def is_selectable(row: Row) -> bool:
    """Whether the cursor may rest on ``row``."""
    return isinstance(row, (PaneRow, DormantRow))


def injects_blank_before(prev_was_selectable: bool, row: Row) -> bool:
    """Whether a blank separator line is drawn before ``row``."""
    return prev_was_selectable and isinstance(row, (HeaderRow, DormantDividerRow))


def _line_numbers(rows: Iterable[Row]) -> list[int]:
    numbers = []
    line = 0
    prior = False
    for row in rows:
        if injects_blank_before(prior, row):
            line += 1
        numbers.append(line)
        line += 1
        prior = is_selectable(row)
    return numbers


def displayed_line_index(rows: list[Row], target: int) -> int:
    """Rendered line of ``rows[target]``, counting blank separators.

    An out-of-range target gives the last rendered line (0 when empty).
    """
    numbers = _line_numbers(rows)
    if 0 <= target < len(numbers):
        return numbers[target]
    return numbers[-1] if numbers else 0


def total_displayed_lines(rows: list[Row]) -> int:
    """Number of rendered lines, blank separators included."""
    numbers = _line_numbers(rows)
    return numbers[-1] + 1 if numbers else 0


def filter_dormant(dormant: list[DormantWorkspace], filter_text: str) -> list[DormantWorkspace]:
    """Filter dormant workspaces by name and base.

    Without a filter: pinned first, then newest mtime, then name. With a
    filter: best score first, ties by name.
    """
    if not filter_text.strip():
        return sorted(dormant, key=lambda d: (not d.pinned, -d.mtime, d.name))
    scored = [
        (score, d)
        for d in dormant
        if (score := fuzzy_score(filter_text, f"{d.name} {d.base}")) is not None
    ]
    scored.sort(key=lambda pair: (-pair[0], pair[1].name))
    return [d for _, d in scored]


def group_filtered(panes: list[PaneState], filter_text: str) -> list[tuple[str, list[PaneState]]]:
    """Filter panes fuzzily, then group by workspace in first-appearance order."""
    if filter_text.strip():
        scored = [
            (score, p)
            for p in panes
            if (
                score := fuzzy_score(
                    filter_text,
                    f"{p.workspace} {p.agent} {p.label} {p.last_prompt} {p.cwd}",
                )
            )
            is not None
        ]
        scored.sort(key=lambda pair: -pair[0])
        filtered = [p for _, p in scored]
    else:
        filtered = list(panes)
    groups: dict[str, list[PaneState]] = {}
    for pane in filtered:
        groups.setdefault(pane.workspace, []).append(pane)
    return list(groups.items())


def _toggle_sentinel(path: Path) -> None:
    try:
        if path.exists():
            path.unlink()
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
    except OSError:
        pass


class App:
    """Dashboard state: rows flattened from a snapshot, plus UI modes.

    ``loader`` re-reads a snapshot after park/pin/refresh actions;
    ``parked_dir`` and ``pinned_dir`` hold the sentinel files those toggle.
    """

    def __init__(
        self,
        snapshot: Snapshot,
        *,
        loader: Callable[[], Snapshot] | None = None,
        parked_dir: Path | str | None = None,
        pinned_dir: Path | str | None = None,
    ) -> None:
        self.rows: list[Row] = []
        self.selected = 0
        self.mode = Mode.NORMAL
        self.filter = ""
        self.show_preview = False
        self.collapsed: set[str] = set()
        self.show_dormant = True
        self.scroll_offset = 0
        self.snapshot = snapshot
        self.create: CreateForm | None = None
        self.loader = loader
        self.parked_dir = Path(parked_dir) if parked_dir is not None else None
        self.pinned_dir = Path(pinned_dir) if pinned_dir is not None else None
        self._rebuild_rows()

    def reload(self, snapshot: Snapshot) -> None:
        """Swap in a new snapshot, keeping the selected pane or workspace."""
        prior_pane = self.selected_pane()
        prior_dormant = self.selected_dormant()
        self.snapshot = snapshot
        self._rebuild_rows()
        if prior_pane is not None:
            for idx, row in enumerate(self.rows):
                if isinstance(row, PaneRow) and row.pane.pane_id == prior_pane.pane_id:
                    self.selected = idx
                    return
        if prior_dormant is not None:
            for idx, row in enumerate(self.rows):
                if isinstance(row, DormantRow) and row.workspace.name == prior_dormant.name:
                    self.selected = idx
                    return
        self._clamp_selection()

    def _rebuild_rows(self) -> None:
        rows: list[Row] = []
        for workspace, panes in group_filtered(self.snapshot.entries, self.filter):
            collapsed = workspace in self.collapsed
            rows.append(
                HeaderRow(
                    workspace=workspace,
                    session_hint=panes[0].session if panes else "",
                    collapsed=collapsed,
                    pinned=panes[0].pinned if panes else False,
                )
            )
            if not collapsed:
                rows.extend(PaneRow(p) for p in panes)
        if self.show_dormant:
            dormant = filter_dormant(self.snapshot.dormant, self.filter)
            if dormant:
                rows.append(DormantDividerRow())
                rows.extend(DormantRow(d) for d in dormant)
        self.rows = rows
        self._clamp_selection()
        self._snap_to_selectable()

    def _clamp_selection(self) -> None:
        if self.selected >= len(self.rows):
            self.selected = max(len(self.rows) - 1, 0)

    def _snap_to_selectable(self) -> None:
        if not self.rows or is_selectable(self.rows[self.selected]):
            return
        forward = range(self.selected, len(self.rows))
        backward = range(self.selected - 1, -1, -1)
        for idx in (*forward, *backward):
            if is_selectable(self.rows[idx]):
                self.selected = idx
                return

    def move_down(self) -> None:
        for idx in range(self.selected + 1, len(self.rows)):
            if is_selectable(self.rows[idx]):
                self.selected = idx
                return

    def move_up(self) -> None:
        for idx in range(min(self.selected, len(self.rows)) - 1, -1, -1):
            if is_selectable(self.rows[idx]):
                self.selected = idx
                return

    def _selected_row(self) -> Row | None:
        return self.rows[self.selected] if 0 <= self.selected < len(self.rows) else None

    def selected_pane(self) -> PaneState | None:
        row = self._selected_row()
        return row.pane if isinstance(row, PaneRow) else None

    def selected_dormant(self) -> DormantWorkspace | None:
        row = self._selected_row()
        return row.workspace if isinstance(row, DormantRow) else None

    def toggle_dormant(self) -> None:
        self.show_dormant = not self.show_dormant
        self._rebuild_rows()

    def toggle_collapse(self) -> None:
        """Collapse or expand the workspace whose header is selected."""
        row = self._selected_row()
        if not isinstance(row, HeaderRow):
            return
        self.collapsed.symmetric_difference_update({row.workspace})
        self._rebuild_rows()

    def toggle_preview(self) -> None:
        self.show_preview = not self.show_preview

    def enter_filter(self) -> None:
        self.mode = Mode.FILTER

    def exit_filter(self) -> None:
        self.mode = Mode.NORMAL

    def enter_create(self, bases: Iterable[str], existing: Iterable[str]) -> None:
        """Open the new-workspace form with the given bases and taken names."""
        self.create = CreateForm(bases=list(bases), existing=set(existing))
        self.mode = Mode.CREATE

    def exit_create(self) -> None:
        self.create = None
        self.mode = Mode.NORMAL

    def with_create(self, func: Callable[[CreateForm], None]) -> None:
        """Apply ``func`` to the open form, clearing any prior error first."""
        if self.create is not None:
            self.create.error = None
            func(self.create)

    def submit_create(self) -> Action:
        """Validate the form; on success close it and return CreateWorkspace."""
        form = self.create
        if form is None:
            return Continue()
        name = form.name.strip()
        if not name:
            return self._fail_create("name cannot be empty")
        if "/" in name or " " in name:
            return self._fail_create("name cannot contain '/' or spaces")
        if name in form.existing:
            return self._fail_create(f"workspace '{name}' already exists")
        if not 0 <= form.base_idx < len(form.bases):
            return self._fail_create("no bases configured; run `aw init` first")
        base = form.bases[form.base_idx]
        self.create = None
        self.mode = Mode.NORMAL
        return CreateWorkspace(name=name, base=base)

    def _fail_create(self, message: str) -> Action:
        if self.create is not None:
            self.create.error = message
        return Continue()

    def filter_push(self, char: str) -> None:
        self.filter += char
        self._rebuild_rows()

    def filter_pop(self) -> None:
        self.filter = self.filter[:-1]
        self._rebuild_rows()

    def filter_clear(self) -> None:
        self.filter = ""
        self._rebuild_rows()

    def _reload_from_loader(self) -> None:
        if self.loader is None:
            return
        try:
            snapshot = self.loader()
        except OSError:
            return
        self.reload(snapshot)

    def apply(self, action: Action) -> Action | None:
        """Handle in-loop actions; return those that end the loop."""
        if isinstance(action, Park):
            if self.parked_dir is None:
                return None
            _toggle_sentinel(self.parked_dir / action.pane_id)
            self._reload_from_loader()
            return None
        if isinstance(action, Refresh):
            self._reload_from_loader()
            return None
        if isinstance(action, TogglePin):
            if self.pinned_dir is None:
                return None
            _toggle_sentinel(self.pinned_dir / action.workspace.replace("/", "_"))
            self._reload_from_loader()
            return None
        return action