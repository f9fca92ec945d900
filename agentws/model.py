"""Data model for agent pane state and the dashboard snapshot."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any


class Status(str, Enum):
    """What an agent in a pane is currently doing."""

    WORKING = "working"
    WAITING = "waiting"
    IDLE = "idle"


@dataclass
class PaneState:
    """State tracked for one tmux pane running an agent."""

    pane_id: str
    agent: str = ""
    schema_version: int = 1
    session: str = ""
    workspace: str = ""
    cwd: str = ""
    status: Status = Status.IDLE
    last_event: str = ""
    last_activity: int = 0
    last_prompt: str = ""
    parked: bool = False
    label: str = ""
    pinned: bool = False

    def __post_init__(self) -> None:
        self.status = Status(self.status)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of this state."""
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PaneState:
        """Build a state from a mapping, ignoring unknown keys.

        Raises ValueError for an unknown status and KeyError without a pane id.
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if "pane_id" not in values:
            raise KeyError("pane_id")
        return cls(**values)


@dataclass
class DormantWorkspace:
    """A workspace on disk with no live tmux session."""

    name: str
    base: str = ""
    created: str = ""
    pinned: bool = False
    mtime: int = 0


@dataclass
class Snapshot:
    """Everything the dashboard shows at one moment."""

    entries: list[PaneState] = field(default_factory=list)
    dormant: list[DormantWorkspace] = field(default_factory=list)

    def counts(self) -> tuple[int, int, int]:
        """Return the number of (working, waiting, idle) panes."""
        tally = Counter(entry.status for entry in self.entries)
        return tally[Status.WORKING], tally[Status.WAITING], tally[Status.IDLE]