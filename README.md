# agentws

Building blocks for a terminal dashboard that keeps track of AI coding agents
running inside tmux panes, grouped by the workspace each agent works in.

Agents report their state (working, waiting for input, idle) through hook
events. This package turns those events into pane states, holds them in a
snapshot together with dormant workspaces (workspaces on disk with no live
tmux session), filters and groups them into dashboard rows, and renders the
dashboard and sidebar as plain text.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `agentws.model` — `Status` (`WORKING`, `WAITING`, `IDLE`), `PaneState`
  (with `to_dict()` / `from_dict()`), `DormantWorkspace` and `Snapshot`,
  whose `counts()` returns the number of working, waiting and idle panes.
- `agentws.hook` — `map_event(agent, event)` gives the status a hook event
  moves a pane to (for the `claude`, `codex` and `pi` agents), or `None` for
  an unknown pair; `extract_prompt(payload)` pulls the prompt out of a JSON
  hook payload, trying the keys `prompt`, `user_prompt`, `text` and `input`.
- `agentws.fuzzy` — `fuzzy_score(pattern, haystack)` scores a haystack
  against a space-separated pattern, or returns `None` when it does not
  match. Atoms are fuzzy by default; `'text` is a substring, `^text` a prefix,
  `text$` a suffix, `^text$` an exact match and `!text` excludes. Case is
  smart and accents are ignored unless the atom carries them.
- `agentws.app` — `App`, the dashboard state machine: rows (`HeaderRow`,
  `PaneRow`, `DormantDividerRow`, `DormantRow`), selection that skips
  headers and dividers, filtering, collapsing groups, showing or hiding the
  dormant section, and the new-workspace form (`CreateForm`,
  `enter_create`, `submit_create`). `App.apply()` handles the in-loop
  actions `Park`, `Refresh` and `TogglePin` by toggling sentinel files in the
  `parked_dir` / `pinned_dir` given to `App` and reloading through its
  `loader`; other actions are returned to the caller.
- `agentws.textfmt` — `truncate`, `parse_iso_like`, `days_from_civil`,
  `humanize_age`, `humanize_created`, `status_glyph`, `status_label` and
  `render_sidebar_text(snapshot)`, the plain-text sidebar.
- `agentws.view` — `render(app, width, height)` draws the popup (header,
  agent list, details or create form, footer) into a string;
  `line_for_row` and `footer_text` give single lines. With the preview
  turned on, the details area shows the output of `tmux capture-pane` for
  the selected pane.
- `agentws.git` — `run(args)` runs `git` quietly and raises `GitError` on
  failure, `capture_stdout(cwd, args)` returns trimmed output or `""`, and
  `repo_basename(url)` derives a directory name from a clone URL.

## Example

```python
from agentws.app import App, Jump
from agentws.git import repo_basename
from agentws.hook import map_event
from agentws.model import DormantWorkspace, PaneState, Snapshot, Status
from agentws.textfmt import render_sidebar_text
from agentws.view import render

repo_basename("https://example.com/bar.git")   # "bar"
map_event("claude", "Notification")             # Status.WAITING

snapshot = Snapshot(
    entries=[PaneState(pane_id="%1", agent="claude", workspace="alpha",
                       session="aw-alpha", status=Status.WORKING)],
    dormant=[DormantWorkspace(name="backlog", base="default")],
)
app = App(snapshot)
app.move_down()                 # selection moves to the dormant row
print(render(app, 100, 24))
print(render_sidebar_text(snapshot))
```

## What this package does not do

There is no command to run and no interactive terminal program: nothing
reads key presses, drives a live screen, or opens a tmux sidebar or popup.
It does not write per-pane state files from hook events, discover
workspaces or read configuration from disk, and does not create, start or
switch to workspaces or tmux sessions. Snapshots, base names and existing
workspace names are supplied by the caller.