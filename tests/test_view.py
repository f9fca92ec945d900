import subprocess
from unittest import mock

from agentws.app import (
    App,
    CreateField,
    CreateForm,
    DormantDividerRow,
    DormantRow,
    HeaderRow,
    Mode,
    PaneRow,
)
from agentws.model import DormantWorkspace, PaneState, Snapshot, Status
from agentws.view import footer_text, line_for_row, render


def pane(pane_id, ws, agent="claude"):
    return PaneState(
        pane_id=pane_id,
        agent=agent,
        session=f"aw-{ws}",
        workspace=ws,
        cwd=f"/tmp/{ws}",
        status=Status.IDLE,
    )


def dormant(name, base):
    return DormantWorkspace(name=name, base=base, created="2026-03-01T10:00:00Z")


def test_popup_renders_dormant_section_after_active():
    app = App(
        Snapshot(
            entries=[pane("%1", "alpha")],
            dormant=[dormant("scratch", "default"), dormant("backlog", "python")],
        )
    )
    out = render(app, 130, 24)
    assert "alpha" in out
    assert "Dormant" in out
    assert "backlog" in out
    assert "scratch" in out
    assert "python" in out
    assert " dormant" in out
    assert "jump" in out


def test_render_has_requested_height_and_width():
    app = App(Snapshot(entries=[pane("%1", "alpha")]))
    out = render(app, 60, 12)
    lines = out.split("\n")
    assert len(lines) == 12
    assert all(len(line) <= 60 for line in lines)
    assert lines[0].startswith(" aw dash")


def test_footer_switches_to_open_when_dormant_selected():
    app = App(Snapshot(dormant=[dormant("only", "default")]))
    assert app.selected_dormant() is not None
    assert "open" in render(app, 100, 24)
    app.toggle_dormant()
    assert "jump" in render(app, 100, 24)


def test_popup_hides_dormant_when_toggled_off():
    app = App(
        Snapshot(entries=[pane("%1", "alpha")], dormant=[dormant("hidden-ws", "default")])
    )
    assert "hidden-ws" in render(app, 100, 24)
    app.toggle_dormant()
    out_off = render(app, 100, 24)
    assert "hidden-ws" not in out_off
    assert "Dormant" not in out_off


def test_detail_pane_shows_workspace_info_for_dormant():
    app = App(Snapshot(dormant=[dormant("my-spike", "rust-base")]))
    out = render(app, 120, 24)
    assert "Workspace" in out
    assert "my-spike" in out
    assert "rust-base" in out
    assert "aw-my-spike" in out
    assert "will be created" in out


def test_list_scrolls_to_keep_selection_visible():
    panes = [pane(f"%{i}", "alpha", f"agent-{i:02}") for i in range(30)]
    app = App(Snapshot(entries=panes))
    initial = render(app, 80, 24)
    assert "agent-00" in initial
    assert "agent-29" not in initial

    for _ in range(29):
        app.move_down()
    scrolled = render(app, 80, 24)
    assert "agent-29" in scrolled
    assert "agent-00" not in scrolled
    assert app.scroll_offset > 0

    for _ in range(29):
        app.move_up()
    back = render(app, 80, 24)
    assert "agent-00" in back


def test_list_does_not_scroll_when_everything_fits():
    app = App(Snapshot(entries=[pane("%1", "alpha", "agent-a"), pane("%2", "alpha", "agent-b")]))
    render(app, 100, 40)
    assert app.scroll_offset == 0


def test_create_form_renders_name_and_base_options():
    app = App(Snapshot())
    app.create = CreateForm(
        name="my-task",
        bases=["default", "python", "web"],
        base_idx=1,
        field=CreateField.BASE,
        error="name cannot contain '/'",
    )
    app.mode = Mode.CREATE
    out = render(app, 100, 24)
    assert "New workspace" in out
    assert "Name:" in out
    assert "my-task" in out
    assert "Base:" in out
    assert "▾ python" in out
    assert "default" in out
    assert "web" in out
    assert "name cannot contain" in out
    assert "↵ create" in out
    assert "⇥ switch field" in out


def test_create_form_with_empty_bases_shows_init_hint():
    app = App(Snapshot())
    app.create = CreateForm()
    app.mode = Mode.CREATE
    assert "no bases configured" in render(app, 100, 24)


def test_empty_dashboard_shows_hint():
    app = App(Snapshot())
    out = render(app, 100, 24)
    assert "no agents tracked" in out
    assert "No agents tracked yet." in out


def test_details_pane_lists_pane_fields():
    p = pane("%7", "alpha")
    p.last_prompt = "fix tests"
    app = App(Snapshot(entries=[p]))
    out = render(app, 140, 24)
    assert "Details" in out
    assert "%7" in out
    assert "fix tests" in out
    assert "idle" in out


def test_preview_shows_captured_pane_content():
    app = App(Snapshot(entries=[pane("%3", "alpha")]))
    app.toggle_preview()
    done = subprocess.CompletedProcess(args=[], returncode=0, stdout=b"hello preview\n")
    with mock.patch("agentws.view.subprocess.run", return_value=done) as run:
        out = render(app, 120, 24)
    assert "Preview" in out
    assert "hello preview" in out
    assert run.call_args[0][0][:4] == ["tmux", "capture-pane", "-p", "-t"]


def test_line_for_header_row():
    row = HeaderRow(workspace="alpha", session_hint="aw-alpha", collapsed=False, pinned=True)
    assert line_for_row(row, False) == "  ▾ alpha ★   aw-alpha"
    collapsed = HeaderRow(workspace="beta", session_hint="aw-beta", collapsed=True)
    assert line_for_row(collapsed, False) == "  ▸ beta   aw-beta"


def test_line_for_divider_row():
    assert line_for_row(DormantDividerRow(), True).startswith("▌ ─ Dormant")


def test_line_for_pane_row_falls_back_to_agent_and_marks_parked():
    p = pane("%1", "alpha", "codex")
    p.parked = True
    line = line_for_row(PaneRow(p), True)
    assert line.startswith("▌   ○  codex")
    assert line.endswith(" ⏸ parked")


def test_line_for_pane_row_prefers_label_and_truncates_prompt():
    p = pane("%1", "alpha")
    p.label = "renamed-session"
    p.last_prompt = "x" * 50
    line = line_for_row(PaneRow(p), False)
    assert "renamed-session" in line
    assert "claude" not in line
    assert ("x" * 39 + "…") in line


def test_line_for_dormant_row():
    d = DormantWorkspace(name="spike", base="python", created="", pinned=True)
    line = line_for_row(DormantRow(d), False)
    assert line.startswith("    ◇  spike")
    assert "python" in line
    assert line.endswith("—  ★")


def test_footer_text_for_each_mode():
    app = App(Snapshot(entries=[pane("%1", "alpha")]))
    normal = footer_text(app)
    assert normal.startswith("↵ jump  ·  ⇥ preview")
    assert normal.endswith("q quit")
    app.enter_filter()
    app.filter_push("a")
    assert footer_text(app) == "/a  ↵ confirm · esc clear"
    app.exit_filter()
    app.enter_create([], [])
    assert footer_text(app) == "↵ create  ·  ⇥ switch field  ·  esc cancel"