"""Mapping of agent hook events to pane status, and prompt extraction."""

from __future__ import annotations

import json

from agentws.model import Status

_EVENT_STATUS: dict[tuple[str, str], Status] = {
    ("claude", "UserPromptSubmit"): Status.WORKING,
    ("claude", "PreToolUse"): Status.WORKING,
    ("claude", "Notification"): Status.WAITING,
    ("claude", "Stop"): Status.IDLE,
    ("codex", "SessionStart"): Status.IDLE,
    ("codex", "UserPromptSubmit"): Status.WORKING,
    ("codex", "PreToolUse"): Status.WORKING,
    ("codex", "Stop"): Status.IDLE,
    ("pi", "agent_start"): Status.WORKING,
    ("pi", "input"): Status.WORKING,
    ("pi", "agent_end"): Status.IDLE,
}

_PROMPT_KEYS = ("prompt", "user_prompt", "text", "input")


def map_event(agent: str, event: str) -> Status | None:
    """Return the status an (agent, event) pair moves a pane to, if any."""
    return _EVENT_STATUS.get((agent, event))


def extract_prompt(payload: str) -> str | None:
    """Pull the user's prompt out of a hook's JSON payload.

    Looks at the common keys in order and returns the first non-empty
    string; returns None for empty, malformed or prompt-less payloads.
    """
    if not payload.strip():
        return None
    try:
        value = json.loads(payload)
    except json.JSONDecodeError:
        return None
    if not isinstance(value, dict):
        return None
    for key in _PROMPT_KEYS:
        candidate = value.get(key)
        if isinstance(candidate, str) and candidate:
            return candidate
    return None