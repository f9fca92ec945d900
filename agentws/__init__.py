"""State model, fuzzy filtering and text rendering for an agent dashboard over tmux panes."""

__version__ = "1.5.0"