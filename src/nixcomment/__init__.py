"""nixcomment — comment-style linter for Nix sources."""

__version__ = "0.3.0"
