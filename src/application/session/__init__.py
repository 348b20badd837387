"""Session identity tracking."""

from application.session.tracker import SessionTracker

__all__ = ["SessionTracker"]
