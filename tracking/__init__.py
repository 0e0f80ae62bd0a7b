"""Player session tracking and the periodic zone poll."""

from tracking.session import PlayerSession, SessionTracker
from tracking.preferences import NotifierPreferences
from tracking.poll import PollLoop

__all__ = ["PlayerSession", "SessionTracker", "NotifierPreferences", "PollLoop"]
