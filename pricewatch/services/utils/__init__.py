"""Browser session utilities."""

from .browser_manager import BrowserSessionManager, SessionState

__all__ = ["BrowserSessionManager", "SessionState"]
