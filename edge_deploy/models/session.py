"""Cloud session model"""

from dataclasses import dataclass
from enum import Enum


class SessionState(Enum):
    """Lifecycle of an authenticated cloud CLI session"""
    LOGGED_OUT = "logged_out"
    LOGGING_IN = "logging_in"
    LOGGED_IN = "logged_in"
    LOGGING_OUT = "logging_out"


@dataclass
class Session:
    """One authenticated session, owned by a single privileged operation"""
    state: SessionState = SessionState.LOGGED_OUT
    subscription: str = ""

    @property
    def logged_in(self) -> bool:
        return self.state == SessionState.LOGGED_IN
