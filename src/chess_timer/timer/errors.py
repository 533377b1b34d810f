from __future__ import annotations


class TimerError(Exception):
    """Base class for work-session errors raised by the timer core."""


class NotFoundError(TimerError):
    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class InvalidStateError(TimerError):
    def __init__(self, session_id: str, status: str, action: str):
        super().__init__(f"Cannot {action} session with status: {status}")
        self.session_id = session_id
        self.status = status
        self.action = action


class ValidationError(TimerError):
    def __init__(self, field: str, value: object, reason: str):
        super().__init__(f"Invalid {field}={value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason
