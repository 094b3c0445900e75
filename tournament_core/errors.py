from typing import Optional


class ProxyError(Exception):
    """Base for failures reported to the caller as an ``{ok: false}`` envelope."""

    status_code = 200

    def __init__(self, message: str, **context):
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.message, **self.context}


class AuthenticationError(ProxyError):
    status_code = 401

    def __init__(self, message: str = "Invalid proxy signature"):
        super().__init__(message)


class ValidationError(ProxyError):
    pass


class NotFoundError(ProxyError):
    def __init__(self, message: str = "Tournament not found"):
        super().__init__(message)


class PersistenceError(ProxyError):
    def __init__(self, message: str = "Database error", details: Optional[str] = None):
        if details is None:
            super().__init__(message)
        else:
            super().__init__(message, details=details)
        self.details = details


class UnknownActionError(ProxyError):
    def __init__(self, action: Optional[str], allowed_actions: list):
        self.action = action
        super().__init__("Unknown action", allowed_actions=allowed_actions)
