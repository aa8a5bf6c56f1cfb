from enum import Enum


# ============================================================
# CALLER-VISIBLE ERRORS
# ============================================================

class GuildhallError(Exception):
    """Base exception for errors surfaced to service callers"""
    status_code = 500
    user_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)
        self.message = message or self.user_message


class InvalidInputError(GuildhallError):
    """Request payload has the wrong shape; rejected before the engine runs"""
    status_code = 400
    user_message = "Invalid request"


class NotFoundError(GuildhallError):
    """Referenced hero, guild or world does not exist"""
    status_code = 404
    user_message = "Not found"


class PreconditionFailure(str, Enum):
    UNKNOWN_ACTION = "unknown_action"
    HERO_INACTIVE = "hero_inactive"
    INSUFFICIENT_RESOURCE = "insufficient_resource"
    GUILD_FULL = "guild_full"                   # Guild transactions
    ALREADY_BUILT = "already_built"


class PreconditionError(GuildhallError):
    """A business rule rejected the request"""
    status_code = 409

    def __init__(self, reason: PreconditionFailure, message: str):
        super().__init__(message)
        self.reason = reason


class ConcurrencyError(GuildhallError):
    """Base for conflicts between concurrent writers"""
    status_code = 409
    user_message = "Please try again"


class StaleSnapshotError(ConcurrencyError):
    """The snapshot a resolution was computed from is no longer current"""
    pass


class PersistenceError(GuildhallError):
    """Opaque failure from the storage layer"""
    status_code = 500
    user_message = "Storage failure"
