"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account
  3xxx: Event
  4xxx: Bet
  9xxx: System

``error`` is the stable, machine-readable kind returned to clients next to the
numeric code (INVALID_INPUT, UNAUTHENTICATED, FORBIDDEN, NOT_FOUND, CONFLICT, ...).
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        error: str = "INTERNAL",
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.error = error
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409, "CONFLICT")


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409, "CONFLICT")


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password", 401, "INVALID_CREDENTIALS")


class UnauthenticatedError(AppError):
    def __init__(self, detail: str = "Invalid or expired token") -> None:
        super().__init__(1004, detail, 401, "UNAUTHENTICATED")


class ForbiddenError(AppError):
    def __init__(self, required_role: str) -> None:
        super().__init__(1005, f"Role '{required_role}' required", 403, "FORBIDDEN")


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1006, f"User not found: {user_id}", 404, "NOT_FOUND")


# --- 2xxx: Account ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
            "INSUFFICIENT_FUNDS",
        )


# --- 3xxx: Event ---

class EventNotFoundError(AppError):
    def __init__(self, event_id: str) -> None:
        super().__init__(3001, f"Event not found: {event_id}", 404, "NOT_FOUND")


class EventNotAvailableError(AppError):
    def __init__(self, event_id: str, status: str) -> None:
        super().__init__(
            3002,
            f"Event {event_id} is {status} and not open for betting",
            422,
            "EVENT_NOT_AVAILABLE",
        )


class NoOddsForOutcomeError(AppError):
    def __init__(self, event_id: str, prediction: str) -> None:
        super().__init__(
            3003,
            f"Event {event_id} has no odds for outcome '{prediction}'",
            422,
            "NO_ODDS_FOR_OUTCOME",
        )


class InvalidStatusTransitionError(AppError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            3004,
            f"Cannot move event from {current} to {target}",
            422,
            "INVALID_STATUS_TRANSITION",
        )


# --- 4xxx: Bet ---

class BetNotFoundError(AppError):
    def __init__(self, bet_id: str) -> None:
        super().__init__(4001, f"Bet not found: {bet_id}", 404, "NOT_FOUND")


class PlacementFailedError(AppError):
    def __init__(self) -> None:
        super().__init__(4002, "Failed to place bet", 500, "PLACEMENT_FAILED")


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500, "INTERNAL")


class InvalidInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, detail, 400, "INVALID_INPUT")
