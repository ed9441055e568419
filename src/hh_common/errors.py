"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Validation / access
  2xxx: Ledger
  3xxx: Completion
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Validation / access ---

class ValidationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Validation failed: {detail}", 422)


class InvalidAmountError(AppError):
    def __init__(self, amount: int) -> None:
        super().__init__(1002, f"Amount must be positive, got {amount} cents", 422)


class InvalidKindError(AppError):
    def __init__(self, kind: str, operation: str) -> None:
        super().__init__(1003, f"Transaction kind '{kind}' is not allowed for {operation}", 422)


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Access denied") -> None:
        super().__init__(1004, detail, 403)


class UnauthenticatedError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Caller identity missing", 401)


# --- 2xxx: Ledger ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
        )


# --- 3xxx: Completion ---

class CompletionNotFoundError(AppError):
    def __init__(self, completion_id: str) -> None:
        super().__init__(3001, f"Completion not found: {completion_id}", 404)


class AlreadyCompletedError(AppError):
    def __init__(self, task_id: str, completion_date: str) -> None:
        super().__init__(
            3002, f"Task {task_id} already completed on {completion_date}", 409
        )


class UndoWindowExpiredError(AppError):
    def __init__(self, window_minutes: int) -> None:
        super().__init__(3003, f"Undo window expired ({window_minutes} minutes)", 422)


class TaskNotFoundError(AppError):
    def __init__(self, task_id: str) -> None:
        super().__init__(3004, f"Task not found: {task_id}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class StoreUnavailableError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Data store unavailable: {detail}", 503)
