class ExpensePlannerError(Exception):
    """Base class for every error raised by the planner."""


class InvalidExpense(ExpensePlannerError, ValueError):
    def __init__(self, details: dict):
        super().__init__(details.get("message", "Invalid expense"))
        self.details = details


class StoreError(ExpensePlannerError):
    """Failure reported by a document store."""


class DocumentNotFound(StoreError):
    pass


class RemoteWriteFailed(ExpensePlannerError):
    """A write to the document store did not complete; the snapshot is unchanged."""


class AuthError(ExpensePlannerError):
    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code
