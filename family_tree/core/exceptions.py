from typing import Optional


class BackendError(Exception):
    """A call to the hosted backend failed (network, PostgREST or RPC error)."""

    def __init__(self, operation: str, target: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.target = target
        self.cause = cause
        message = f"Backend {operation} on '{target}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DeletionConstraintError(Exception):
    """A person cannot be deleted while other persons reference them as a parent."""

    def __init__(self, message: str, children: Optional[list] = None):
        self.children = children or []
        super().__init__(message)
