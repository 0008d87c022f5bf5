from typing import Any, Iterable


class SnapshotValidationError(ValueError):
    """Raised at the input boundary when a snapshot or parameter has the wrong shape."""

    def __init__(self, message: str, issues: Iterable[dict[str, Any]] = ()):
        super().__init__(message)
        self.issues = list(issues)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.issues:
            return base
        return f"{base} ({len(self.issues)} issue(s))"
