from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Sequence, Tuple

if TYPE_CHECKING:
    from .issues import Issue


class SchemakitError(Exception):
    """Base exception for schemakit."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ValidationError(SchemakitError, ValueError):
    """Raised by ``Schema.parse`` when a value does not match its schema.

    ``str(error)`` is a human-readable summary with one line per issue;
    ``error.issues`` is the structured detail, in traversal order.

    Example:
        >>> try:
        ...     schema.parse(payload)
        ... except ValidationError as error:
        ...     for issue in error.issues:
        ...         print(issue.path, issue.message)
    """

    issues: Tuple["Issue", ...]

    def __init__(self, issues: Sequence["Issue"]) -> None:
        issues = tuple(issues)
        if not issues:
            raise ValueError("ValidationError requires at least one issue")
        self.issues = issues
        SchemakitError.__init__(
            self, self.format(), context={"issue_count": len(issues)}
        )

    def format(self) -> str:
        """Return the summary message: ``[path]: message`` per issue."""
        lines = []
        for issue in self.issues:
            if issue.path:
                lines.append(f"[{issue.path_str}]: {issue.message}")
            else:
                lines.append(issue.message)
        return "\n".join(lines)

    def flatten(self) -> Dict[str, Any]:
        """Group messages for per-field rendering.

        Issues at the root land in ``form_errors``; every other issue is
        listed under the first segment of its path in ``field_errors``.
        """
        form_errors: List[str] = []
        field_errors: Dict[str, List[str]] = {}
        for issue in self.issues:
            if not issue.path:
                form_errors.append(issue.message)
                continue
            field_errors.setdefault(str(issue.path[0]), []).append(issue.message)
        return {"form_errors": form_errors, "field_errors": field_errors}

    def to_json_error(self) -> Dict[str, Any]:
        payload = super().to_json_error()
        payload["issues"] = [issue.to_dict() for issue in self.issues]
        return payload

    def __reduce__(self):
        return (self.__class__, (self.issues,))


class SchemaDefinitionError(SchemakitError, TypeError):
    """Raised when a schema constructor or builder method gets invalid arguments."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        SchemakitError.__init__(self, message, context=context)
        TypeError.__init__(self, message)


class SchemaConstructionError(SchemakitError, ValueError):
    """Raised by ``from_json_schema`` for unsupported or contradictory documents.

    ``context["pointer"]`` holds the JSON pointer of the offending node.
    """

    def __init__(
        self,
        message: str,
        *,
        pointer: str = "",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["pointer"] = pointer
        location = pointer or "/"
        SchemakitError.__init__(self, f"{message} (at {location})", context=ctx)
        ValueError.__init__(self, f"{message} (at {location})")

    @property
    def pointer(self) -> str:
        return self.context.get("pointer", "")


class ConfigError(SchemakitError):
    """Raised when settings are malformed or fail the settings schema."""

    def __init__(
        self,
        message: str,
        *,
        errors: Sequence[str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if errors:
            ctx["errors"] = list(errors)
        super().__init__(message, context=ctx)


__all__ = [
    "SchemakitError",
    "ValidationError",
    "SchemaDefinitionError",
    "SchemaConstructionError",
    "ConfigError",
]
