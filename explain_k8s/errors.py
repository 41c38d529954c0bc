"""Exception hierarchy for schema explanation failures.

Three families matter to callers:
- StructuralParseError: a schema document did not match the expected layout.
  Fatal to the resource being parsed.
- QueryFailure: the external ``kubectl explain`` call failed or timed out.
  Contained per field unless the strict failure policy is selected.
- ConfigurationError: bad input list or settings, reported once.
"""

from typing import Optional

__all__ = [
    "ExplainError",
    "ConfigurationError",
    "QueryFailure",
    "QueryTimeout",
    "StructuralParseError",
    "MissingDescriptionSection",
    "MissingFieldsSection",
    "TrailingUnparsedContent",
    "UnexpectedLeadingIndent",
    "MalformedFieldLine",
    "DuplicateFieldName",
]

# Longest raw snippet kept on a structural error
SNIPPET_LIMIT = 200


class ExplainError(RuntimeError):
    """Base exception for every explanation failure."""


class ConfigurationError(ExplainError):
    """Raised when the resource list or settings are invalid."""


class QueryFailure(ExplainError):
    """Raised when an external schema query fails for one name."""

    def __init__(self, message: str, *, full_name: str = "", stderr: str = ""):
        super().__init__(message)
        self.full_name = full_name
        self.stderr = stderr


class QueryTimeout(QueryFailure):
    """Raised when an external schema query exceeds its deadline."""


class StructuralParseError(ExplainError):
    """Raised when a schema document does not match the expected grammar."""

    def __init__(self, message: str, *, full_name: str = "", snippet: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.full_name = full_name
        snippet = snippet or ""
        if len(snippet) > SNIPPET_LIMIT:
            snippet = snippet[:SNIPPET_LIMIT] + "..."
        self.snippet = snippet

    def __str__(self) -> str:
        parts = [self.message]
        if self.full_name:
            parts.append(f"at '{self.full_name}'")
        if self.snippet:
            parts.append(f"near {self.snippet!r}")
        return " ".join(parts)


class MissingDescriptionSection(StructuralParseError):
    """Document does not start with a DESCRIPTION section holding at least one line."""


class MissingFieldsSection(StructuralParseError):
    """DESCRIPTION is not followed by a FIELDS section holding at least one line."""


class TrailingUnparsedContent(StructuralParseError):
    """Text remains after the FIELDS section was consumed."""


class UnexpectedLeadingIndent(StructuralParseError):
    """A field block starts with an indented line instead of a top-level field."""


class MalformedFieldLine(StructuralParseError):
    """A top-level field line is not exactly ``name<TAB>type``."""


class DuplicateFieldName(StructuralParseError):
    """Two sibling fields share the same name."""
