"""ApiBake exception and warning hierarchy.

Per-file problems derive from SpecError so the CLI can report them and move
on to the next input. OutlineStructureError is a programming error in the
traversal and is never caught.
"""


class ApiBakeError(Exception):
    """Base exception for all ApiBake errors."""


class SpecError(ApiBakeError):
    """An input specification cannot be rendered."""


class InvalidSpecError(SpecError):
    """Raised when the document has no openapi/swagger version field."""

    def __init__(self, detail: str = "Invalid OpenAPI specification.") -> None:
        super().__init__(detail)


class UnsupportedVersionError(SpecError):
    """Raised for Swagger 1.x / 2.x documents."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"Not supported OpenAPI version: {version}, supported: 3.0.0+.")


class MalformedInputError(SpecError):
    """Raised when input text cannot be decoded as JSON or YAML."""


class OutlineStructureError(ApiBakeError):
    """Raised when a header skips an outline nesting level."""

    def __init__(self, level: int, depth: int) -> None:
        self.level = level
        self.depth = depth
        super().__init__(
            "A header can only be nested inside headers with level - 1. "
            f"level={level}, previousLevel={depth - 1}"
        )


class OutputError(ApiBakeError):
    """Raised when the finished document cannot be written."""


class WriterClosedError(ApiBakeError):
    """Raised when content is added after the document was finished."""

    def __init__(self) -> None:
        super().__init__("The document is already finished.")


class ConfigError(ApiBakeError):
    """Raised for an unreadable or invalid style configuration."""


class ApiBakeWarning(UserWarning):
    """Base class for recoverable problems that are recorded, not raised."""


class UnresolvedReferenceWarning(ApiBakeWarning):
    """A $ref points at something missing from the document."""


class DuplicateSchemaWarning(ApiBakeWarning):
    """A merged schema name was already defined by an earlier file."""


class DuplicateSectionWarning(ApiBakeWarning):
    """Two input files produced the same section name; the later one is renamed."""
