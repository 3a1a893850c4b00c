"""Exception hierarchy for sdkgen.

All exceptions inherit from :class:`SdkgenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`sdkgen.exit_codes`.
The top-level error handler in :func:`sdkgen.app.main` catches
``SdkgenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SdkgenError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- SpecParseError          (exit 3)
    +-- SpecCompileError        (exit 4)
    +-- UnsupportedSchemaError  (exit 4)
    +-- ProjectionError         (exit 5)
    +-- TemplateError           (exit 5)
    +-- FormatterError          (exit 6)
    +-- ConfigError             (exit 1)
"""

from sdkgen.exit_codes import (
    EXIT_COMPILE_FAILURE,
    EXIT_FORMATTER_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_RENDER_FAILURE,
    EXIT_SPEC_PARSE_ERROR,
)


class SdkgenError(Exception):
    """Base exception for all sdkgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`sdkgen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SdkgenError):
    """Raised for invalid CLI arguments (unknown target language, missing output dir)."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SdkgenError):
    """Raised when the OpenAPI document cannot be loaded, parsed, or is not OpenAPI 3.x."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class SpecCompileError(SdkgenError):
    """Raised when the document violates an invariant that makes partial output misleading.

    Examples are ``$ref`` path items, request bodies with several content
    types, and success responses that disagree on their body schema.
    """

    exit_code = EXIT_COMPILE_FAILURE


class UnsupportedSchemaError(SdkgenError):
    """A schema or parameter uses a construct outside the supported subset.

    Raised by the field-type resolver and the type builder. Callers decide
    whether it drops an operation, drops a named type, or becomes a
    :class:`SpecCompileError`.
    """

    exit_code = EXIT_COMPILE_FAILURE


class ProjectionError(SdkgenError):
    """Raised when a field type has no representation in a target language yet."""

    exit_code = EXIT_RENDER_FAILURE


class TemplateError(SdkgenError):
    """Raised when a template is missing or fails to render."""

    exit_code = EXIT_RENDER_FAILURE


class FormatterError(SdkgenError):
    """Raised when the external formatter is not installed or exits non-zero."""

    exit_code = EXIT_FORMATTER_FAILURE


class ConfigError(SdkgenError):
    """Raised for configuration problems (unreadable file, invalid values)."""

    exit_code = EXIT_GENERIC_FAILURE
