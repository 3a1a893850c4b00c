"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~sdkgen.exceptions.SdkgenError` subclass.
Build scripts can inspect the exit code to tell a broken document apart
from a failing formatter without parsing stderr.

Example::

    $ sdkgen generate openapi.json -t rust -o out/
    $ echo $?
    4   # EXIT_COMPILE_FAILURE -- the document violates a fatal invariant
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SPEC_PARSE_ERROR = 3
"""The OpenAPI document could not be loaded or is not OpenAPI 3.x."""

EXIT_COMPILE_FAILURE = 4
"""The document is too malformed to compile into a trustworthy IR."""

EXIT_RENDER_FAILURE = 5
"""A template failed to render or reached an unimplemented type projection."""

EXIT_FORMATTER_FAILURE = 6
"""The external source formatter was missing or exited with an error."""
