"""sdkgen -- Compile OpenAPI 3 documents into client SDKs for several languages.

The package reads an OpenAPI document, compiles the restricted subset of
OpenAPI/JSON-Schema it understands into a small intermediate representation
(resources, operations and named types), and renders that representation
into client code for each configured target language.

Typical workflow::

    sdkgen inspect resources openapi.json      # look at the compiled IR
    sdkgen generate openapi.json -t rust -o out/

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models (configuration and IR).
    compiler: OpenAPI document -> IR.
    generator: IR -> source files.
    diagnostics: Structured diagnostics sink used during compilation.
    exceptions: Exception hierarchy with exit-code mapping.
"""

__version__ = "0.3.0"
