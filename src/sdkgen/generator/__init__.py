"""Intermediate representation -> client source files.

Sub-modules:

* :mod:`~sdkgen.generator.typenames` -- field type -> type name, per language.
* :mod:`~sdkgen.generator.renderer` -- Jinja2 rendering and file output.
* :mod:`~sdkgen.generator.formatter` -- external formatter invocation.
* :mod:`~sdkgen.generator.naming` -- identifier case conversion.
"""

from sdkgen.generator.formatter import format_files
from sdkgen.generator.renderer import render_target, write_target
from sdkgen.generator.typenames import PROJECTORS, type_name

__all__ = ["PROJECTORS", "format_files", "render_target", "type_name", "write_target"]
