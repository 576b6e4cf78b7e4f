"""
CSM - build-time atomic CSS compiler.

Turns small style declarations into stable atomic class names, per-call CSS
fragments, recipe dispatch tables and one deduplicated, minified bundle.
"""

from __future__ import annotations

from ._version import get_version
from .core import (
    BuildConfig,
    BuildContext,
    CsmConfig,
    CsmError,
    DispatchTable,
    FileFragmentStore,
    MemoryFragmentStore,
    ParseError,
    build_context,
    compile_declarations,
    compile_invocation,
    compile_recipe,
    compile_variable_defs,
    ir,
    load_config,
    parse_declarations,
    parse_recipe,
    parse_variable_defs,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "CsmError",
    "ParseError",
    "BuildConfig",
    "BuildContext",
    "CsmConfig",
    "DispatchTable",
    "FileFragmentStore",
    "MemoryFragmentStore",
    "build_context",
    "compile_declarations",
    "compile_invocation",
    "compile_recipe",
    "compile_variable_defs",
    "load_config",
    "parse_declarations",
    "parse_recipe",
    "parse_variable_defs",
]
