"""Core CSM functionality: IR, lexer, parser, synthesis, recipes, fragments, bundling."""

from . import ir
from .bundler import Bundler, minify_css
from .compiler import (
    compile_declarations,
    compile_invocation,
    compile_recipe,
    compile_variable_defs,
)
from .context import BuildContext, build_context
from .dsl_parser_impl import (
    parse_declarations,
    parse_invocation,
    parse_recipe,
    parse_variable_defs,
)
from .errors import (
    BuildContextError,
    BundleError,
    ConfigError,
    CsmError,
    ErrorContext,
    ParseError,
    StoreError,
    VariantLookupError,
)
from .fragments import (
    VARIABLES_FRAGMENT_ID,
    FileFragmentStore,
    FragmentStore,
    MemoryFragmentStore,
)
from .manifest import BuildConfig, CsmConfig, load_config
from .recipe import DispatchTable
from .synth import synthesize
from .variables import VariableStore

__all__ = [
    "ir",
    # Errors
    "CsmError",
    "ErrorContext",
    "ParseError",
    "VariantLookupError",
    "StoreError",
    "BundleError",
    "BuildContextError",
    "ConfigError",
    # Parsing
    "parse_declarations",
    "parse_invocation",
    "parse_recipe",
    "parse_variable_defs",
    # Compilation
    "synthesize",
    "DispatchTable",
    "VariableStore",
    "compile_declarations",
    "compile_invocation",
    "compile_recipe",
    "compile_variable_defs",
    # Build
    "BuildContext",
    "build_context",
    "BuildConfig",
    "CsmConfig",
    "load_config",
    "Bundler",
    "minify_css",
    "FragmentStore",
    "FileFragmentStore",
    "MemoryFragmentStore",
    "VARIABLES_FRAGMENT_ID",
]
