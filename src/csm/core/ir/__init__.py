"""
CSM Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

from .recipe import (
    DispatchEntry,
    RecipeSpec,
    VariantChoice,
    VariantSpec,
)
from .rules import (
    U32_MAX,
    Identifier,
    NumericLiteral,
    Rule,
    RuleSet,
    ValueAtom,
    VariableReference,
)
from .variables import VariableDefinition

__all__ = [
    # Rules
    "U32_MAX",
    "Identifier",
    "NumericLiteral",
    "Rule",
    "RuleSet",
    "ValueAtom",
    "VariableReference",
    # Variables
    "VariableDefinition",
    # Recipes
    "DispatchEntry",
    "RecipeSpec",
    "VariantChoice",
    "VariantSpec",
]
