"""
Recipe types for CSM IR.

A recipe is a base RuleSet plus named variants; each variant offers named
choices, each choice carrying its own RuleSet. Compiling a recipe expands
the cartesian product of all choices into DispatchEntry rows.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import RuleSet


class VariantChoice(BaseModel):
    """One named choice of a variant, e.g. `solid: { color: white }`."""

    name: str
    rules: RuleSet = Field(default_factory=RuleSet)

    model_config = ConfigDict(frozen=True)


class VariantSpec(BaseModel):
    """A named axis of choices, kept in declaration order."""

    name: str
    choices: tuple[VariantChoice, ...]

    model_config = ConfigDict(frozen=True)

    @field_validator("choices")
    @classmethod
    def validate_choices(cls, v: tuple[VariantChoice, ...]) -> tuple[VariantChoice, ...]:
        """Choice names must be unique and at least one choice must exist."""
        if not v:
            raise ValueError("a variant needs at least one choice")
        names = [choice.name for choice in v]
        for name in names:
            if names.count(name) > 1:
                raise ValueError(f"duplicate choice name '{name}'")
        return v

    def choice_names(self) -> list[str]:
        return [choice.name for choice in self.choices]

    def get_choice(self, name: str) -> VariantChoice | None:
        for choice in self.choices:
            if choice.name == name:
                return choice
        return None


class RecipeSpec(BaseModel):
    """
    A recipe declaration.

    `defaults` holds `(variant_name, choice_name)` pairs exactly as declared.
    Nothing consumes them yet: lookups never fall back to a default choice.
    """

    name: str
    base: RuleSet = Field(default_factory=RuleSet)
    variants: tuple[VariantSpec, ...] = ()
    defaults: tuple[tuple[str, str], ...] = ()

    model_config = ConfigDict(frozen=True)

    @field_validator("variants")
    @classmethod
    def validate_variants(cls, v: tuple[VariantSpec, ...]) -> tuple[VariantSpec, ...]:
        names = [variant.name for variant in v]
        for name in names:
            if names.count(name) > 1:
                raise ValueError(f"duplicate variant name '{name}'")
        return v

    def variant_names(self) -> list[str]:
        return [variant.name for variant in self.variants]


class DispatchEntry(BaseModel):
    """One precomputed row of a recipe's dispatch table."""

    selector: tuple[str, ...] = Field(description="Choice names, one per variant, in variant order")
    class_name: str
    css: str

    model_config = ConfigDict(frozen=True)
