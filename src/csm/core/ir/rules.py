"""
Rule model types for CSM IR.

A Rule is one property declaration with an ordered list of value atoms.
Atoms know two spellings of themselves: a `key` used when synthesizing class
names and a `rendered` form used in CSS value text.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

U32_MAX = 2**32 - 1


class Identifier(BaseModel):
    """A bare identifier value, e.g. `flex`, `center`, `auto`."""

    kind: Literal["identifier"] = "identifier"
    text: str

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return self.text.replace(" ", "_")

    @property
    def rendered(self) -> str:
        return self.key


class NumericLiteral(BaseModel):
    """
    An unsigned integer with an optional unit suffix.

    Examples:
        - NumericLiteral(magnitude=5, unit="rem") → 5rem
        - NumericLiteral(magnitude=4, unit="") → 4
    """

    kind: Literal["numeric"] = "numeric"
    magnitude: int = Field(ge=0, le=U32_MAX)
    unit: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return f"{self.magnitude}{self.unit}"

    @property
    def rendered(self) -> str:
        return self.key


class VariableReference(BaseModel):
    """A `$name` reference, rendered as `var(--name)`. The variable need not be defined."""

    kind: Literal["variable"] = "variable"
    name: str

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return self.name

    @property
    def rendered(self) -> str:
        return f"var(--{self.name})"


ValueAtom = Annotated[
    Identifier | NumericLiteral | VariableReference,
    Field(discriminator="kind"),
]


class Rule(BaseModel):
    """A single property declaration: `prop: value value ...`."""

    prop: str = Field(description="CSS property name, hyphens preserved")
    values: tuple[ValueAtom, ...] = Field(default=(), description="Values in declaration order")

    model_config = ConfigDict(frozen=True)

    def to_css(self) -> str:
        """Render the declaration, e.g. `width: 5rem;`."""
        rendered = " ".join(value.rendered for value in self.values)
        return f"{self.prop}: {rendered};"

    @property
    def is_variable(self) -> bool:
        """True for the `$ref` form, which carries exactly one VariableReference."""
        return len(self.values) == 1 and isinstance(self.values[0], VariableReference)


class RuleSet(BaseModel):
    """
    An ordered sequence of rules.

    Declaration sets coming out of the parser have unique properties. Sets
    produced by `merge` may repeat a property; both declarations are kept.
    """

    rules: tuple[Rule, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __iter__(self):  # type: ignore[override]
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def merge(self, other: RuleSet) -> RuleSet:
        """Append `other` after this set. Duplicate properties are retained."""
        return RuleSet(rules=self.rules + other.rules)

    def properties(self) -> list[str]:
        return [rule.prop for rule in self.rules]

    def duplicate_properties(self) -> list[str]:
        """Properties that appear more than once, in order of their second appearance."""
        seen: set[str] = set()
        duplicates: list[str] = []
        for rule in self.rules:
            if rule.prop in seen and rule.prop not in duplicates:
                duplicates.append(rule.prop)
            seen.add(rule.prop)
        return duplicates
