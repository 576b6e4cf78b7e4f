"""
Variable definition types for CSM IR.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class VariableDefinition(BaseModel):
    """
    A custom property definition rendered inside `:root`.

    `value` is either `var(--other)` or a run of `#ident` pieces such as
    `#EE0F0F`.
    """

    name: str
    value: str

    model_config = ConfigDict(frozen=True)

    def to_css(self) -> str:
        return f"--{self.name}: {self.value};"
