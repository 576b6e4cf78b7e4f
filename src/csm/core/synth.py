"""
Class-name and CSS synthesis for atomic rules.

Each rule becomes one single-purpose class:

    width: 5rem        ->  w_5rem        .w_5rem { width: 5rem; }
    color: $red        ->  color_red     .color_red { color: var(--red); }
    flex: 0 0 auto     ->  flex_0_0_auto .flex_0_0_auto { flex: 0 0 auto; }

Values keep their declaration order in both the class name and the CSS
body, so output is deterministic for a given input order.
"""

from __future__ import annotations

from . import ir

# Property name -> class-name prefix
SHORTHANDS: dict[str, str] = {
    "display": "d",
    "align-items": "items",
    "justify-content": "justify",
    "height": "h",
    "width": "w",
    "background-color": "bg",
    "border-radius": "rounded",
    "font-size": "fs",
    "padding": "p",
}


def shorthand(prop: str) -> str:
    """Return the class-name prefix for a property."""
    return SHORTHANDS.get(prop, prop.replace("-", "_"))


def class_name(rule: ir.Rule) -> str:
    keys = "_".join(value.key for value in rule.values)
    return f"{shorthand(rule.prop)}_{keys}"


def css_class(rule: ir.Rule) -> str:
    """Render the single-class CSS text for a rule."""
    return f".{class_name(rule)} {{ {rule.to_css()} }}"


def synthesize(rule: ir.Rule) -> tuple[str, str]:
    """Return `(class_name, css_text)` for a rule."""
    return class_name(rule), css_class(rule)


def synthesize_rules(rules: ir.RuleSet) -> list[tuple[str, str]]:
    return [synthesize(rule) for rule in rules]


def fragment_css(rules: ir.RuleSet) -> str:
    """CSS text of a whole declaration set, one class per line."""
    return "\n".join(css_class(rule) for rule in rules)
