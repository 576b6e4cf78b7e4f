"""Tests for atomic class-name and CSS synthesis."""

from __future__ import annotations

import pytest

from csm.core import ir
from csm.core.dsl_parser_impl import parse_declarations
from csm.core.synth import class_name, fragment_css, shorthand, synthesize, synthesize_rules


def _rule(source: str) -> ir.Rule:
    (rule,) = parse_declarations(source).rules
    return rule


class TestShorthand:
    @pytest.mark.parametrize(
        "prop,expected",
        [
            ("display", "d"),
            ("align-items", "items"),
            ("justify-content", "justify"),
            ("height", "h"),
            ("width", "w"),
            ("background-color", "bg"),
            ("border-radius", "rounded"),
            ("font-size", "fs"),
            ("padding", "p"),
            ("color", "color"),
            ("border-width", "border_width"),
        ],
    )
    def test_prefix(self, prop: str, expected: str) -> None:
        assert shorthand(prop) == expected


class TestSynthesize:
    def test_identifier_value(self) -> None:
        assert synthesize(_rule("display: flex")) == (
            "d_flex",
            ".d_flex { display: flex; }",
        )

    def test_numeric_value(self) -> None:
        assert synthesize(_rule("width: 5rem")) == ("w_5rem", ".w_5rem { width: 5rem; }")

    def test_border_radius(self) -> None:
        assert class_name(_rule("border-radius: 9999px")) == "rounded_9999px"

    def test_variable_reference(self) -> None:
        assert synthesize(_rule("color: $red")) == (
            "color_red",
            ".color_red { color: var(--red); }",
        )

    def test_multiple_values(self) -> None:
        assert synthesize(_rule("flex: 0 0 auto")) == (
            "flex_0_0_auto",
            ".flex_0_0_auto { flex: 0 0 auto; }",
        )

    def test_unlisted_hyphenated_property(self) -> None:
        assert class_name(_rule("border-width: 1px")) == "border_width_1px"

    def test_identical_rules_give_identical_output(self) -> None:
        first = synthesize(_rule("padding: 4"))
        second = synthesize(_rule("padding : 4"))
        assert first == second


class TestFragmentCss:
    def test_declaration_order(self) -> None:
        rules = parse_declarations("display: flex, width: 5rem")
        assert fragment_css(rules) == ".d_flex { display: flex; }\n.w_5rem { width: 5rem; }"

    def test_synthesize_rules(self) -> None:
        rules = parse_declarations("display: flex, width: 5rem")
        assert [name for name, _ in synthesize_rules(rules)] == ["d_flex", "w_5rem"]

    def test_empty_set(self) -> None:
        assert fragment_css(ir.RuleSet()) == ""
