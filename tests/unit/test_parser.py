"""Tests for the CSM DSL parser: declarations, variable definitions and recipes."""

from __future__ import annotations

import pytest

from csm.core import ir
from csm.core.dsl_parser_impl import (
    parse_declarations,
    parse_invocation,
    parse_recipe,
    parse_variable_defs,
)
from csm.core.errors import (
    DuplicateChoiceError,
    DuplicatePropertyError,
    InvalidNumericLiteralError,
    MissingColonError,
    MissingVariableIdentifierError,
    ParseError,
    UnexpectedTokenError,
)
from csm.core.lexer import tokenize

# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


class TestParseDeclarations:
    def test_simple_declarations(self) -> None:
        rules = parse_declarations("display: flex, width: 5rem")

        assert rules.properties() == ["display", "width"]
        assert rules.rules[0].values == (ir.Identifier(text="flex"),)
        assert rules.rules[1].values == (ir.NumericLiteral(magnitude=5, unit="rem"),)

    def test_hyphenated_property(self) -> None:
        rules = parse_declarations("align - items: center")
        assert rules.properties() == ["align-items"]

    def test_multiple_values_keep_order(self) -> None:
        (rule,) = parse_declarations("flex: 0 0 auto").rules
        assert rule.values == (
            ir.NumericLiteral(magnitude=0),
            ir.NumericLiteral(magnitude=0),
            ir.Identifier(text="auto"),
        )

    def test_trailing_comma(self) -> None:
        assert len(parse_declarations("display: flex, width: 5rem,")) == 2

    def test_empty_input(self) -> None:
        assert len(parse_declarations("")) == 0

    def test_unitless_number(self) -> None:
        (rule,) = parse_declarations("padding: 4").rules
        assert rule.values == (ir.NumericLiteral(magnitude=4, unit=""),)

    def test_variable_reference(self) -> None:
        (rule,) = parse_declarations("background-color: $danger").rules
        assert rule.values == (ir.VariableReference(name="danger"),)
        assert rule.is_variable

    def test_accepts_tokens(self) -> None:
        rules = parse_declarations(tokenize("display: flex"))
        assert rules.properties() == ["display"]

    def test_u32_max_accepted(self) -> None:
        (rule,) = parse_declarations("z-index: 4294967295").rules
        assert rule.values[0].key == "4294967295"


class TestDeclarationErrors:
    def test_duplicate_property(self) -> None:
        with pytest.raises(DuplicatePropertyError) as exc_info:
            parse_declarations("display: flex, width: 5rem, display: block")

        assert exc_info.value.property_name == "display"
        assert exc_info.value.message == "duplicate rule for property `display`"

    def test_missing_colon(self) -> None:
        with pytest.raises(MissingColonError) as exc_info:
            parse_declarations("display, width: 5rem")
        assert exc_info.value.property_name == "display"

    def test_missing_colon_at_end(self) -> None:
        with pytest.raises(MissingColonError):
            parse_declarations("display")

    def test_bad_property_token(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_declarations("5rem: flex")

    def test_missing_variable_identifier(self) -> None:
        with pytest.raises(MissingVariableIdentifierError) as exc_info:
            parse_declarations("color: $")
        assert exc_info.value.property_name == "color"

    def test_variable_followed_by_number(self) -> None:
        with pytest.raises(MissingVariableIdentifierError):
            parse_declarations("color: $5")

    def test_reference_must_be_only_value(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_declarations("color: $red blue")

    def test_decimal_literal(self) -> None:
        with pytest.raises(InvalidNumericLiteralError) as exc_info:
            parse_declarations("width: 1.5rem")
        assert exc_info.value.property_name == "width"

    def test_out_of_range_literal(self) -> None:
        with pytest.raises(InvalidNumericLiteralError):
            parse_declarations("width: 4294967296px")

    @pytest.mark.parametrize(
        "value", ["50%", "100%", "1_000", "5_px", "0x10", "0xff", "0b101", "0o17"]
    )
    def test_non_class_safe_literal(self, value: str) -> None:
        with pytest.raises(InvalidNumericLiteralError) as exc_info:
            parse_declarations(f"width: {value}")
        assert exc_info.value.property_name == "width"

    def test_unit_starting_with_x_after_nonzero(self) -> None:
        (rule,) = parse_declarations("zoom: 2x").rules
        assert rule.values == (ir.NumericLiteral(magnitude=2, unit="x"),)

    def test_hyphen_in_value(self) -> None:
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_declarations("color: dark-red")
        assert "prop: color" in exc_info.value.message

    def test_error_carries_location(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse_declarations("display: flex,\ndisplay: block", "<foo>")

        context = exc_info.value.context
        assert context is not None
        assert (context.source, context.line, context.column) == ("<foo>", 2, 1)
        assert str(exc_info.value).startswith("<foo>:2:1")

    def test_error_quotes_offending_line(self) -> None:
        with pytest.raises(DuplicatePropertyError) as exc_info:
            parse_declarations("display: flex,\n  display: block", "<foo>")

        assert str(exc_info.value) == (
            "<foo>:2:3\n"
            "      display: block\n"
            "      ^\n"
            "duplicate rule for property `display`"
        )

    def test_token_input_has_no_snippet(self) -> None:
        with pytest.raises(DuplicatePropertyError) as exc_info:
            parse_declarations(tokenize("display: flex, display: block"))

        assert exc_info.value.context is not None
        assert exc_info.value.context.snippet is None


class TestParseInvocation:
    def test_id_then_declarations(self) -> None:
        fragment_id, rules = parse_invocation("foo, display: flex, width: 5rem")
        assert fragment_id == "foo"
        assert rules.properties() == ["display", "width"]

    def test_missing_comma(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_invocation("foo display: flex")


# ---------------------------------------------------------------------------
# Variable definitions
# ---------------------------------------------------------------------------


class TestParseVariableDefs:
    def test_hex_and_reference(self) -> None:
        defs = parse_variable_defs("red: #EE0F0F, danger: $red")
        assert defs == [
            ir.VariableDefinition(name="red", value="#EE0F0F"),
            ir.VariableDefinition(name="danger", value="var(--red)"),
        ]

    def test_hex_starting_with_digit(self) -> None:
        (definition,) = parse_variable_defs("gray: #0F0F0F")
        assert definition.value == "#0F0F0F"

    def test_hyphenated_name(self) -> None:
        (definition,) = parse_variable_defs("brand-red: #FF0000")
        assert definition.name == "brand-red"
        assert definition.to_css() == "--brand-red: #FF0000;"

    def test_repeated_names_kept_in_order(self) -> None:
        defs = parse_variable_defs("red: #FF0000, red: #EE0000")
        assert [d.value for d in defs] == ["#FF0000", "#EE0000"]

    def test_comments_between_definitions(self) -> None:
        defs = parse_variable_defs("// tokens\nred: #FF0000,\n// semantic\ndanger: $red,")
        assert [d.name for d in defs] == ["red", "danger"]

    def test_plain_value_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse_variable_defs("red: 5")

    def test_missing_value(self) -> None:
        with pytest.raises(ParseError):
            parse_variable_defs("red: , blue: #0000FF")


# ---------------------------------------------------------------------------
# Recipes
# ---------------------------------------------------------------------------


class TestParseRecipe:
    def test_full_recipe(self, button_source: str) -> None:
        recipe = parse_recipe(button_source)

        assert recipe.name == "button"
        assert recipe.base.properties() == ["display"]
        assert recipe.variant_names() == ["visual", "size"]
        assert recipe.variants[0].choice_names() == ["solid", "outline"]
        assert recipe.variants[1].choice_names() == ["sm", "lg"]
        assert recipe.defaults == (("visual", "solid"), ("size", "sm"))

    def test_choice_rules(self, button_source: str) -> None:
        recipe = parse_recipe(button_source)
        solid = recipe.variants[0].get_choice("solid")
        assert solid is not None
        assert solid.rules.properties() == ["background-color", "color"]

    def test_base_only(self) -> None:
        recipe = parse_recipe("box, base: { display: block }")
        assert recipe.variants == ()
        assert recipe.defaults == ()

    def test_single_default_identifier(self) -> None:
        recipe = parse_recipe("box, base: { display: block }, default: sm")
        assert recipe.defaults == (("default", "sm"),)

    def test_braced_default_identifier(self) -> None:
        recipe = parse_recipe("box, base: { display: block }, default: { sm }")
        assert recipe.defaults == (("default", "sm"),)

    def test_unknown_section(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse_recipe("box, base: { display: block }, extras: { color: red }")
        assert exc_info.value.message == "expected base, variants, or default, got: `extras`"

    def test_missing_base(self) -> None:
        with pytest.raises(ParseError, match="requires a `base` section"):
            parse_recipe("box, variants: { size: { sm: { padding: 4 } } }")

    def test_duplicate_section(self) -> None:
        with pytest.raises(ParseError, match="duplicate `base` section"):
            parse_recipe("box, base: { display: block }, base: { display: flex }")

    def test_duplicate_choice(self) -> None:
        source = "box, base: {}, variants: { size: { sm: { padding: 4 }, sm: { padding: 2 } } }"
        with pytest.raises(DuplicateChoiceError):
            parse_recipe(source)

    def test_duplicate_variant(self) -> None:
        source = (
            "box, base: {}, variants: { size: { sm: { padding: 4 } }, "
            "size: { lg: { padding: 8 } } }"
        )
        with pytest.raises(DuplicateChoiceError):
            parse_recipe(source)

    def test_empty_variant(self) -> None:
        with pytest.raises(ParseError, match="at least one choice"):
            parse_recipe("box, base: {}, variants: { size: {} }")

    def test_duplicate_property_in_choice(self) -> None:
        source = "box, base: {}, variants: { size: { sm: { padding: 4, padding: 2 } } }"
        with pytest.raises(DuplicatePropertyError):
            parse_recipe(source)
