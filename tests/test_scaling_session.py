"""Tests for whole-list scaling and the interactive scaling session."""

import pytest

from recipeshape.ingest.schemas import ScalingMode
from recipeshape.scale.scaling import ScalableIngredient
from recipeshape.scale.session import (
    ScalingSession,
    parse_ingredient_line,
    scale_ingredients,
    to_scalable,
)


class TestToScalable:
    """Tests for projecting raw ingredients onto the scaler's input."""

    def test_plain_line(self):
        """Test a '<qty> <unit> <name>' line is split."""
        assert to_scalable("2 cups flour") == ScalableIngredient(
            name="flour", quantity="2", unit="cups"
        )

    def test_plain_line_mixed_fraction(self):
        """Test a mixed fraction quantity is kept together."""
        parsed = parse_ingredient_line("1 1/2 tsp salt")
        assert parsed.quantity == "1 1/2"
        assert parsed.unit == "tsp"
        assert parsed.name == "salt"

    def test_plain_line_without_unit(self):
        """Test a quantity directly followed by the name."""
        parsed = parse_ingredient_line("3 eggs")
        assert parsed.quantity == "3"
        assert parsed.unit is None
        assert parsed.name == "eggs"

    def test_legacy_mapping(self):
        """Test the legacy bare quantity plus unit shape."""
        assert to_scalable({"name": "flour", "quantity": 2, "unit": "cups"}) == ScalableIngredient(
            name="flour", quantity=2, unit="cups"
        )

    def test_structured_mapping(self):
        """Test the structured quantity shape."""
        scalable = to_scalable({"name": "butter", "quantity": {"amount": 1, "unit": "cup"}})
        assert scalable.quantity == 1
        assert scalable.unit == "cup"

    def test_to_taste_flag(self):
        """Test the legacy to-taste flag becomes the to-taste mode."""
        assert to_scalable({"name": "salt", "toTaste": True}).mode is ScalingMode.TO_TASTE

    def test_unusable_entries(self):
        """Test entries with nothing to scale are skipped."""
        assert to_scalable(42) is None
        assert to_scalable({"quantity": 2}) is None


class TestScaleIngredients:
    """Tests for scale_ingredients."""

    def test_doubling(self, cookie_ingredients):
        """Test doubling a recipe from 4 to 8 servings."""
        result = scale_ingredients("4 servings", cookie_ingredients, 8)

        assert result.original_servings == 4
        assert result.target_servings == 8
        assert result.scale_factor == 2
        assert result.can_scale is True
        assert result.is_scaled is True
        assert [item.scaled for item in result.items] == [
            "4½ cups all-purpose flour",
            "2 cup butter",
            "1½ cup sugar",
            "4 large eggs",
            "1 tsp vanilla extract",
            "salt (to taste)",
        ]
        assert [item.id for item in result.items] == [f"ing-{i}" for i in range(6)]

    def test_original_text(self, cookie_ingredients):
        """Test each item keeps its unscaled text."""
        result = scale_ingredients("4 servings", cookie_ingredients, 8)
        assert result.items[0].original == "2¼ cups all-purpose flour"
        assert result.items[2].original == "¾ cup sugar"

    def test_item_flags(self, cookie_ingredients):
        """Test per-item scaled and eligible flags."""
        result = scale_ingredients("4 servings", cookie_ingredients, 8)
        flour, vanilla, salt = result.items[0], result.items[4], result.items[5]

        assert flour.is_scaled and flour.can_scale
        assert not vanilla.is_scaled and not vanilla.can_scale
        assert not salt.is_scaled and not salt.can_scale

    def test_same_target_is_identity(self, cookie_ingredients):
        """Test scaling to the original servings changes nothing."""
        result = scale_ingredients("4 servings", cookie_ingredients, 4)

        assert result.scale_factor == 1
        assert result.is_scaled is False
        for item in result.items:
            assert item.scaled == item.original
            assert item.is_scaled is False

    def test_scaling_disabled(self, cookie_ingredients):
        """Test disabled scaling keeps every original line."""
        result = scale_ingredients("4 servings", cookie_ingredients, 8, scaling_enabled=False)

        assert result.can_scale is False
        assert result.scale_factor == 1
        assert all(item.scaled == item.original for item in result.items)

    def test_servings_without_number(self, cookie_ingredients):
        """Test a servings label without a number cannot scale."""
        result = scale_ingredients("a crowd", cookie_ingredients, 8)

        assert result.original_servings is None
        assert result.can_scale is False
        assert result.scale_factor == 1

    def test_nothing_eligible(self):
        """Test a list of only to-taste items cannot scale."""
        result = scale_ingredients("4 servings", [{"name": "salt", "toTaste": True}], 8)
        assert result.can_scale is False
        assert result.items[0].scaled == "salt (to taste)"

    @pytest.mark.parametrize(("target", "expected"), [(0, 1), (-3, 1), (2.6, 3), (2.5, 3)])
    def test_target_is_clamped(self, target, expected):
        """Test the target is rounded and clamped to at least 1."""
        result = scale_ingredients("4 servings", [{"name": "flour", "quantity": 2}], target)
        assert result.target_servings == expected

    def test_sections_are_flattened(self):
        """Test grouped ingredients are scaled alongside plain ones."""
        ingredients = [
            {"section": {"name": "Dough", "items": [{"name": "flour", "quantity": 2, "unit": "cups"}]}},
            "1 tsp salt",
        ]
        result = scale_ingredients("2 servings", ingredients, 4)
        assert [item.scaled for item in result.items] == ["4 cups flour", "2 tsp salt"]

    def test_non_list_ingredients(self):
        """Test a non-list ingredients value scales to nothing."""
        result = scale_ingredients("4 servings", "flour", 8)
        assert result.items == []
        assert result.can_scale is False


class TestScalingSession:
    """Tests for ScalingSession."""

    def test_starts_at_original_servings(self, cookie_ingredients):
        """Test the initial target is the original servings."""
        session = ScalingSession("4 servings", cookie_ingredients)
        assert session.target_servings == 4
        assert session.result().is_scaled is False

    def test_default_target_without_number(self, cookie_ingredients):
        """Test the default target is used when servings has no number."""
        session = ScalingSession("varies", cookie_ingredients, default_target=6)
        assert session.target_servings == 6

    def test_increment_and_decrement(self, cookie_ingredients):
        """Test stepping the target up and down."""
        session = ScalingSession("4 servings", cookie_ingredients)
        session.increment()
        assert session.target_servings == 5
        session.decrement()
        session.decrement()
        assert session.target_servings == 3

    def test_decrement_stops_at_one(self):
        """Test the target never drops below 1."""
        session = ScalingSession("1 serving", [{"name": "egg", "quantity": 1}])
        session.decrement()
        assert session.target_servings == 1

    def test_set_target(self, cookie_ingredients):
        """Test setting an explicit target rounds and clamps it."""
        session = ScalingSession("4 servings", cookie_ingredients)
        session.set_target(8)
        assert session.result().scale_factor == 2
        session.set_target(0)
        assert session.target_servings == 1

    def test_reset(self, cookie_ingredients):
        """Test reset returns to the original servings."""
        session = ScalingSession("4 servings", cookie_ingredients)
        session.set_target(12)
        session.reset()
        assert session.target_servings == 4

    def test_reset_without_original(self, cookie_ingredients):
        """Test reset keeps the target when the original is unknown."""
        session = ScalingSession("varies", cookie_ingredients)
        session.set_target(7)
        session.reset()
        assert session.target_servings == 7

    def test_reset_clamps_zero_servings(self, cookie_ingredients):
        """Test reset never returns a target below 1."""
        session = ScalingSession("0 servings", cookie_ingredients)
        session.set_target(6)
        session.reset()
        assert session.target_servings == 1


class TestScalingEdgeCases:
    """Tests for blank lines, overflow and repeat calls."""

    def test_blank_line_keeps_positions(self):
        """Test a blank ingredient line keeps its slot and id."""
        result = scale_ingredients("2 servings", ["2 cups flour", "", "1 tsp salt"], 4)

        assert [item.id for item in result.items] == ["ing-0", "ing-1", "ing-2"]
        assert result.items[1].scaled == ""
        assert result.items[1].can_scale is False
        assert result.items[2].scaled == "2 tsp salt"

    def test_overflowing_quantity_keeps_original(self):
        """Test a quantity that overflows when scaled stays unscaled."""
        result = scale_ingredients("2 servings", [{"name": "x", "quantity": 1e308, "unit": "g"}], 4)

        item = result.items[0]
        assert result.scale_factor == 2
        assert item.is_scaled is False
        assert item.scaled == item.original

    def test_huge_servings_number(self):
        """Test a servings label with an absurdly long number does not fail."""
        result = scale_ingredients("9" * 5000 + " servings", [{"name": "flour", "quantity": 2}], 4)
        assert result.original_servings is None
        assert result.can_scale is False

    def test_idempotent(self, cookie_ingredients):
        """Test scaling the same list twice gives equal results."""
        first = scale_ingredients("4 servings", cookie_ingredients, 6)
        second = scale_ingredients("4 servings", cookie_ingredients, 6)
        assert first == second
