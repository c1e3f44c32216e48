"""Pytest configuration and shared fixtures."""

import pytest

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "api: marks tests that exercise the HTTP surface")


# =============================================================================
# Recipe Fixtures
# =============================================================================


@pytest.fixture
def legacy_recipe():
    """Recipe in the legacy shape: bare quantities, servings string, hours/minutes timing."""
    return {
        "name": "Classic Beef Tacos",
        "description": "Weeknight tacos",
        "servings": "Serves 4-6",
        "ingredients": [
            {"name": "ground beef", "quantity": 1, "unit": "lb", "notes": "80/20"},
            {"name": "onion", "quantity": "1", "unit": "small"},
            {"name": "salt", "toTaste": True},
            "Toppings: shredded lettuce, diced tomatoes, cheese",
        ],
        "instructions": [
            {
                "text": "Brown the beef.",
                "timing": {"duration": {"minutes": 6}, "activity": "active"},
            },
            {
                "text": "Simmer until the sauce thickens.",
                "timing": {"duration": {"hours": 0, "minutes": 5}, "activity": "passive"},
            },
            "Serve in warm tortillas.",
        ],
        "miseEnPlace": [{"text": "Dice the onion"}, {"text": "Measure the spices"}],
        "storage": {
            "refrigerated": {"duration": {"iso8601": "P3D"}},
        },
    }


@pytest.fixture
def current_recipe():
    """Recipe in the current shape: structured quantity, yield, scaling modes, ranges."""
    return {
        "$schema": "https://spec.soustack.org/soustack.schema.json",
        "profile": "base",
        "name": "Brown Butter Cookies",
        "yield": {"amount": 24, "unit": "cookies"},
        "servings": "Makes 2 dozen",
        "time": {"total": {"minutes": 75}},
        "ingredients": [
            {"name": "all-purpose flour", "quantity": {"amount": 2.25, "unit": "cups"}},
            {"name": "butter", "quantity": {"amount": 1, "unit": "cup"}, "prep": "browned"},
            {
                "name": "vanilla extract",
                "quantity": {"amount": 1, "unit": "tsp"},
                "scaling": {"mode": "fixed"},
            },
            {"name": "flaky salt", "scaling": {"mode": "toTaste"}},
        ],
        "instructions": [
            {"text": "Brown the butter.", "timing": {"duration": {"minMinutes": 5, "maxMinutes": 7}}},
            {"text": "Chill the dough.", "timing": {"duration": {"minutes": 60}, "activity": "passive"}},
            {"text": "Bake until golden.", "timing": {"completionCue": "edges are golden"}},
        ],
        "storage": {
            "roomTemp": {"duration": {"iso8601": "P5D"}, "notes": "in an airtight container"},
            "frozen": {"duration": {"iso8601": "P3M"}},
        },
    }


@pytest.fixture
def cookie_ingredients():
    """Ingredients for the doubling scenario."""
    return [
        {"name": "all-purpose flour", "quantity": 2.25, "unit": "cups"},
        {"name": "butter", "quantity": 1, "unit": "cup"},
        {"name": "sugar", "quantity": "3/4", "unit": "cup"},
        {"name": "eggs", "quantity": 2, "unit": "large"},
        {"name": "vanilla extract", "quantity": 1, "unit": "tsp", "scaling": {"mode": "fixed"}},
        {"name": "salt", "scaling": {"mode": "toTaste"}},
    ]
