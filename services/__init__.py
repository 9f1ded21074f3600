"""
Services Package

Business logic modules for the bar cost application.
"""

from .parsing import (
    parse_size,
    parse_amount,
    parse_price,
    amount_to_oz,
    format_amount,
    price_per_oz,
    normalize_brand_name,
)

from .calculator import (
    CombinationLimitError,
    calculate_recipe_costs,
    cheapest_size,
    recipe_slots,
    suggested_price,
)

__all__ = [
    # Parsing
    'parse_size',
    'parse_amount',
    'parse_price',
    'amount_to_oz',
    'format_amount',
    'price_per_oz',
    'normalize_brand_name',
    # Calculator
    'CombinationLimitError',
    'calculate_recipe_costs',
    'cheapest_size',
    'recipe_slots',
    'suggested_price',
]
