"""
Recipe Cost Calculator

Enumerates every way to source a recipe with one brand per slot and ranks
the resulting costs, profits and margins.
"""

import itertools
import logging
import math

from .parsing import parse_size, parse_amount, amount_to_oz, format_amount, price_per_oz

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMBINATIONS = 10000


class CombinationLimitError(ValueError):
    """Raised when a recipe would expand into too many brand combinations."""

    def __init__(self, count, limit):
        self.count = count
        self.limit = limit
        super().__init__(
            f'Recipe expands to {count} brand combinations (limit {limit}). '
            'Remove some brand options and try again.'
        )


def _size_ml(size):
    """Size in ml from the stored quantity, falling back to the printed label."""
    quantity = getattr(size, 'quantity', None)
    if quantity:
        return quantity
    return parse_size(getattr(size, 'label', None))


def cheapest_size(ingredient):
    """
    Find the size with the lowest price per ounce across all sources.

    Returns (size, price_per_oz) or (None, None) when no size is usable.
    Sizes without a parseable volume or price are skipped.
    """
    best, best_ppo = None, None
    for source in ingredient.sources:
        for size in source.sizes:
            ppo = price_per_oz(size.price, _size_ml(size))
            if ppo is None:
                continue
            if best_ppo is None or ppo < best_ppo:
                best, best_ppo = size, ppo
    return best, best_ppo


def slot_amount_oz(slot):
    """Slot amount in ounces from either an amount string or quantity/unit."""
    amount = slot.get('amount')
    if isinstance(amount, dict):
        quantity, unit = float(amount['quantity']), amount.get('unit', 'oz')
    elif amount is not None and not isinstance(amount, (int, float)):
        quantity, unit = parse_amount(amount)
    else:
        quantity, unit = float(amount if amount is not None else slot['quantity']), slot.get('unit', 'oz')
    return amount_to_oz(quantity, unit), format_amount(quantity, unit)


def recipe_slots(recipe):
    """Convert a Recipe model into calculator slots."""
    return [
        {
            'label': ri.label or (ri.ingredient.name if ri.ingredient else ''),
            'amount': {'quantity': ri.quantity, 'unit': ri.unit},
            'ingredient_ids': ri.candidate_ids,
        }
        for ri in recipe.ingredients
    ]


def suggested_price(total_cost, desired_margin):
    """
    Price that yields the desired margin percent for a given cost.

    Returns None when no margin is requested or the margin is not in [0, 100).
    """
    if desired_margin is None or desired_margin < 0 or desired_margin >= 100:
        return None
    price = total_cost / (1 - desired_margin / 100)
    return {
        'price': round(price, 2),
        'profit_margin': round(desired_margin, 2),
        'profit': round(price - total_cost, 2),
    }


def _brand_options(slot, catalog):
    amount_oz, amount_label = slot_amount_oz(slot)
    options = []
    for ingredient_id in slot.get('ingredient_ids', []):
        ingredient = catalog.get(ingredient_id)
        if ingredient is None:
            continue
        size, ppo = cheapest_size(ingredient)
        if size is None:
            logger.debug("Ingredient %s has no priced sizes, skipping", ingredient_id)
            continue
        options.append({
            'brand_id': ingredient.id,
            'brand_name': ingredient.name,
            'size_used': size.label,
            'price_per_oz': ppo,
            'total_cost': ppo * amount_oz,
            'unit_price': size.price,
        })
    return {
        'label': slot.get('label', ''),
        'amount': amount_label,
        'amount_oz': amount_oz,
        'brand_options': options,
    }


def calculate_recipe_costs(slots, ingredients, menu_price, desired_margin=None,
                           max_combinations=DEFAULT_MAX_COMBINATIONS):
    """
    Calculate every brand combination for a recipe and rank them by cost.

    Args:
        slots: Ordered slots, each a dict with 'label', 'amount' (amount string,
            number of ounces, or {'quantity', 'unit'}) and 'ingredient_ids'
        ingredients: Catalog of ingredient objects (id, name, sources[].sizes[])
        menu_price: Sale price of the finished drink
        desired_margin: Optional target margin percent for suggested prices
        max_combinations: Reject recipes expanding beyond this many combinations

    Returns:
        {'recipe_costs': [...], 'ingredient_costs': [...]} with recipe_costs
        sorted by total_cost ascending (stable).

    Raises:
        CombinationLimitError: if the product of per-slot options exceeds
            max_combinations
    """
    catalog = {ing.id: ing for ing in ingredients}
    ingredient_costs = [_brand_options(slot, catalog) for slot in slots]

    option_lists = [slot['brand_options'] for slot in ingredient_costs]
    if not option_lists:
        return {'recipe_costs': [], 'ingredient_costs': ingredient_costs}

    count = math.prod(len(options) for options in option_lists)
    if count > max_combinations:
        raise CombinationLimitError(count, max_combinations)

    price = menu_price or 0.0
    recipe_costs = []
    for combination in itertools.product(*option_lists):
        total = sum(brand['total_cost'] for brand in combination)
        profit = price - total
        recipe_costs.append({
            'total_cost': total,
            'menu_price': price,
            'profit': profit,
            'profit_margin': profit / price * 100 if price > 0 else None,
            'suggested_price': suggested_price(total, desired_margin),
            'breakdown': [
                {
                    'brand_id': brand['brand_id'],
                    'brand_name': brand['brand_name'],
                    'cost': brand['total_cost'],
                    'size_used': brand['size_used'],
                    'unit_price': brand['unit_price'],
                }
                for brand in combination
            ],
        })

    recipe_costs.sort(key=lambda x: x['total_cost'])
    return {'recipe_costs': recipe_costs, 'ingredient_costs': ingredient_costs}
