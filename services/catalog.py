"""
Catalog Service

Queries and write operations for ingredients, recipes and menus, plus the
JSON shapes the API returns.
"""

import logging

from sqlalchemy import func, or_

from constants import (
    CUSTOM_SOURCE_NAME, MAX_LENGTHS, MAX_PRICE, MAX_QUANTITY, VALID_AMOUNT_UNITS
)
from models.base import utcnow
from models import (
    db, Ingredient, IngredientSource, IngredientSize, Recipe, RecipeIngredient, Menu, MenuRecipe
)
from utils.forms import safe_float
from utils.sanitizer import sanitize_name, sanitize_text
from .calculator import calculate_recipe_costs, cheapest_size, recipe_slots, CombinationLimitError
from .parsing import parse_size, parse_amount, price_per_oz

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised with a user-facing message when submitted data is invalid."""
    pass


# ============================================
# INGREDIENTS
# ============================================

def visible_ingredients_query(user_id):
    """Global catalog entries plus the user's own custom ingredients."""
    return Ingredient.query.filter(
        or_(Ingredient.created_by.is_(None), Ingredient.created_by == user_id)
    )


def visible_ingredients(user_id):
    return visible_ingredients_query(user_id).order_by(Ingredient.name).all()


def _build_size(label, price):
    label = sanitize_text(label, max_length=MAX_LENGTHS['size_label'])
    ml = parse_size(label)
    if ml is None:
        raise ValidationError(f'Invalid size: {label or "(empty)"}')
    price = safe_float(price, default=None, min_val=0.0, max_val=MAX_PRICE)
    if price is None:
        raise ValidationError(f'Invalid price for size {label}')
    return IngredientSize(
        label=label, unit='ml', quantity=ml, price=price, regular_price=price,
        discount=0.0, unit_price=price_per_oz(price, ml),
    )


def create_custom_ingredient(user_id, name, sizes=None):
    """
    Create a user-owned ingredient with a single CUSTOM source.

    sizes: optional list of {'label': '750ml', 'price': 19.99}
    """
    name = sanitize_name(name, max_length=MAX_LENGTHS['ingredient_name'])
    if not name:
        raise ValidationError('Ingredient name is required')

    existing = Ingredient.query.filter(
        Ingredient.created_by == user_id, func.lower(Ingredient.name) == name.lower()
    ).first()
    if existing:
        raise ValidationError(f'"{name}" already exists in your ingredients')

    source = IngredientSource(name=CUSTOM_SOURCE_NAME)
    for size in sizes or []:
        if not isinstance(size, dict):
            raise ValidationError('Invalid size entry')
        source.sizes.append(_build_size(size.get('label'), size.get('price')))

    ingredient = Ingredient(name=name, created_by=user_id, sources=[source])
    db.session.add(ingredient)
    db.session.commit()
    logger.info("User %s created custom ingredient %s", user_id, ingredient.id)
    return ingredient


def catalog_rows(ingredients, search='', sort_by=None, reverse=False):
    """
    Build catalog table rows with each ingredient's best-value size.

    Filters by name or alcohol type and sorts by one of
    name, type, size, price, unit_price. Ingredients without a priced size
    sort after the rest.
    """
    query = (search or '').lower().strip()
    rows = []
    for ing in ingredients:
        if query and query not in ing.name.lower() and query not in (ing.alcohol_type or '').lower():
            continue
        size, ppo = cheapest_size(ing)
        rows.append({
            'ingredient': ing,
            'best_size': size,
            'price_per_oz': ppo,
            'size_ml': (size.quantity or parse_size(size.label)) if size else None,
        })

    sort_keys = {
        'name': lambda r: r['ingredient'].name.lower(),
        'type': lambda r: (r['ingredient'].alcohol_type or '').lower(),
        'size': lambda r: r['size_ml'],
        'price': lambda r: r['best_size'].price if r['best_size'] else None,
        'unit_price': lambda r: r['price_per_oz'],
    }
    if sort_by in sort_keys:
        key = sort_keys[sort_by]
        priced = [r for r in rows if key(r) is not None]
        unpriced = [r for r in rows if key(r) is None]
        rows = sorted(priced, key=key, reverse=reverse) + unpriced
    return rows


# ============================================
# RECIPES
# ============================================

def parse_slots(raw_slots, visible_ids):
    """
    Validate submitted recipe slots.

    Each slot: {'ingredientId', 'options'?, 'label'?, 'amount'} where amount
    is {'unit', 'quantity'} or an amount string like '1.5oz'.
    Returns normalized dicts with ingredient_id, option_ids, label, quantity, unit.
    """
    if not isinstance(raw_slots, list) or not raw_slots:
        raise ValidationError('At least one ingredient is required')

    slots = []
    for raw in raw_slots:
        if not isinstance(raw, dict):
            raise ValidationError('Invalid ingredient structure')

        ids = [raw.get('ingredientId')] + list(raw.get('options') or [])
        try:
            ids = [int(i) for i in ids if i not in (None, '')]
        except (TypeError, ValueError):
            raise ValidationError('Invalid ingredient structure')
        if not ids:
            raise ValidationError('Invalid ingredient structure')
        unknown = [i for i in ids if i not in visible_ids]
        if unknown:
            raise ValidationError(f'Unknown ingredient: {unknown[0]}')

        amount = raw.get('amount')
        try:
            if isinstance(amount, dict):
                quantity, unit = float(amount.get('quantity')), str(amount.get('unit') or '').lower()
            else:
                quantity, unit = parse_amount(amount)
        except (TypeError, ValueError):
            raise ValidationError('Invalid ingredient amount')
        if unit not in VALID_AMOUNT_UNITS or not 0 < quantity <= MAX_QUANTITY:
            raise ValidationError('Invalid ingredient amount')

        slots.append({
            'ingredient_id': ids[0],
            'option_ids': list(dict.fromkeys(ids[1:])),
            'label': sanitize_name(raw.get('label'), max_length=MAX_LENGTHS['slot_label']),
            'quantity': quantity,
            'unit': unit,
        })
    return slots


def _recipe_fields(name, notes, menu_price):
    name = sanitize_name(name, max_length=MAX_LENGTHS['recipe_name'])
    if not name:
        raise ValidationError('Recipe name is required')
    notes = sanitize_text(notes, max_length=MAX_LENGTHS['notes'])
    menu_price = safe_float(menu_price, default=None, min_val=0.0, max_val=MAX_PRICE)
    return name, notes, menu_price


def _slot_models(slots):
    option_ids = {i for slot in slots for i in slot['option_ids']}
    options = {ing.id: ing for ing in Ingredient.query.filter(Ingredient.id.in_(option_ids)).all()} if option_ids else {}
    return [
        RecipeIngredient(
            position=position,
            label=slot['label'],
            ingredient_id=slot['ingredient_id'],
            quantity=slot['quantity'],
            unit=slot['unit'],
            options=[options[i] for i in slot['option_ids'] if i in options],
        )
        for position, slot in enumerate(slots)
    ]


def create_recipe(user_id, name, slots, notes='', menu_price=None):
    name, notes, menu_price = _recipe_fields(name, notes, menu_price)
    recipe = Recipe(name=name, notes=notes, menu_price=menu_price, created_by=user_id,
                    ingredients=_slot_models(slots))
    db.session.add(recipe)
    db.session.commit()
    logger.info("User %s created recipe %s", user_id, recipe.id)
    return recipe


def update_recipe(recipe, name, slots, notes='', menu_price=None):
    name, notes, menu_price = _recipe_fields(name, notes, menu_price)
    recipe.name = name
    recipe.notes = notes
    recipe.menu_price = menu_price
    recipe.ingredients = _slot_models(slots)
    recipe.updated_at = utcnow()
    db.session.commit()
    return recipe


def recipe_costs(recipe, ingredients, menu_price=None, desired_margin=None, max_combinations=10000):
    """Run the calculator for a stored recipe, defaulting to its own menu price."""
    if menu_price is None:
        menu_price = recipe.menu_price
    return calculate_recipe_costs(recipe_slots(recipe), ingredients, menu_price,
                                  desired_margin=desired_margin, max_combinations=max_combinations)


def cheapest_recipe_cost(recipe, ingredients, menu_price=None, max_combinations=10000):
    """Cheapest combination for a recipe, or None if it cannot be sourced."""
    try:
        costs = recipe_costs(recipe, ingredients, menu_price=menu_price, max_combinations=max_combinations)
    except CombinationLimitError:
        return None
    return costs['recipe_costs'][0] if costs['recipe_costs'] else None


# ============================================
# MENUS
# ============================================

def parse_menu_entries(raw_entries, user_id):
    """Validate [{'recipeId', 'price'}] entries against the user's recipes."""
    if raw_entries is None:
        return []
    if not isinstance(raw_entries, list):
        raise ValidationError('Menu recipes must be a list')

    owned = {r.id for r in Recipe.query.filter_by(created_by=user_id).with_entities(Recipe.id)}
    entries = []
    for raw in raw_entries:
        if not isinstance(raw, dict):
            raise ValidationError('Invalid menu recipe entry')
        try:
            recipe_id = int(raw.get('recipeId'))
        except (TypeError, ValueError):
            raise ValidationError('Invalid menu recipe entry')
        if recipe_id not in owned:
            raise ValidationError(f'Unknown recipe: {recipe_id}')
        price = safe_float(raw.get('price'), default=None, min_val=0.0, max_val=MAX_PRICE)
        if price is None:
            raise ValidationError('Invalid menu price')
        entries.append({'recipe_id': recipe_id, 'price': price})
    return entries


def save_menu(user_id, name, entries, menu=None):
    """Create a menu, or replace name and entries of an existing one."""
    name = sanitize_name(name, max_length=MAX_LENGTHS['menu_name'])
    if not name:
        raise ValidationError('Menu name is required')

    if menu is None:
        menu = Menu(created_by=user_id)
        db.session.add(menu)
    menu.name = name
    menu.recipes = [MenuRecipe(recipe_id=e['recipe_id'], price=e['price']) for e in entries]
    menu.updated_at = utcnow()
    db.session.commit()
    return menu


def add_recipe_to_menus(recipe, raw_menus, user_id):
    """
    Put a newly created recipe on each listed menu.

    raw_menus: [{'id'?, 'name', 'price'}]. Menus with an id get a new entry;
    menus without one are created holding just this recipe. A failure on one
    menu is logged and the rest continue. Returns ids of updated menus.
    """
    updated = []
    for raw in raw_menus or []:
        if not isinstance(raw, dict) or not raw.get('name'):
            continue
        try:
            price = safe_float(raw.get('price'), default=None, min_val=0.0, max_val=MAX_PRICE)
            if price is None:
                raise ValidationError('Invalid menu price')

            if raw.get('id'):
                menu = Menu.query.filter_by(id=int(raw['id']), created_by=user_id).first()
                if menu is None:
                    raise ValidationError(f"Menu {raw['id']} not found")
                menu.recipes.append(MenuRecipe(recipe_id=recipe.id, price=price))
                menu.updated_at = utcnow()
                db.session.commit()
            else:
                entries = [{'recipe_id': recipe.id, 'price': price}]
                menu = save_menu(user_id, raw['name'], entries)
            updated.append(menu.id)
        except Exception as e:
            db.session.rollback()
            logger.error("Error updating menu %s: %s", raw.get('id') or raw.get('name'), e)
    return updated


def menu_summary(menu, ingredients, max_combinations=10000):
    """
    Per-entry cheapest cost, profit and margin for a menu, plus totals.

    Totals only count entries that could be costed; 'uncosted' is the
    number of entries left out.
    """
    rows = []
    revenue = cost = 0.0
    uncosted = 0
    for entry in menu.recipes:
        best = cheapest_recipe_cost(entry.recipe, ingredients, menu_price=entry.price,
                                    max_combinations=max_combinations)
        rows.append({'entry': entry, 'recipe': entry.recipe, 'price': entry.price, 'best': best})
        if best is None:
            uncosted += 1
            continue
        revenue += entry.price
        cost += best['total_cost']
    profit = revenue - cost
    return {
        'rows': rows,
        'revenue': revenue,
        'cost': cost,
        'profit': profit,
        'profit_margin': profit / revenue * 100 if revenue > 0 else None,
        'uncosted': uncosted,
    }


# ============================================
# SERIALIZATION
# ============================================

def ingredient_to_dict(ingredient):
    return {
        'id': ingredient.id,
        'name': ingredient.name,
        'alcoholType': ingredient.alcohol_type,
        'proof': ingredient.proof,
        'createdBy': ingredient.created_by,
        'sources': [
            {
                'name': source.name,
                'sizes': [
                    {
                        'code': size.code,
                        'label': size.label,
                        'unit': size.unit,
                        'quantity': size.quantity,
                        'price': size.price,
                        'discount': size.discount,
                        'unitPrice': size.unit_price,
                    }
                    for size in source.sizes
                ],
            }
            for source in ingredient.sources
        ],
    }


def recipe_to_dict(recipe):
    return {
        'id': recipe.id,
        'name': recipe.name,
        'notes': recipe.notes,
        'menuPrice': recipe.menu_price,
        'createdBy': recipe.created_by,
        'createdAt': recipe.created_at.isoformat() if recipe.created_at else None,
        'updatedAt': recipe.updated_at.isoformat() if recipe.updated_at else None,
        'ingredients': [
            {
                'ingredientId': ri.ingredient_id,
                'options': [ing.id for ing in ri.options],
                'label': ri.label,
                'amount': {'unit': ri.unit, 'quantity': ri.quantity},
            }
            for ri in recipe.ingredients
        ],
    }


def menu_to_dict(menu):
    return {
        'id': menu.id,
        'name': menu.name,
        'createdBy': menu.created_by,
        'createdAt': menu.created_at.isoformat() if menu.created_at else None,
        'updatedAt': menu.updated_at.isoformat() if menu.updated_at else None,
        'recipes': [{'recipeId': e.recipe_id, 'price': e.price} for e in menu.recipes],
    }
