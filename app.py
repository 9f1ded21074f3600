from flask import Flask, render_template, request, redirect, url_for, flash, jsonify
from flask_migrate import Migrate
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from sqlalchemy.orm import joinedload, selectinload
import json
import logging

import click

from config import get_config
from constants import VALID_INGREDIENT_SORTS, MAX_PRICE
from models import db, User, Ingredient, IngredientSource, Recipe, RecipeIngredient, Menu, MenuRecipe
from services.auth import AuthError, register_user, authenticate
from services.calculator import calculate_recipe_costs, CombinationLimitError
from services.catalog import (
    ValidationError, visible_ingredients, visible_ingredients_query, create_custom_ingredient,
    catalog_rows, parse_slots, create_recipe, update_recipe, recipe_costs, cheapest_recipe_cost,
    parse_menu_entries, save_menu, add_recipe_to_menus, menu_summary,
    ingredient_to_dict, recipe_to_dict, menu_to_dict,
)
from services.parsing import format_amount
from services.scraper import run_scrape
from utils.forms import safe_float, safe_int

app = Flask(__name__)
app.config.from_object(get_config())

logging.basicConfig(
    level=app.config['LOG_LEVEL'],
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

db.init_app(app)
migrate = Migrate(app, db)

login_manager = LoginManager(app)
login_manager.login_view = 'login'
login_manager.login_message = 'Please sign in to continue.'
login_manager.login_message_category = 'warning'


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    if request.path.startswith('/api/'):
        return json_error('Authentication required', 401)
    flash(login_manager.login_message, login_manager.login_message_category)
    return redirect(url_for('login', next=request.path))


def money(value):
    """Format a number as dollars for display."""
    if value is None:
        return 'n/a'
    return f"${value:,.2f}"


def percent(value):
    if value is None:
        return 'n/a'
    return f"{value:.1f}%"


app.jinja_env.filters['money'] = money
app.jinja_env.filters['percent'] = percent


def json_error(message, status):
    return jsonify({'error': message}), status


@app.errorhandler(404)
def not_found(e):
    if request.path.startswith('/api/'):
        return json_error('Not found', 404)
    return render_template('error.html', code=404, message='Page not found'), 404


@app.errorhandler(405)
def method_not_allowed(e):
    if request.path.startswith('/api/'):
        return json_error('Method not allowed', 405)
    return render_template('error.html', code=405, message='Method not allowed'), 405


def _visible_ids(ingredients):
    return {ing.id for ing in ingredients}


def _slots_from_form(form):
    """
    Collect raw recipe slots from the recipe form.

    Accepts either an 'ingredients' JSON field (same shape as the API) or
    numbered rows: slots-<i>-label / -amount / -ingredient / -options.
    """
    if form.get('ingredients'):
        try:
            slots = json.loads(form['ingredients'])
        except ValueError:
            raise ValidationError('Invalid ingredients data')
        if not isinstance(slots, list):
            raise ValidationError('Invalid ingredients data')
        return slots

    slots = []
    count = safe_int(form.get('slot_count'), default=0, min_val=0, max_val=50)
    for i in range(count):
        ingredient_id = form.get(f'slots-{i}-ingredient', '').strip()
        amount = form.get(f'slots-{i}-amount', '').strip()
        if not ingredient_id and not amount:
            continue  # blank row
        slots.append({
            'label': form.get(f'slots-{i}-label', ''),
            'amount': amount,
            'ingredientId': ingredient_id,
            'options': form.getlist(f'slots-{i}-options'),
        })
    return slots


def _calculator_slots(slots):
    """Validated slots (from parse_slots) in the shape the calculator takes."""
    return [
        {
            'label': s['label'],
            'amount': {'quantity': s['quantity'], 'unit': s['unit']},
            'ingredient_ids': [s['ingredient_id']] + s['option_ids'],
        }
        for s in slots
    ]


def _recipe_form_slots(recipe):
    """Raw slots for pre-filling the recipe form from a stored recipe."""
    return [
        {
            'label': ri.label,
            'amount': format_amount(ri.quantity, ri.unit),
            'ingredientId': ri.ingredient_id,
            'options': [ing.id for ing in ri.options],
        }
        for ri in recipe.ingredients
    ]


def _load_recipe(id):
    return Recipe.query.options(
        selectinload(Recipe.ingredients).selectinload(RecipeIngredient.options),
        selectinload(Recipe.ingredients).joinedload(RecipeIngredient.ingredient),
    ).filter_by(id=id, created_by=current_user.id).first_or_404()


def _catalog():
    """Visible ingredients with sources and sizes eagerly loaded."""
    return visible_ingredients_query(current_user.id).options(
        selectinload(Ingredient.sources).selectinload(IngredientSource.sizes)
    ).order_by(Ingredient.name).all()


# ============================================
# ROUTES - AUTH
# ============================================

@app.route('/auth/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('index'))

    error = None
    if request.method == 'POST':
        try:
            user = authenticate(request.form.get('email', ''), request.form.get('password', ''))
        except AuthError:
            error = 'Invalid credentials. Please try again.'
        else:
            login_user(user)
            next_url = request.args.get('next', '')
            # Only follow local redirects
            if not next_url.startswith('/') or next_url.startswith('//'):
                next_url = url_for('index')
            return redirect(next_url)

    return render_template('login.html', error=error, email=request.form.get('email', ''))


@app.route('/auth/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('index'))

    error = None
    if request.method == 'POST':
        name = request.form.get('name', '')
        email = request.form.get('email', '')
        password = request.form.get('password', '')
        confirm = request.form.get('confirmPassword', '')

        if not name or not email or not password or not confirm:
            error = 'All fields are required'
        elif password != confirm:
            error = 'Passwords do not match'
        else:
            try:
                user = register_user(name, email, password)
            except AuthError as e:
                error = str(e)
            else:
                login_user(user)
                flash(f'Welcome, {user.name}!', 'success')
                return redirect(url_for('index'))

    return render_template('register.html', error=error,
                           name=request.form.get('name', ''), email=request.form.get('email', ''))


@app.route('/auth/logout', methods=['GET', 'POST'])
def logout():
    logout_user()
    return redirect(url_for('login'))


# ============================================
# ROUTES - HOME
# ============================================

@app.route('/')
@login_required
def index():
    counts = {
        'ingredients': visible_ingredients_query(current_user.id).count(),
        'recipes': Recipe.query.filter_by(created_by=current_user.id).count(),
        'menus': Menu.query.filter_by(created_by=current_user.id).count(),
    }
    recent = Recipe.query.filter_by(created_by=current_user.id).order_by(Recipe.updated_at.desc()).limit(5).all()
    return render_template('index.html', counts=counts, recent=recent)


@app.route('/profile')
@login_required
def profile():
    return render_template('profile.html', user=current_user)


# ============================================
# ROUTES - INGREDIENTS
# ============================================

@app.route('/ingredients')
@login_required
def ingredients_list():
    search = request.args.get('q', '')
    sort_by = request.args.get('sort', 'name')
    if sort_by not in VALID_INGREDIENT_SORTS:
        sort_by = 'name'
    reverse = request.args.get('reverse') == '1'

    rows = catalog_rows(_catalog(), search=search, sort_by=sort_by, reverse=reverse)
    return render_template('ingredients.html', rows=rows, search=search, sort_by=sort_by, reverse=reverse)


@app.route('/ingredient/add', methods=['POST'])
@login_required
def ingredient_add():
    sizes = []
    size_label = request.form.get('size', '').strip()
    if size_label:
        sizes.append({'label': size_label, 'price': request.form.get('price', '')})

    try:
        ingredient = create_custom_ingredient(current_user.id, request.form.get('name', ''), sizes)
    except ValidationError as e:
        flash(str(e), 'danger')
        return redirect(url_for('ingredients_list'))

    flash(f'Ingredient "{ingredient.name}" added!', 'success')
    return redirect(url_for('ingredient_view', id=ingredient.id))


@app.route('/ingredient/<int:id>')
@login_required
def ingredient_view(id):
    ingredient = visible_ingredients_query(current_user.id).filter(Ingredient.id == id).first_or_404()
    return render_template('ingredient_view.html', ingredient=ingredient)


# ============================================
# ROUTES - RECIPES
# ============================================

@app.route('/recipes')
@login_required
def recipes_list():
    recipes = Recipe.query.options(
        selectinload(Recipe.ingredients).selectinload(RecipeIngredient.options)
    ).filter_by(created_by=current_user.id).order_by(Recipe.name).all()
    catalog = _catalog()
    cheapest = {
        r.id: cheapest_recipe_cost(r, catalog, max_combinations=app.config['MAX_COMBINATIONS'])
        for r in recipes
    }
    return render_template('recipes.html', recipes=recipes, cheapest=cheapest)


def _render_recipe_form(recipe, ingredients, fields, result=None):
    return render_template('recipe_form.html', recipe=recipe, ingredients=ingredients,
                           fields=fields, result=result)


def _handle_recipe_form(recipe=None):
    """Shared POST handling for add/edit: 'calculate' previews, 'save' persists."""
    ingredients = _catalog()
    fields = {
        'name': request.form.get('name', ''),
        'menu_price': request.form.get('menu_price', ''),
        'margin': request.form.get('margin', ''),
        'notes': request.form.get('notes', ''),
        'slots': [],
    }

    try:
        fields['slots'] = _slots_from_form(request.form)
        slots = parse_slots(fields['slots'], _visible_ids(ingredients))
    except ValidationError as e:
        flash(str(e), 'danger')
        return _render_recipe_form(recipe, ingredients, fields)

    if request.form.get('action') == 'calculate':
        try:
            result = calculate_recipe_costs(
                _calculator_slots(slots), ingredients,
                safe_float(fields['menu_price'], default=None, min_val=0.0, max_val=MAX_PRICE),
                desired_margin=safe_float(fields['margin'], default=None),
                max_combinations=app.config['MAX_COMBINATIONS'],
            )
        except CombinationLimitError as e:
            flash(str(e), 'warning')
            result = None
        return _render_recipe_form(recipe, ingredients, fields, result=result)

    try:
        if recipe is None:
            recipe = create_recipe(current_user.id, fields['name'], slots,
                                   notes=fields['notes'], menu_price=fields['menu_price'])
            flash(f'Recipe "{recipe.name}" created!', 'success')
        else:
            update_recipe(recipe, fields['name'], slots,
                          notes=fields['notes'], menu_price=fields['menu_price'])
            flash(f'Recipe "{recipe.name}" updated!', 'success')
    except ValidationError as e:
        db.session.rollback()
        flash(str(e), 'danger')
        return _render_recipe_form(recipe, ingredients, fields)

    return redirect(url_for('recipe_view', id=recipe.id))


@app.route('/recipe/add', methods=['GET', 'POST'])
@login_required
def recipe_add():
    if request.method == 'POST':
        return _handle_recipe_form()

    fields = {'name': '', 'menu_price': '', 'margin': '', 'notes': '', 'slots': []}
    return _render_recipe_form(None, _catalog(), fields)


@app.route('/recipe/<int:id>')
@login_required
def recipe_view(id):
    recipe = _load_recipe(id)
    menu_price = safe_float(request.args.get('menu_price'), default=None, min_val=0.0, max_val=MAX_PRICE)
    margin = safe_float(request.args.get('margin'), default=None)

    result = None
    try:
        result = recipe_costs(recipe, _catalog(), menu_price=menu_price, desired_margin=margin,
                              max_combinations=app.config['MAX_COMBINATIONS'])
    except CombinationLimitError as e:
        flash(str(e), 'warning')

    menus = MenuRecipe.query.join(Menu).filter(
        MenuRecipe.recipe_id == recipe.id, Menu.created_by == current_user.id
    ).all()
    return render_template('recipe_view.html', recipe=recipe, result=result, menus=menus,
                           menu_price=menu_price if menu_price is not None else recipe.menu_price,
                           margin=margin)


@app.route('/recipe/<int:id>/edit', methods=['GET', 'POST'])
@login_required
def recipe_edit(id):
    recipe = _load_recipe(id)
    if request.method == 'POST':
        return _handle_recipe_form(recipe)

    fields = {
        'name': recipe.name,
        'menu_price': '' if recipe.menu_price is None else f"{recipe.menu_price:.2f}",
        'margin': '',
        'notes': recipe.notes or '',
        'slots': _recipe_form_slots(recipe),
    }
    return _render_recipe_form(recipe, _catalog(), fields)


@app.route('/tools')
@login_required
def tools():
    """Margin tool: analyze any of the user's recipes at a given price and target margin."""
    recipes = Recipe.query.filter_by(created_by=current_user.id).order_by(Recipe.name).all()
    recipe_id = safe_int(request.args.get('recipe_id'), default=None)
    menu_price = safe_float(request.args.get('menu_price'), default=None, min_val=0.0, max_val=MAX_PRICE)
    margin = safe_float(request.args.get('margin'), default=None)

    selected = None
    result = None
    if recipe_id is not None:
        selected = _load_recipe(recipe_id)
        try:
            result = recipe_costs(selected, _catalog(), menu_price=menu_price, desired_margin=margin,
                                  max_combinations=app.config['MAX_COMBINATIONS'])
        except CombinationLimitError as e:
            flash(str(e), 'warning')

    return render_template('tools.html', recipes=recipes, selected=selected, result=result,
                           menu_price=menu_price, margin=margin)


# ============================================
# ROUTES - MENUS
# ============================================

def _entries_from_form(form):
    entries = []
    count = safe_int(form.get('entry_count'), default=0, min_val=0, max_val=100)
    for i in range(count):
        recipe_id = form.get(f'entries-{i}-recipe', '').strip()
        if not recipe_id:
            continue
        entries.append({'recipeId': recipe_id, 'price': form.get(f'entries-{i}-price', '')})
    return entries


@app.route('/menus')
@login_required
def menus_list():
    menus = Menu.query.options(
        selectinload(Menu.recipes).joinedload(MenuRecipe.recipe)
    ).filter_by(created_by=current_user.id).order_by(Menu.name).all()
    recipes = Recipe.query.filter_by(created_by=current_user.id).order_by(Recipe.name).all()
    return render_template('menus.html', menus=menus, recipes=recipes)


@app.route('/menu/add', methods=['POST'])
@login_required
def menu_add():
    try:
        entries = parse_menu_entries(_entries_from_form(request.form), current_user.id)
        menu = save_menu(current_user.id, request.form.get('name', ''), entries)
    except ValidationError as e:
        db.session.rollback()
        flash(str(e), 'danger')
        return redirect(url_for('menus_list'))

    flash(f'Menu "{menu.name}" created!', 'success')
    return redirect(url_for('menu_view', id=menu.id))


@app.route('/menu/<int:id>')
@login_required
def menu_view(id):
    menu = Menu.query.filter_by(id=id, created_by=current_user.id).first_or_404()
    summary = menu_summary(menu, _catalog(), max_combinations=app.config['MAX_COMBINATIONS'])
    return render_template('menu_view.html', menu=menu, summary=summary)


@app.route('/menu/<int:id>/edit', methods=['GET', 'POST'])
@login_required
def menu_edit(id):
    menu = Menu.query.filter_by(id=id, created_by=current_user.id).first_or_404()
    recipes = Recipe.query.filter_by(created_by=current_user.id).order_by(Recipe.name).all()

    if request.method == 'POST':
        try:
            entries = parse_menu_entries(_entries_from_form(request.form), current_user.id)
            save_menu(current_user.id, request.form.get('name', ''), entries, menu=menu)
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'danger')
            return redirect(url_for('menu_edit', id=id))
        flash(f'Menu "{menu.name}" updated!', 'success')
        return redirect(url_for('menu_view', id=id))

    return render_template('menu_form.html', menu=menu, recipes=recipes)


# ============================================
# ROUTES - JSON API
# ============================================

def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON body')
    return data


@app.route('/api/ingredients', methods=['POST'])
@login_required
def api_ingredients():
    try:
        data = _json_body()
        ingredient = create_custom_ingredient(current_user.id, data.get('name'), data.get('sizes'))
    except ValidationError as e:
        db.session.rollback()
        return json_error(str(e), 400)
    except Exception as e:
        db.session.rollback()
        app.logger.exception("Error creating ingredient")
        return json_error(str(e), 500)

    return jsonify({'success': True, 'ingredient': ingredient_to_dict(ingredient)})


@app.route('/api/menus', methods=['POST'])
@login_required
def api_menus():
    try:
        data = _json_body()
        menu = None
        if data.get('id'):
            menu = Menu.query.filter_by(id=safe_int(data['id'], default=0), created_by=current_user.id).first()
            if menu is None:
                return json_error('Menu not found', 404)
        entries = parse_menu_entries(data.get('recipes'), current_user.id)
        menu = save_menu(current_user.id, data.get('name'), entries, menu=menu)
    except ValidationError as e:
        db.session.rollback()
        return json_error(str(e), 400)
    except Exception as e:
        db.session.rollback()
        app.logger.exception("Error saving menu")
        return json_error(str(e), 500)

    return jsonify({'success': True, 'menu': menu_to_dict(menu)})


@app.route('/api/recipes', methods=['POST'])
@login_required
def api_recipes():
    try:
        data = _json_body()
        recipe_data = data.get('recipe')
        menus = data.get('menus', [])
        if not isinstance(recipe_data, dict) or not isinstance(menus, list):
            raise ValidationError('Invalid input: recipe and menus array required')
        if not recipe_data.get('name') or not isinstance(recipe_data.get('ingredients'), list):
            raise ValidationError('Invalid recipe structure')

        slots = parse_slots(recipe_data['ingredients'], _visible_ids(visible_ingredients(current_user.id)))
        recipe = create_recipe(current_user.id, recipe_data['name'], slots,
                               notes=recipe_data.get('notes', ''), menu_price=recipe_data.get('menuPrice'))
    except ValidationError as e:
        db.session.rollback()
        return json_error(str(e), 400)
    except Exception as e:
        db.session.rollback()
        app.logger.exception("Error creating recipe")
        return json_error(str(e), 500)

    updated_menus = add_recipe_to_menus(recipe, menus, current_user.id)
    return jsonify({'success': True, 'recipe': recipe_to_dict(recipe), 'updatedMenus': updated_menus})


@app.route('/api/calculate', methods=['POST'])
@login_required
def api_calculate():
    try:
        data = _json_body()
        ingredients = _catalog()
        slots = parse_slots(data.get('ingredients'), _visible_ids(ingredients))
        result = calculate_recipe_costs(
            _calculator_slots(slots), ingredients,
            safe_float(data.get('menuPrice'), default=None, min_val=0.0, max_val=MAX_PRICE),
            desired_margin=safe_float(data.get('margin'), default=None),
            max_combinations=app.config['MAX_COMBINATIONS'],
        )
    except (ValidationError, CombinationLimitError) as e:
        return json_error(str(e), 400)

    return jsonify({'success': True, 'recipeCosts': result['recipe_costs'],
                    'ingredientCosts': result['ingredient_costs']})


@app.route('/api/scrape', methods=['GET', 'POST'])
@login_required
def api_scrape():
    try:
        result = run_scrape(app.config['SCRAPE_URLS'], timeout=app.config['SCRAPE_TIMEOUT'])
    except Exception as e:
        app.logger.exception("Error updating ingredients")
        return json_error(str(e), 500)
    return jsonify({'success': True, **result})


# ============================================
# CLI COMMANDS
# ============================================

@app.cli.command('init-db')
def init_db_command():
    """Create all tables."""
    init_db()
    click.echo('Database initialized.')


@app.cli.command('scrape')
def scrape_command():
    """Scrape the price guide into the ingredient catalog."""
    result = run_scrape(app.config['SCRAPE_URLS'], timeout=app.config['SCRAPE_TIMEOUT'])
    click.echo(
        f"matched={result['matched_count']} modified={result['modified_count']} "
        f"upserted={result['upserted_count']}"
    )


# ============================================
# INITIALIZE DATABASE
# ============================================

def init_db():
    with app.app_context():
        db.create_all()


if __name__ == '__main__':
    init_db()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
