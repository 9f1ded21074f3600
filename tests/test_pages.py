from models import db, Menu, Recipe


def recipe_form(catalog, action='save', **overrides):
    data = {
        'name': 'Vodka Soda',
        'menu_price': '8',
        'margin': '',
        'notes': 'Tall glass, lime wedge',
        'slot_count': '2',
        'slots-0-label': 'Vodka',
        'slots-0-amount': '2oz',
        'slots-0-ingredient': str(catalog['titos']),
        'slots-0-options': [str(catalog['goose'])],
        'slots-1-label': '',
        'slots-1-amount': '',
        'slots-1-ingredient': '',
        'action': action,
    }
    data.update(overrides)
    return data


def create_recipe(client, catalog):
    response = client.post('/recipe/add', data=recipe_form(catalog))
    assert response.status_code == 302
    return int(response.headers['Location'].rstrip('/').rsplit('/', 1)[-1])


def test_dashboard(auth_client, catalog):
    response = auth_client.get('/')
    assert response.status_code == 200
    assert b'4 ingredients' in response.data
    assert b'0 recipes' in response.data


def test_profile(auth_client, user):
    response = auth_client.get('/profile')
    assert response.status_code == 200
    assert user['email'].encode() in response.data


class TestIngredientPages:
    def test_search(self, auth_client, catalog):
        response = auth_client.get('/ingredients?q=goose')
        assert b'Grey Goose Vodka' in response.data
        assert b'Cointreau' not in response.data

    def test_search_matches_type(self, auth_client, catalog):
        response = auth_client.get('/ingredients?q=cordials')
        assert b'Cointreau' in response.data
        assert b'Grey Goose Vodka' not in response.data

    def test_sort_by_unit_price(self, auth_client, catalog):
        response = auth_client.get('/ingredients?sort=unit_price&reverse=1')
        assert response.status_code == 200
        body = response.data
        # most expensive per ounce first, unpriced last
        assert body.index(b'Cointreau') < body.index(b'Grey Goose Vodka') < body.index(b'Mystery Gin')

    def test_unknown_sort_falls_back_to_name(self, auth_client, catalog):
        response = auth_client.get('/ingredients?sort=bogus')
        body = response.data
        assert body.index(b'Cointreau') < body.index(b'Grey Goose Vodka')

    def test_add_custom_ingredient(self, app, auth_client, user):
        response = auth_client.post('/ingredient/add', data={'name': 'Lime Juice', 'size': '1L', 'price': '6'})
        assert response.status_code == 302
        page = auth_client.get(response.headers['Location'])
        assert b'Lime Juice' in page.data
        assert b'CUSTOM' in page.data

    def test_add_custom_ingredient_requires_name(self, auth_client):
        response = auth_client.post('/ingredient/add', data={'name': ''}, follow_redirects=True)
        assert b'Ingredient name is required' in response.data

    def test_ingredient_view(self, auth_client, catalog):
        response = auth_client.get(f"/ingredient/{catalog['titos']}")
        assert response.status_code == 200
        assert b'1.75L' in response.data
        assert b'802 Spirits' in response.data

    def test_missing_ingredient(self, auth_client):
        assert auth_client.get('/ingredient/999').status_code == 404


class TestRecipePages:
    def test_calculate_without_saving(self, app, auth_client, catalog):
        response = auth_client.post('/recipe/add', data=recipe_form(catalog, action='calculate'))
        assert response.status_code == 200
        assert b'Combinations (2)' in response.data
        with app.app_context():
            assert Recipe.query.count() == 0

    def test_save_recipe(self, app, auth_client, catalog):
        recipe_id = create_recipe(auth_client, catalog)
        with app.app_context():
            recipe = db.session.get(Recipe, recipe_id)
            assert recipe.name == 'Vodka Soda'
            assert recipe.menu_price == 8.0
            [slot] = recipe.ingredients
            assert slot.ingredient_id == catalog['titos']
            assert slot.candidate_ids == [catalog['titos'], catalog['goose']]
            assert (slot.quantity, slot.unit) == (2.0, 'oz')

        response = auth_client.get(f'/recipe/{recipe_id}')
        assert response.status_code == 200
        assert b'Grey Goose Vodka' in response.data
        assert b'Combinations (2)' in response.data

    def test_recipe_requires_ingredients(self, auth_client, catalog):
        form = recipe_form(catalog, **{'slots-0-ingredient': '', 'slots-0-amount': ''})
        response = auth_client.post('/recipe/add', data=form)
        assert response.status_code == 200
        assert b'At least one ingredient is required' in response.data

    def test_recipe_requires_name(self, auth_client, catalog):
        response = auth_client.post('/recipe/add', data=recipe_form(catalog, name=''))
        assert b'Recipe name is required' in response.data

    def test_recipe_from_json_field(self, app, auth_client, catalog):
        form = {
            'name': 'Neat Goose',
            'ingredients': '[{"ingredientId": %d, "amount": "2oz"}]' % catalog['goose'],
            'action': 'save',
        }
        response = auth_client.post('/recipe/add', data=form)
        assert response.status_code == 302
        with app.app_context():
            assert Recipe.query.filter_by(name='Neat Goose').count() == 1

    def test_view_with_price_and_margin(self, auth_client, catalog):
        recipe_id = create_recipe(auth_client, catalog)
        response = auth_client.get(f'/recipe/{recipe_id}?menu_price=10&margin=75')
        assert response.status_code == 200
        assert b'$10.00' in response.data

    def test_edit_recipe(self, app, auth_client, catalog):
        recipe_id = create_recipe(auth_client, catalog)

        page = auth_client.get(f'/recipe/{recipe_id}/edit')
        assert page.status_code == 200
        assert b'value="2oz"' in page.data

        form = recipe_form(catalog, name='Big Vodka Soda', **{'slots-0-amount': '3 oz', 'slots-0-options': []})
        response = auth_client.post(f'/recipe/{recipe_id}/edit', data=form)
        assert response.status_code == 302
        with app.app_context():
            recipe = db.session.get(Recipe, recipe_id)
            assert recipe.name == 'Big Vodka Soda'
            assert recipe.ingredients[0].quantity == 3.0
            assert recipe.ingredients[0].candidate_ids == [catalog['titos']]

    def test_other_users_recipe_is_hidden(self, app, auth_client, catalog, other_user):
        recipe_id = create_recipe(auth_client, catalog)
        other = app.test_client()
        other.post('/auth/login', data={'email': other_user['email'], 'password': 'password123'})
        assert other.get(f'/recipe/{recipe_id}').status_code == 404
        assert other.get(f'/recipe/{recipe_id}/edit').status_code == 404

    def test_recipes_list(self, auth_client, catalog):
        create_recipe(auth_client, catalog)
        response = auth_client.get('/recipes')
        assert b'Vodka Soda' in response.data

    def test_tools(self, auth_client, catalog):
        recipe_id = create_recipe(auth_client, catalog)
        assert auth_client.get('/tools').status_code == 200
        response = auth_client.get(f'/tools?recipe_id={recipe_id}&menu_price=10&margin=70')
        assert response.status_code == 200
        assert b'Combinations (2)' in response.data


class TestMenuPages:
    def test_create_view_and_edit_menu(self, app, auth_client, catalog):
        recipe_id = create_recipe(auth_client, catalog)

        response = auth_client.post('/menu/add', data={
            'name': 'Patio', 'entry_count': '2',
            'entries-0-recipe': str(recipe_id), 'entries-0-price': '9',
            'entries-1-recipe': '', 'entries-1-price': '',
        })
        assert response.status_code == 302
        menu_id = int(response.headers['Location'].rsplit('/', 1)[-1])

        page = auth_client.get(f'/menu/{menu_id}')
        assert page.status_code == 200
        assert b'Vodka Soda' in page.data
        assert b'$9.00' in page.data

        assert auth_client.get(f'/menu/{menu_id}/edit').status_code == 200
        response = auth_client.post(f'/menu/{menu_id}/edit', data={
            'name': 'Rooftop', 'entry_count': '1',
            'entries-0-recipe': str(recipe_id), 'entries-0-price': '11',
        })
        assert response.status_code == 302
        with app.app_context():
            menu = db.session.get(Menu, menu_id)
            assert menu.name == 'Rooftop'
            assert [e.price for e in menu.recipes] == [11.0]

        assert b'Rooftop' in auth_client.get('/menus').data

    def test_menu_requires_name(self, auth_client):
        response = auth_client.post('/menu/add', data={'name': '', 'entry_count': '0'}, follow_redirects=True)
        assert b'Menu name is required' in response.data

    def test_missing_menu(self, auth_client):
        assert auth_client.get('/menu/999').status_code == 404
