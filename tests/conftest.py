import os

os.environ['FLASK_ENV'] = 'testing'

import pytest

from app import app as flask_app
from models import db, Ingredient, IngredientSource, IngredientSize
from services.auth import register_user
from services.parsing import parse_size, price_per_oz

PASSWORD = 'password123'


@pytest.fixture
def app():
    with flask_app.app_context():
        db.create_all()
    yield flask_app
    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Push an app context for tests that call services directly."""
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(app, name, email):
    with app.app_context():
        user = register_user(name, email, PASSWORD)
        return {'id': user.id, 'email': user.email}


@pytest.fixture
def user(app):
    return _make_user(app, 'Test Bartender', 'bar@example.com')


@pytest.fixture
def other_user(app):
    return _make_user(app, 'Other Bartender', 'other@example.com')


def login(client, email, password=PASSWORD):
    return client.post('/auth/login', data={'email': email, 'password': password})


@pytest.fixture
def auth_client(client, user):
    login(client, user['email'])
    return client


def add_global_ingredient(name, alcohol_type, sizes, proof=80.0):
    """sizes: [(label, price)]"""
    source = IngredientSource(name='802 Spirits')
    for label, price in sizes:
        ml = parse_size(label)
        source.sizes.append(IngredientSize(
            label=label, unit='ml', quantity=ml, price=price, regular_price=price,
            discount=0.0, unit_price=price_per_oz(price, ml),
        ))
    ingredient = Ingredient(name=name, alcohol_type=alcohol_type, proof=proof, sources=[source])
    db.session.add(ingredient)
    return ingredient


@pytest.fixture
def catalog(app):
    """A small global catalog; returns ingredient ids by short key."""
    with app.app_context():
        items = {
            'titos': add_global_ingredient("Tito's Vodka", 'vodka', [('750ml', 20.0), ('1.75L', 35.0)]),
            'goose': add_global_ingredient('Grey Goose Vodka', 'vodka', [('750ml', 30.0)]),
            'cointreau': add_global_ingredient('Cointreau', 'cordials', [('750ml', 40.0)], proof=80.0),
            'unpriced': add_global_ingredient('Mystery Gin', 'gin', [('N/A', 10.0)]),
        }
        db.session.commit()
        return {key: ing.id for key, ing in items.items()}
