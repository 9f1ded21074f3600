"""
Menu Models

Contains the Menu model and the MenuRecipe entries pricing each recipe.
"""

from .base import db, TimestampMixin


class Menu(TimestampMixin, db.Model):
    """Named group of priced recipes owned by a user."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    recipes = db.relationship('MenuRecipe', backref='menu', lazy=True,
                              cascade='all, delete-orphan', order_by='MenuRecipe.id')


class MenuRecipe(db.Model):
    """Recipe on a menu at a sale price."""
    id = db.Column(db.Integer, primary_key=True)
    menu_id = db.Column(db.Integer, db.ForeignKey('menu.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    price = db.Column(db.Float, nullable=False, default=0.0)
    recipe = db.relationship('Recipe')
