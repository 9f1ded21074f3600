"""
Recipe Models

Contains the Recipe and RecipeIngredient models. Each RecipeIngredient is a
slot: an amount plus the set of ingredients (brands) acceptable for it.
"""

from .base import db, TimestampMixin


# Additional acceptable ingredients for a slot, beyond its primary ingredient
recipe_ingredient_option = db.Table(
    'recipe_ingredient_option',
    db.Column('recipe_ingredient_id', db.Integer,
              db.ForeignKey('recipe_ingredient.id', ondelete='CASCADE'), primary_key=True),
    db.Column('ingredient_id', db.Integer,
              db.ForeignKey('ingredient.id', ondelete='CASCADE'), primary_key=True),
)


class Recipe(TimestampMixin, db.Model):
    """Cocktail recipe owned by a user."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    notes = db.Column(db.Text, default='')

    # Default sale price used when analyzing margins
    menu_price = db.Column(db.Float, nullable=True)

    created_by = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    ingredients = db.relationship('RecipeIngredient', backref='recipe', lazy=True,
                                  cascade='all, delete-orphan', order_by='RecipeIngredient.position')


class RecipeIngredient(db.Model):
    """Recipe slot with quantity and unit."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    label = db.Column(db.String(100), default='')
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='CASCADE'), nullable=False, index=True)
    unit = db.Column(db.String(10), nullable=False, default='oz')
    quantity = db.Column(db.Float, nullable=False)

    ingredient = db.relationship('Ingredient')
    options = db.relationship('Ingredient', secondary=recipe_ingredient_option, lazy=True)

    @property
    def candidate_ids(self):
        """Primary ingredient followed by the options, without duplicates."""
        ids = [self.ingredient_id] + [ing.id for ing in self.options]
        return list(dict.fromkeys(ids))
