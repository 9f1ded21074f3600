"""
Ingredient Models

Contains the Ingredient, IngredientSource and IngredientSize models for the
liquor catalog. An ingredient is sold through one or more sources (vendors),
each offering independently priced package sizes.
"""

from .base import db, TimestampMixin


class Ingredient(TimestampMixin, db.Model):
    """
    Catalog ingredient.

    Ownership:
    - created_by NULL: global catalog entry (scraped price list)
    - created_by set:  custom ingredient visible only to that user
    """
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)

    # Price guide category the ingredient was scraped from (vodka, gin, ...)
    alcohol_type = db.Column(db.String(50), nullable=True, index=True)
    proof = db.Column(db.Float, nullable=True)

    created_by = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=True, index=True)

    sources = db.relationship('IngredientSource', backref='ingredient', lazy=True,
                              cascade='all, delete-orphan', order_by='IngredientSource.id')

    @property
    def sizes(self):
        """All sizes across every source."""
        return [size for source in self.sources for size in source.sizes]


class IngredientSource(db.Model):
    """Vendor/brand an ingredient is sold under (e.g. '802 Spirits', 'CUSTOM')."""
    id = db.Column(db.Integer, primary_key=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    sizes = db.relationship('IngredientSize', backref='source', lazy=True,
                            cascade='all, delete-orphan', order_by='IngredientSize.id')


class IngredientSize(db.Model):
    """One purchasable package size with its pricing."""
    id = db.Column(db.Integer, primary_key=True)
    source_id = db.Column(db.Integer, db.ForeignKey('ingredient_source.id', ondelete='CASCADE'), nullable=False, index=True)
    code = db.Column(db.String(20), nullable=True)

    # Printed size string from the price list, e.g. "750ml", "1.75L", "12/50ml"
    label = db.Column(db.String(50), nullable=False, default='')

    # Normalized size: always millilitres; NULL when the label could not be parsed
    unit = db.Column(db.String(10), nullable=False, default='ml')
    quantity = db.Column(db.Float, nullable=True)

    regular_price = db.Column(db.Float, nullable=True)
    price = db.Column(db.Float, nullable=False, default=0.0)  # sale price
    discount = db.Column(db.Float, nullable=False, default=0.0)

    # Price per fluid ounce, derived from price and quantity
    unit_price = db.Column(db.Float, nullable=True)
