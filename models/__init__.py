"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db

from .user import User
from .ingredient import Ingredient, IngredientSource, IngredientSize
from .recipe import Recipe, RecipeIngredient, recipe_ingredient_option
from .menu import Menu, MenuRecipe

__all__ = [
    'db',
    'User',
    'Ingredient',
    'IngredientSource',
    'IngredientSize',
    'Recipe',
    'RecipeIngredient',
    'recipe_ingredient_option',
    'Menu',
    'MenuRecipe',
]
