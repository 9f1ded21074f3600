"""
Unit Constants and Conversion Tables

Contains the unit mappings and conversion factors used for package size
parsing, recipe amounts and price-per-ounce calculations.
"""

# Millilitres in one US fluid ounce
ML_PER_OZ = 29.5735

# Package size units (lowercase input -> millilitre multiplier)
SIZE_UNIT_TO_ML = {
    'ml': 1,
    'l': 1000,
    'liter': 1000,
    'liters': 1000,
    'oz': ML_PER_OZ,
    'ounce': ML_PER_OZ,
    'ounces': ML_PER_OZ,
}

# Unit mappings for recipe amounts (lowercase input -> standard unit)
AMOUNT_UNIT_MAPPINGS = {
    'oz': 'oz', 'ounce': 'oz', 'ounces': 'oz', 'fl oz': 'oz',
    'ml': 'ml', 'milliliter': 'ml', 'milliliters': 'ml',
    'l': 'l', 'liter': 'l', 'liters': 'l',
    'tsp': 'tsp', 'teaspoon': 'tsp', 'teaspoons': 'tsp',
    'tbsp': 'tbsp', 'tablespoon': 'tbsp', 'tablespoons': 'tbsp',
    'cup': 'cup', 'cups': 'cup',
    'dash': 'dash', 'dashes': 'dash',
}

# Recipe amount conversions to fluid ounces
AMOUNT_TO_OZ = {
    'oz': 1,
    'ml': 1 / ML_PER_OZ,
    'l': 1000 / ML_PER_OZ,
    'tsp': 1 / 6,
    'tbsp': 0.5,
    'cup': 8,
    'dash': 1 / 32,
}

# Unicode fraction characters mapping
UNICODE_FRACTIONS = {
    '\u00bd': 0.5,   # ½
    '\u2153': 1/3,   # ⅓
    '\u2154': 2/3,   # ⅔
    '\u00bc': 0.25,  # ¼
    '\u00be': 0.75,  # ¾
    '\u215b': 0.125, # ⅛
}
