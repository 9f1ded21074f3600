"""
Validation Constants

Contains whitelist values and limits for validating user input.
"""

# Valid units for recipe slot amounts (whitelist for security)
VALID_AMOUNT_UNITS = {'oz', 'ml', 'l', 'tsp', 'tbsp', 'cup', 'dash'}

# Sort keys accepted by the ingredient catalog page
VALID_INGREDIENT_SORTS = {'name', 'type', 'size', 'price', 'unit_price'}

# Email shape check (same rule the registration form enforces)
EMAIL_PATTERN = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'

MIN_PASSWORD_LENGTH = 8

# Maximum field lengths for security
MAX_LENGTHS = {
    'ingredient_name': 200,
    'recipe_name': 200,
    'menu_name': 200,
    'user_name': 100,
    'email': 254,
    'slot_label': 100,
    'size_label': 50,
    'notes': 5000,
}

# Clamp bounds for numeric form input
MAX_PRICE = 99999.99
MAX_QUANTITY = 9999

# Source labels
SCRAPE_SOURCE_NAME = '802 Spirits'
CUSTOM_SOURCE_NAME = 'CUSTOM'
