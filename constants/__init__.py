"""
Constants Package

Unit tables and validation whitelists shared by models, services and routes.
"""

from .units import (
    ML_PER_OZ,
    SIZE_UNIT_TO_ML,
    AMOUNT_UNIT_MAPPINGS,
    AMOUNT_TO_OZ,
    UNICODE_FRACTIONS,
)

from .validation import (
    VALID_AMOUNT_UNITS,
    VALID_INGREDIENT_SORTS,
    EMAIL_PATTERN,
    MIN_PASSWORD_LENGTH,
    MAX_LENGTHS,
    MAX_PRICE,
    MAX_QUANTITY,
    SCRAPE_SOURCE_NAME,
    CUSTOM_SOURCE_NAME,
)
