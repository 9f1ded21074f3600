"""
Parsing Service

Functions for parsing package sizes, recipe amounts and prices from
price-list cells and form input.
"""

import re
from constants import (
    ML_PER_OZ, SIZE_UNIT_TO_ML, AMOUNT_UNIT_MAPPINGS, AMOUNT_TO_OZ, UNICODE_FRACTIONS
)

_SIZE_UNITS = '|'.join(sorted(SIZE_UNIT_TO_ML, key=len, reverse=True))

# "12/750ml": 12 packs of 750ml
_MULTIPACK_RE = re.compile(r'^(\d+)\s*/\s*(\d+(?:\.\d+)?)\s*(' + _SIZE_UNITS + r')$')

# "750", "750ml", "1.75 l", ".5oz"
_SIZE_RE = re.compile(r'^(\d+(?:\.\d*)?|\.\d+)\s*(' + _SIZE_UNITS + r')?$')


def parse_size(text):
    """
    Parse a printed package size into millilitres.

    Handles:
    - bare numbers, assumed to be ml ("750" -> 750)
    - explicit units: ml, l/liter(s), oz/ounce(s) ("1.75L" -> 1750)
    - multipacks "N/SIZEunit" ("12/750ml" -> 9000)
    - a standalone unit word ("L" -> 1000)

    Returns None for anything unparseable ("N/A") so callers can skip it.
    """
    if text is None:
        return None
    normalized = str(text).lower().strip()
    if not normalized:
        return None

    if normalized in SIZE_UNIT_TO_ML:
        return float(SIZE_UNIT_TO_ML[normalized])

    multipack = _MULTIPACK_RE.match(normalized)
    if multipack:
        count = int(multipack.group(1))
        size = float(multipack.group(2))
        return count * size * SIZE_UNIT_TO_ML[multipack.group(3)]

    match = _SIZE_RE.match(normalized)
    if not match:
        return None

    value = float(match.group(1))
    unit = match.group(2) or 'ml'
    return value * SIZE_UNIT_TO_ML[unit]


def ml_to_oz(ml):
    return ml / ML_PER_OZ


def price_per_oz(price, ml):
    """Sale price normalized to price per fluid ounce, or None if not computable."""
    if price is None or not ml or ml <= 0:
        return None
    return price / ml_to_oz(ml)


def normalize_fractions(text):
    """Replace Unicode fraction characters with decimal equivalents."""
    for char, value in UNICODE_FRACTIONS.items():
        if char in text:
            # Check if preceded by a number (mixed fraction like "1½" or "1 ½")
            pattern = r'(\d+)\s*' + re.escape(char)
            match = re.search(pattern, text)
            if match:
                whole = float(match.group(1))
                text = re.sub(pattern, str(whole + value), text)
            else:
                text = text.replace(char, str(value))
    return text


def _parse_quantity_str(s):
    """Convert quantity string to float. Handles: 1, 1.5, .5, 1/2, 1 1/2"""
    mixed_match = re.match(r'^(\d+)\s+(\d+)\s*/\s*(\d+)$', s)
    if mixed_match:
        whole, num, denom = (float(g) for g in mixed_match.groups())
        return whole + num / denom if denom else None

    frac_match = re.match(r'^(\d+)\s*/\s*(\d+)$', s)
    if frac_match:
        num, denom = (float(g) for g in frac_match.groups())
        return num / denom if denom else None

    try:
        return float(s)
    except ValueError:
        return None


def parse_amount(text, default_unit='oz'):
    """
    Parse a recipe amount like '1oz', '1 1/2 oz', '30 ml' or '2 dashes'.

    Returns (quantity, unit). Raises ValueError for an unparseable amount or
    an unknown unit.
    """
    if text is None:
        raise ValueError('Amount is required')
    text = normalize_fractions(str(text)).strip().lower()
    if not text:
        raise ValueError('Amount is required')

    match = re.match(r'^(\d+\s+\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+\.?\d*|\.\d+)\s*(.*)$', text)
    if not match:
        raise ValueError(f'Invalid amount: {text}')

    quantity = _parse_quantity_str(match.group(1).strip())
    if quantity is None or quantity <= 0:
        raise ValueError(f'Invalid amount: {text}')

    unit_text = match.group(2).strip().rstrip('.')
    unit = AMOUNT_UNIT_MAPPINGS.get(unit_text) if unit_text else default_unit
    if unit is None:
        raise ValueError(f'Unknown unit: {unit_text}')
    return quantity, unit


def amount_to_oz(quantity, unit):
    """Convert a recipe amount to fluid ounces."""
    unit = (unit or 'oz').lower()
    if unit not in AMOUNT_TO_OZ:
        raise ValueError(f'Unknown unit: {unit}')
    return quantity * AMOUNT_TO_OZ[unit]


def format_amount(quantity, unit):
    """Format an amount for display, e.g. (1.5, 'oz') -> '1.5oz'."""
    if quantity == int(quantity):
        return f"{int(quantity)}{unit}"
    return f"{quantity:.2f}".rstrip('0').rstrip('.') + unit


def parse_price(text):
    """Parse a price cell like '$1,234.50' into a float; None if empty or invalid."""
    if text is None:
        return None
    cleaned = re.sub(r'[$,\s]', '', str(text))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def normalize_brand_name(name, size_label=''):
    """Strip a trailing size label from a scraped product name and collapse spaces."""
    name = re.sub(r'\s+', ' ', (name or '')).strip()
    size_label = (size_label or '').strip()
    if size_label and name.endswith(size_label):
        name = name[:-len(size_label)].strip()
    return name
