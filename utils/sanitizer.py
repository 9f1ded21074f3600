"""
Input Sanitization Module

Normalizes user input and scraped text before it is stored. Output escaping
is left to Jinja2 autoescaping, so values are stored unescaped.
"""

import re

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b-\x1f\x7f-\x9f]')


def sanitize_text(text, max_length=10000):
    """
    Strip control characters and surrounding whitespace, then truncate.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Sanitized string, truncated if necessary
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = _CONTROL_CHARS.sub('', text).strip()

    if len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_name(name, max_length=200):
    """
    Sanitize a display name (ingredient, recipe, menu, user).

    Collapses internal whitespace; returns '' when nothing is left.
    """
    name = sanitize_text(name, max_length=max_length * 2)
    name = re.sub(r'\s+', ' ', name)
    return name[:max_length].strip()


def sanitize_email(email, max_length=254):
    """Lower-case and trim an email address."""
    return sanitize_text(email, max_length=max_length).lower()
