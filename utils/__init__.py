# Utility modules for the bar cost app
from .url_validator import is_safe_url, validate_url, safe_fetch, SSRFError
from .sanitizer import sanitize_text, sanitize_name, sanitize_email
from .forms import safe_float, safe_int
