"""
Price Guide Fetch Guard

The scraper only talks to public http(s) hosts. URLs pointing at loopback,
private or otherwise internal addresses are refused before any request is
made, and page bodies are read with a size cap.
"""

import ipaddress
import socket
from urllib.parse import urlparse
import requests

DEFAULT_HEADERS = {'User-Agent': 'Mozilla/5.0 (compatible; barcost-price-scraper/1.0)'}

# Price guide pages are a few hundred KB; anything far larger is not a price list
MAX_PAGE_BYTES = 5 * 1024 * 1024

_BLOCKED_HOSTNAMES = {'localhost', 'localhost.localdomain'}


class SSRFError(Exception):
    """Raised when a price guide URL is refused or its page is too large."""
    pass


def is_private_ip(ip_str):
    """True for any address that is not publicly routable (unparseable counts as private)."""
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return True
    return not ip.is_global or ip.is_multicast


def _host_addresses(hostname):
    try:
        ipaddress.ip_address(hostname)
        return [hostname]
    except ValueError:
        pass
    try:
        infos = socket.getaddrinfo(hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except socket.gaierror:
        raise SSRFError(f"Cannot resolve hostname: {hostname}")
    return [info[4][0] for info in infos]


def validate_url(url):
    """
    Refuse a URL the scraper must not fetch.

    Raises:
        SSRFError: empty URL, non-http(s) scheme, missing host, localhost,
            or a host resolving to a non-public address
    """
    if not url:
        raise SSRFError("Empty URL")

    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https'):
        raise SSRFError(f"Invalid scheme: {parsed.scheme or '(none)'}. Only http and https are allowed.")

    hostname = (parsed.hostname or '').lower()
    if not hostname:
        raise SSRFError("No hostname in URL")
    if hostname in _BLOCKED_HOSTNAMES:
        raise SSRFError("Cannot access localhost")

    for address in _host_addresses(hostname):
        if is_private_ip(address):
            raise SSRFError(f"{hostname} resolves to private/internal IP: {address}")


def is_safe_url(url):
    """Returns (is_safe, error_message)."""
    try:
        validate_url(url)
    except SSRFError as e:
        return False, str(e)
    return True, None


def safe_fetch(url, headers=None, timeout=10, max_size=MAX_PAGE_BYTES):
    """
    GET a price guide page after validating its URL.

    The body is streamed and fully read into the response, so callers can use
    `.text` as usual.

    Raises:
        SSRFError: refused URL, or a body larger than max_size
        requests.RequestException: network errors and non-2xx responses
    """
    validate_url(url)

    response = requests.get(url, headers=headers or DEFAULT_HEADERS, timeout=timeout, stream=True)
    with response:
        response.raise_for_status()

        declared = response.headers.get('content-length')
        if declared and declared.isdigit() and int(declared) > max_size:
            raise SSRFError(f"Page too large: {declared} bytes (max {max_size})")

        body = bytearray()
        for chunk in response.iter_content(chunk_size=64 * 1024):
            body.extend(chunk)
            if len(body) > max_size:
                raise SSRFError(f"Page exceeded maximum size of {max_size} bytes")

    response._content = bytes(body)
    return response
