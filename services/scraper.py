"""
Price List Scraper

Fetches the vendor price guide pages, parses their HTML tables into
ingredient records and upserts them into the global catalog.
"""

import logging

import requests
from bs4 import BeautifulSoup

from constants import SCRAPE_SOURCE_NAME
from models import db, Ingredient, IngredientSource, IngredientSize
from utils.url_validator import safe_fetch, SSRFError
from .parsing import parse_size, parse_price, price_per_oz, normalize_brand_name

logger = logging.getLogger(__name__)

# Price table columns: code, brand, size, regular price, sale price, savings, proof
COLUMNS = ('code', 'name', 'size', 'regular_price', 'sale_price', 'savings', 'proof')


class ScrapeError(Exception):
    """Raised when a price guide page cannot be fetched or yields no rows."""
    pass


def fetch_page(url, timeout=15):
    """Fetch a price guide page and return its HTML."""
    try:
        return safe_fetch(url, timeout=timeout).text
    except (SSRFError, requests.RequestException) as e:
        raise ScrapeError(f'Failed to fetch {url}: {e}') from e


def parse_price_table(html, category):
    """
    Extract price rows from a price guide page.

    A row is kept when it has a name, a size, a category and a numeric
    regular price; header and spacer rows fall out naturally.
    """
    soup = BeautifulSoup(html, 'html.parser')
    entities = []
    for row in soup.find_all('tr'):
        cells = [td.get_text(strip=True) for td in row.find_all('td')]
        cells += [''] * (len(COLUMNS) - len(cells))
        values = dict(zip(COLUMNS, cells))

        regular_price = parse_price(values['regular_price'])
        if not (values['name'] and values['size'] and category) or regular_price is None:
            continue

        entities.append({
            'code': values['code'] or None,
            'name': values['name'],
            'size': values['size'],
            'regular_price': regular_price,
            'sale_price': parse_price(values['sale_price']),
            'savings': parse_price(values['savings']) or 0.0,
            'proof': parse_price(values['proof']),
            'category': category,
        })
    return entities


def scrape_page(url, timeout=15):
    """Fetch one price guide page; the category is the last URL path segment."""
    category = url.rstrip('/').rsplit('/', 1)[-1]
    entities = parse_price_table(fetch_page(url, timeout=timeout), category)
    logger.info("Scraped %d rows from %s", len(entities), url)
    return entities


def group_entities(entities):
    """
    Group scraped rows into ingredient records keyed by normalized name.

    Rows whose size cannot be parsed are dropped. Each record carries a
    single price-guide source holding every size found for that name.
    """
    records = {}
    for e in entities:
        ml = parse_size(e['size'])
        if ml is None:
            logger.debug("Skipping %r: unparseable size %r", e['name'], e['size'])
            continue

        name = normalize_brand_name(e['name'], e['size'])
        if not name:
            continue

        record = records.setdefault(name, {
            'name': name,
            'alcohol_type': e['category'],
            'proof': e['proof'],
            'source': SCRAPE_SOURCE_NAME,
            'sizes': [],
        })

        price = e['sale_price'] if e['sale_price'] is not None else e['regular_price']
        record['sizes'].append({
            'code': e['code'],
            'label': e['size'],
            'unit': 'ml',
            'quantity': ml,
            'regular_price': e['regular_price'],
            'price': price,
            'discount': e['savings'],
            'unit_price': price_per_oz(price, ml),
        })
    return list(records.values())


def _size_key(size):
    return (size['label'], size['quantity'], size['price'], size['discount'])


def _apply_record(ingredient, record):
    """Replace the price-guide source on an ingredient. Returns True if anything changed."""
    source = next((s for s in ingredient.sources if s.name == record['source']), None)
    old_sizes = []
    if source is None:
        source = IngredientSource(name=record['source'])
        ingredient.sources.append(source)
    else:
        old_sizes = [
            _size_key({'label': s.label, 'quantity': s.quantity, 'price': s.price, 'discount': s.discount})
            for s in source.sizes
        ]

    changed = (
        old_sizes != [_size_key(s) for s in record['sizes']] or
        ingredient.proof != record['proof'] or
        ingredient.alcohol_type != record['alcohol_type']
    )

    ingredient.proof = record['proof']
    ingredient.alcohol_type = record['alcohol_type']
    source.sizes = [IngredientSize(**size) for size in record['sizes']]
    return changed


def upsert_ingredients(records):
    """
    Upsert scraped records into the global catalog in a single commit.

    Returns a dict with matched_count, modified_count and upserted_count.
    """
    matched = modified = upserted = 0
    try:
        for record in records:
            ingredient = Ingredient.query.filter_by(name=record['name'], created_by=None).first()
            if ingredient is None:
                ingredient = Ingredient(name=record['name'])
                db.session.add(ingredient)
                _apply_record(ingredient, record)
                upserted += 1
                continue

            matched += 1
            if _apply_record(ingredient, record):
                modified += 1
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return {'matched_count': matched, 'modified_count': modified, 'upserted_count': upserted}


def run_scrape(urls, timeout=15):
    """
    Scrape every price guide page, then upsert the catalog.

    Any page failure aborts the whole job before anything is written.
    """
    logger.info("Starting price guide scrape of %d pages", len(urls))
    entities = []
    for url in urls:
        entities.extend(scrape_page(url, timeout=timeout))

    if not entities:
        raise ScrapeError('No price rows found on any page')

    records = group_entities(entities)
    result = upsert_ingredients(records)
    logger.info(
        "Scrape finished: %d rows, %d ingredients (%d matched, %d modified, %d new)",
        len(entities), len(records), result['matched_count'],
        result['modified_count'], result['upserted_count'],
    )
    return result
