import pytest

from services.parsing import (
    parse_size, parse_amount, parse_price, amount_to_oz, format_amount,
    price_per_oz, normalize_brand_name, normalize_fractions,
)


@pytest.mark.parametrize('text, expected', [
    ('750ml', 750),
    ('750', 750),
    ('1.75L', 1750),
    ('1 L', 1000),
    ('L', 1000),
    ('liter', 1000),
    ('12/750ml', 9000),
    ('24/50ML', 1200),
    ('1oz', 29.5735),
])
def test_parse_size(text, expected):
    assert parse_size(text) == pytest.approx(expected)


@pytest.mark.parametrize('text', [None, '', 'N/A', 'each', '750 gallons'])
def test_parse_size_unparseable(text):
    assert parse_size(text) is None


def test_price_per_oz():
    # 750ml is ~25.36oz
    assert price_per_oz(20.0, 750) == pytest.approx(20.0 / (750 / 29.5735))
    assert price_per_oz(20.0, None) is None
    assert price_per_oz(20.0, 0) is None
    assert price_per_oz(None, 750) is None


@pytest.mark.parametrize('text, expected', [
    ('1oz', (1.0, 'oz')),
    ('1.5 oz', (1.5, 'oz')),
    ('1 1/2 oz', (1.5, 'oz')),
    ('3/4 oz', (0.75, 'oz')),
    ('½ oz', (0.5, 'oz')),
    ('30 ml', (30.0, 'ml')),
    ('2 dashes', (2.0, 'dash')),
    ('1 tsp', (1.0, 'tsp')),
    ('2', (2.0, 'oz')),
])
def test_parse_amount(text, expected):
    quantity, unit = parse_amount(text)
    assert quantity == pytest.approx(expected[0])
    assert unit == expected[1]


@pytest.mark.parametrize('text', [None, '', 'splash', '0 oz', '2 buckets'])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_amount_to_oz():
    assert amount_to_oz(2, 'oz') == 2
    assert amount_to_oz(29.5735, 'ml') == pytest.approx(1.0)
    assert amount_to_oz(2, 'tbsp') == pytest.approx(1.0)
    assert amount_to_oz(32, 'dash') == pytest.approx(1.0)
    with pytest.raises(ValueError):
        amount_to_oz(1, 'bucket')


def test_format_amount():
    assert format_amount(2.0, 'oz') == '2oz'
    assert format_amount(1.5, 'oz') == '1.5oz'
    assert format_amount(0.333333, 'oz') == '0.33oz'


def test_normalize_fractions_mixed():
    assert normalize_fractions('1½ oz') == '1.5 oz'


@pytest.mark.parametrize('text, expected', [
    ('$19.99', 19.99),
    ('$1,234.50', 1234.50),
    (' 80 ', 80.0),
    ('', None),
    ('N/A', None),
    (None, None),
])
def test_parse_price(text, expected):
    assert parse_price(text) == expected


def test_normalize_brand_name():
    assert normalize_brand_name("Tito's  Handmade Vodka 750ml", '750ml') == "Tito's Handmade Vodka"
    assert normalize_brand_name('  Cointreau  ', '750ml') == 'Cointreau'
    assert normalize_brand_name(None) == ''
