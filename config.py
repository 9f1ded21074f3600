"""
Application Configuration

Centralizes all Flask and application configuration settings.
"""

import os

# Base directory of the application
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Price guide pages scraped into the global ingredient catalog
SCRAPE_URLS = [
    'https://802spirits.com/price_guide/brandy',
    'https://802spirits.com/price_guide/cocktails',
    'https://802spirits.com/price_guide/cordials',
    'https://802spirits.com/price_guide/gin',
    'https://802spirits.com/price_guide/rum',
    'https://802spirits.com/price_guide/tequila',
    'https://802spirits.com/price_guide/vodka',
    'https://802spirits.com/price_guide/whiskey',
]


class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-change-in-production')

    # Session cookie (signed by SECRET_KEY)
    SESSION_COOKIE_NAME = '__session'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False

    # SQLAlchemy settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///barcost.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Scraper settings
    SCRAPE_URLS = SCRAPE_URLS
    SCRAPE_TIMEOUT = int(os.environ.get('SCRAPE_TIMEOUT', 15))

    # Upper bound on brand combinations enumerated for one recipe
    MAX_COMBINATIONS = int(os.environ.get('MAX_COMBINATIONS', 10000))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    SESSION_COOKIE_SECURE = True


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    MAX_COMBINATIONS = 1000


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """Get configuration based on environment."""
    if env is None:
        env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
