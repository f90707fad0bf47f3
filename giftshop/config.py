"""Flask configuration."""

import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Flask-Login
    REMEMBER_COOKIE_DURATION = timedelta(days=30)

    # CSRF Configuration
    WTF_CSRF_ENABLED = True
    WTF_CSRF_CHECK_DEFAULT = True
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour

    # Local store for persisted carts
    basedir = os.path.dirname(os.path.dirname(__file__))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        f'sqlite:///{os.path.join(basedir, "instance", "giftshop.db")}'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Remote REST API
    API_BASE_URL = os.environ.get('API_BASE_URL', 'http://localhost:3000')
    API_TIMEOUT = float(os.environ.get('API_TIMEOUT', 30))

    # Cart
    CART_STORAGE_KEY = os.environ.get('CART_STORAGE_KEY', 'gift-cart-storage')

    # Checkout defaults
    DEFAULT_SHIPPING_AREA = os.environ.get('DEFAULT_SHIPPING_AREA', 'Hà Nội')
    DEFAULT_SHIPPING_FEE = int(os.environ.get('DEFAULT_SHIPPING_FEE', 30000))
    ORDER_SOURCE = 'web'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_JSON = os.environ.get('LOG_JSON', 'False').lower() == 'true'
    SERVICE_NAME = 'giftshop'

    # Pagination
    ITEMS_PER_PAGE = 12


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_ECHO = False


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    LOG_JSON = True


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    API_BASE_URL = 'http://api.test'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
