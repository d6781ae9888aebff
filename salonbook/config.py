import os


def _int_env(name, default):
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return int(value)


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key')

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///salon_booking.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CREATE_TABLES_ON_START = os.environ.get('CREATE_TABLES_ON_START', '1') == '1'

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Forms are fed JSON bodies; session auth is cookie-based and same-site
    WTF_CSRF_ENABLED = False

    # 0 = step by the service duration
    SLOT_INTERVAL_MINUTES = _int_env('SLOT_INTERVAL_MINUTES', 0)
    BOOKING_LEAD_MINUTES = _int_env('BOOKING_LEAD_MINUTES', 0)

    TRIAL_DAYS = _int_env('TRIAL_DAYS', 30)
    TRIAL_RESET_DAYS = _int_env('TRIAL_RESET_DAYS', 7)

    CLIENT_TOKEN_MAX_AGE = _int_env('CLIENT_TOKEN_MAX_AGE', 86400)
    DEFAULT_COUNTRY_CODE = os.environ.get('DEFAULT_COUNTRY_CODE', '55')

    APPOINTMENTS_PER_PAGE = _int_env('APPOINTMENTS_PER_PAGE', 20)


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    CREATE_TABLES_ON_START = True
    SLOT_INTERVAL_MINUTES = 0
    BOOKING_LEAD_MINUTES = 0


CONFIGS = {
    'default': Config,
    'development': DevelopmentConfig,
    'testing': TestingConfig,
}


def get_config(name=None):
    """Return the config class registered under name (falls back to Config)"""
    return CONFIGS.get(name or 'default', Config)
