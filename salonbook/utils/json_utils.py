from datetime import date, datetime, time
from decimal import Decimal

from flask.json.provider import DefaultJSONProvider


class SalonJSONProvider(DefaultJSONProvider):
    """
    JSON provider for API responses
    Money values become floats, dates ISO strings and times HH:MM
    """

    @staticmethod
    def default(obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat(timespec='seconds')
        if isinstance(obj, date):
            return obj.isoformat()
        if isinstance(obj, time):
            return obj.strftime('%H:%M')
        return DefaultJSONProvider.default(obj)
