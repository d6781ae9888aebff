from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

CLIENT_AREA_SALT = 'client-area'


def get_token_serializer():
    """Creates a secure token serializer using the app's secret key"""
    secret_key = current_app.config['SECRET_KEY']
    return URLSafeTimedSerializer(secret_key)


def generate_client_token(client):
    """Generate a timed token that grants access to one client's area"""
    s = get_token_serializer()
    return s.dumps({'client_id': client.id, 'salon_id': client.salon_id}, salt=CLIENT_AREA_SALT)


def verify_client_token(token, max_age=None):
    """Return the token payload, or None when it is invalid or expired"""
    if max_age is None:
        max_age = current_app.config['CLIENT_TOKEN_MAX_AGE']
    s = get_token_serializer()
    try:
        return s.loads(token, salt=CLIENT_AREA_SALT, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None
