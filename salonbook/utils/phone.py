import re
from urllib.parse import quote


def digits_only(value):
    return re.sub(r'\D', '', value or '')


def normalize_phone(phone):
    """Strip formatting so phones compare equal however they were typed"""
    return digits_only(phone)


def is_valid_phone(phone):
    """Area code plus number: 10 or 11 digits"""
    return 10 <= len(digits_only(phone)) <= 11


def phone_for_whatsapp(phone, country_code='55'):
    digits = digits_only(phone)
    # Already carries the country code
    if digits.startswith(country_code) and len(digits) in (12, 13):
        return digits
    return f'{country_code}{digits}'


def whatsapp_link(phone, message, country_code='55'):
    return f'https://wa.me/{phone_for_whatsapp(phone, country_code)}?text={quote(message)}'
