from flask import jsonify
from werkzeug.exceptions import HTTPException


class BookingError(Exception):
    """Base class for errors raised by the booking workflow"""
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(BookingError):
    status_code = 400


class SalonUnavailableError(BookingError):
    status_code = 403


class NotFoundError(BookingError):
    status_code = 404


class ConflictError(BookingError):
    status_code = 409


class SlotUnavailableError(ConflictError):
    pass


class InvalidTransitionError(ConflictError):
    pass


class FormValidationError(ValidationError):
    """Raised when a WTForms form fails to validate"""

    def __init__(self, form, message='Invalid data submitted.'):
        super().__init__(message)
        self.fields = form.errors


def register_error_handlers(app):
    @app.errorhandler(BookingError)
    def handle_booking_error(error):
        payload = {'error': error.message}
        if isinstance(error, FormValidationError):
            payload['fields'] = error.fields
        return jsonify(payload), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code
