from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from salonbook.errors import FormValidationError, ValidationError

SUBMIT_METHODS = ('POST', 'PUT', 'PATCH', 'DELETE')


def json_formdata(data):
    """Multidict of a JSON object for WTForms; null values count as not submitted"""
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')

    items = []
    for key, value in data.items():
        if isinstance(value, list):
            items.extend((key, item) for item in value if item is not None)
        elif value is not None:
            items.append((key, value))
    return ImmutableMultiDict(items)


class APIForm(FlaskForm):
    """Base form for the JSON API"""

    class Meta(FlaskForm.Meta):
        def wrap_formdata(self, form, formdata):
            if request.method in SUBMIT_METHODS and request.is_json and not request.form and not request.files:
                return json_formdata(request.get_json())
            return super().wrap_formdata(form, formdata)


def validate_form(form):
    """Validate a submitted form or raise FormValidationError (400 with field errors)"""
    if not form.validate_on_submit():
        raise FormValidationError(form)
    return form
