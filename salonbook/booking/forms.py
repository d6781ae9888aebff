from datetime import date
from salonbook.forms import APIForm
from wtforms import StringField, IntegerField, DateField
from wtforms.validators import DataRequired, Email, Length, ValidationError
from salonbook.utils.phone import is_valid_phone
from salonbook.utils.scheduling import parse_time


class BookingForm(APIForm):
    """Form for booking an appointment: service, professional, date/time and customer"""
    service_id = IntegerField('Service', validators=[DataRequired()])
    professional_id = IntegerField('Professional', validators=[DataRequired()])
    date = DateField('Date', validators=[DataRequired()], format='%Y-%m-%d')
    time = StringField('Time', validators=[DataRequired()])
    name = StringField('Name', validators=[DataRequired(), Length(min=2, max=100)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    phone = StringField('Phone Number', validators=[DataRequired(), Length(max=20)])

    def validate_date(self, date_field):
        # Ensure appointment is not in the past
        if date_field.data < date.today():
            raise ValidationError('Please select a future date.')

    def validate_time(self, time_field):
        try:
            parse_time(time_field.data)
        except (ValueError, AttributeError):
            raise ValidationError('Time must use the HH:MM format.')

    def validate_phone(self, phone):
        if not is_valid_phone(phone.data):
            raise ValidationError('Phone number must have 10 or 11 digits including area code.')
