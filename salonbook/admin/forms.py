from salonbook.forms import APIForm
from wtforms import (
    StringField, TextAreaField, SelectField, SelectMultipleField, BooleanField, DecimalField,
    IntegerField, DateField, TimeField
)
from wtforms.validators import (
    DataRequired, Email, Length, Optional, NumberRange, ValidationError, URL
)
from salonbook.models.appointment import STATUSES
from salonbook.models.professional import WEEKDAYS
from salonbook.services.messages import MESSAGE_KINDS
from salonbook.utils.phone import is_valid_phone
from salonbook.utils.scheduling import parse_time


class ClientForm(APIForm):
    """Form for creating or updating a salon client"""
    name = StringField('Name', validators=[DataRequired(), Length(min=2, max=100)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    phone = StringField('Phone Number', validators=[DataRequired(), Length(max=20)])

    def validate_phone(self, phone):
        if not is_valid_phone(phone.data):
            raise ValidationError('Phone number must have 10 or 11 digits including area code.')


class ProfessionalForm(APIForm):
    """Form for creating or updating a professional and their working hours"""
    name = StringField('Name', validators=[DataRequired(), Length(min=2, max=100)])
    working_days = SelectMultipleField('Working Days', choices=[(day, day.title()) for day in WEEKDAYS],
                                       validators=[DataRequired(message='Select at least one working day.')])
    start_time = TimeField('Start Time', validators=[DataRequired()], format='%H:%M')
    end_time = TimeField('End Time', validators=[DataRequired()], format='%H:%M')

    def validate_end_time(self, end_time):
        if self.start_time.data and end_time.data <= self.start_time.data:
            raise ValidationError('End time must be after start time.')


class ServiceForm(APIForm):
    """Form for creating or updating a salon service"""
    name = StringField('Service Name', validators=[DataRequired(), Length(max=100)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=500)])
    category = StringField('Category', validators=[Optional(), Length(max=80)])
    price = DecimalField('Price', validators=[NumberRange(min=0, message='Price must be zero or more.')])
    duration_minutes = IntegerField('Duration (minutes)', validators=[
        DataRequired(),
        NumberRange(min=5, message='Service duration must be at least 5 minutes')
    ])
    image_url = StringField('Image URL', validators=[Optional(), URL(), Length(max=255)])
    is_active = BooleanField('Active')


class BlockForm(APIForm):
    """Form for blocking out days or hours for the salon or one professional"""
    start_date = DateField('Start Date', validators=[DataRequired()], format='%Y-%m-%d')
    end_date = DateField('End Date', validators=[DataRequired()], format='%Y-%m-%d')
    start_time = TimeField('Start Time', validators=[Optional()], format='%H:%M')
    end_time = TimeField('End Time', validators=[Optional()], format='%H:%M')
    professional_id = IntegerField('Professional', validators=[Optional()])
    note = StringField('Note', validators=[Optional(), Length(max=255)])

    def validate_end_date(self, end_date):
        if self.start_date.data and end_date.data < self.start_date.data:
            raise ValidationError('End date cannot be before start date.')

    def validate(self, extra_validators=None):
        if not super().validate(extra_validators=extra_validators):
            return False

        # Times go together: both for a partial-day block, neither for whole days
        if (self.start_time.data is None) != (self.end_time.data is None):
            self.end_time.errors.append('Provide both start and end time, or neither for whole days.')
            return False
        if self.end_time.data is not None and self.end_time.data <= self.start_time.data:
            self.end_time.errors.append('End time must be after start time.')
            return False
        return True


class StatusForm(APIForm):
    """Form for updating appointment status"""
    status = SelectField('Status', validators=[DataRequired()], choices=[(s, s.title()) for s in STATUSES])
    reason = TextAreaField('Reason', validators=[Optional(), Length(max=500)])


class CancelForm(APIForm):
    reason = TextAreaField('Reason', validators=[Optional(), Length(max=500)])


class RescheduleForm(APIForm):
    """Form for moving an appointment to a new date and time"""
    date = DateField('New Date', validators=[DataRequired()], format='%Y-%m-%d')
    time = StringField('New Time', validators=[DataRequired()])

    def validate_time(self, time_field):
        try:
            parse_time(time_field.data)
        except (ValueError, AttributeError):
            raise ValidationError('Time must use the HH:MM format.')


class MessageTemplateForm(APIForm):
    body = TextAreaField('Message', validators=[DataRequired(), Length(max=2000)])

    def __init__(self, kind=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.kind = kind

    def validate_body(self, body):
        if self.kind not in MESSAGE_KINDS:
            raise ValidationError(f'Unknown message kind: {self.kind}')
