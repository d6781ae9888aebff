from salonbook.forms import APIForm
from wtforms import StringField, IntegerField, TextAreaField
from wtforms.validators import DataRequired, Email, Length, NumberRange, Optional


class ClientVerifyForm(APIForm):
    """Email and phone used when booking, to open the client area"""
    email = StringField('Email', validators=[DataRequired(), Email()])
    phone = StringField('Phone Number', validators=[DataRequired(), Length(max=20)])


class CancelForm(APIForm):
    reason = TextAreaField('Reason', validators=[Optional(), Length(max=500)])


class ReviewForm(APIForm):
    """Form for rating a completed appointment"""
    rating = IntegerField('Rating', validators=[
        DataRequired(message='Please select a rating from 1 to 5 stars.'),
        NumberRange(min=1, max=5, message='Please select a rating from 1 to 5 stars.')
    ])
    comment = TextAreaField('Comment', validators=[Optional(), Length(max=1000)])
