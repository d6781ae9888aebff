from salonbook.forms import APIForm
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Email, Length, Optional, EqualTo, URL


class LoginForm(APIForm):
    """Form for staff login"""
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])


class UpdateProfileForm(APIForm):
    """Form for updating the logged in user's profile"""
    name = StringField('Name', validators=[Optional(), Length(max=100)])
    phone = StringField('Phone Number', validators=[Optional(), Length(max=20)])
    studio_name = StringField('Studio Name', validators=[Optional(), Length(max=120)])
    avatar_url = StringField('Avatar URL', validators=[Optional(), URL(), Length(max=255)])


class ChangePasswordForm(APIForm):
    """Form for changing the logged in user's password"""
    current_password = PasswordField('Current Password', validators=[DataRequired()])
    password = PasswordField('New Password', validators=[DataRequired(), Length(min=6)])
    confirm_password = PasswordField('Confirm New Password',
                                     validators=[DataRequired(), EqualTo('password', message='Passwords must match')])
