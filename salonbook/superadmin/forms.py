from salonbook.forms import APIForm
from wtforms import StringField, PasswordField, SelectField
from wtforms.validators import DataRequired, Email, Length, Optional, Regexp, ValidationError
from salonbook.models.salon import Salon, PLANS, PLAN_TRIAL
from salonbook.models.user import User


class SalonForm(APIForm):
    """Form for registering a new salon with its administrator"""
    name = StringField('Salon Name', validators=[DataRequired(), Length(min=2, max=120)])
    professional_name = StringField('Professional Name', validators=[DataRequired(), Length(min=2, max=100)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=6)])
    slug = StringField('Public URL', validators=[
        DataRequired(),
        Length(min=3, max=80),
        Regexp(r'^[a-z0-9-]+$', message='Use only lowercase letters, numbers and hyphens.')
    ])
    phone = StringField('Phone Number', validators=[Optional(), Length(max=20)])
    plan = SelectField('Plan', choices=[(plan, plan.title()) for plan in PLANS], default=PLAN_TRIAL)

    def validate_slug(self, slug):
        if Salon.query.filter_by(slug=slug.data).first():
            raise ValidationError('This URL is already taken. Please choose another one.')

    def validate_email(self, email):
        if User.query.filter_by(email=email.data.strip().lower()).first():
            raise ValidationError('Email already registered. Please use a different one.')


class PlanForm(APIForm):
    plan = SelectField('Plan', validators=[DataRequired()], choices=[(plan, plan.title()) for plan in PLANS])
