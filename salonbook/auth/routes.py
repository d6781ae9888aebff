from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from salonbook import db
from salonbook.auth.forms import LoginForm, UpdateProfileForm, ChangePasswordForm
from salonbook.errors import ValidationError, SalonUnavailableError
from salonbook.forms import validate_form
from salonbook.models.user import User

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


@auth_bp.route('/login', methods=['POST'])
def login():
    form = validate_form(LoginForm())

    user = User.query.filter_by(email=form.email.data.strip().lower()).first()

    if not user or not user.check_password(form.password.data):
        current_app.logger.warning(f"Failed login attempt for {form.email.data}")
        return jsonify({'error': 'Invalid email or password.'}), 401

    if not user.is_active:
        current_app.logger.warning(f"Login refused for inactive account {user.email}")
        raise SalonUnavailableError('Your account is currently deactivated. Please contact support.')

    login_user(user)
    current_app.logger.info(f"User {user.email} logged in")

    return jsonify({'user': user.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    current_app.logger.info(f"User {current_user.email} logged out")
    logout_user()
    return jsonify({'message': 'You have been logged out.'})


@auth_bp.route('/me')
@login_required
def me():
    data = current_user.to_dict()
    if current_user.salon is not None:
        data['salon'] = current_user.salon.to_dict()
    return jsonify({'user': data})


@auth_bp.route('/profile', methods=['POST'])
@login_required
def profile():
    form = validate_form(UpdateProfileForm())

    # Only overwrite the fields that were sent
    for field in ('name', 'phone', 'studio_name', 'avatar_url'):
        value = getattr(form, field).data
        if value is not None and value != '':
            setattr(current_user, field, value)

    db.session.commit()
    current_app.logger.info(f"User {current_user.email} updated their profile")

    return jsonify({'user': current_user.to_dict()})


@auth_bp.route('/change-password', methods=['POST'])
@login_required
def change_password():
    form = validate_form(ChangePasswordForm())

    if not current_user.check_password(form.current_password.data):
        raise ValidationError('Current password is incorrect.')

    current_user.set_password(form.password.data)
    db.session.commit()
    current_app.logger.info(f"User {current_user.email} changed their password")

    return jsonify({'message': 'Your password has been updated.'})
