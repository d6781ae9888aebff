from datetime import date
from functools import wraps
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from sqlalchemy import or_
from salonbook import db
from salonbook.errors import NotFoundError, ValidationError
from salonbook.forms import validate_form
from salonbook.models.salon import Salon, PLANS
from salonbook.services.dashboard import platform_stats
from salonbook.services.salons import create_salon, update_plan, reset_trial
from salonbook.superadmin.forms import SalonForm, PlanForm

superadmin_bp = Blueprint('superadmin', __name__, url_prefix='/superadmin')


# Custom decorator to ensure only the platform owner can access these routes
def superadmin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_superadmin():
            return jsonify({'error': 'Access denied. This area is for platform administrators only.'}), 403
        return f(*args, **kwargs)
    return decorated_function


def _salon_or_404(salon_id):
    salon = db.session.get(Salon, salon_id)
    if not salon:
        raise NotFoundError('Salon not found')
    return salon


def _salon_summary(salon, today):
    data = salon.to_dict()
    data['is_active'] = salon.is_active(today)
    data['trial_expired'] = salon.has_trial_expired(today)
    data['professionals'] = salon.professionals.count()
    data['services'] = salon.services.count()
    data['clients'] = salon.clients.count()
    return data


@superadmin_bp.route('/salons')
@login_required
@superadmin_required
def salons():
    """All salons, optionally filtered by plan or a name/email/slug search"""
    query = Salon.query

    plan = request.args.get('plan', 'all')
    if plan != 'all':
        if plan not in PLANS:
            raise ValidationError(f'Invalid plan: {plan}')
        query = query.filter(Salon.plan == plan)

    search = request.args.get('q', '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(Salon.name.ilike(pattern), Salon.email.ilike(pattern), Salon.slug.ilike(pattern)))

    today = date.today()
    salons_list = query.order_by(Salon.created_at.desc(), Salon.id.desc()).all()
    return jsonify({'salons': [_salon_summary(salon, today) for salon in salons_list]})


@superadmin_bp.route('/salons/<int:salon_id>')
@login_required
@superadmin_required
def salon_detail(salon_id):
    salon = _salon_or_404(salon_id)
    return jsonify({'salon': _salon_summary(salon, date.today())})


@superadmin_bp.route('/salons', methods=['POST'])
@login_required
@superadmin_required
def new_salon():
    form = validate_form(SalonForm())

    salon = create_salon(
        name=form.name.data.strip(),
        professional_name=form.professional_name.data.strip(),
        email=form.email.data.strip(),
        password=form.password.data,
        slug=form.slug.data,
        plan=form.plan.data,
        phone=form.phone.data or None
    )
    current_app.logger.info(f"Salon {salon.slug} created by {current_user.email}")

    return jsonify({'salon': _salon_summary(salon, date.today())}), 201


@superadmin_bp.route('/salons/<int:salon_id>/plan', methods=['POST'])
@login_required
@superadmin_required
def salon_plan(salon_id):
    salon = _salon_or_404(salon_id)
    form = validate_form(PlanForm())

    update_plan(salon, form.plan.data)
    return jsonify({'salon': _salon_summary(salon, date.today())})


@superadmin_bp.route('/salons/<int:salon_id>/reset-trial', methods=['POST'])
@login_required
@superadmin_required
def salon_reset_trial(salon_id):
    """Give a salon a fresh short trial"""
    salon = _salon_or_404(salon_id)
    reset_trial(salon)
    return jsonify({'salon': _salon_summary(salon, date.today())})


@superadmin_bp.route('/stats')
@login_required
@superadmin_required
def stats():
    return jsonify(platform_stats())
