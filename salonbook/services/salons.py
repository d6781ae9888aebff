"""
Tenant salons: lookup by public slug and super-admin management
"""
import logging
from datetime import date, timedelta

from flask import current_app

from salonbook import db
from salonbook.errors import NotFoundError, SalonUnavailableError, ValidationError
from salonbook.models.professional import Professional
from salonbook.models.salon import Salon, PLANS, PLAN_TRIAL
from salonbook.models.user import User, ROLE_SALON_ADMIN

logger = logging.getLogger(__name__)


def get_salon_by_slug(slug):
    salon = Salon.query.filter_by(slug=(slug or '').lower()).first()
    if not salon:
        raise NotFoundError('Salon not found')
    return salon


def get_active_salon(slug, today=None):
    """Salon behind a public URL; inactive or expired salons take no bookings"""
    salon = get_salon_by_slug(slug)
    if not salon.is_active(today):
        raise SalonUnavailableError('This salon is not accepting bookings at the moment.')
    return salon


def create_salon(name, professional_name, email, password, slug, plan=PLAN_TRIAL, phone=None,
                 today=None):
    """Create a salon with its admin account and a first professional"""
    today = today or date.today()

    trial_expires_on = None
    if plan == PLAN_TRIAL:
        trial_expires_on = today + timedelta(days=current_app.config['TRIAL_DAYS'])

    salon = Salon(
        name=name,
        email=email.lower(),
        slug=slug.lower(),
        plan=plan,
        phone=phone,
        trial_expires_on=trial_expires_on
    )
    db.session.add(salon)
    db.session.flush()

    admin = User(
        email=email.lower(),
        password=password,
        role=ROLE_SALON_ADMIN,
        name=professional_name,
        phone=phone,
        salon_id=salon.id
    )
    admin.studio_name = name
    db.session.add(admin)

    # Create initial professional
    professional = Professional(salon_id=salon.id, name=professional_name)
    db.session.add(professional)

    db.session.commit()
    logger.info(f"Created salon {salon.slug} ({salon.plan})")
    return salon


def update_plan(salon, plan, today=None):
    if plan not in PLANS:
        raise ValidationError(f'Invalid plan: {plan}')

    salon.plan = plan
    if plan == PLAN_TRIAL and salon.trial_expires_on is None:
        today = today or date.today()
        salon.trial_expires_on = today + timedelta(days=current_app.config['TRIAL_DAYS'])
    db.session.commit()
    logger.info(f"Salon {salon.slug} plan set to {plan}")
    return salon


def reset_trial(salon, today=None):
    today = today or date.today()
    salon.plan = PLAN_TRIAL
    salon.trial_expires_on = today + timedelta(days=current_app.config['TRIAL_RESET_DAYS'])
    db.session.commit()
    logger.info(f"Salon {salon.slug} trial reset until {salon.trial_expires_on}")
    return salon
