from salonbook import db
from datetime import datetime, date

# Salon plans
PLAN_TRIAL = 'trial'
PLAN_ACTIVE = 'active'
PLAN_INACTIVE = 'inactive'
PLANS = (PLAN_TRIAL, PLAN_ACTIVE, PLAN_INACTIVE)


class Salon(db.Model):
    __tablename__ = 'salons'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    slug = db.Column(db.String(80), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(20), nullable=True)
    plan = db.Column(db.String(20), nullable=False, default=PLAN_TRIAL)
    trial_expires_on = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    users = db.relationship('User', backref='salon', lazy='dynamic')
    professionals = db.relationship('Professional', backref='salon', lazy='dynamic')
    services = db.relationship('Service', backref='salon', lazy='dynamic')
    clients = db.relationship('Client', backref='salon', lazy='dynamic')

    def __init__(self, name, email, slug, plan=PLAN_TRIAL, phone=None, trial_expires_on=None):
        self.name = name
        self.email = email
        self.slug = slug
        self.plan = plan
        self.phone = phone
        self.trial_expires_on = trial_expires_on

    def has_trial_expired(self, today=None):
        if self.plan != PLAN_TRIAL:
            return False
        if not self.trial_expires_on:
            return False
        today = today or date.today()
        return today > self.trial_expires_on

    def is_active(self, today=None):
        """Active plan, or a trial that has not expired yet"""
        if self.plan == PLAN_ACTIVE:
            return True
        if self.plan == PLAN_TRIAL and not self.has_trial_expired(today):
            return True
        return False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'slug': self.slug,
            'phone': self.phone,
            'plan': self.plan,
            'trial_expires_on': self.trial_expires_on,
            'created_at': self.created_at,
        }

    def __repr__(self):
        return f'<Salon {self.slug}>'
