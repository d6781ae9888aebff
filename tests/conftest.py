"""Shared fixtures: an app on in-memory SQLite with one seeded salon."""

from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from salonbook import create_app, db
from salonbook.config import TestingConfig
from salonbook.models import Salon, User, Professional, Service, Client, Appointment
from salonbook.models.salon import PLAN_ACTIVE
from salonbook.models.user import ROLE_SUPERADMIN

ADMIN_EMAIL = 'owner@studiobella.com'
ADMIN_PASSWORD = 'secret123'
SUPERADMIN_EMAIL = 'root@salonbook.io'
SUPERADMIN_PASSWORD = 'rootpass1'

# 2030-01-07 is a Monday, 2030-01-06 a Sunday
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)
SUNDAY = date(2030, 1, 6)
BEFORE_MONDAY = datetime(2030, 1, 1, 8, 0)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    """Application context for tests calling services directly."""
    with app.app_context():
        yield


def make_salon(slug, email, plan=PLAN_ACTIVE, trial_expires_on=None):
    """Salon with an admin, a Mon-Fri 09:00-18:00 professional and a 60 minute service."""
    salon = Salon(name=slug.replace('-', ' ').title(), email=email, slug=slug, plan=plan,
                  trial_expires_on=trial_expires_on)
    db.session.add(salon)
    db.session.flush()

    admin = User(email=email, password=ADMIN_PASSWORD, salon_id=salon.id, name='Owner')
    professional = Professional(salon_id=salon.id, name='Bella')
    service = Service(salon_id=salon.id, name='Haircut', price=Decimal('50.00'), duration_minutes=60)
    db.session.add_all([admin, professional, service])
    db.session.commit()

    return SimpleNamespace(
        salon_id=salon.id,
        slug=salon.slug,
        admin_email=email,
        professional_id=professional.id,
        service_id=service.id,
    )


def add_appointment(seed, day, slot, status='scheduled', phone='11987654321', name='Ana Souza'):
    """Insert an appointment directly, bypassing availability checks."""
    client = Client.query.filter_by(salon_id=seed.salon_id, phone=phone).first()
    if client is None:
        client = Client(salon_id=seed.salon_id, name=name, email='ana@mail.com', phone=phone)
        db.session.add(client)
        db.session.flush()

    appointment = Appointment(
        salon_id=seed.salon_id,
        client_id=client.id,
        professional_id=seed.professional_id,
        service_id=seed.service_id,
        date=day,
        time=time.fromisoformat(slot),
        status=status
    )
    db.session.add(appointment)
    db.session.commit()
    return appointment


@pytest.fixture
def seed(app):
    with app.app_context():
        return make_salon('studio-bella', ADMIN_EMAIL)


@pytest.fixture
def other_seed(app):
    with app.app_context():
        return make_salon('other-salon', 'owner@othersalon.com')


@pytest.fixture
def admin_client(client, seed):
    """Test client logged in as the seeded salon's administrator."""
    response = client.post('/auth/login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def superadmin_client(app, client):
    """Test client logged in as a platform administrator."""
    with app.app_context():
        db.session.add(User(email=SUPERADMIN_EMAIL, password=SUPERADMIN_PASSWORD, role=ROLE_SUPERADMIN))
        db.session.commit()

    response = client.post('/auth/login', json={'email': SUPERADMIN_EMAIL, 'password': SUPERADMIN_PASSWORD})
    assert response.status_code == 200
    return client
