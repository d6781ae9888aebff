"""Tests for client reviews and client message templates."""

import pytest

from salonbook import db
from salonbook.errors import InvalidTransitionError, ValidationError
from salonbook.models import Salon, Appointment
from salonbook.services.messages import (
    DEFAULT_TEMPLATES, templates_for, save_template, format_template, appointment_message
)
from salonbook.services.reviews import submit_review, salon_reviews, professional_ratings
from conftest import MONDAY, add_appointment


@pytest.mark.usefixtures('ctx')
class TestReviews:
    """Test reviewing completed appointments."""

    def test_review_completed_appointment(self, seed):
        appointment = add_appointment(seed, MONDAY, '09:00', status='completed')

        review = submit_review(appointment, 5, '  Loved it  ')

        assert review.rating == 5
        assert review.comment == 'Loved it'
        assert appointment.reviewed is True

    def test_only_completed_can_be_reviewed(self, seed):
        appointment = add_appointment(seed, MONDAY, '09:00')
        with pytest.raises(InvalidTransitionError):
            submit_review(appointment, 4)

    def test_one_review_per_appointment(self, seed):
        appointment = add_appointment(seed, MONDAY, '09:00', status='completed')
        submit_review(appointment, 4)

        with pytest.raises(InvalidTransitionError):
            submit_review(appointment, 3)

    def test_rating_range(self, seed):
        appointment = add_appointment(seed, MONDAY, '09:00', status='completed')
        with pytest.raises(ValidationError):
            submit_review(appointment, 6)

    def test_ratings_and_listing(self, seed):
        first = add_appointment(seed, MONDAY, '09:00', status='completed')
        second = add_appointment(seed, MONDAY, '10:00', status='completed', phone='11911112222',
                                 name='Bia Lima')
        submit_review(first, 5)
        submit_review(second, 4, 'Good')

        ratings = professional_ratings(seed.salon_id)
        assert ratings[seed.professional_id] == {'average': 4.5, 'count': 2}

        reviews = salon_reviews(seed.salon_id)
        assert [r['client_name'] for r in reviews] == ['Bia Lima', 'Ana Souza']
        assert reviews[0]['professional_name'] == 'Bella'
        assert reviews[0]['service_name'] == 'Haircut'

    def test_ratings_are_per_salon(self, seed, other_seed):
        appointment = add_appointment(other_seed, MONDAY, '09:00', status='completed')
        submit_review(appointment, 2)

        assert professional_ratings(seed.salon_id) == {}
        assert salon_reviews(seed.salon_id) == []


class TestFormatTemplate:

    def test_replaces_known_placeholders(self):
        assert format_template('Hi {name}, {time}', {'name': 'Ana', 'time': '10:00'}) == 'Hi Ana, 10:00'

    def test_leaves_empty_values_untouched(self):
        assert format_template('Hi {name}', {'name': ''}) == 'Hi {name}'


@pytest.mark.usefixtures('ctx')
class TestMessages:
    """Test per-salon templates and WhatsApp messages."""

    def test_defaults_and_overrides(self, seed):
        salon = db.session.get(Salon, seed.salon_id)
        assert templates_for(salon) == DEFAULT_TEMPLATES

        save_template(salon, 'reminder', 'See you tomorrow, {name}!')
        save_template(salon, 'reminder', 'See you soon, {name}!')

        templates = templates_for(salon)
        assert templates['reminder'] == 'See you soon, {name}!'
        assert templates['confirmation'] == DEFAULT_TEMPLATES['confirmation']

    def test_unknown_kind(self, seed):
        salon = db.session.get(Salon, seed.salon_id)
        with pytest.raises(ValidationError):
            save_template(salon, 'birthday', 'Happy birthday!')

    def test_appointment_message(self, seed):
        appointment = add_appointment(seed, MONDAY, '10:00')

        result = appointment_message(appointment, 'confirmation')

        assert result['kind'] == 'confirmation'
        assert 'Hello Ana Souza!' in result['message']
        assert 'on 07/01/2030 at 10:00' in result['message']
        assert 'Price: 50.00' in result['message']
        assert result['link'].startswith('https://wa.me/5511987654321?text=Hello%20Ana%20Souza')
        assert db.session.get(Appointment, appointment.id).last_message_sent_at is not None
