"""Tests for the client area: verification, listing, cancellation and reviews."""

from datetime import date

import pytest

from salonbook.utils.tokens import generate_client_token, verify_client_token
from salonbook.models import Client
from conftest import MONDAY, add_appointment


@pytest.fixture
def booked(app, seed):
    """Ana has a future appointment and a completed one; Bia has one future appointment."""
    with app.app_context():
        future = add_appointment(seed, MONDAY, '10:00')
        past = add_appointment(seed, date(2020, 3, 2), '10:00', status='completed')
        other = add_appointment(seed, MONDAY, '11:00', phone='11911112222', name='Bia Lima')
        return {'future': future.id, 'past': past.id, 'other': other.id}


def verify(client, email='ana@mail.com', phone='(11) 98765-4321', slug='studio-bella'):
    return client.post(f'/s/{slug}/client/verify', json={'email': email, 'phone': phone})


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}


class TestVerify:
    """Test exchanging email and phone for an access token."""

    def test_verify(self, client, booked):
        response = verify(client, email='ANA@mail.com')

        assert response.status_code == 200
        data = response.get_json()
        assert data['client']['name'] == 'Ana Souza'
        assert data['token']

    def test_wrong_phone(self, client, booked):
        response = verify(client, phone='11900000000')
        assert response.status_code == 404

    def test_same_client_unknown_in_other_salon(self, client, booked, other_seed):
        assert verify(client, slug='other-salon').status_code == 404


class TestClientAppointments:
    """Test the authenticated client area."""

    def test_requires_token(self, client, booked):
        assert client.get('/s/studio-bella/client/appointments').status_code == 401

    def test_rejects_tampered_token(self, client, booked):
        response = client.get('/s/studio-bella/client/appointments', headers=auth_header('not-a-token'))
        assert response.status_code == 401

    def test_lists_own_appointments_newest_first(self, client, booked):
        token = verify(client).get_json()['token']

        data = client.get('/s/studio-bella/client/appointments', headers=auth_header(token)).get_json()

        assert [a['id'] for a in data['appointments']] == [booked['future'], booked['past']]

    def test_token_in_query_string(self, client, booked):
        token = verify(client).get_json()['token']
        response = client.get(f'/s/studio-bella/client/appointments?token={token}')
        assert response.status_code == 200

    def test_token_is_bound_to_salon(self, client, booked, other_seed):
        token = verify(client).get_json()['token']
        response = client.get('/s/other-salon/client/appointments', headers=auth_header(token))
        assert response.status_code == 401

    def test_cancel_future_appointment(self, client, booked):
        token = verify(client).get_json()['token']

        response = client.post(f'/s/studio-bella/client/appointments/{booked["future"]}/cancel',
                               json={'reason': 'Traveling'}, headers=auth_header(token))

        assert response.status_code == 200
        appointment = response.get_json()['appointment']
        assert appointment['status'] == 'canceled'
        assert appointment['cancellation_reason'] == 'Traveling'

    def test_cannot_cancel_past_appointment(self, client, booked):
        token = verify(client).get_json()['token']
        response = client.post(f'/s/studio-bella/client/appointments/{booked["past"]}/cancel',
                               json={}, headers=auth_header(token))
        assert response.status_code == 409

    def test_cannot_touch_other_clients_appointment(self, client, booked):
        token = verify(client).get_json()['token']
        response = client.post(f'/s/studio-bella/client/appointments/{booked["other"]}/cancel',
                               json={}, headers=auth_header(token))
        assert response.status_code == 404


class TestClientReviews:
    """Test reviewing from the client area."""

    def test_review_completed(self, client, booked):
        token = verify(client).get_json()['token']

        response = client.post(f'/s/studio-bella/client/appointments/{booked["past"]}/review',
                               json={'rating': 5, 'comment': 'Great cut'}, headers=auth_header(token))

        assert response.status_code == 201
        assert response.get_json()['review']['rating'] == 5

        again = client.post(f'/s/studio-bella/client/appointments/{booked["past"]}/review',
                            json={'rating': 4}, headers=auth_header(token))
        assert again.status_code == 409

    def test_review_scheduled_is_rejected(self, client, booked):
        token = verify(client).get_json()['token']
        response = client.post(f'/s/studio-bella/client/appointments/{booked["future"]}/review',
                               json={'rating': 5}, headers=auth_header(token))
        assert response.status_code == 409

    def test_rating_out_of_range(self, client, booked):
        token = verify(client).get_json()['token']
        response = client.post(f'/s/studio-bella/client/appointments/{booked["past"]}/review',
                               json={'rating': 6}, headers=auth_header(token))
        assert response.status_code == 400
        assert 'rating' in response.get_json()['fields']


class TestTokens:
    """Test client token signing."""

    def test_round_trip_and_expiry(self, app, booked):
        with app.app_context():
            ana = Client.query.filter_by(phone='11987654321').one()
            token = generate_client_token(ana)

            assert verify_client_token(token) == {'client_id': ana.id, 'salon_id': ana.salon_id}
            assert verify_client_token(token, max_age=-1) is None
            assert verify_client_token(token + 'x') is None
