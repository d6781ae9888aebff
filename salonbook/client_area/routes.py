from datetime import datetime
from functools import wraps
from flask import Blueprint, jsonify, request, current_app, g
from salonbook import db
from salonbook.client_area.forms import ClientVerifyForm, CancelForm, ReviewForm
from salonbook.errors import NotFoundError, InvalidTransitionError
from salonbook.forms import validate_form
from salonbook.models.appointment import Appointment
from salonbook.models.client import Client
from salonbook.services.appointments import cancel_appointment
from salonbook.services.reviews import submit_review
from salonbook.services.salons import get_active_salon
from salonbook.utils.phone import normalize_phone
from salonbook.utils.tokens import generate_client_token, verify_client_token

client_area_bp = Blueprint('client_area', __name__, url_prefix='/s/<slug>/client')


def _request_token():
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        return auth_header[len('Bearer '):].strip()
    return request.args.get('token')


# Custom decorator to ensure only a verified client can access these routes
def client_token_required(f):
    @wraps(f)
    def decorated_function(slug, *args, **kwargs):
        salon = get_active_salon(slug)

        token = _request_token()
        payload = verify_client_token(token) if token else None
        if not payload or payload.get('salon_id') != salon.id:
            return jsonify({'error': 'Access denied. Please verify your email and phone again.'}), 401

        client = Client.query.filter_by(id=payload['client_id'], salon_id=salon.id).first()
        if not client:
            return jsonify({'error': 'Access denied. Please verify your email and phone again.'}), 401

        g.salon = salon
        g.client = client
        return f(slug, *args, **kwargs)
    return decorated_function


def _client_appointment(appointment_id):
    """An appointment of the verified client, or 404"""
    appointment = Appointment.query.filter_by(
        id=appointment_id, client_id=g.client.id, salon_id=g.salon.id
    ).first()
    if not appointment:
        raise NotFoundError('Appointment not found')
    return appointment


@client_area_bp.route('/verify', methods=['POST'])
def verify(slug):
    """Exchange the email and phone used when booking for an access token"""
    salon = get_active_salon(slug)
    form = validate_form(ClientVerifyForm())

    client = Client.query.filter(
        Client.salon_id == salon.id,
        db.func.lower(Client.email) == form.email.data.strip().lower(),
        Client.phone == normalize_phone(form.phone.data)
    ).first()

    if not client:
        current_app.logger.info(f"Client area verification failed for salon {salon.slug}")
        raise NotFoundError('No appointments found for this email and phone.')

    return jsonify({'token': generate_client_token(client), 'client': client.to_dict()})


@client_area_bp.route('/appointments')
@client_token_required
def appointments(slug):
    """All appointments of the verified client, newest first"""
    appointments_list = Appointment.query.filter_by(
        client_id=g.client.id, salon_id=g.salon.id
    ).order_by(Appointment.date.desc(), Appointment.time.desc()).all()

    return jsonify({
        'client': g.client.to_dict(),
        'appointments': [appointment.to_dict(details=True) for appointment in appointments_list]
    })


@client_area_bp.route('/appointments/<int:appointment_id>/cancel', methods=['POST'])
@client_token_required
def cancel(slug, appointment_id):
    """Cancel an upcoming appointment"""
    appointment = _client_appointment(appointment_id)
    form = validate_form(CancelForm())

    # Check if appointment can be cancelled (not in the past, etc.)
    if appointment.is_in_past(datetime.now()):
        raise InvalidTransitionError('Cannot cancel an appointment that has already started or completed.')

    cancel_appointment(appointment, reason=form.reason.data)
    current_app.logger.info(f"Client {g.client.id} canceled appointment {appointment.id}")

    return jsonify({'appointment': appointment.to_dict(details=True)})


@client_area_bp.route('/appointments/<int:appointment_id>/review', methods=['POST'])
@client_token_required
def review(slug, appointment_id):
    """Rate a completed appointment"""
    appointment = _client_appointment(appointment_id)
    form = validate_form(ReviewForm())

    new_review = submit_review(appointment, form.rating.data, form.comment.data)

    return jsonify({'review': new_review.to_dict()}), 201
