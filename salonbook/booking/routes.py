from datetime import datetime
from flask import Blueprint, jsonify, request, current_app
from salonbook.booking.forms import BookingForm
from salonbook.errors import ValidationError, NotFoundError
from salonbook.forms import validate_form
from salonbook.models.professional import Professional
from salonbook.models.service import Service
from salonbook.services.appointments import book_appointment
from salonbook.services.availability import available_times
from salonbook.services.reviews import salon_reviews, professional_ratings
from salonbook.services.salons import get_active_salon
from salonbook.utils.scheduling import parse_date, parse_time

booking_bp = Blueprint('booking', __name__, url_prefix='/s/<slug>')


@booking_bp.route('/')
def salon_info(slug):
    """Public details of a salon"""
    salon = get_active_salon(slug)
    return jsonify({'salon': {
        'name': salon.name,
        'slug': salon.slug,
        'phone': salon.phone,
        'email': salon.email,
    }})


@booking_bp.route('/services')
def services(slug):
    """Active services of the salon"""
    salon = get_active_salon(slug)
    services_list = Service.query.filter_by(salon_id=salon.id, is_active=True).order_by(Service.name).all()
    return jsonify({'services': [service.to_dict() for service in services_list]})


@booking_bp.route('/professionals')
def professionals(slug):
    """Professionals of the salon with their average rating"""
    salon = get_active_salon(slug)
    ratings = professional_ratings(salon.id)

    results = []
    for professional in Professional.query.filter_by(salon_id=salon.id).order_by(Professional.name).all():
        data = professional.to_dict()
        data['rating'] = ratings.get(professional.id)
        results.append(data)

    return jsonify({'professionals': results})


@booking_bp.route('/professionals/<int:professional_id>/reviews')
def professional_reviews(slug, professional_id):
    salon = get_active_salon(slug)
    Professional.query.filter_by(id=professional_id, salon_id=salon.id).first_or_404()
    return jsonify({'reviews': salon_reviews(salon.id, professional_id=professional_id)})


@booking_bp.route('/available-times')
def get_available_times(slug):
    """Free start times of a professional for a service on a date"""
    salon = get_active_salon(slug)

    professional_id = request.args.get('professional_id', type=int)
    service_id = request.args.get('service_id', type=int)
    date_str = request.args.get('date')

    # Validate inputs
    if not professional_id or not service_id or not date_str:
        raise ValidationError('Please select a professional, service, and date')

    try:
        selected_date = parse_date(date_str)
    except ValueError:
        raise ValidationError('Date must use the YYYY-MM-DD format.')

    service = Service.query.filter_by(id=service_id, salon_id=salon.id, is_active=True).first()
    if not service:
        raise NotFoundError('Selected service not found')

    professional = Professional.query.filter_by(id=professional_id, salon_id=salon.id).first()
    if not professional:
        raise NotFoundError('Selected professional not found')

    times = available_times(professional, service, selected_date, now=datetime.now())

    return jsonify({'date': selected_date, 'available_times': times})


@booking_bp.route('/appointments', methods=['POST'])
def create_appointment(slug):
    """Confirm a booking"""
    salon = get_active_salon(slug)
    form = validate_form(BookingForm())

    appointment = book_appointment(
        salon,
        service_id=form.service_id.data,
        professional_id=form.professional_id.data,
        day=form.date.data,
        slot_time=parse_time(form.time.data),
        client_name=form.name.data,
        client_email=form.email.data,
        client_phone=form.phone.data
    )
    current_app.logger.info(f"Public booking {appointment.id} created for salon {salon.slug}")

    return jsonify({'appointment': appointment.to_dict(details=True)}), 201
