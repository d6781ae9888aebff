from datetime import date, datetime
from functools import wraps
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from sqlalchemy import or_
from salonbook import db
from salonbook.admin.forms import (
    ClientForm, ProfessionalForm, ServiceForm, BlockForm, StatusForm, CancelForm, RescheduleForm,
    MessageTemplateForm
)
from salonbook.errors import ValidationError, NotFoundError, ConflictError
from salonbook.forms import validate_form
from salonbook.models.appointment import Appointment, STATUSES
from salonbook.models.availability import Block
from salonbook.models.client import Client
from salonbook.models.professional import Professional
from salonbook.models.service import Service
from salonbook.services.appointments import (
    filter_appointments, update_status, cancel_appointment, complete_appointment,
    reschedule_appointment, delete_appointment, auto_complete_past
)
from salonbook.services.availability import available_times
from salonbook.services.dashboard import salon_month_stats, weekly_schedule
from salonbook.services.messages import templates_for, save_template, appointment_message, MESSAGE_KINDS
from salonbook.services.reviews import salon_reviews, professional_ratings
from salonbook.utils.history import appointment_history_for
from salonbook.utils.phone import normalize_phone, digits_only
from salonbook.utils.scheduling import parse_date, parse_time

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


# Custom decorator to ensure only salon administrators can access these routes
def salon_admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_salon_admin() or not current_user.salon_id:
            return jsonify({'error': 'Access denied. This area is for salon administrators only.'}), 403
        return f(*args, **kwargs)
    return decorated_function


def _owned(model, object_id, label):
    """Row of the current user's salon, or 404"""
    obj = model.query.filter_by(id=object_id, salon_id=current_user.salon_id).first()
    if not obj:
        raise NotFoundError(f'{label} not found')
    return obj


def _submitted(field_name):
    data = request.get_json(silent=True) or {}
    return field_name in data or field_name in request.form


def _date_arg(name, default=None):
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_date(value)
    except ValueError:
        raise ValidationError(f'{name} must use the YYYY-MM-DD format.')


# Dashboard

@admin_bp.route('/dashboard')
@login_required
@salon_admin_required
def dashboard():
    """Monthly metrics of the salon (defaults to the current month)"""
    today = date.today()
    year = request.args.get('year', today.year, type=int)
    month = request.args.get('month', today.month, type=int)
    if not 1 <= month <= 12:
        raise ValidationError('Month must be between 1 and 12.')
    # The previous month is compared too, so year 1 has nothing before it
    if not 1 < year <= 9999:
        raise ValidationError('Year must be between 2 and 9999.')

    return jsonify(salon_month_stats(current_user.salon_id, year, month))


@admin_bp.route('/weekly')
@login_required
@salon_admin_required
def weekly():
    """Appointments of the week (Sunday to Saturday) containing date"""
    day = _date_arg('date', date.today())
    professional_id = request.args.get('professional_id', type=int)
    if professional_id:
        _owned(Professional, professional_id, 'Professional')

    return jsonify(weekly_schedule(current_user.salon_id, day, professional_id=professional_id))


# Appointments

@admin_bp.route('/appointments')
@login_required
@salon_admin_required
def appointments():
    """Filtered, paginated list of the salon's appointments"""
    status = request.args.get('status', 'all')
    if status != 'all' and status not in STATUSES:
        raise ValidationError(f'Invalid status: {status}')

    professional_id = request.args.get('professional_id', 'all')
    if professional_id != 'all' and not professional_id.isdigit():
        raise ValidationError('professional_id must be a number or "all".')

    query = filter_appointments(
        current_user.salon_id,
        status=status,
        professional_id=professional_id,
        start_date=_date_arg('start_date'),
        end_date=_date_arg('end_date'),
        client_query=request.args.get('q', '').strip() or None
    )

    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', current_app.config['APPOINTMENTS_PER_PAGE'], type=int)
    pagination = query.paginate(page=page, per_page=per_page, error_out=False)

    return jsonify({
        'appointments': [appointment.to_dict(details=True) for appointment in pagination.items],
        'page': pagination.page,
        'pages': pagination.pages,
        'total': pagination.total,
    })


@admin_bp.route('/appointments/<int:appointment_id>')
@login_required
@salon_admin_required
def appointment_detail(appointment_id):
    appointment = _owned(Appointment, appointment_id, 'Appointment')

    data = appointment.to_dict(details=True)
    data['history'] = [entry.to_dict() for entry in appointment_history_for(appointment)]
    data['review'] = appointment.review.to_dict() if appointment.review else None
    return jsonify({'appointment': data})


@admin_bp.route('/appointments/<int:appointment_id>/status', methods=['POST'])
@login_required
@salon_admin_required
def appointment_status(appointment_id):
    """Move an appointment to scheduled, completed or canceled"""
    appointment = _owned(Appointment, appointment_id, 'Appointment')
    form = validate_form(StatusForm())

    update_status(appointment, form.status.data, reason=form.reason.data, now=datetime.now())
    current_app.logger.info(f"Admin {current_user.email} set appointment {appointment.id} to {appointment.status}")

    return jsonify({'appointment': appointment.to_dict(details=True)})


@admin_bp.route('/appointments/<int:appointment_id>/cancel', methods=['POST'])
@login_required
@salon_admin_required
def appointment_cancel(appointment_id):
    appointment = _owned(Appointment, appointment_id, 'Appointment')
    form = validate_form(CancelForm())

    cancel_appointment(appointment, reason=form.reason.data)
    return jsonify({'appointment': appointment.to_dict(details=True)})


@admin_bp.route('/appointments/<int:appointment_id>/complete', methods=['POST'])
@login_required
@salon_admin_required
def appointment_complete(appointment_id):
    appointment = _owned(Appointment, appointment_id, 'Appointment')
    complete_appointment(appointment, now=datetime.now())
    return jsonify({'appointment': appointment.to_dict(details=True)})


@admin_bp.route('/appointments/<int:appointment_id>/available-times')
@login_required
@salon_admin_required
def appointment_available_times(appointment_id):
    """Free times for moving an appointment, ignoring its own slot"""
    appointment = _owned(Appointment, appointment_id, 'Appointment')
    day = _date_arg('date')
    if day is None:
        raise ValidationError('Please select a date.')

    times = available_times(
        appointment.professional, appointment.service, day,
        now=datetime.now(), exclude_appointment_id=appointment.id
    )
    return jsonify({'date': day, 'available_times': times})


@admin_bp.route('/appointments/<int:appointment_id>/reschedule', methods=['POST'])
@login_required
@salon_admin_required
def appointment_reschedule(appointment_id):
    appointment = _owned(Appointment, appointment_id, 'Appointment')
    form = validate_form(RescheduleForm())

    reschedule_appointment(appointment, form.date.data, parse_time(form.time.data), now=datetime.now())
    return jsonify({'appointment': appointment.to_dict(details=True)})


@admin_bp.route('/appointments/<int:appointment_id>', methods=['DELETE'])
@login_required
@salon_admin_required
def appointment_delete(appointment_id):
    appointment = _owned(Appointment, appointment_id, 'Appointment')
    delete_appointment(appointment)
    current_app.logger.info(f"Admin {current_user.email} deleted appointment {appointment_id}")
    return jsonify({'message': 'Appointment deleted.'})


@admin_bp.route('/appointments/auto-complete', methods=['POST'])
@login_required
@salon_admin_required
def appointments_auto_complete():
    """Complete the salon's scheduled appointments whose time has passed"""
    completed = auto_complete_past(now=datetime.now(), salon=current_user.salon)
    return jsonify({'completed': [appointment.id for appointment in completed]})


@admin_bp.route('/appointments/<int:appointment_id>/message')
@login_required
@salon_admin_required
def appointment_message_link(appointment_id):
    """Client message text and WhatsApp link for an appointment"""
    appointment = _owned(Appointment, appointment_id, 'Appointment')
    kind = request.args.get('kind', 'confirmation')
    return jsonify(appointment_message(appointment, kind))


# Clients

@admin_bp.route('/clients')
@login_required
@salon_admin_required
def clients():
    query = Client.query.filter_by(salon_id=current_user.salon_id)

    search = request.args.get('q', '').strip()
    if search:
        pattern = f'%{search}%'
        conditions = [Client.name.ilike(pattern), Client.email.ilike(pattern)]
        if digits_only(search):
            conditions.append(Client.phone.like(f'%{digits_only(search)}%'))
        query = query.filter(or_(*conditions))

    return jsonify({'clients': [client.to_dict() for client in query.order_by(Client.name).all()]})


@admin_bp.route('/clients/<int:client_id>')
@login_required
@salon_admin_required
def client_detail(client_id):
    client = _owned(Client, client_id, 'Client')
    data = client.to_dict()
    data['appointments'] = [
        appointment.to_dict(details=True)
        for appointment in client.appointments.order_by(Appointment.date.desc(), Appointment.time.desc())
    ]
    return jsonify({'client': data})


def _check_client_phone(phone, client_id=None):
    existing = Client.query.filter_by(salon_id=current_user.salon_id, phone=phone).first()
    if existing and existing.id != client_id:
        raise ConflictError('A client with this phone number already exists.')


@admin_bp.route('/clients', methods=['POST'])
@login_required
@salon_admin_required
def create_client():
    form = validate_form(ClientForm())
    phone = normalize_phone(form.phone.data)
    _check_client_phone(phone)

    client = Client(
        salon_id=current_user.salon_id,
        name=form.name.data.strip(),
        email=form.email.data.strip().lower(),
        phone=phone
    )
    db.session.add(client)
    db.session.commit()
    current_app.logger.info(f"Client {client.id} created by {current_user.email}")

    return jsonify({'client': client.to_dict()}), 201


@admin_bp.route('/clients/<int:client_id>', methods=['PUT'])
@login_required
@salon_admin_required
def update_client(client_id):
    client = _owned(Client, client_id, 'Client')
    form = validate_form(ClientForm())
    phone = normalize_phone(form.phone.data)
    _check_client_phone(phone, client_id=client.id)

    client.name = form.name.data.strip()
    client.email = form.email.data.strip().lower()
    client.phone = phone
    db.session.commit()

    return jsonify({'client': client.to_dict()})


@admin_bp.route('/clients/<int:client_id>', methods=['DELETE'])
@login_required
@salon_admin_required
def delete_client(client_id):
    client = _owned(Client, client_id, 'Client')
    if client.appointments.count():
        raise ConflictError('Cannot delete a client with appointments.')

    db.session.delete(client)
    db.session.commit()
    current_app.logger.info(f"Client {client_id} deleted by {current_user.email}")
    return jsonify({'message': 'Client deleted.'})


# Professionals

@admin_bp.route('/professionals')
@login_required
@salon_admin_required
def professionals():
    ratings = professional_ratings(current_user.salon_id)
    results = []
    for professional in Professional.query.filter_by(salon_id=current_user.salon_id).order_by(Professional.name):
        data = professional.to_dict()
        data['rating'] = ratings.get(professional.id)
        results.append(data)
    return jsonify({'professionals': results})


@admin_bp.route('/professionals', methods=['POST'])
@login_required
@salon_admin_required
def create_professional():
    form = validate_form(ProfessionalForm())

    professional = Professional(
        salon_id=current_user.salon_id,
        name=form.name.data.strip(),
        working_days=form.working_days.data,
        start_time=form.start_time.data,
        end_time=form.end_time.data
    )
    db.session.add(professional)
    db.session.commit()
    current_app.logger.info(f"Professional {professional.id} created by {current_user.email}")

    return jsonify({'professional': professional.to_dict()}), 201


@admin_bp.route('/professionals/<int:professional_id>', methods=['PUT'])
@login_required
@salon_admin_required
def update_professional(professional_id):
    professional = _owned(Professional, professional_id, 'Professional')
    form = validate_form(ProfessionalForm())

    professional.name = form.name.data.strip()
    professional.working_days = form.working_days.data
    professional.start_time = form.start_time.data
    professional.end_time = form.end_time.data
    db.session.commit()

    return jsonify({'professional': professional.to_dict()})


@admin_bp.route('/professionals/<int:professional_id>', methods=['DELETE'])
@login_required
@salon_admin_required
def delete_professional(professional_id):
    professional = _owned(Professional, professional_id, 'Professional')
    if professional.appointments.count():
        raise ConflictError('Cannot delete a professional with appointments.')

    Block.query.filter_by(professional_id=professional.id).delete()
    db.session.delete(professional)
    db.session.commit()
    current_app.logger.info(f"Professional {professional_id} deleted by {current_user.email}")
    return jsonify({'message': 'Professional deleted.'})


# Services

@admin_bp.route('/services')
@login_required
@salon_admin_required
def services():
    query = Service.query.filter_by(salon_id=current_user.salon_id)
    if request.args.get('active') == 'true':
        query = query.filter_by(is_active=True)
    return jsonify({'services': [service.to_dict() for service in query.order_by(Service.name).all()]})


@admin_bp.route('/services', methods=['POST'])
@login_required
@salon_admin_required
def create_service():
    form = validate_form(ServiceForm())

    service = Service(
        salon_id=current_user.salon_id,
        name=form.name.data.strip(),
        price=form.price.data,
        duration_minutes=form.duration_minutes.data,
        description=form.description.data or None,
        category=form.category.data or None,
        image_url=form.image_url.data or None,
        # New services are active unless told otherwise
        is_active=form.is_active.data if _submitted('is_active') else True
    )
    db.session.add(service)
    db.session.commit()
    current_app.logger.info(f"Service {service.id} created by {current_user.email}")

    return jsonify({'service': service.to_dict()}), 201


@admin_bp.route('/services/<int:service_id>', methods=['PUT'])
@login_required
@salon_admin_required
def update_service(service_id):
    service = _owned(Service, service_id, 'Service')
    form = validate_form(ServiceForm())

    service.name = form.name.data.strip()
    service.price = form.price.data
    service.duration_minutes = form.duration_minutes.data
    service.description = form.description.data or None
    service.category = form.category.data or None
    service.image_url = form.image_url.data or None
    if _submitted('is_active'):
        service.is_active = form.is_active.data
    db.session.commit()

    return jsonify({'service': service.to_dict()})


@admin_bp.route('/services/<int:service_id>/toggle', methods=['POST'])
@login_required
@salon_admin_required
def toggle_service(service_id):
    """Activate or deactivate a service on the public scheduler"""
    service = _owned(Service, service_id, 'Service')
    service.is_active = not service.is_active
    db.session.commit()

    status = 'activated' if service.is_active else 'deactivated'
    current_app.logger.info(f"Service {service.id} {status} by {current_user.email}")
    return jsonify({'service': service.to_dict()})


@admin_bp.route('/services/<int:service_id>', methods=['DELETE'])
@login_required
@salon_admin_required
def delete_service(service_id):
    service = _owned(Service, service_id, 'Service')
    if service.appointments.count():
        raise ConflictError('Cannot delete a service with appointments. Deactivate it instead.')

    db.session.delete(service)
    db.session.commit()
    current_app.logger.info(f"Service {service_id} deleted by {current_user.email}")
    return jsonify({'message': 'Service deleted.'})


# Blocks

def _block_professional_id(form):
    professional_id = form.professional_id.data
    if professional_id:
        _owned(Professional, professional_id, 'Professional')
        return professional_id
    return None


@admin_bp.route('/blocks')
@login_required
@salon_admin_required
def blocks():
    """Blocks that have not ended yet, or all of them with ?all=true"""
    query = Block.query.filter_by(salon_id=current_user.salon_id)
    if request.args.get('all') != 'true':
        query = query.filter(Block.end_date >= date.today())
    return jsonify({'blocks': [block.to_dict() for block in query.order_by(Block.start_date).all()]})


@admin_bp.route('/blocks', methods=['POST'])
@login_required
@salon_admin_required
def create_block():
    form = validate_form(BlockForm())

    block = Block(
        salon_id=current_user.salon_id,
        start_date=form.start_date.data,
        end_date=form.end_date.data,
        start_time=form.start_time.data,
        end_time=form.end_time.data,
        note=form.note.data or None,
        professional_id=_block_professional_id(form)
    )
    db.session.add(block)
    db.session.commit()
    current_app.logger.info(f"Block {block.id} created by {current_user.email}")

    return jsonify({'block': block.to_dict()}), 201


@admin_bp.route('/blocks/<int:block_id>', methods=['PUT'])
@login_required
@salon_admin_required
def update_block(block_id):
    block = _owned(Block, block_id, 'Block')
    form = validate_form(BlockForm())

    block.start_date = form.start_date.data
    block.end_date = form.end_date.data
    block.start_time = form.start_time.data
    block.end_time = form.end_time.data
    block.note = form.note.data or None
    block.professional_id = _block_professional_id(form)
    db.session.commit()

    return jsonify({'block': block.to_dict()})


@admin_bp.route('/blocks/<int:block_id>', methods=['DELETE'])
@login_required
@salon_admin_required
def delete_block(block_id):
    block = _owned(Block, block_id, 'Block')
    db.session.delete(block)
    db.session.commit()
    return jsonify({'message': 'Block deleted.'})


# Reviews and messages

@admin_bp.route('/reviews')
@login_required
@salon_admin_required
def reviews():
    professional_id = request.args.get('professional_id', type=int)
    return jsonify({
        'reviews': salon_reviews(current_user.salon_id, professional_id=professional_id),
        'ratings': professional_ratings(current_user.salon_id),
    })


@admin_bp.route('/message-templates')
@login_required
@salon_admin_required
def message_templates():
    return jsonify({'templates': templates_for(current_user.salon)})


@admin_bp.route('/message-templates/<kind>', methods=['PUT'])
@login_required
@salon_admin_required
def update_message_template(kind):
    if kind not in MESSAGE_KINDS:
        raise NotFoundError(f'Unknown message kind: {kind}')
    form = validate_form(MessageTemplateForm(kind=kind))

    template = save_template(current_user.salon, kind, form.body.data)
    current_app.logger.info(f"Message template {kind} updated by {current_user.email}")
    return jsonify({'kind': template.kind, 'body': template.body})
