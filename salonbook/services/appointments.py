"""
Appointment workflow: booking, status transitions, rescheduling and deletion

Appointment statuses: scheduled → completed / canceled
                      completed / canceled → scheduled (reactivation)

Every change is committed first and then written to the appointment
history.
"""
import logging
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError

from salonbook import db
from salonbook.errors import (
    ValidationError, SlotUnavailableError, InvalidTransitionError, NotFoundError
)
from salonbook.models.appointment import (
    Appointment, STATUSES, STATUS_SCHEDULED, STATUS_COMPLETED, STATUS_CANCELED
)
from salonbook.models.client import Client
from salonbook.models.history import (
    KIND_CREATED, KIND_SCHEDULED, KIND_COMPLETED, KIND_CANCELED, KIND_RESCHEDULED
)
from salonbook.models.professional import Professional
from salonbook.models.service import Service
from salonbook.services.availability import is_slot_available, conflicts_with_bookings
from salonbook.utils.history import record_history
from salonbook.utils.phone import normalize_phone, digits_only
from salonbook.utils.scheduling import format_time

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_REASON = 'Not specified'


def _slot_label(day, slot_time):
    return f"{day.isoformat()} {format_time(slot_time)}"


def _commit_slot_change():
    """Commit a change that takes a slot; the slot index turns races into 409s"""
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise SlotUnavailableError('Sorry, this time slot is no longer available. Please select another time.')


def _client_by_phone(salon_id, phone):
    return Client.query.filter_by(salon_id=salon_id, phone=phone).first()


def find_or_create_client(salon, name, email, phone):
    """Return the salon client with this phone, creating it on first booking"""
    phone = normalize_phone(phone)
    client = _client_by_phone(salon.id, phone)
    if client:
        return client

    client = Client(
        salon_id=salon.id,
        name=name.strip(),
        email=email.strip().lower(),
        phone=phone
    )
    try:
        with db.session.begin_nested():
            db.session.add(client)
    except IntegrityError:
        # A concurrent booking created the client first
        client = _client_by_phone(salon.id, phone)
        if client is None:
            raise
        return client

    logger.info(f"Created client {client.id} for salon {salon.id}")
    return client


def book_appointment(salon, service_id, professional_id, day, slot_time, client_name, client_email,
                     client_phone, now=None):
    """Book a new appointment from the public scheduler"""
    now = now or datetime.now()

    service = Service.query.filter_by(id=service_id, salon_id=salon.id, is_active=True).first()
    if not service:
        raise NotFoundError('Selected service not found')

    professional = Professional.query.filter_by(id=professional_id, salon_id=salon.id).first()
    if not professional:
        raise NotFoundError('Selected professional not found')

    # Check one more time if the slot is available
    if not is_slot_available(professional, service, day, slot_time, now=now):
        raise SlotUnavailableError('Sorry, this time slot is no longer available. Please select another time.')

    client = find_or_create_client(salon, client_name, client_email, client_phone)

    appointment = Appointment(
        salon_id=salon.id,
        client_id=client.id,
        professional_id=professional.id,
        service_id=service.id,
        date=day,
        time=slot_time
    )
    db.session.add(appointment)
    _commit_slot_change()

    logger.info(f"Booked appointment {appointment.id} for {_slot_label(day, slot_time)}")
    record_history(
        appointment,
        KIND_CREATED,
        description=f"Appointment booked for {_slot_label(day, slot_time)}",
        new_value=STATUS_SCHEDULED
    )
    return appointment


def complete_appointment(appointment, now=None):
    now = now or datetime.now()

    if appointment.status != STATUS_SCHEDULED:
        raise InvalidTransitionError(f'Cannot complete an appointment that is {appointment.status}.')
    if not appointment.is_in_past(now):
        raise InvalidTransitionError('Cannot complete an appointment that has not started yet.')

    previous = appointment.status
    appointment.status = STATUS_COMPLETED
    db.session.commit()

    logger.info(f"Appointment {appointment.id}: {previous} -> {STATUS_COMPLETED}")
    record_history(
        appointment, KIND_COMPLETED, description='Appointment completed',
        previous_value=previous, new_value=STATUS_COMPLETED
    )
    return appointment


def cancel_appointment(appointment, reason=None):
    if appointment.status != STATUS_SCHEDULED:
        raise InvalidTransitionError(f'Cannot cancel an appointment that is {appointment.status}.')

    reason = (reason or '').strip() or DEFAULT_CANCELLATION_REASON
    previous = appointment.status
    appointment.status = STATUS_CANCELED
    appointment.cancellation_reason = reason
    db.session.commit()

    logger.info(f"Appointment {appointment.id}: {previous} -> {STATUS_CANCELED} ({reason})")
    record_history(
        appointment, KIND_CANCELED, description=f'Appointment canceled - Reason: {reason}',
        previous_value=previous, new_value=STATUS_CANCELED
    )
    return appointment


def reactivate_appointment(appointment):
    """Put a canceled or completed appointment back on the schedule"""
    if appointment.status == STATUS_SCHEDULED:
        raise InvalidTransitionError('Appointment is already scheduled.')

    if conflicts_with_bookings(appointment):
        raise SlotUnavailableError('This time slot has been taken by another appointment.')

    previous = appointment.status
    appointment.status = STATUS_SCHEDULED
    appointment.cancellation_reason = None
    _commit_slot_change()

    logger.info(f"Appointment {appointment.id}: {previous} -> {STATUS_SCHEDULED}")
    record_history(
        appointment, KIND_SCHEDULED, description='Appointment scheduled again',
        previous_value=previous, new_value=STATUS_SCHEDULED
    )
    return appointment


def update_status(appointment, status, reason=None, now=None):
    """Move an appointment to status, dispatching to the matching transition"""
    if status not in STATUSES:
        raise ValidationError(f'Invalid status: {status}')
    if status == appointment.status:
        raise InvalidTransitionError(f'Appointment is already {status}.')

    if status == STATUS_COMPLETED:
        return complete_appointment(appointment, now=now)
    if status == STATUS_CANCELED:
        return cancel_appointment(appointment, reason=reason)
    return reactivate_appointment(appointment)


def reschedule_appointment(appointment, new_date, new_time, now=None):
    now = now or datetime.now()

    if appointment.status != STATUS_SCHEDULED:
        raise InvalidTransitionError('Only scheduled appointments can be rescheduled.')
    if appointment.date == new_date and appointment.time == new_time:
        raise ValidationError('The new date and time are the same as the current ones.')

    if not is_slot_available(appointment.professional, appointment.service, new_date, new_time,
                             now=now, exclude_appointment_id=appointment.id):
        raise SlotUnavailableError('Sorry, this time slot is not available. Please select another time.')

    previous = _slot_label(appointment.date, appointment.time)
    appointment.date = new_date
    appointment.time = new_time
    _commit_slot_change()

    new_value = _slot_label(new_date, new_time)
    logger.info(f"Appointment {appointment.id} rescheduled: {previous} -> {new_value}")
    record_history(
        appointment, KIND_RESCHEDULED,
        description=f'Appointment rescheduled to {new_date.isoformat()} at {format_time(new_time)}',
        previous_value=previous, new_value=new_value
    )
    return appointment


def delete_appointment(appointment):
    """Delete an appointment together with its history and review"""
    appointment_id = appointment.id
    db.session.delete(appointment)
    db.session.commit()
    logger.info(f"Deleted appointment {appointment_id}")


def _salon_scope(query, salon):
    if salon is not None:
        query = query.filter(Appointment.salon_id == salon.id)
    return query


def _started_before(now):
    return or_(
        Appointment.date < now.date(),
        and_(Appointment.date == now.date(), Appointment.time < now.time())
    )


def auto_complete_past(now=None, salon=None):
    """Mark every scheduled appointment whose time has passed as completed"""
    now = now or datetime.now()

    query = Appointment.query.filter(Appointment.status == STATUS_SCHEDULED, _started_before(now))
    past_appointments = _salon_scope(query, salon).all()

    if not past_appointments:
        return []

    for appointment in past_appointments:
        appointment.status = STATUS_COMPLETED
    db.session.commit()

    logger.info(f"Auto-completed {len(past_appointments)} past appointments")
    for appointment in past_appointments:
        record_history(
            appointment, KIND_COMPLETED,
            description='Appointment completed automatically (time expired)',
            previous_value=STATUS_SCHEDULED, new_value=STATUS_COMPLETED
        )
    return past_appointments


def reset_future_completed(now=None, salon=None):
    """Put back on the schedule future appointments that were marked completed"""
    now = now or datetime.now()

    query = Appointment.query.filter(Appointment.status == STATUS_COMPLETED, ~_started_before(now))
    future_appointments = _salon_scope(query, salon).all()

    if not future_appointments:
        return []

    for appointment in future_appointments:
        logger.info(f"Resetting appointment {appointment.id} ({appointment.date} {appointment.time})")
        appointment.status = STATUS_SCHEDULED
    _commit_slot_change()

    for appointment in future_appointments:
        record_history(
            appointment, KIND_SCHEDULED,
            description='Future appointment marked as completed was scheduled again',
            previous_value=STATUS_COMPLETED, new_value=STATUS_SCHEDULED
        )
    return future_appointments


def filter_appointments(salon_id, status=None, professional_id=None, start_date=None, end_date=None,
                        client_query=None):
    """Admin appointment list query; 'all' or empty filters are ignored"""
    query = Appointment.query.filter(Appointment.salon_id == salon_id)

    if status and status != 'all':
        query = query.filter(Appointment.status == status)

    if professional_id and professional_id != 'all':
        query = query.filter(Appointment.professional_id == int(professional_id))

    if start_date:
        query = query.filter(Appointment.date >= start_date)

    if end_date:
        query = query.filter(Appointment.date <= end_date)

    if client_query:
        pattern = f"%{client_query.strip()}%"
        conditions = [Client.name.ilike(pattern), Client.email.ilike(pattern), Client.phone.ilike(pattern)]
        # Phones are stored as digits only
        phone_digits = digits_only(client_query)
        if phone_digits:
            conditions.append(Client.phone.like(f"%{phone_digits}%"))
        query = query.join(Client, Client.id == Appointment.client_id).filter(or_(*conditions))

    return query.order_by(Appointment.date, Appointment.time)
