"""
Slot availability for the public scheduler and for rescheduling

A professional can be booked on one of their working days, inside their
working hours, outside salon/professional blocks and outside the time taken
by appointments that are not canceled.
"""
import logging
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import or_

from salonbook.models.appointment import Appointment, STATUS_CANCELED
from salonbook.models.availability import Block
from salonbook.utils.scheduling import generate_time_slots, format_time, overlaps

logger = logging.getLogger(__name__)


def blocks_for(professional, day):
    """Blocks of the professional's salon that hit this day and apply to them"""
    return Block.query.filter(
        Block.salon_id == professional.salon_id,
        Block.start_date <= day,
        Block.end_date >= day,
        or_(Block.professional_id.is_(None), Block.professional_id == professional.id)
    ).all()


def booked_intervals(professional, day, exclude_appointment_id=None):
    """(start, end) datetimes of the live appointments of a professional on a day"""
    query = Appointment.query.filter(
        Appointment.professional_id == professional.id,
        Appointment.date == day,
        Appointment.status != STATUS_CANCELED
    )
    if exclude_appointment_id is not None:
        query = query.filter(Appointment.id != exclude_appointment_id)

    return [(appointment.starts_at, appointment.ends_at) for appointment in query.all()]


def available_times(professional, service, day, now=None, exclude_appointment_id=None):
    """
    Free start times ('HH:MM') for booking service with professional on day

    exclude_appointment_id lets an appointment being rescheduled ignore its own slot.
    """
    now = now or datetime.now()

    if day < now.date():
        return []

    if not professional.works_on(day):
        return []

    busy = booked_intervals(professional, day, exclude_appointment_id)

    for block in blocks_for(professional, day):
        if block.is_full_day:
            return []
        busy.append((datetime.combine(day, block.start_time), datetime.combine(day, block.end_time)))

    not_before = None
    if day == now.date():
        not_before = now + timedelta(minutes=current_app.config['BOOKING_LEAD_MINUTES'])

    slots = generate_time_slots(
        day,
        professional.start_time,
        professional.end_time,
        service.duration_minutes,
        interval_minutes=current_app.config['SLOT_INTERVAL_MINUTES'],
        busy=busy,
        not_before=not_before
    )
    logger.debug(f"{len(slots)} free slots for professional {professional.id} on {day}")
    return slots


def is_slot_available(professional, service, day, slot_time, now=None, exclude_appointment_id=None):
    return format_time(slot_time) in available_times(
        professional, service, day, now=now, exclude_appointment_id=exclude_appointment_id
    )


def conflicts_with_bookings(appointment):
    """True when another live appointment overlaps this appointment's own slot"""
    start, end = appointment.starts_at, appointment.ends_at
    for busy_start, busy_end in booked_intervals(appointment.professional, appointment.date,
                                                 exclude_appointment_id=appointment.id):
        if overlaps(start, end, busy_start, busy_end):
            return True
    return False
