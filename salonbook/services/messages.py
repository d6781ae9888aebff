"""
Client message texts (confirmation, reminder, ...) and WhatsApp links

Salons start from the default texts and can override any of them.
"""
import logging
from datetime import datetime

from flask import current_app

from salonbook import db
from salonbook.errors import ValidationError
from salonbook.models.message_template import MessageTemplate
from salonbook.utils.phone import whatsapp_link
from salonbook.utils.scheduling import format_time

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES = {
    'confirmation': (
        'Hello {name}! Your appointment for {service} on {date} at {time} is confirmed. '
        'Price: {price}. We look forward to seeing you!'
    ),
    'reminder': (
        'Hello {name}! This is a reminder of your appointment tomorrow at {time} for {service}. '
        'If you need to reschedule, please get in touch. Thank you!'
    ),
    'reschedule': (
        'Hello {name}! We need to reschedule your appointment for {service} booked for {date} at {time}. '
        'Please contact us to pick a new date and time. Thank you for understanding!'
    ),
    'cancellation': (
        'Hello {name}! Unfortunately we have to cancel your appointment for {service} on {date} at {time}. '
        'Please contact us for more information. We apologize for the inconvenience.'
    ),
    'followup': (
        'Hello {name}! How was your {service}? We would love to hear your feedback. '
        'Thank you for choosing us!'
    ),
}
MESSAGE_KINDS = tuple(DEFAULT_TEMPLATES)


def templates_for(salon):
    """Default texts merged with the salon's overrides"""
    templates = dict(DEFAULT_TEMPLATES)
    for override in MessageTemplate.query.filter_by(salon_id=salon.id).all():
        templates[override.kind] = override.body
    return templates


def save_template(salon, kind, body):
    if kind not in MESSAGE_KINDS:
        raise ValidationError(f'Unknown message kind: {kind}')

    template = MessageTemplate.query.filter_by(salon_id=salon.id, kind=kind).first()
    if template:
        template.body = body
    else:
        template = MessageTemplate(salon_id=salon.id, kind=kind, body=body)
        db.session.add(template)
    db.session.commit()
    return template


def format_template(template, values):
    """Replace {placeholder} markers; unknown or empty values are left untouched"""
    message = template
    for key, value in values.items():
        if value:
            message = message.replace('{' + key + '}', str(value))
    return message


def appointment_message(appointment, kind):
    """Render the kind message for an appointment and build its WhatsApp link"""
    if kind not in MESSAGE_KINDS:
        raise ValidationError(f'Unknown message kind: {kind}')

    template = templates_for(appointment.client.salon)[kind]
    message = format_template(template, {
        'name': appointment.client.name,
        'service': appointment.service.name,
        'date': appointment.date.strftime('%d/%m/%Y'),
        'time': format_time(appointment.time),
        'price': f'{appointment.service.price:.2f}',
    })
    link = whatsapp_link(appointment.client.phone, message, current_app.config['DEFAULT_COUNTRY_CODE'])

    appointment.last_message_sent_at = datetime.utcnow()
    db.session.commit()
    logger.info(f"Built {kind} message for appointment {appointment.id}")

    return {'kind': kind, 'message': message, 'link': link}
