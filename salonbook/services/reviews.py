"""
Client reviews of completed appointments
"""
import logging

from sqlalchemy import func

from salonbook import db
from salonbook.errors import InvalidTransitionError, ValidationError
from salonbook.models.appointment import Appointment, STATUS_COMPLETED
from salonbook.models.client import Client
from salonbook.models.professional import Professional
from salonbook.models.review import Review
from salonbook.models.service import Service

logger = logging.getLogger(__name__)


def submit_review(appointment, rating, comment=None):
    if appointment.status != STATUS_COMPLETED:
        raise InvalidTransitionError('Only completed appointments can be reviewed.')
    if appointment.reviewed or appointment.review is not None:
        raise InvalidTransitionError('This appointment has already been reviewed.')
    if rating is None or not 1 <= int(rating) <= 5:
        raise ValidationError('Please select a rating from 1 to 5 stars.')

    comment = (comment or '').strip() or None
    review = Review(appointment_id=appointment.id, rating=int(rating), comment=comment)
    db.session.add(review)
    appointment.reviewed = True
    db.session.commit()

    logger.info(f"Review {review.id} submitted for appointment {appointment.id}")
    return review


def salon_reviews(salon_id, professional_id=None):
    """Reviews of a salon, newest first, with client, professional and service names"""
    query = db.session.query(
        Review, Client.name, Professional.id, Professional.name, Service.name
    ).join(
        Appointment, Appointment.id == Review.appointment_id
    ).join(
        Client, Client.id == Appointment.client_id
    ).join(
        Professional, Professional.id == Appointment.professional_id
    ).join(
        Service, Service.id == Appointment.service_id
    ).filter(Appointment.salon_id == salon_id)

    if professional_id:
        query = query.filter(Appointment.professional_id == professional_id)

    results = []
    for review, client_name, prof_id, prof_name, service_name in query.order_by(
            Review.created_at.desc(), Review.id.desc()).all():
        data = review.to_dict()
        data.update({
            'client_name': client_name,
            'professional_id': prof_id,
            'professional_name': prof_name,
            'service_name': service_name,
        })
        results.append(data)
    return results


def professional_ratings(salon_id):
    """{professional_id: {'average': float, 'count': int}} for reviewed professionals"""
    rows = db.session.query(
        Appointment.professional_id,
        func.avg(Review.rating),
        func.count(Review.id)
    ).join(
        Review, Review.appointment_id == Appointment.id
    ).filter(
        Appointment.salon_id == salon_id
    ).group_by(Appointment.professional_id).all()

    return {
        professional_id: {'average': round(float(average), 2), 'count': count}
        for professional_id, average, count in rows
    }
