"""
Aggregate queries for the salon dashboard and the platform console
"""
import calendar
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta

from sqlalchemy import func

from salonbook import db
from salonbook.models.appointment import (
    Appointment, STATUSES, STATUS_COMPLETED
)
from salonbook.models.client import Client
from salonbook.models.professional import Professional
from salonbook.models.salon import Salon, PLANS
from salonbook.models.service import Service

logger = logging.getLogger(__name__)

TOP_LIMIT = 5
RECENT_LIMIT = 5


def month_bounds(year, month):
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def previous_month(year, month):
    if month == 1:
        return year - 1, 12
    return year, month - 1


def percent_change(current, previous):
    if not previous:
        return 100.0 if current else 0.0
    return round((current - previous) / previous * 100, 1)


def _month_appointments(salon_id, first_day, last_day):
    return Appointment.query.filter(
        Appointment.salon_id == salon_id,
        Appointment.date >= first_day,
        Appointment.date <= last_day
    ).all()


def _revenue(appointments):
    return float(sum(
        (appointment.service.price for appointment in appointments if appointment.status == STATUS_COMPLETED),
        0
    ))


def _new_clients(salon_id, first_day, last_day):
    return Client.query.filter(
        Client.salon_id == salon_id,
        Client.created_at >= datetime.combine(first_day, datetime.min.time()),
        Client.created_at < datetime.combine(last_day + timedelta(days=1), datetime.min.time())
    ).count()


def salon_month_stats(salon_id, year, month):
    """Metrics of one salon for a calendar month"""
    first_day, last_day = month_bounds(year, month)
    appointments = _month_appointments(salon_id, first_day, last_day)
    total = len(appointments)

    # Status counts and percentages
    status_map = defaultdict(int)
    for appointment in appointments:
        status_map[appointment.status] += 1
    status_counts = [
        {
            'status': status,
            'count': status_map[status],
            'percentage': (status_map[status] / total) * 100 if total > 0 else 0
        }
        for status in STATUSES
    ]

    # Services breakdown
    services = {}
    for appointment in appointments:
        entry = services.setdefault(appointment.service_id, {
            'id': appointment.service_id,
            'name': appointment.service.name,
            'count': 0,
            'value': 0.0
        })
        entry['count'] += 1
        entry['value'] += float(appointment.service.price)
    top_services = sorted(services.values(), key=lambda s: s['count'], reverse=True)[:TOP_LIMIT]

    # Professionals breakdown
    professionals = {}
    for appointment in appointments:
        entry = professionals.setdefault(appointment.professional_id, {
            'id': appointment.professional_id,
            'name': appointment.professional.name,
            'count': 0
        })
        entry['count'] += 1
    top_professionals = sorted(professionals.values(), key=lambda p: p['count'], reverse=True)[:TOP_LIMIT]

    recent = sorted(appointments, key=lambda a: (a.created_at or datetime.min, a.id), reverse=True)[:RECENT_LIMIT]

    revenue = _revenue(appointments)
    new_clients = _new_clients(salon_id, first_day, last_day)

    # Trends against the previous month
    prev_year, prev_month = previous_month(year, month)
    prev_first, prev_last = month_bounds(prev_year, prev_month)
    prev_appointments = _month_appointments(salon_id, prev_first, prev_last)

    return {
        'month': f'{year:04d}-{month:02d}',
        'total_appointments': total,
        'total_revenue': revenue,
        'scheduled_appointments': status_map['scheduled'],
        'completed_appointments': status_map['completed'],
        'canceled_appointments': status_map['canceled'],
        'status_counts': status_counts,
        'top_services': top_services,
        'top_professionals': top_professionals,
        'recent_appointments': [appointment.to_dict(details=True) for appointment in recent],
        'new_clients': new_clients,
        'appointments_trend': percent_change(total, len(prev_appointments)),
        'revenue_trend': percent_change(revenue, _revenue(prev_appointments)),
        'clients_trend': percent_change(new_clients, _new_clients(salon_id, prev_first, prev_last)),
    }


def week_start(day):
    """Sunday that starts the week containing day"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_schedule(salon_id, day, professional_id=None):
    """Appointments of the week containing day, grouped per day"""
    start = week_start(day)
    end = start + timedelta(days=6)

    query = Appointment.query.filter(
        Appointment.salon_id == salon_id,
        Appointment.date >= start,
        Appointment.date <= end
    )
    if professional_id:
        query = query.filter(Appointment.professional_id == professional_id)

    by_day = defaultdict(list)
    for appointment in query.order_by(Appointment.date, Appointment.time).all():
        by_day[appointment.date].append(appointment.to_dict(details=True))

    days = []
    for offset in range(7):
        current = start + timedelta(days=offset)
        days.append({'date': current, 'appointments': by_day[current]})

    return {'week_start': start, 'week_end': end, 'days': days}


def platform_stats(today=None):
    """Counters across every salon for the super-admin console"""
    today = today or date.today()
    first_day, last_day = month_bounds(today.year, today.month)

    plan_counts = dict(
        db.session.query(Salon.plan, func.count(Salon.id)).group_by(Salon.plan).all()
    )

    month_query = Appointment.query.filter(Appointment.date >= first_day, Appointment.date <= last_day)

    revenue_value = db.session.query(func.sum(Service.price)).join(
        Appointment, Service.id == Appointment.service_id
    ).filter(
        Appointment.status == STATUS_COMPLETED,
        Appointment.date >= first_day,
        Appointment.date <= last_day
    ).scalar()

    new_clients = Client.query.filter(
        Client.created_at >= datetime.combine(first_day, datetime.min.time())
    ).count()

    recent_salons = Salon.query.order_by(Salon.created_at.desc(), Salon.id.desc()).limit(RECENT_LIMIT).all()

    stats = {
        'total_salons': sum(plan_counts.values()),
        'total_appointments': Appointment.query.count(),
        'total_professionals': Professional.query.count(),
        'total_services': Service.query.count(),
        'appointments_this_month': month_query.count(),
        'revenue_this_month': float(revenue_value) if revenue_value is not None else 0.0,
        'new_clients_this_month': new_clients,
        'recent_salons': [salon.to_dict() for salon in recent_salons],
    }
    for plan in PLANS:
        stats[f'{plan}_salons'] = plan_counts.get(plan, 0)

    logger.debug(f"Platform stats computed for {today}")
    return stats
