from flask import current_app
from salonbook import db
from salonbook.models.history import AppointmentHistory


def record_history(appointment, kind, description=None, new_value=None, previous_value=None):
    """
    Add a history entry for an appointment

    Parameters:
    - appointment: the appointment that changed
    - kind: what happened (e.g., 'created', 'canceled', 'rescheduled')
    - description: human readable summary (optional)
    - new_value / previous_value: the value after and before the change (optional)

    Call it once the change itself is committed: a failed history write is
    logged and rolled back on its own.
    """
    try:
        entry = AppointmentHistory(
            appointment_id=appointment.id,
            kind=kind,
            description=description,
            previous_value=previous_value,
            new_value=new_value
        )

        db.session.add(entry)
        db.session.commit()

        return True
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to record history for appointment {appointment.id}: {e}")
        return False


def appointment_history_for(appointment):
    """History entries of an appointment, newest first"""
    return appointment.history.order_by(
        AppointmentHistory.created_at.desc(), AppointmentHistory.id.desc()
    ).all()
