from salonbook import db
from datetime import datetime

# History entry kinds
KIND_CREATED = 'created'
KIND_SCHEDULED = 'scheduled'
KIND_COMPLETED = 'completed'
KIND_CANCELED = 'canceled'
KIND_RESCHEDULED = 'rescheduled'


class AppointmentHistory(db.Model):
    """Trail of changes made to an appointment"""
    __tablename__ = 'appointment_history'

    id = db.Column(db.Integer, primary_key=True)
    appointment_id = db.Column(db.Integer, db.ForeignKey('appointments.id'), nullable=False, index=True)
    kind = db.Column(db.String(30), nullable=False)
    description = db.Column(db.Text, nullable=True)
    previous_value = db.Column(db.String(120), nullable=True)
    new_value = db.Column(db.String(120), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __init__(self, appointment_id, kind, description=None, previous_value=None, new_value=None):
        self.appointment_id = appointment_id
        self.kind = kind
        self.description = description
        self.previous_value = previous_value
        self.new_value = new_value

    def to_dict(self):
        return {
            'id': self.id,
            'appointment_id': self.appointment_id,
            'kind': self.kind,
            'description': self.description,
            'previous_value': self.previous_value,
            'new_value': self.new_value,
            'created_at': self.created_at,
        }

    def __repr__(self):
        return f'<AppointmentHistory {self.kind} {self.appointment_id}>'
