from salonbook import db
from datetime import datetime, timedelta

# Appointment status constants
STATUS_SCHEDULED = 'scheduled'
STATUS_COMPLETED = 'completed'
STATUS_CANCELED = 'canceled'
STATUSES = (STATUS_SCHEDULED, STATUS_COMPLETED, STATUS_CANCELED)


class Appointment(db.Model):
    __tablename__ = 'appointments'

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey('salons.id'), nullable=False, index=True)
    client_id = db.Column(db.Integer, db.ForeignKey('clients.id'), nullable=False)
    professional_id = db.Column(db.Integer, db.ForeignKey('professionals.id'), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id'), nullable=False)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.Time, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_SCHEDULED)
    cancellation_reason = db.Column(db.Text, nullable=True)
    reviewed = db.Column(db.Boolean, default=False)
    last_message_sent_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    history = db.relationship('AppointmentHistory', backref='appointment', lazy='dynamic',
                              cascade='all, delete-orphan')
    review = db.relationship('Review', backref='appointment', uselist=False,
                             cascade='all, delete-orphan')

    __table_args__ = (
        # One live booking per professional and slot; canceled rows free the slot
        db.Index(
            'uq_appointment_slot', 'professional_id', 'date', 'time',
            unique=True,
            sqlite_where=db.text("status != 'canceled'"),
            postgresql_where=db.text("status != 'canceled'"),
        ),
        db.CheckConstraint(
            "status IN ('scheduled', 'completed', 'canceled')", name='ck_appointment_status'
        ),
    )

    def __init__(self, salon_id, client_id, professional_id, service_id, date, time,
                 status=STATUS_SCHEDULED):
        self.salon_id = salon_id
        self.client_id = client_id
        self.professional_id = professional_id
        self.service_id = service_id
        self.date = date
        self.time = time
        self.status = status
        self.reviewed = False

    @property
    def starts_at(self):
        return datetime.combine(self.date, self.time)

    @property
    def ends_at(self):
        return self.starts_at + timedelta(minutes=self.service.duration_minutes)

    def is_in_past(self, now=None):
        now = now or datetime.now()
        return self.starts_at < now

    def is_active(self):
        return self.status == STATUS_SCHEDULED

    def to_dict(self, details=False):
        data = {
            'id': self.id,
            'client_id': self.client_id,
            'professional_id': self.professional_id,
            'service_id': self.service_id,
            'date': self.date,
            'time': self.time,
            'status': self.status,
            'cancellation_reason': self.cancellation_reason,
            'reviewed': bool(self.reviewed),
            'last_message_sent_at': self.last_message_sent_at,
            'created_at': self.created_at,
        }
        if details:
            data['client'] = self.client.to_dict()
            data['service'] = self.service.to_dict()
            data['professional'] = self.professional.to_dict()
        return data

    def __repr__(self):
        return f'<Appointment {self.id}: {self.date} {self.time}>'
