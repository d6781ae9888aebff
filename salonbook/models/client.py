from salonbook import db
from datetime import datetime


class Client(db.Model):
    __tablename__ = 'clients'

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey('salons.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    appointments = db.relationship('Appointment', backref='client', lazy='dynamic')

    __table_args__ = (
        db.UniqueConstraint('salon_id', 'phone', name='uq_client_salon_phone'),
    )

    def __init__(self, salon_id, name, email, phone):
        self.salon_id = salon_id
        self.name = name
        self.email = email
        self.phone = phone

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'created_at': self.created_at,
        }

    def __repr__(self):
        return f'<Client {self.name}>'
