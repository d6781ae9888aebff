from salonbook import db
from datetime import datetime


class Service(db.Model):
    __tablename__ = 'services'

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey('salons.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(80), nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False)  # Duration in minutes
    image_url = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    appointments = db.relationship('Appointment', backref='service', lazy='dynamic')

    def __init__(self, salon_id, name, price, duration_minutes, description=None, category=None,
                 image_url=None, is_active=True):
        self.salon_id = salon_id
        self.name = name
        self.price = price
        self.duration_minutes = duration_minutes
        self.description = description
        self.category = category
        self.image_url = image_url
        self.is_active = is_active

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category': self.category,
            'price': self.price,
            'duration_minutes': self.duration_minutes,
            'image_url': self.image_url,
            'is_active': self.is_active,
        }

    def __repr__(self):
        return f'<Service {self.name}>'
