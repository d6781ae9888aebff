from salonbook import db
from datetime import datetime


class Block(db.Model):
    """Period in which the salon, or a single professional, takes no bookings"""
    __tablename__ = 'blocks'

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey('salons.id'), nullable=False, index=True)
    professional_id = db.Column(db.Integer, db.ForeignKey('professionals.id'), nullable=True)  # None = whole salon
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.Time, nullable=True)  # None = whole day
    end_time = db.Column(db.Time, nullable=True)
    note = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __init__(self, salon_id, start_date, end_date, start_time=None, end_time=None, note=None,
                 professional_id=None):
        self.salon_id = salon_id
        self.start_date = start_date
        self.end_date = end_date
        self.start_time = start_time
        self.end_time = end_time
        self.note = note
        self.professional_id = professional_id

    @property
    def is_full_day(self):
        return self.start_time is None or self.end_time is None

    def to_dict(self):
        return {
            'id': self.id,
            'professional_id': self.professional_id,
            'start_date': self.start_date,
            'end_date': self.end_date,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'note': self.note,
            'created_at': self.created_at,
        }

    def __repr__(self):
        if self.is_full_day:
            return f'<Block: {self.start_date} to {self.end_date}>'
        return f'<Block: {self.start_date} to {self.end_date} {self.start_time}-{self.end_time}>'
