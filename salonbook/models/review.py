from salonbook import db
from datetime import datetime


class Review(db.Model):
    __tablename__ = 'reviews'

    id = db.Column(db.Integer, primary_key=True)
    appointment_id = db.Column(db.Integer, db.ForeignKey('appointments.id'), unique=True, nullable=False)
    rating = db.Column(db.Integer, nullable=False)  # 1-5 stars
    comment = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_review_rating'),
    )

    def __init__(self, appointment_id, rating, comment=None):
        self.appointment_id = appointment_id
        self.rating = rating
        self.comment = comment

    def to_dict(self):
        return {
            'id': self.id,
            'appointment_id': self.appointment_id,
            'rating': self.rating,
            'comment': self.comment,
            'created_at': self.created_at,
        }

    def __repr__(self):
        return f'<Review {self.appointment_id}: {self.rating}>'
