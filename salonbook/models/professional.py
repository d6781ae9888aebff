from salonbook import db
from datetime import datetime, time

# Weekday names indexed like date.weekday() (0 = Monday, 6 = Sunday)
WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')
DEFAULT_WORKING_DAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday']
DEFAULT_START_TIME = time(9, 0)
DEFAULT_END_TIME = time(18, 0)


class Professional(db.Model):
    __tablename__ = 'professionals'

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey('salons.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    working_days_raw = db.Column('working_days', db.String(80), nullable=False)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    appointments = db.relationship('Appointment', backref='professional', lazy='dynamic')

    def __init__(self, salon_id, name, working_days=None, start_time=DEFAULT_START_TIME,
                 end_time=DEFAULT_END_TIME):
        self.salon_id = salon_id
        self.name = name
        self.working_days = working_days if working_days is not None else DEFAULT_WORKING_DAYS
        self.start_time = start_time
        self.end_time = end_time

    @property
    def working_days(self):
        if not self.working_days_raw:
            return []
        return self.working_days_raw.split(',')

    @working_days.setter
    def working_days(self, days):
        # Keep week order and drop duplicates
        wanted = {day.lower() for day in days}
        self.working_days_raw = ','.join(day for day in WEEKDAYS if day in wanted)

    def works_on(self, day):
        return WEEKDAYS[day.weekday()] in self.working_days

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'working_days': self.working_days,
            'start_time': self.start_time,
            'end_time': self.end_time,
        }

    def __repr__(self):
        return f'<Professional {self.name}>'
