# Import all models here for easier imports elsewhere
from .salon import Salon
from .user import User
from .client import Client
from .professional import Professional
from .service import Service
from .appointment import Appointment
from .history import AppointmentHistory
from .review import Review
from .availability import Block
from .message_template import MessageTemplate
