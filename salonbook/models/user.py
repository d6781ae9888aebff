from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
from salonbook import db, login_manager

# User roles
ROLE_SALON_ADMIN = 'salon_admin'
ROLE_SUPERADMIN = 'superadmin'


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    name = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    studio_name = db.Column(db.String(120), nullable=True)
    avatar_url = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(20), default=ROLE_SALON_ADMIN)
    salon_id = db.Column(db.Integer, db.ForeignKey('salons.id'), nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __init__(self, email, password, role=ROLE_SALON_ADMIN, name=None, phone=None, salon_id=None):
        self.email = email
        self.set_password(password)
        self.role = role
        self.name = name
        self.phone = phone
        self.salon_id = salon_id
        self.is_active = True

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def is_superadmin(self):
        return self.role == ROLE_SUPERADMIN

    def is_salon_admin(self):
        return self.role == ROLE_SALON_ADMIN and self.salon_id is not None

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'phone': self.phone,
            'studio_name': self.studio_name,
            'avatar_url': self.avatar_url,
            'role': self.role,
            'salon_id': self.salon_id,
        }

    def __repr__(self):
        return f'<User {self.email}>'


@login_manager.user_loader
def load_user(id):
    return db.session.get(User, int(id))
