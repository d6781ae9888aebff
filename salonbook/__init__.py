# Import important modules and create app package
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from dotenv import load_dotenv
import logging
import os

# Load environment variables
load_dotenv()

# Initialize extensions
db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_object=None):
    # Initialize app
    app = Flask(__name__)

    # Configure app
    from salonbook.config import get_config
    if config_object is None:
        config_object = get_config(os.environ.get('FLASK_CONFIG'))
    app.config.from_object(config_object)

    from salonbook.utils.json_utils import SalonJSONProvider
    app.json = SalonJSONProvider(app)

    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    # Initialize extensions with app
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Please log in to access this resource.'}), 401

    from salonbook.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from salonbook.auth.routes import auth_bp
    from salonbook.booking.routes import booking_bp
    from salonbook.client_area.routes import client_area_bp
    from salonbook.admin.routes import admin_bp
    from salonbook.superadmin.routes import superadmin_bp
    from salonbook.main.routes import main_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(client_area_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(superadmin_bp)
    app.register_blueprint(main_bp)

    from salonbook.cli import register_commands
    register_commands(app)

    # Create database tables
    if app.config.get('CREATE_TABLES_ON_START'):
        with app.app_context():
            from salonbook import models  # noqa: F401
            db.create_all()
            app.logger.info("Database tables created successfully")

    return app
