from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from salonbook import db
from salonbook.models.salon import PLANS

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Landing information for the booking platform"""
    return jsonify({
        'name': 'SalonBook',
        'plans': list(PLANS),
        'trial_days': current_app.config['TRIAL_DAYS'],
    })


@main_bp.route('/health')
def health():
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        current_app.logger.error(f"Health check failed: {e}")
        return jsonify({'status': 'error', 'database': 'unavailable'}), 503
    return jsonify({'status': 'ok', 'database': 'ok'})
