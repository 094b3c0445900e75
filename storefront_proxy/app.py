import os
import logging
from flask import Flask, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from .config import config
from .models import db
from .tournament_repository import TournamentRepository
from .signature import verify_proxy_signature
from .actions import dispatch
from tournament_core.errors import AuthenticationError, PersistenceError

logger = logging.getLogger(__name__)


def create_app(config_name: str = None) -> Flask:
    """Application factory for the storefront proxy service."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)

    # Create tables
    with app.app_context():
        db.create_all()

    # Store services on app for access in routes
    app.repository = TournamentRepository()

    # Register routes
    register_api_routes(app)

    return app


def is_signed_request(params) -> bool:
    """Check the app proxy signature unless verification is switched off."""
    if not current_app.config.get('VERIFY_PROXY_SIGNATURE', True):
        return True
    return verify_proxy_signature(params, current_app.config.get('APP_PROXY_SECRET', ''))


def register_api_routes(app: Flask):
    """Register API routes."""

    # ==================== App Proxy Actions ====================

    @app.route('/api/proxy', methods=['GET', 'POST'])
    def api_proxy():
        """Signed action router; errors are reported in the body with HTTP 200."""
        params = request.args

        if not is_signed_request(params):
            error = AuthenticationError()
            return jsonify(error.to_dict()), error.status_code

        customer_id = params.get('logged_in_customer_id')
        if not customer_id:
            return jsonify({'ok': True, 'logged_in': False})

        action = params.get('action')
        try:
            result = dispatch(app.repository, customer_id, action, params)
        except Exception as e:
            logger.exception(f"Proxy handler error for action {action}")
            result = {'ok': False, 'error': 'Internal error', 'details': str(e)}

        return jsonify(result), 200

    # ==================== Tournament Listing ====================

    @app.route('/api/tournaments', methods=['GET', 'POST', 'PUT', 'DELETE'])
    def api_list_tournaments():
        """Read-only listing of the logged-in customer's tournaments."""
        if request.method != 'GET':
            return jsonify({'ok': False, 'error': 'Method not allowed'}), 405

        params = request.args
        if not is_signed_request(params):
            error = AuthenticationError()
            return jsonify(error.to_dict()), error.status_code

        customer_id = params.get('logged_in_customer_id')
        if not customer_id:
            return jsonify({'ok': True, 'tournaments': []})

        try:
            tournaments = app.repository.list_tournaments(customer_id)
        except PersistenceError:
            return jsonify({'ok': False, 'error': 'Database error'}), 500

        return jsonify({
            'ok': True,
            'tournaments': [t.to_dict() for t in tournaments]
        })

    # ==================== Health Check ====================

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        try:
            db.session.execute(db.text('SELECT 1'))
            db_ok = True
        except SQLAlchemyError:
            db_ok = False

        status = 'healthy' if db_ok else 'unhealthy'
        code = 200 if status == 'healthy' else 503

        return jsonify({
            'status': status,
            'database': 'connected' if db_ok else 'disconnected'
        }), code
