"""
CartPoints Loyalty Platform
Flask application factory
"""
import os
import logging
from flask import Flask
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db, migrate
from .config import get_config, validate_config
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(config_name: str = None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    # Setup logging before anything else
    setup_logging()

    validate_config(config_name)

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    # Register blueprints
    register_blueprints(app)

    # Register CLI commands
    from .commands import init_app as init_commands
    init_commands(app)

    # Register error handlers
    register_error_handlers(app)

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return {'status': 'healthy', 'service': 'cartpoints'}

    logger.info(f'CartPoints app created ({config_name})')
    return app


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints."""
    # Storefront (cookie auth)
    from .api.auth import auth_bp
    from .api.loyalty import loyalty_bp

    # Admin CRUD
    from .api.products import products_bp
    from .api.categories import categories_bp
    from .api.customers import customers_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(loyalty_bp)

    app.register_blueprint(products_bp, url_prefix='/api/products')
    app.register_blueprint(categories_bp, url_prefix='/api/categories')
    app.register_blueprint(customers_bp, url_prefix='/api/customers')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from .utils.exceptions import CartPointsError
    from .utils.errors import (
        exception_response,
        error_response,
        bad_request,
        not_found,
        internal_error,
        ErrorCode,
    )

    @app.errorhandler(CartPointsError)
    def business_error(error):
        return exception_response(error)

    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        db.session.rollback()
        return error_response('Database error', ErrorCode.DATABASE_ERROR, 500, details={'error': str(error)})

    @app.errorhandler(400)
    def handle_bad_request(error):
        return bad_request('Bad request')

    @app.errorhandler(404)
    def handle_not_found(error):
        return not_found('Not found')

    @app.errorhandler(500)
    def handle_server_error(error):
        return internal_error(details={'error': str(error)})
