"""Flask application factory."""

import os
from flask import Flask, render_template, session
from .config import config
from .extensions import db, migrate, login_manager, csrf


def create_app(config_name=None, api_transport=None):
    """Create and configure the Flask application.

    ``api_transport`` replaces the HTTP transport of the remote API client.
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_CONFIG', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Logging
    from .logging_config import setup_logging
    setup_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)

    from .api import init_api
    init_api(app, transport=api_transport)

    # Local cart store lives in the instance folder
    os.makedirs(app.instance_path, exist_ok=True)

    # Register blueprints
    from .routes import register_blueprints
    register_blueprints(app)

    # User loader for Flask-Login
    from .models import SessionUser

    @login_manager.user_loader
    def load_user(user_id):
        user = session.get('user')
        if not user or str(user.get('id')) != user_id:
            return None
        return SessionUser(user, session.get('permissions'))

    # Error handlers
    @app.errorhandler(404)
    def not_found_error(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(403)
    def forbidden_error(error):
        return render_template('errors/403.html'), 403

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return render_template('errors/500.html'), 500

    # Template helpers
    from .pricing import format_price
    from .orders import tracking
    app.add_template_filter(format_price, 'price')
    app.add_template_filter(tracking.status_label, 'status_label')
    app.add_template_filter(tracking.status_color, 'status_color')

    # Context processors
    @app.context_processor
    def inject_globals():
        from .cart import current_cart
        cart = current_cart()
        return dict(cart_count=cart.get_item_count(), cart_total=cart.get_total_amount())

    with app.app_context():
        db.create_all()

    return app
