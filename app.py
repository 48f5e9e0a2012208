"""
SkorZen School Portal
Main Flask application entry point
"""

import logging
from datetime import date

from flask import Flask, render_template
from flask_wtf.csrf import CSRFProtect
from config import Config
from database import db, init_db
from utils.calendar_helpers import format_date_id, month_name

def configure_logging(app):
    """Configure root logging once for the process"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    app.logger.setLevel(level)

def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Initialize extensions with app
    db.init_app(app)
    CSRFProtect(app)

    # Add CSRF token to template context
    @app.context_processor
    def inject_csrf_token():
        from flask_wtf.csrf import generate_csrf
        return dict(csrf_token=generate_csrf, school_name=app.config.get('SCHOOL_NAME'),
                    current_date=date.today)

    # Register blueprints
    from routes.auth import auth_bp
    from routes.admin import admin_bp
    from routes.guru import guru_bp
    from routes.exams import exams_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(guru_bp, url_prefix='/guru')
    app.register_blueprint(exams_bp, url_prefix='/ujian')

    # Initialize database
    init_db(app)

    # Jinja filter: format numbers so 34.0 -> 34, keep 34.5 as 34.5
    @app.template_filter('format_mark')
    def format_mark(value):
        if value is None or value == "":
            return ""
        try:
            number = float(value)
        except (TypeError, ValueError):
            return value
        if number.is_integer():
            return str(int(number))
        return ("%.2f" % number).rstrip('0').rstrip('.')

    app.add_template_filter(format_date_id, 'date_id')
    app.add_template_filter(month_name, 'month_name')

    @app.errorhandler(404)
    def not_found(error):
        return render_template('errors/404.html'), 404

    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=8000, debug=True, use_reloader=False)
