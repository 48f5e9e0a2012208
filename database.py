"""
Database configuration and initialization for SkorZen School Portal
"""

import functools
import logging
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Initialize SQLAlchemy instance
db = SQLAlchemy()

@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def init_db(app):
    """Initialize database with application context"""
    with app.app_context():
        # Import all models to ensure they are registered
        import models  # noqa: F401

        # Create all tables
        db.create_all()

        if app.config.get('SEED_DEFAULT_ADMIN', True):
            create_default_admin_user(
                app.config['DEFAULT_ADMIN_USERNAME'],
                app.config['DEFAULT_ADMIN_PASSWORD']
            )

        # Weight configuration row with the default bobot
        from models.grades import GradeWeights
        GradeWeights.get_current()

        logger.info("Database initialized")

def reset_database(app):
    """Drop every table and initialize again"""
    with app.app_context():
        import models  # noqa: F401
        db.drop_all()
        logger.warning("All tables dropped")
    init_db(app)

def create_default_admin_user(username, password):
    """Create default admin user for initial access"""
    from models.user import User

    existing_user = User.query.filter_by(role=User.ROLE_ADMIN).first()
    if existing_user:
        return existing_user

    default_user = User(username=username, display_name='Administrator', role=User.ROLE_ADMIN)
    default_user.set_password(password)

    try:
        db.session.add(default_user)
        db.session.commit()
        logger.info("Default admin user created: %s", username)
        return default_user
    except Exception:
        db.session.rollback()
        logger.exception("Error creating default admin user")
        return None

class DatabaseError(Exception):
    """Custom exception for database operations"""
    pass

def handle_db_error(func):
    """Decorator to roll back and wrap unexpected database errors"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError:
            raise
        except Exception as e:
            db.session.rollback()
            logger.exception("Database operation %s failed", func.__name__)
            raise DatabaseError(f"Database operation failed: {str(e)}") from e
    return wrapper
