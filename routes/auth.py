"""
Authentication routes for SkorZen School Portal
Handles login, logout, password changes and access decorators
"""

import functools

from flask import Blueprint, render_template, request, redirect, url_for, flash, session, g
from database import db
from models.user import User
from services.auth_service import AuthService, SessionManager
from utils.navigation import build_navigation
from utils.roles import LEADERSHIP_DUTIES
from utils.validators import validate_password

auth_bp = Blueprint('auth', __name__)

def get_current_user():
    """Logged-in active user for this request, cached on flask.g"""
    if 'current_user_obj' not in g:
        user = None
        user_id = SessionManager.get_current_user_id(session)
        if user_id is not None:
            user = db.session.get(User, user_id)
            if user is not None and not user.is_active:
                user = None
        g.current_user_obj = user
    return g.current_user_obj

def _dashboard_url(user):
    return url_for('admin.dashboard') if user.is_admin else url_for('guru.dashboard')

@auth_bp.route('/', methods=['GET', 'POST'])
@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login page and handler for admins and teachers"""
    user = get_current_user()
    if user:
        return redirect(_dashboard_url(user))

    if request.method == 'POST':
        username = request.form.get('username', '').strip()
        password = request.form.get('password', '')

        if not username or not password:
            flash('Username dan password wajib diisi', 'error')
            return render_template('auth/login.html', username=username)

        success, user, message = AuthService.authenticate(username, password)
        if success:
            SessionManager.create_session(session, user)
            flash(message, 'success')
            return redirect(_dashboard_url(user))
        flash(message, 'error')
        return render_template('auth/login.html', username=username)

    return render_template('auth/login.html')

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Logout handler for every role"""
    SessionManager.clear_session(session)
    flash('Anda telah keluar', 'success')
    return redirect(url_for('auth.login'))

# Authentication decorator
def login_required(role=None):
    """Decorator to require an authenticated user, optionally with a role"""
    def decorator(f):
        @functools.wraps(f)
        def decorated_function(*args, **kwargs):
            user = get_current_user()
            if user is None:
                SessionManager.clear_session(session)
                flash('Silakan login untuk mengakses halaman ini', 'error')
                return redirect(url_for('auth.login'))

            if role and user.role != role:
                flash('Akses ditolak untuk halaman ini', 'error')
                return redirect(_dashboard_url(user))

            return f(*args, **kwargs)
        return decorated_function
    return decorator

def duty_required(*duties):
    """Decorator for guru pages tied to additional duties; admins always pass"""
    def decorator(f):
        @functools.wraps(f)
        def decorated_function(*args, **kwargs):
            user = get_current_user()
            if user is None:
                flash('Silakan login untuk mengakses halaman ini', 'error')
                return redirect(url_for('auth.login'))
            if not user.is_admin and not user.has_duty(*duties):
                flash('Halaman ini hanya untuk guru dengan tugas tambahan terkait', 'error')
                return redirect(_dashboard_url(user))
            return f(*args, **kwargs)
        return decorated_function
    return decorator

def leadership_read_required(f):
    """
    Decorator for admin report pages that school leadership may read.

    Admins and guru holding a leadership duty (kepala sekolah, kepala
    tata usaha) pass. Only apply it to GET views; mutations keep
    login_required(User.ROLE_ADMIN).
    """
    @functools.wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_current_user()
        if user is None:
            SessionManager.clear_session(session)
            flash('Silakan login untuk mengakses halaman ini', 'error')
            return redirect(url_for('auth.login'))
        if not user.is_admin and not user.has_duty(*LEADERSHIP_DUTIES):
            flash('Akses ditolak untuk halaman ini', 'error')
            return redirect(_dashboard_url(user))
        return f(*args, **kwargs)
    return decorated_function

@auth_bp.route('/change-password', methods=['GET', 'POST'])
@login_required()
def change_password():
    """Change password for authenticated users"""
    user = get_current_user()
    if request.method == 'POST':
        current_password = request.form.get('current_password', '')
        new_password = request.form.get('new_password', '')
        confirm_password = request.form.get('confirm_password', '')

        if not all([current_password, new_password, confirm_password]):
            flash('Semua kolom password wajib diisi', 'error')
            return render_template('auth/change_password.html')

        if new_password != confirm_password:
            flash('Konfirmasi password baru tidak cocok', 'error')
            return render_template('auth/change_password.html')

        is_valid, message = validate_password(new_password)
        if not is_valid:
            flash(message, 'error')
            return render_template('auth/change_password.html')

        success, message = AuthService.change_password(user.id, current_password, new_password)
        if success:
            flash(message, 'success')
            return redirect(_dashboard_url(user))
        flash(message, 'error')

    return render_template('auth/change_password.html')

# Context processor to make user info and menus available in templates
@auth_bp.app_context_processor
def inject_user():
    """Inject user information into template context"""
    user = get_current_user()
    return {
        'current_user': user,
        'is_authenticated': user is not None,
        'navigation': build_navigation(user),
    }
