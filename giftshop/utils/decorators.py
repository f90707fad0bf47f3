"""Role and permission based access decorators."""

from functools import wraps
from flask import redirect, url_for, flash, abort
from flask_login import current_user


def admin_required(f):
    """Decorator to require a staff account (admin role or any permission)."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return redirect(url_for('auth.login'))
        if not current_user.is_staff():
            flash('Access denied. Staff account required.', 'danger')
            abort(403)
        return f(*args, **kwargs)
    return decorated_function


def permission_required(permission):
    """Decorator to require a named permission."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return redirect(url_for('auth.login'))
            if not current_user.has_permission(permission):
                flash('You do not have permission to do that.', 'danger')
                abort(403)
            return f(*args, **kwargs)
        return decorated_function
    return decorator
