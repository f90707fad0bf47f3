"""Authentication routes."""

from flask import Blueprint, render_template, redirect, url_for, flash, request, session, current_app
from flask_login import login_user, logout_user, login_required, current_user
from giftshop.api import ApiError
from giftshop.api import auth as auth_api
from giftshop.forms.auth import LoginForm
from giftshop.models import SessionUser

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Staff login against the remote API."""
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    form = LoginForm()
    if form.validate_on_submit():
        try:
            user_data = auth_api.login(form.email.data.lower(), form.password.data)
        except ApiError as exc:
            flash(exc.message or 'Invalid email or password.', 'danger')
            return render_template('auth/login.html', form=form)

        try:
            permissions = auth_api.get_permissions(user_data.get('id'))
        except ApiError:
            permissions = []
        session['permissions'] = permissions

        user = SessionUser(user_data, permissions)
        login_user(user, remember=form.remember.data)
        flash(f'Welcome back, {user.name}!', 'success')

        next_page = request.args.get('next')
        if next_page and next_page.startswith('/'):
            return redirect(next_page)
        if user.is_staff():
            return redirect(url_for('admin.dashboard'))
        return redirect(url_for('main.index'))

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout')
@login_required
def logout():
    """User logout."""
    try:
        auth_api.logout()
    except ApiError as exc:
        current_app.logger.info('Remote logout failed: %s', exc.message)
    session.pop('permissions', None)
    logout_user()
    flash('You have been logged out.', 'info')
    return redirect(url_for('main.index'))
