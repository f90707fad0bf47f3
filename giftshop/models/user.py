"""Signed-in user, rebuilt from the session on every request."""

from flask_login import UserMixin


class SessionUser(UserMixin):
    """User record returned by the remote login call.

    Nothing is stored locally; the record and the permission names granted
    through the user's roles live in the session cookie.
    """

    def __init__(self, data, permissions=None):
        self.data = data or {}
        self.id = str(self.data.get('id'))
        self.email = self.data.get('email')
        self.name = self.data.get('fullName') or self.data.get('name') or self.email
        self.permissions = set(permissions or [])

    @property
    def roles(self):
        roles = self.data.get('roles') or []
        return {role['name'] if isinstance(role, dict) else role for role in roles}

    def is_admin(self):
        return any(role.lower() == 'admin' for role in self.roles if role)

    def is_staff(self):
        return self.is_admin() or bool(self.permissions)

    def has_permission(self, name):
        """``<module>.manage`` grants every action of that module."""
        if self.is_admin() or name in self.permissions:
            return True
        module = name.split('.', 1)[0]
        return f'{module}.manage' in self.permissions

    def __repr__(self):
        return f'<SessionUser {self.email}>'
