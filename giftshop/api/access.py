"""Roles, permissions and user management endpoints."""

from giftshop.api import get_api, paths
from giftshop.api.client import unwrap, unwrap_list


def get_roles():
    return unwrap_list(get_api().get(paths.ROLES))


def get_role(role_id):
    return unwrap(get_api().get(paths.role_by_id(role_id)))


def create_role(name):
    return unwrap(get_api().post(paths.ROLES, json={'name': name}))


def update_role(role_id, name):
    return unwrap(get_api().patch(paths.role_by_id(role_id), json={'name': name}))


def delete_role(role_id):
    return get_api().delete(paths.role_by_id(role_id))


def get_permissions():
    return unwrap_list(get_api().get(paths.PERMISSIONS))


def get_role_permissions(role_id):
    return unwrap_list(get_api().get(paths.role_permissions(role_id)))


def assign_permissions(role_id, permission_ids):
    return unwrap(get_api().post(paths.assign_permissions_to_role(role_id),
                                 json={'permissionIds': list(permission_ids)}))


def remove_permission(role_id, permission_id):
    return get_api().delete(paths.remove_permission_from_role(role_id, permission_id))


def get_users(params=None):
    return unwrap_list(get_api().get(paths.USERS, params=params))


def assign_roles(user_id, role_ids):
    return unwrap(get_api().post(paths.ASSIGN_ROLES_TO_USER,
                                 json={'userId': user_id, 'roleIds': list(role_ids)}))
