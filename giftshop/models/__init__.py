"""Local models."""

from .cart import StoredCart
from .user import SessionUser

__all__ = ['StoredCart', 'SessionUser']
