"""Persisted cart storage model."""

from datetime import datetime
from giftshop.extensions import db


class StoredCart(db.Model):
    """Serialized cart contents for one browser session."""
    __tablename__ = 'stored_carts'

    key = db.Column(db.String(120), primary_key=True)
    payload = db.Column(db.Text, nullable=False, default='{"items": []}')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<StoredCart {self.key}>'
