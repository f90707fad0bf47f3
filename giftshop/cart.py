"""Cart store: the visitor's pending, fully configured orders.

The whole cart is serialized to the ``stored_carts`` table under a fixed key
prefix on every mutation and rehydrated on load. Each browser session owns
exactly one cart, identified by a random token kept in the session cookie.
"""

import json
import logging
import secrets
import string
import time
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from flask import current_app, g, session
from pydantic import ValidationError

from giftshop.extensions import db
from giftshop.models import StoredCart
from giftshop.schemas import CartItem

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_cart_item_id() -> str:
    """Client-side unique id: ``cart_<epoch ms>_<9 random chars>``."""
    suffix = ''.join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f'cart_{int(time.time() * 1000)}_{suffix}'


class CartStore:
    """Ordered collection of cart items bound to one storage key."""

    def __init__(self, storage_key: str, items: Optional[List[CartItem]] = None):
        self.storage_key = storage_key
        self.items: List[CartItem] = list(items or [])

    @classmethod
    def load(cls, owner: str, prefix: Optional[str] = None) -> 'CartStore':
        prefix = prefix or current_app.config['CART_STORAGE_KEY']
        storage_key = f'{prefix}:{owner}'
        stored = db.session.get(StoredCart, storage_key)
        items = []
        if stored is not None:
            try:
                raw = json.loads(stored.payload or '{}')
                items = [CartItem.model_validate(entry) for entry in raw.get('items', [])]
            except (ValueError, ValidationError):
                logger.warning('Discarding unreadable cart payload for %s', storage_key, exc_info=True)
        return cls(storage_key, items)

    def _persist(self):
        stored = db.session.get(StoredCart, self.storage_key)
        if stored is None:
            stored = StoredCart(key=self.storage_key)
            db.session.add(stored)
        stored.payload = json.dumps({'items': [item.to_wire() for item in self.items]})
        db.session.commit()

    # --- Mutations ---

    def add_item(self, **fields) -> CartItem:
        """Append a new item; id and createdAt are generated here."""
        fields.pop('id', None)
        fields.pop('created_at', None)
        item = CartItem(
            id=generate_cart_item_id(),
            created_at=datetime.now(timezone.utc).isoformat(),
            **fields,
        )
        self.items.append(item)
        self._persist()
        logger.info('Added cart item %s (total=%s)', item.id, item.total)
        return item

    def add_order(self, order_data, pricing, selected_shipping_id=None,
                  applied_promotion_code=None, customer_info=None) -> CartItem:
        """Add a configured order priced by ``pricing.build_pricing``."""
        return self.add_item(
            order_data=order_data,
            customer_info=customer_info,
            shipping_fee=pricing.shipping_fee,
            selected_shipping_id=selected_shipping_id,
            applied_promotion_code=applied_promotion_code,
            discount=pricing.discount_amount,
            subtotal=pricing.subtotal,
            total=pricing.total,
        )

    def remove_item(self, item_id: str) -> bool:
        before = len(self.items)
        self.items = [item for item in self.items if item.id != item_id]
        self._persist()
        return len(self.items) != before

    def remove_items(self, item_ids: Iterable[str]):
        ids = set(item_ids)
        self.items = [item for item in self.items if item.id not in ids]
        self._persist()

    def update_item(self, item_id: str, **updates) -> Optional[CartItem]:
        updated = None
        for index, item in enumerate(self.items):
            if item.id == item_id:
                updated = item.model_copy(update=updates)
                self.items[index] = updated
        self._persist()
        return updated

    def clear_cart(self):
        self.items = []
        self._persist()

    # --- Accessors ---

    def get_item(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def get_item_count(self) -> int:
        return len(self.items)

    def get_total_amount(self) -> float:
        return sum(item.total for item in self.items)

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)


def cart_owner() -> str:
    """Token identifying this browser session's cart."""
    owner = session.get('cart_owner')
    if not owner:
        owner = uuid.uuid4().hex
        session['cart_owner'] = owner
    return owner


def current_cart() -> CartStore:
    """Cart store for the current request, loaded once per request."""
    if 'cart' not in g:
        g.cart = CartStore.load(cart_owner())
    return g.cart
