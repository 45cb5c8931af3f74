"""
Session basket.

The basket is an explicit, serializable value: views ``load()`` it from
the Django session at the start of a request and ``save()`` it back at
the end. Line items are immutable once added; changing an amount means
removing the item and adding a new one.
"""

import uuid
from dataclasses import dataclass, field, asdict, replace
from typing import List, Optional

from django.conf import settings

from apps.donations.models import DonationType, Frequency

from .fees import FeeSplit, coerce_pence, split_fees


RECURRING_FREQUENCIES = (Frequency.MONTHLY, Frequency.YEARLY)


@dataclass(frozen=True)
class BasketItem:
    """One line in the basket."""

    appeal_title: str
    amount_pence: int
    frequency: str = Frequency.ONE_OFF
    donation_type: str = DonationType.GENERAL
    product_name: str = ''
    appeal_id: Optional[str] = None
    fundraiser_id: Optional[str] = None
    water_project_id: Optional[str] = None
    water_project_country_id: Optional[str] = None
    sponsorship_project_id: Optional[str] = None
    sponsorship_country_id: Optional[str] = None
    plaque_name: str = ''
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_recurring(self) -> bool:
        return self.frequency in RECURRING_FREQUENCIES

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'BasketItem':
        known = {name for name in cls.__dataclass_fields__}
        values = {key: value for key, value in data.items() if key in known}
        values['amount_pence'] = coerce_pence(values.get('amount_pence'))
        for key in ('appeal_id', 'fundraiser_id', 'water_project_id', 'water_project_country_id',
                    'sponsorship_project_id', 'sponsorship_country_id'):
            if values.get(key) is not None:
                values[key] = str(values[key])
        return cls(**values)


@dataclass
class Basket:
    """The donor's basket: line items plus the cover-fees choice."""

    items: List[BasketItem] = field(default_factory=list)
    cover_fees: bool = False

    def __len__(self):
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def one_off_subtotal_pence(self) -> int:
        return sum(item.amount_pence for item in self.items if not item.is_recurring)

    @property
    def recurring_subtotal_pence(self) -> int:
        return sum(item.amount_pence for item in self.items if item.is_recurring)

    @property
    def has_recurring(self) -> bool:
        return any(item.is_recurring for item in self.items)

    def add(self, item: BasketItem) -> BasketItem:
        if any(existing.id == item.id for existing in self.items):
            item = replace(item, id=uuid.uuid4().hex)
        self.items.append(item)
        return item

    def remove(self, item_id: str) -> bool:
        """Remove an item by id. Returns False when the id is unknown."""
        remaining = [item for item in self.items if item.id != item_id]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed

    def clear(self):
        self.items = []
        self.cover_fees = False

    def summary(self, cover_fees: Optional[bool] = None) -> FeeSplit:
        """
        Fee split for the current contents.

        An empty basket always summarises to all zeros, even with
        cover_fees set, since there is nothing to charge.
        """
        if self.is_empty:
            return FeeSplit()
        if cover_fees is None:
            cover_fees = self.cover_fees
        return split_fees(self.one_off_subtotal_pence, self.recurring_subtotal_pence, cover_fees)

    def to_dict(self) -> dict:
        return {
            'items': [item.to_dict() for item in self.items],
            'cover_fees': self.cover_fees,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'Basket':
        if not isinstance(data, dict):
            return cls()
        items = [
            BasketItem.from_dict(raw)
            for raw in data.get('items') or []
            if isinstance(raw, dict)
        ]
        return cls(items=items, cover_fees=bool(data.get('cover_fees', False)))


class BasketStore:
    """Load and save a Basket against a Django session."""

    @staticmethod
    def session_key() -> str:
        return getattr(settings, 'BASKET_SESSION_KEY', 'basket')

    @staticmethod
    def load(session) -> Basket:
        return Basket.from_dict(session.get(BasketStore.session_key()))

    @staticmethod
    def save(session, basket: Basket):
        session[BasketStore.session_key()] = basket.to_dict()
        session.modified = True

    @staticmethod
    def clear(session):
        session.pop(BasketStore.session_key(), None)
