"""Category registry: seeded defaults, uniqueness and rename cascades.

Transactions and budgets reference categories by *name*, so renaming or
retyping a category rewrites every dependent record of the owning user.
The rewrite happens inside a single storage batch.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from . import config
from .errors import SystemCategoryError
from .ledger import new_id
from .models import Category, TransactionType
from .storage import Storage

logger = logging.getLogger(__name__)


def category_id(name: str) -> str:
    """Slug used as the id of a newly created category."""
    return re.sub(r"\s+", "-", name.strip().lower())


def default_categories() -> List[Category]:
    return [
        Category(
            id=category_id(name),
            name=name,
            user_id=config.SYSTEM_USER_ID,
            type=TransactionType(type_name),
        )
        for name, type_name in config.DEFAULT_CATEGORIES
    ]


def _name_taken(name: str, records: List[dict], skip: Optional[int] = None) -> bool:
    wanted = name.strip().lower()
    return any(
        str(r.get('name', '')).lower() == wanted
        for i, r in enumerate(records)
        if i != skip
    )


def resolve(name: str, categories: Iterable[Category]) -> Optional[Category]:
    """Find the category a soft reference points to, if it still exists."""
    wanted = name.strip().lower()
    for category in categories:
        if category.name.lower() == wanted:
            return category
    return None


class CategoryRegistry:
    """Manages the user's categories plus the shared system set."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _load(self) -> List[dict]:
        # the default set is written on first use, when the store is empty
        records = self.storage.load(config.CATEGORIES_KEY)
        if not records:
            records = [category.to_dict() for category in default_categories()]
            self.storage.save(config.CATEGORIES_KEY, records)
            logger.info("Seeded %d default categories", len(records))
        return records

    def list(self, user_id: str) -> List[Category]:
        """Return categories owned by ``user_id`` or by the system."""
        records = self._load()
        visible: List[Category] = []
        for record in records:
            if record.get('userId') not in (user_id, config.SYSTEM_USER_ID):
                continue
            try:
                visible.append(Category.from_dict(record))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping malformed category %r: %s", record, exc)
        return visible

    def add(self, category: Category) -> bool:
        """Append ``category`` unless its name is already taken.

        A category whose id is already used by another record (for
        instance a renamed default still carrying its original slug) is
        given a suffixed id before it is stored.

        Returns:
            True if the category was stored, False on a name collision.
        """
        records = self._load()
        if _name_taken(category.name, records):
            logger.debug("Category %r already exists", category.name)
            return False
        taken_ids = {str(r.get('id')) for r in records}
        while category.id in taken_ids:
            category.id = f"{category_id(category.name)}-{new_id()[:4]}"
        records.append(category.to_dict())
        self.storage.save(config.CATEGORIES_KEY, records)
        return True

    def update(self, category_id: str, new_name: str, new_type: TransactionType, user_id: str) -> bool:
        """Rename/retype a category and cascade into the user's records.

        Returns:
            True if a category matched, False otherwise (nothing changes).
        """
        new_type = TransactionType.parse(new_type)
        with self.storage.batch():
            records = self._load()
            index = next(
                (
                    i for i, r in enumerate(records)
                    if str(r.get('id')) == str(category_id)
                    and r.get('userId') in (user_id, config.SYSTEM_USER_ID)
                ),
                None,
            )
            if index is None:
                logger.debug("No category %s visible to %s", category_id, user_id)
                return False

            if _name_taken(new_name, records, skip=index):
                logger.debug("Cannot rename %s: %r already exists", category_id, new_name)
                return False

            old_name = records[index].get('name')
            records[index]['name'] = new_name
            records[index]['type'] = new_type.value
            self.storage.save(config.CATEGORIES_KEY, records)

            transactions = self.storage.load(config.TRANSACTIONS_KEY)
            touched_tx = 0
            for record in transactions:
                if record.get('userId') != user_id:
                    continue
                if record.get('category') == old_name:
                    record['category'] = new_name
                    record['type'] = new_type.value
                    touched_tx += 1
                # withdrawals point back at their savings category by name
                if record.get('linkedCategory') == old_name:
                    record['linkedCategory'] = new_name
                    touched_tx += 1
            self.storage.save(config.TRANSACTIONS_KEY, transactions)

            budgets = self.storage.load(config.BUDGETS_KEY)
            touched_bg = 0
            for record in budgets:
                if record.get('category') == old_name and record.get('userId') == user_id:
                    record['category'] = new_name
                    touched_bg += 1
            self.storage.save(config.BUDGETS_KEY, budgets)

        logger.info(
            "Renamed category %r to %r (%d transactions, %d budgets)",
            old_name, new_name, touched_tx, touched_bg,
        )
        return True

    def delete(self, category_id: str, user_id: str) -> bool:
        """Remove a user-owned category.

        Raises:
            SystemCategoryError: If the category belongs to the system set.
        """
        records = self._load()
        target = next((r for r in records if str(r.get('id')) == str(category_id)), None)
        if target is not None and target.get('userId') == config.SYSTEM_USER_ID:
            raise SystemCategoryError()

        remaining = [
            r for r in records
            if not (str(r.get('id')) == str(category_id) and r.get('userId') == user_id)
        ]
        if len(remaining) == len(records):
            logger.debug("No category %s owned by %s", category_id, user_id)
            return False
        self.storage.save(config.CATEGORIES_KEY, remaining)
        return True
