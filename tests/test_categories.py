"""Tests for the category registry: seeding, uniqueness, rename cascades and deletion."""

from __future__ import annotations

import pytest

from conftest import OTHER_USER_ID, USER_ID, make_transaction
from finance_tracker import config
from finance_tracker.aggregation import savings_actual
from finance_tracker.categories import CategoryRegistry, category_id, resolve
from finance_tracker.errors import SystemCategoryError
from finance_tracker.ledger import BudgetLedger, TransactionLedger
from finance_tracker.models import Budget, Category, TransactionType


def _user_category(name: str, type: TransactionType = TransactionType.DEPENSE, user_id: str = USER_ID) -> Category:
    return Category(id=category_id(name), name=name, user_id=user_id, type=type)


def test_first_list_seeds_defaults(storage) -> None:
    registry = CategoryRegistry(storage)
    categories = registry.list(USER_ID)

    assert len(categories) == 12
    assert all(c.is_system for c in categories)
    by_type = {t: [c for c in categories if c.type is t] for t in TransactionType}
    assert len(by_type[TransactionType.DEPENSE]) == 8
    assert len(by_type[TransactionType.GAIN]) == 2
    assert len(by_type[TransactionType.EPARGNE]) == 2
    assert len(storage.load(config.CATEGORIES_KEY)) == 12


def test_list_hides_other_users_categories(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)
    registry.add(_user_category("Voyage", TransactionType.EPARGNE, user_id=OTHER_USER_ID))

    names = {c.name for c in registry.list(USER_ID)}
    assert "Voyage" not in names
    assert "Voyage" in {c.name for c in registry.list(OTHER_USER_ID)}


def test_add_rejects_case_insensitive_duplicate(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)

    assert registry.add(_user_category("Voyage")) is True
    assert registry.add(_user_category("VOYAGE")) is False
    assert registry.add(_user_category("alimentation")) is False
    assert [c.name for c in registry.list(USER_ID)].count("Voyage") == 1


def test_category_id_is_slug() -> None:
    assert category_id("Épargne de secours") == "épargne-de-secours"


def test_delete_system_category_fails(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)
    before = storage.load(config.CATEGORIES_KEY)

    with pytest.raises(SystemCategoryError):
        registry.delete("alimentation", USER_ID)
    assert storage.load(config.CATEGORIES_KEY) == before


def test_delete_removes_only_target(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)
    registry.add(_user_category("Voyage"))
    registry.add(_user_category("Cadeaux"))
    before = len(storage.load(config.CATEGORIES_KEY))

    assert registry.delete("voyage", USER_ID) is True
    remaining = storage.load(config.CATEGORIES_KEY)
    assert len(remaining) == before - 1
    assert "Voyage" not in {r["name"] for r in remaining}
    assert "Cadeaux" in {r["name"] for r in remaining}


def test_delete_missing_or_foreign_category_is_noop(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)
    registry.add(_user_category("Voyage", user_id=OTHER_USER_ID))

    assert registry.delete("does-not-exist", USER_ID) is False
    assert registry.delete("voyage", USER_ID) is False
    assert "Voyage" in {c.name for c in registry.list(OTHER_USER_ID)}


def test_delete_leaves_referencing_transactions(storage) -> None:
    registry = CategoryRegistry(storage)
    ledger = TransactionLedger(storage)
    registry.list(USER_ID)
    registry.add(_user_category("Voyage"))
    ledger.save(make_transaction("t1", 50, category="Voyage"))

    registry.delete("voyage", USER_ID)

    [orphan] = ledger.list(USER_ID)
    assert orphan.category == "Voyage"
    assert resolve(orphan.category, registry.list(USER_ID)) is None


def test_rename_cascades_to_owner_records_only(storage) -> None:
    registry = CategoryRegistry(storage)
    transactions = TransactionLedger(storage)
    budgets = BudgetLedger(storage)
    registry.list(USER_ID)
    registry.add(_user_category("Old"))

    transactions.save(make_transaction("mine", 10, category="Old"))
    transactions.save(make_transaction("theirs", 20, category="Old", user_id=OTHER_USER_ID))
    budgets.save(Budget(id="b1", user_id=USER_ID, category="Old", month=0, year=2024, planned_amount=100))
    budgets.save(Budget(id="b2", user_id=OTHER_USER_ID, category="Old", month=0, year=2024, planned_amount=100))

    assert registry.update("old", "New", TransactionType.EPARGNE, USER_ID) is True

    [mine] = transactions.list(USER_ID)
    [theirs] = transactions.list(OTHER_USER_ID)
    assert mine.category == "New"
    assert mine.type is TransactionType.EPARGNE
    assert theirs.category == "Old"
    assert theirs.type is TransactionType.DEPENSE

    assert [b.category for b in budgets.list(USER_ID, 0, 2024)] == ["New"]
    assert [b.category for b in budgets.list(OTHER_USER_ID, 0, 2024)] == ["Old"]

    renamed = resolve("new", registry.list(USER_ID))
    assert renamed is not None and renamed.type is TransactionType.EPARGNE


def test_system_category_can_be_renamed(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)

    assert registry.update("loisirs", "Sorties", TransactionType.DEPENSE, USER_ID) is True
    category = resolve("Sorties", registry.list(USER_ID))
    assert category is not None
    assert category.is_system


def test_update_unknown_category_is_noop(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)
    before = storage.load(config.CATEGORIES_KEY)

    assert registry.update("nope", "Whatever", TransactionType.GAIN, USER_ID) is False
    assert storage.load(config.CATEGORIES_KEY) == before


def test_update_cannot_touch_other_users_category(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)
    registry.add(_user_category("Voyage", user_id=OTHER_USER_ID))

    assert registry.update("voyage", "Hacked", TransactionType.GAIN, USER_ID) is False
    assert "Voyage" in {c.name for c in registry.list(OTHER_USER_ID)}


def test_readding_a_renamed_default_gets_its_own_id(service) -> None:
    assert service.update_category("loisirs", "Sorties", TransactionType.DEPENSE) is True
    assert service.add_category("Loisirs", TransactionType.DEPENSE) is True

    records = service.storage.load(config.CATEGORIES_KEY)
    ids = [r["id"] for r in records]
    assert len(ids) == len(set(ids))

    mine = resolve("Loisirs", service.categories.list(USER_ID))
    assert mine is not None and not mine.is_system
    assert mine.id != "loisirs"

    assert service.delete_category(mine.id) is True
    assert resolve("Loisirs", service.categories.list(USER_ID)) is None
    assert resolve("Sorties", service.categories.list(USER_ID)).is_system
    with pytest.raises(SystemCategoryError):
        service.delete_category("loisirs")


def test_rename_to_existing_name_is_rejected(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)
    before = storage.load(config.CATEGORIES_KEY)

    assert registry.update("transport", "loyer", TransactionType.DEPENSE, USER_ID) is False
    assert storage.load(config.CATEGORIES_KEY) == before
    names = [c.name.lower() for c in registry.list(USER_ID)]
    assert names.count("loyer") == 1


def test_rename_may_change_case_of_own_name(storage) -> None:
    registry = CategoryRegistry(storage)
    registry.list(USER_ID)

    assert registry.update("transport", "TRANSPORT", TransactionType.DEPENSE, USER_ID) is True
    assert resolve("transport", registry.list(USER_ID)).name == "TRANSPORT"


def test_rename_keeps_withdrawals_linked_to_savings(storage) -> None:
    registry = CategoryRegistry(storage)
    ledger = TransactionLedger(storage)
    registry.list(USER_ID)
    registry.add(_user_category("Voyage", TransactionType.EPARGNE))
    ledger.save(make_transaction("dep", 500, TransactionType.EPARGNE, "Voyage"))
    ledger.save(make_transaction(
        "wd", 200, TransactionType.GAIN, config.WITHDRAWAL_CATEGORY, linked_category="Voyage",
    ))
    ledger.save(make_transaction(
        "foreign", 50, TransactionType.GAIN, config.WITHDRAWAL_CATEGORY,
        user_id=OTHER_USER_ID, linked_category="Voyage",
    ))

    assert registry.update("voyage", "Vacances", TransactionType.EPARGNE, USER_ID) is True

    withdrawal = next(t for t in ledger.list(USER_ID) if t.id == "wd")
    assert withdrawal.category == config.WITHDRAWAL_CATEGORY
    assert withdrawal.linked_category == "Vacances"
    assert savings_actual(ledger.list(USER_ID), "Vacances") == 300
    assert ledger.list(OTHER_USER_ID)[0].linked_category == "Voyage"
