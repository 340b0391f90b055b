"""
Tests for the checkout coordinator.

Covers:
- Points awarded for eligible lines (one transaction row per line)
- Per-line problems reported in the right bucket, in cart order
- Fatal errors: missing account, missing or empty cart
- All-or-nothing commit: a failure leaves balance and history untouched
"""
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from cartpoints.extensions import db
from cartpoints.models import LoyaltyAccount, PointEarningRule, PointTransaction, Product
from cartpoints.services.cart_service import CartLine, CartSnapshot
from cartpoints.services.checkout_service import (
    CheckoutCoordinator,
    CheckoutResult,
    build_checkout_coordinator,
)
from cartpoints.services.loyalty_account_store import loyalty_account_store
from cartpoints.utils.exceptions import AccountNotFoundError, EmptyCartError

from conftest import CHECKOUT_TIME, put_in_cart


def balance(customer_id):
    return LoyaltyAccount.query.filter_by(customer_id=customer_id).one().points


def transaction_count():
    return PointTransaction.query.count()


def fixed_coordinator_at(moment):
    return build_checkout_coordinator(clock=lambda: moment)


class TestCheckoutAwardsPoints:
    """Eligible lines earn points and are logged."""

    def test_laptop_in_electronics_earns_2400(self, app, customer, laptop, fixed_coordinator):
        put_in_cart(customer.id, laptop.id)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.total_points_earned == 2400
        assert result.invalid_products == []
        assert result.products_missing_category == []
        assert result.point_earning_rules_missing == []
        assert result.success is True
        assert balance(customer.id) == 2400

    def test_quantity_uses_per_unit_floor(self, app, customer, book, fixed_coordinator):
        put_in_cart(customer.id, book.id, quantity=3)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.total_points_earned == 45

    def test_one_transaction_row_per_earning_line(self, app, customer, laptop, book, fixed_coordinator):
        put_in_cart(customer.id, laptop.id)
        put_in_cart(customer.id, book.id, quantity=2)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        rows = PointTransaction.query.order_by(PointTransaction.id).all()
        assert [(r.product_id, r.points_earned) for r in rows] == [(laptop.id, 2400), (book.id, 30)]
        assert all(r.transaction_date == CHECKOUT_TIME for r in rows)
        assert result.transactions_recorded == 2
        assert sum(r.points_earned for r in rows) == result.total_points_earned

    def test_balance_adds_to_existing_points(self, app, customer, laptop, fixed_coordinator):
        account = LoyaltyAccount.query.filter_by(customer_id=customer.id).one()
        loyalty_account_store.add_points(account.id, 100)
        db.session.commit()
        put_in_cart(customer.id, laptop.id)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert balance(customer.id) == 100 + result.total_points_earned

    def test_last_updated_set_to_checkout_time(self, app, customer, laptop, fixed_coordinator):
        put_in_cart(customer.id, laptop.id)

        loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        account = LoyaltyAccount.query.filter_by(customer_id=customer.id).one()
        assert account.last_updated == CHECKOUT_TIME

    def test_cart_is_not_cleared_by_coordinator(self, app, customer, laptop, fixed_coordinator):
        put_in_cart(customer.id, laptop.id)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.cart.items == [CartLine(laptop.id, 1)]
        assert len(customer.cart.items) == 1


class TestCheckoutReportsSkippedLines:
    """Per-line problems are reported, not raised."""

    def test_rule_expired(self, app, customer, laptop):
        coordinator_2025 = fixed_coordinator_at(datetime(2025, 1, 15, 9, 0))
        put_in_cart(customer.id, laptop.id)

        result = loyalty_account_store.checkout_transaction(customer.id, coordinator_2025)

        assert result.point_earning_rules_missing == [laptop.id]
        assert result.total_points_earned == 0
        assert result.success is False
        assert balance(customer.id) == 0

    def test_rule_end_date_is_inclusive(self, app, customer, laptop):
        coordinator = fixed_coordinator_at(datetime(2024, 12, 31, 23, 59, 59))
        put_in_cart(customer.id, laptop.id)

        result = loyalty_account_store.checkout_transaction(customer.id, coordinator)

        assert result.total_points_earned == 2400

    def test_product_without_category(self, app, customer, uncategorized_product, fixed_coordinator):
        put_in_cart(customer.id, uncategorized_product.id)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.products_missing_category == [uncategorized_product.id]
        assert result.total_points_earned == 0

    def test_unknown_product(self, app, customer, fixed_coordinator):
        put_in_cart(customer.id, 9999)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.invalid_products == [9999]
        assert result.total_points_earned == 0
        assert transaction_count() == 0

    def test_zero_rate_reported_as_missing_rule(self, app, customer, electronics, fixed_coordinator):
        """A rule paying 0 pts/$ is reported the same as no rule."""
        category = electronics
        category.point_earning_rules[0].points_per_dollar = 0
        product = Product(name='Cable', price=Decimal('9.99'), category_id=category.id)
        db.session.add(product)
        db.session.commit()
        put_in_cart(customer.id, product.id)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.point_earning_rules_missing == [product.id]
        assert transaction_count() == 0

    def test_free_product_reported_as_missing_rule(self, app, customer, electronics, fixed_coordinator):
        product = Product(name='Sticker', price=Decimal('0.00'), category_id=electronics.id)
        db.session.add(product)
        db.session.commit()
        put_in_cart(customer.id, product.id)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.point_earning_rules_missing == [product.id]

    def test_mixed_cart_keeps_good_lines(
        self, app, customer, laptop, book, uncategorized_product, fixed_coordinator
    ):
        put_in_cart(customer.id, 9999)
        put_in_cart(customer.id, laptop.id)
        put_in_cart(customer.id, uncategorized_product.id)
        put_in_cart(customer.id, book.id)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.total_points_earned == 2400 + 15
        assert result.invalid_products == [9999]
        assert result.products_missing_category == [uncategorized_product.id]
        assert result.point_earning_rules_missing == []
        assert result.success is False
        assert balance(customer.id) == 2415
        assert transaction_count() == 2

    def test_each_line_lands_in_exactly_one_bucket(
        self, app, customer, laptop, book, uncategorized_product
    ):
        coordinator = fixed_coordinator_at(datetime(2025, 3, 1))
        for product_id in (laptop.id, book.id, uncategorized_product.id, 424242):
            put_in_cart(customer.id, product_id)

        result = loyalty_account_store.checkout_transaction(customer.id, coordinator)

        reported = (
            result.invalid_products
            + result.products_missing_category
            + result.point_earning_rules_missing
        )
        assert len(reported) + result.transactions_recorded == 4
        # Books rule is open-ended; Electronics expired at the end of 2024
        assert result.point_earning_rules_missing == [laptop.id]
        assert result.total_points_earned == 15

    def test_overlapping_rules_lowest_id_wins(self, app, customer, laptop, electronics, fixed_coordinator):
        db.session.add(PointEarningRule(
            category_id=electronics.id,
            points_per_dollar=10,
            start_date=date(2024, 5, 1),
            end_date=date(2024, 7, 1)
        ))
        db.session.commit()
        put_in_cart(customer.id, laptop.id)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert result.total_points_earned == 2400


class TestCheckoutFatalErrors:
    """Errors that abort checkout before any change."""

    def test_empty_cart(self, app, customer, fixed_coordinator):
        with pytest.raises(EmptyCartError):
            loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)
        assert balance(customer.id) == 0

    def test_no_cart(self, app, customer, fixed_coordinator):
        db.session.delete(customer.cart)
        db.session.commit()

        with pytest.raises(EmptyCartError):
            loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

    def test_missing_account(self, app, customer, laptop, fixed_coordinator):
        put_in_cart(customer.id, laptop.id)
        db.session.delete(customer.loyalty_account)
        db.session.commit()

        with pytest.raises(AccountNotFoundError):
            loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)
        assert transaction_count() == 0


class TestCheckoutAtomicity:
    """A failure mid-checkout leaves no partial state."""

    def test_failure_in_balance_update_rolls_back_transactions(
        self, app, customer, laptop, book, fixed_coordinator
    ):
        put_in_cart(customer.id, laptop.id)
        put_in_cart(customer.id, book.id)

        with patch.object(loyalty_account_store, 'add_points', side_effect=RuntimeError('db down')):
            with pytest.raises(RuntimeError):
                loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert balance(customer.id) == 0
        assert transaction_count() == 0

    def test_commit_failure_rolls_back_everything(self, app, customer, laptop, fixed_coordinator):
        put_in_cart(customer.id, laptop.id)

        with patch.object(db.session, 'commit', side_effect=SQLAlchemyError('commit failed')):
            with pytest.raises(SQLAlchemyError):
                loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        assert balance(customer.id) == 0
        assert transaction_count() == 0

    def test_repeat_checkout_after_failure_succeeds(self, app, customer, laptop, fixed_coordinator):
        put_in_cart(customer.id, laptop.id)

        with patch.object(loyalty_account_store, 'add_points', side_effect=RuntimeError('db down')):
            with pytest.raises(RuntimeError):
                loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)

        result = loyalty_account_store.checkout_transaction(customer.id, fixed_coordinator)
        assert result.total_points_earned == 2400
        assert balance(customer.id) == 2400


class TestCoordinatorWithFakes:
    """The coordinator only talks to its injected collaborators."""

    def make_coordinator(self, lines, products, rules, has_account=True):
        account = SimpleNamespace(id=7) if has_account else None
        recorded = []

        cart_provider = SimpleNamespace(
            get_cart=lambda customer_id: CartSnapshot(customer_id, [CartLine(*l) for l in lines])
        )
        product_lookup = SimpleNamespace(find_by_id=lambda product_id: products.get(product_id))
        rule_lookup = SimpleNamespace(find_rules_for_category=lambda category_id: rules.get(category_id, []))
        account_lookup = SimpleNamespace(
            find_by_customer_id=lambda customer_id, for_update=False: account,
            add_transaction=lambda acct, product, points, when: recorded.append((product.id, points, when)),
            add_points=lambda account_id, delta, when=None: recorded.append(('balance', account_id, delta)),
        )
        coordinator = CheckoutCoordinator(
            cart_provider,
            product_lookup,
            rule_lookup,
            account_lookup,
            clock=lambda: CHECKOUT_TIME
        )
        return coordinator, recorded

    def test_awards_and_records(self):
        product = SimpleNamespace(id=1, price=Decimal('10.50'), category_id=3, is_eligible_for_points=lambda: True)
        rule = PointEarningRule(points_per_dollar=3, start_date=date(2024, 1, 1), end_date=None)
        coordinator, recorded = self.make_coordinator([(1, 2)], {1: product}, {3: [rule]})

        result = coordinator.checkout(42)

        assert isinstance(result, CheckoutResult)
        assert result.total_points_earned == 62
        assert recorded == [(1, 62, CHECKOUT_TIME), ('balance', 7, 62)]

    def test_missing_account_raises_before_reading_cart(self):
        coordinator, recorded = self.make_coordinator([(1, 1)], {}, {}, has_account=False)

        with pytest.raises(AccountNotFoundError):
            coordinator.checkout(42)
        assert recorded == []

    def test_empty_cart_raises(self):
        coordinator, recorded = self.make_coordinator([], {}, {})

        with pytest.raises(EmptyCartError):
            coordinator.checkout(42)
        assert recorded == []

    def test_balance_updated_once_even_with_nothing_earned(self):
        coordinator, recorded = self.make_coordinator([(5, 1), (6, 1)], {}, {})

        result = coordinator.checkout(42)

        assert result.invalid_products == [5, 6]
        assert recorded == [('balance', 7, 0)]
