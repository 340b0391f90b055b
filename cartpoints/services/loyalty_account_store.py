"""
Loyalty Account Store.

Owns the persistent points balance and transaction log per customer.

ARCHITECTURE:
- LoyaltyAccount.points is the running balance, PointTransaction the audit trail
- Balance changes are a single SQL increment (points = points + delta),
  never a read-modify-write in Python, so concurrent checkouts for the
  same account cannot lose an update
- checkout_transaction() is the one place a checkout is committed:
  everything the coordinator stages lands together or not at all
"""
from datetime import datetime
from typing import List, Optional

from flask import current_app

from ..extensions import db
from ..models.customer import Customer, LoyaltyAccount
from ..models.catalog import Product
from ..models.points import PointTransaction
from ..utils.exceptions import (
    AccountNotFoundError,
    CartPointsError,
    CustomerNotFoundError,
    DuplicateError,
    ValidationError,
)


class LoyaltyAccountStore:
    """
    Persistence for loyalty accounts.

    Usage:
        store = LoyaltyAccountStore()

        account = store.find_by_customer_id(customer_id)
        store.add_points(account.id, 250)

        # Full checkout in one unit of work
        result = store.checkout_transaction(customer_id)
    """

    # ==================== Lookups ====================

    def find_by_id(self, account_id: int) -> Optional[LoyaltyAccount]:
        return db.session.get(LoyaltyAccount, account_id)

    def find_by_customer_id(self, customer_id: int, for_update: bool = False) -> Optional[LoyaltyAccount]:
        """
        Find the account owned by a customer.

        Args:
            customer_id: Owning customer
            for_update: Lock the row (SELECT ... FOR UPDATE) until the
                current transaction ends

        Returns:
            LoyaltyAccount or None
        """
        query = LoyaltyAccount.query.filter_by(customer_id=customer_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_points(self, customer_id: int) -> int:
        account = self.find_by_customer_id(customer_id)
        if not account:
            raise AccountNotFoundError(customer_id)
        return account.get_points()

    def get_transactions(self, customer_id: int, limit: int = 50) -> List[PointTransaction]:
        """Most recent transactions first."""
        account = self.find_by_customer_id(customer_id)
        if not account:
            raise AccountNotFoundError(customer_id)
        return (
            PointTransaction.query
            .filter_by(loyalty_account_id=account.id)
            .order_by(PointTransaction.transaction_date.desc(), PointTransaction.id.desc())
            .limit(limit)
            .all()
        )

    # ==================== Writes ====================

    def create(self, customer_id: int, points: int = 0, commit: bool = True) -> LoyaltyAccount:
        """Open an account for a customer (one per customer)."""
        if points < 0:
            raise ValidationError('Opening balance cannot be negative', 'points')
        if not db.session.get(Customer, customer_id):
            raise CustomerNotFoundError(customer_id)
        if self.find_by_customer_id(customer_id):
            raise DuplicateError('Loyalty account', f'customer {customer_id}')

        account = LoyaltyAccount(
            customer_id=customer_id,
            points=points,
            last_updated=datetime.utcnow()
        )
        db.session.add(account)
        if commit:
            db.session.commit()
        else:
            db.session.flush()
        return account

    def update(self, account: LoyaltyAccount, commit: bool = True, **fields) -> LoyaltyAccount:
        """Update plain fields on an account. Use add_points for the balance."""
        if 'points' in fields:
            raise ValidationError('Balance changes must go through add_points', 'points')

        for key, value in fields.items():
            if not hasattr(account, key):
                raise ValidationError(f'Unknown loyalty account field: {key}', key)
            setattr(account, key, value)
        account.last_updated = datetime.utcnow()

        if commit:
            db.session.commit()
        return account

    def add_points(self, account_id: int, delta: int, when: datetime = None) -> LoyaltyAccount:
        """
        Atomically increase an account's balance.

        Issues UPDATE loyalty_accounts SET points = points + :delta, so the
        new balance is computed by the database against the current row.
        Does not commit; runs inside the caller's unit of work.
        """
        if delta < 0:
            raise ValidationError('Points delta cannot be negative', 'points')

        updated = (
            LoyaltyAccount.query
            .filter_by(id=account_id)
            .update(
                {
                    LoyaltyAccount.points: LoyaltyAccount.points + delta,
                    LoyaltyAccount.last_updated: when or datetime.utcnow(),
                },
                synchronize_session=False
            )
        )
        if not updated:
            raise AccountNotFoundError(account_id)

        account = db.session.get(LoyaltyAccount, account_id)
        db.session.refresh(account)
        return account

    def add_transaction(
        self,
        account: LoyaltyAccount,
        product: Product,
        points_earned: int,
        when: datetime
    ) -> PointTransaction:
        """Stage an audit row in the current unit of work."""
        transaction = PointTransaction(
            loyalty_account_id=account.id,
            product_id=product.id,
            points_earned=points_earned,
            transaction_date=when
        )
        db.session.add(transaction)
        return transaction

    # ==================== Checkout ====================

    def checkout_transaction(self, customer_id: int, coordinator=None):
        """
        Run a full checkout for a customer in one unit of work.

        Commits when the coordinator returns; rolls back and re-raises on
        any exception, leaving balance and transaction log untouched.

        Args:
            customer_id: Customer checking out
            coordinator: Optional CheckoutCoordinator (defaults to the
                database-backed one)

        Returns:
            CheckoutResult
        """
        from .checkout_service import build_checkout_coordinator

        coordinator = coordinator or build_checkout_coordinator(account_store=self)

        try:
            result = coordinator.checkout(customer_id)
            db.session.commit()
        except CartPointsError as e:
            db.session.rollback()
            current_app.logger.warning(f"Checkout rejected for customer {customer_id}: {e.message}")
            raise
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Checkout rolled back for customer {customer_id}: {e}")
            raise

        current_app.logger.info(
            f"Checkout committed: customer {customer_id} +{result.total_points_earned} pts "
            f"({result.transactions_recorded} transaction(s), "
            f"{len(result.invalid_products)} invalid, "
            f"{len(result.products_missing_category)} uncategorized, "
            f"{len(result.point_earning_rules_missing)} without rule)"
        )
        return result


loyalty_account_store = LoyaltyAccountStore()
