"""
Checkout Transaction Coordinator.

Turns a customer's cart into loyalty points:

1. Lock and load the customer's loyalty account (fatal if missing)
2. Snapshot the cart (fatal if missing or empty)
3. For each line, in cart order:
   - unknown product            -> invalid_products
   - product without category   -> products_missing_category
   - no rule active today       -> point_earning_rules_missing
   - rule active but 0 points   -> point_earning_rules_missing
   - otherwise stage a PointTransaction and add to the total
4. Add the total to the balance once

Per-line problems are reported, never raised. The coordinator does not
commit; LoyaltyAccountStore.checkout_transaction owns the unit of work.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from .cart_service import CartService, CartSnapshot, cart_service
from .lookups import ProductLookup, CategoryRuleLookup
from .loyalty_account_store import LoyaltyAccountStore, loyalty_account_store
from .point_calculation import find_active_rule, calculate_points
from ..utils.exceptions import AccountNotFoundError, EmptyCartError

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    """Outcome of one checkout."""
    total_points_earned: int = 0
    invalid_products: List[int] = field(default_factory=list)
    products_missing_category: List[int] = field(default_factory=list)
    point_earning_rules_missing: List[int] = field(default_factory=list)
    transactions_recorded: int = 0
    cart: Optional[CartSnapshot] = None

    @property
    def success(self) -> bool:
        """True when every line earned points."""
        return not (
            self.invalid_products
            or self.products_missing_category
            or self.point_earning_rules_missing
        )

    def to_dict(self):
        return {
            'total_points_earned': self.total_points_earned,
            'invalid_products': list(self.invalid_products),
            'products_missing_category': list(self.products_missing_category),
            'point_earning_rules_missing': list(self.point_earning_rules_missing),
            'success': self.success,
        }


class CheckoutCoordinator:
    """
    Checkout algorithm over injected collaborators.

    Args:
        cart_provider: get_cart(customer_id) -> CartSnapshot | None
        product_lookup: find_by_id(product_id) -> Product | None
        rule_lookup: find_rules_for_category(category_id) -> [PointEarningRule]
        account_lookup: find_by_customer_id(customer_id, for_update=...),
            add_transaction(...) and add_points(account_id, delta, when)
        clock: returns the checkout timestamp (naive UTC)
    """

    def __init__(
        self,
        cart_provider,
        product_lookup,
        rule_lookup,
        account_lookup,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.cart_provider = cart_provider
        self.product_lookup = product_lookup
        self.rule_lookup = rule_lookup
        self.account_lookup = account_lookup
        self.clock = clock

    def checkout(self, customer_id: int) -> CheckoutResult:
        now = self.clock()
        as_of = now.date()

        account = self.account_lookup.find_by_customer_id(customer_id, for_update=True)
        if account is None:
            raise AccountNotFoundError(customer_id)

        cart = self.cart_provider.get_cart(customer_id)
        if cart is None or not cart.items:
            raise EmptyCartError(customer_id)

        logger.info(f"Checkout started: customer {customer_id}, {len(cart.items)} line(s)")
        result = CheckoutResult(cart=cart)

        for line in cart.items:
            product = self.product_lookup.find_by_id(line.product_id)
            if product is None:
                logger.debug(f"Checkout customer {customer_id}: product {line.product_id} not found")
                result.invalid_products.append(line.product_id)
                continue

            if product.category_id is None:
                logger.debug(f"Checkout customer {customer_id}: product {product.id} has no category")
                result.products_missing_category.append(product.id)
                continue

            rules = self.rule_lookup.find_rules_for_category(product.category_id)
            rule = find_active_rule(rules, as_of)
            if rule is None:
                logger.debug(
                    f"Checkout customer {customer_id}: no rule active on {as_of} "
                    f"for category {product.category_id}"
                )
                result.point_earning_rules_missing.append(product.id)
                continue

            points = calculate_points(product, rule, as_of, line.quantity)
            if points == 0:
                # Zero-point sales are reported the same as a missing rule
                result.point_earning_rules_missing.append(product.id)
                continue

            self.account_lookup.add_transaction(account, product, points, now)
            result.total_points_earned += points
            result.transactions_recorded += 1

        self.account_lookup.add_points(account.id, result.total_points_earned, when=now)
        return result


def build_checkout_coordinator(
    account_store: LoyaltyAccountStore = None,
    cart_provider: CartService = None,
    clock: Callable[[], datetime] = None
) -> CheckoutCoordinator:
    """Coordinator wired to the database-backed collaborators."""
    return CheckoutCoordinator(
        cart_provider=cart_provider or cart_service,
        product_lookup=ProductLookup(),
        rule_lookup=CategoryRuleLookup(),
        account_lookup=account_store or loyalty_account_store,
        clock=clock or datetime.utcnow
    )
