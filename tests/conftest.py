"""
Shared pytest fixtures for CartPoints tests.

Every test gets a fresh in-memory SQLite database inside an app context.
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from cartpoints import create_app
from cartpoints.extensions import db
from cartpoints.models import (
    Category,
    Product,
    PointEarningRule,
    ShoppingCart,
    ShoppingCartItem,
)
from cartpoints.services.checkout_service import build_checkout_coordinator
from cartpoints.services.customer_service import customer_service

# Mid-2024: inside the seeded 2024 rule windows
CHECKOUT_TIME = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def app():
    """Create test application."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Test client."""
    return app.test_client()


@pytest.fixture
def electronics(app):
    """Electronics category: 2 pts/$ during 2024."""
    category = Category(name='Electronics')
    db.session.add(category)
    db.session.flush()
    db.session.add(PointEarningRule(
        category_id=category.id,
        points_per_dollar=2,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31)
    ))
    db.session.commit()
    return category


@pytest.fixture
def books(app):
    """Books category: 1 pt/$, open-ended from 2000."""
    category = Category(name='Books')
    db.session.add(category)
    db.session.flush()
    db.session.add(PointEarningRule(
        category_id=category.id,
        points_per_dollar=1,
        start_date=date(2000, 1, 1),
        end_date=None
    ))
    db.session.commit()
    return category


@pytest.fixture
def laptop(app, electronics):
    product = Product(name='Laptop', price=Decimal('1200.00'), category_id=electronics.id)
    db.session.add(product)
    db.session.commit()
    return product


@pytest.fixture
def book(app, books):
    product = Product(name='Science Fiction Book', price=Decimal('15.99'), category_id=books.id)
    db.session.add(product)
    db.session.commit()
    return product


@pytest.fixture
def uncategorized_product(app):
    product = Product(name='Mystery Box', price=Decimal('20.00'), category_id=None)
    db.session.add(product)
    db.session.commit()
    return product


@pytest.fixture
def customer(app):
    """Customer with a 0-point loyalty account and an empty cart."""
    return customer_service.create_customer(name='John Doe', email='john.doe@example.com')


@pytest.fixture
def logged_in_client(client, customer):
    """Test client carrying the customer cookie."""
    client.set_cookie('customer_id', str(customer.id))
    return client


@pytest.fixture
def fixed_coordinator(app):
    """Checkout coordinator pinned to CHECKOUT_TIME."""
    return build_checkout_coordinator(clock=lambda: CHECKOUT_TIME)


def put_in_cart(customer_id, product_id, quantity=1):
    """Insert a cart line directly, bypassing product existence checks."""
    cart = ShoppingCart.query.filter_by(customer_id=customer_id).first()
    if not cart:
        cart = ShoppingCart(customer_id=customer_id)
        db.session.add(cart)
        db.session.flush()
    db.session.add(ShoppingCartItem(cart_id=cart.id, product_id=product_id, quantity=quantity))
    db.session.commit()
