"""
Customer service.

Creating a customer also opens its loyalty account and an empty cart,
so every customer can check out immediately.
"""
from typing import List, Optional

from flask import current_app

from ..extensions import db
from ..models.customer import Customer
from ..models.cart import ShoppingCart
from ..utils.exceptions import CustomerNotFoundError, DuplicateError
from .loyalty_account_store import loyalty_account_store


class CustomerService:
    """CRUD for customers."""

    def list_customers(self) -> List[Customer]:
        return Customer.query.order_by(Customer.id).all()

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        return db.session.get(Customer, customer_id)

    def get_customer(self, customer_id: int) -> Customer:
        customer = self.find_by_id(customer_id)
        if not customer:
            raise CustomerNotFoundError(customer_id)
        return customer

    def create_customer(self, name: str, email: str, opening_points: int = 0) -> Customer:
        if Customer.query.filter_by(email=email).first():
            raise DuplicateError('Customer', f'email {email}')

        customer = Customer(name=name, email=email)
        db.session.add(customer)
        try:
            db.session.flush()
            loyalty_account_store.create(customer.id, points=opening_points, commit=False)
            db.session.add(ShoppingCart(customer_id=customer.id))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Customer created: {customer.id} with {opening_points} opening pts")
        return customer

    def update_customer(self, customer_id: int, name: str = None, email: str = None) -> Customer:
        customer = self.get_customer(customer_id)

        if email and email != customer.email:
            if Customer.query.filter_by(email=email).first():
                raise DuplicateError('Customer', f'email {email}')
            customer.email = email
        if name:
            customer.name = name

        db.session.commit()
        return customer

    def delete_customer(self, customer_id: int) -> None:
        """Delete a customer with their account, history and cart."""
        customer = self.get_customer(customer_id)
        db.session.delete(customer)
        db.session.commit()


customer_service = CustomerService()
