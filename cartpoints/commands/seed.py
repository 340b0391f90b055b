"""
Database seeding commands.

Creates a small demo dataset: two categories with 2024 earning rules, a
Default category with an open-ended rule, two products, and two
customers with 100-point accounts and empty carts.
"""
from datetime import date
from decimal import Decimal

import click
from flask.cli import with_appcontext

from ..extensions import db
from ..services.catalog_service import catalog_service
from ..services.customer_service import customer_service

SEED_CATEGORIES = ['Electronics', 'Books', 'Default']

SEED_PRODUCTS = [
    {
        'name': 'Laptop',
        'price': Decimal('1200.00'),
        'category': 'Electronics',
        'image_url': 'https://upload.wikimedia.org/wikipedia/commons/e/e9/Apple-desk-laptop-macbook-pro_%2823699397893%29.jpg',
    },
    {
        'name': 'Science Fiction Book',
        'price': Decimal('15.99'),
        'category': 'Books',
        'image_url': 'https://upload.wikimedia.org/wikipedia/commons/thumb/e/eb/Eric_Frank_Russell_-_Die_Gro%C3%9Fe_Explosion_-_Cover.jpg/770px-Eric_Frank_Russell_-_Die_Gro%C3%9Fe_Explosion_-_Cover.jpg',
    },
]

SEED_CUSTOMERS = [
    {'name': 'John Doe', 'email': 'john.doe@example.com'},
    {'name': 'Jane Smith', 'email': 'jane.smith@example.com'},
]

SEED_OPENING_POINTS = 100

SEED_RULES = [
    {'category': 'Default', 'points_per_dollar': 1, 'start_date': date(1900, 1, 1), 'end_date': date(2099, 12, 31)},
    {'category': 'Electronics', 'points_per_dollar': 2, 'start_date': date(2024, 1, 1), 'end_date': date(2024, 12, 31)},
    {'category': 'Books', 'points_per_dollar': 1, 'start_date': date(2024, 1, 1), 'end_date': date(2024, 12, 31)},
]


def seed_database() -> dict:
    """
    Insert the demo dataset. Existing categories and customers (matched
    by name/email) are left alone, so running twice is harmless.

    Returns:
        Counts of created rows per entity
    """
    created = {'categories': 0, 'products': 0, 'customers': 0, 'rules': 0}

    categories = {}
    for name in SEED_CATEGORIES:
        category = catalog_service.find_category_by_name(name)
        if not category:
            category = catalog_service.create_category(name)
            created['categories'] += 1
            for rule in SEED_RULES:
                if rule['category'] == name:
                    catalog_service.create_rule(
                        category.id,
                        rule['points_per_dollar'],
                        rule['start_date'],
                        rule['end_date']
                    )
                    created['rules'] += 1
        categories[name] = category

    existing_products = {p.name for p in catalog_service.list_products()}
    for product in SEED_PRODUCTS:
        if product['name'] in existing_products:
            continue
        catalog_service.create_product(
            name=product['name'],
            price=product['price'],
            image_url=product['image_url'],
            category_id=categories[product['category']].id
        )
        created['products'] += 1

    existing_emails = {c.email for c in customer_service.list_customers()}
    for customer in SEED_CUSTOMERS:
        if customer['email'] in existing_emails:
            continue
        customer_service.create_customer(
            name=customer['name'],
            email=customer['email'],
            opening_points=SEED_OPENING_POINTS
        )
        created['customers'] += 1

    return created


@click.group('seed')
def seed_cli():
    """Database seeding commands."""
    pass


@seed_cli.command('run')
@click.option('--reset', is_flag=True, help='Drop and recreate all tables before seeding')
@with_appcontext
def run_seed(reset):
    """Seed the database with demo data."""
    if reset:
        click.echo('Dropping and recreating tables...')
        db.drop_all()
        db.create_all()

    created = seed_database()

    for entity, count in created.items():
        click.echo(f"  {entity.capitalize()}: {count} created")
    click.echo('Seed complete')


def init_app(app):
    """Register seed commands with the Flask app."""
    app.cli.add_command(seed_cli)
