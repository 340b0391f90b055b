"""
CLI Commands for CartPoints.

Usage:
    flask seed run            # Seed demo catalog, customers and rules
    flask seed run --reset    # Drop and recreate all tables first
"""
from .seed import init_app as init_seed_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_seed_commands(app)
