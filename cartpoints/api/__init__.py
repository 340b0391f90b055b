"""
HTTP API blueprints for CartPoints.
"""
