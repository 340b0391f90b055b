"""
Utility helpers for CartPoints.
"""
