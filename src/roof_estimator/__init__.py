"""
Roof Estimator Package

Roofing estimate tool for sales agents and owners.
Resolves Address → Roof Geometry → Tiered Price using a configurable formula.
"""

__version__ = "1.0.0"
