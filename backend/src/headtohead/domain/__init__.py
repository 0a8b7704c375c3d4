"""
Domain layer: models and services for multi-sport player comparison.
"""
