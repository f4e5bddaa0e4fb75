"""
REST API layer.
"""
