"""
Core module - configuration, exceptions, and shared models.
"""
