"""
Optional external integrations.
"""
