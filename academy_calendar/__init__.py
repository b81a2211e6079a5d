"""
Academy Calendar: recurring-event expansion for academy operations.
"""

__version__ = "0.1.0"
