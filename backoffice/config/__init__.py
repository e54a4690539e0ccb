"""
Configuration package for the back-office metrics service.

Holds environment settings consumed by the database, logging,
security and metrics-engine layers.
"""

from backoffice.config.settings import settings, get_settings, Settings

__all__ = ['settings', 'get_settings', 'Settings']
