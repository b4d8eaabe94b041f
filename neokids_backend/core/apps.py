"""
Core app configuration
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Users, roles, audit log and system settings."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'neokids_backend.core'
    verbose_name = 'Core (Usuários, Auditoria & Configurações)'
