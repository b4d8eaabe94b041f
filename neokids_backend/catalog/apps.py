from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'neokids_backend.catalog'
    verbose_name = 'Catálogo de Serviços'
