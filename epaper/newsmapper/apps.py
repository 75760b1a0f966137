from django.apps import AppConfig


class NewsmapperConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'newsmapper'
    verbose_name = 'ePaper area mapper'
