from django.apps import AppConfig


class CoreConfig(AppConfig):
    name = "itlog.apps.core"
    verbose_name = "Core"
