from django.apps import AppConfig


class SavingsStateConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "savings_state"
