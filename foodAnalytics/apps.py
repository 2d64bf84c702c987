from django.apps import AppConfig


class FoodAnalyticsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "foodAnalytics"
    verbose_name = "Food Order Analytics"
