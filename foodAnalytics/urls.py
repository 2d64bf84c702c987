from django.urls import path

from foodAnalytics.views.analytics import dashboard_view, order_like_view
from foodAnalytics.views.auth import login_view, logout_view, me_view, register_view
from foodAnalytics.views.orders import upload_order_history_view

urlpatterns = [
    # auth
    path("auth/register", register_view, name="auth_register"),
    path("auth/login", login_view, name="auth_login"),
    path("auth/me", me_view, name="auth_me"),
    path("auth/logout", logout_view, name="auth_logout"),

    # orders
    path("orders/upload", upload_order_history_view, name="orders_upload"),

    # analytics
    path("analytics/dashboard", dashboard_view, name="analytics_dashboard"),
    path("analytics/orders/<str:order_id>/like", order_like_view, name="order_like"),
]
