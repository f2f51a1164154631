from django.urls import path

from .views import StateView

urlpatterns = [
    path("api/state", StateView.as_view(), name="state"),
]
