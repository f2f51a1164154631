from django.urls import include, path

urlpatterns = [
    path("", include("savings_state.urls")),
]
