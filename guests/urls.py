from django.urls import path

from . import views

urlpatterns = [
    path("", views.guest_list_view, name="guest_list"),
    path("create/", views.guest_create_view, name="guest_create"),
    path("<int:guest_id>/", views.guest_detail_view, name="guest_detail"),
    path("<int:guest_id>/update/", views.guest_update_view, name="guest_update"),
]
