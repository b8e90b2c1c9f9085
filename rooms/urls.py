from django.urls import path

from . import views

urlpatterns = [
    path("", views.room_list_view, name="room_list"),
    path("create/", views.room_create_view, name="room_create"),
    path("<int:room_id>/", views.room_detail_view, name="room_detail"),
    path("<int:room_id>/update/", views.room_update_view, name="room_update"),
    path("<int:room_id>/status/", views.room_status_view, name="room_status"),
]
