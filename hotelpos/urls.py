from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/rooms/", include("rooms.urls")),
    path("api/guests/", include("guests.urls")),
    path("api/reservations/", include("reservations.urls")),
    path("api/invoices/", include("invoices.urls")),
    path("api/pos/", include("pos.urls")),
    path("api/tasks/", include("tasks.urls")),
]
