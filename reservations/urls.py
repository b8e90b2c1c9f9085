from django.urls import path

from . import views

urlpatterns = [
    path("", views.reservation_list_view, name="reservation_list"),
    path("create/", views.reservation_create_view, name="reservation_create"),
    path("active/", views.active_reservations_view, name="reservation_active"),
    path("items/", views.reservation_item_list_view, name="reservation_items"),
    path("room/<int:room_id>/", views.room_reservations_view, name="reservation_room"),
    path("<int:reservation_id>/", views.reservation_detail_view, name="reservation_detail"),
    path(
        "<int:reservation_id>/check-in/",
        views.reservation_check_in_view,
        name="reservation_check_in",
    ),
    path(
        "<int:reservation_id>/check-out/",
        views.reservation_check_out_view,
        name="reservation_check_out",
    ),
    path(
        "<int:reservation_id>/calculate-sub-total/",
        views.reservation_calculate_sub_total_view,
        name="reservation_calculate_sub_total",
    ),
    path("<int:reservation_id>/cancel/", views.reservation_cancel_view, name="reservation_cancel"),
    path(
        "<int:reservation_id>/order-total/",
        views.reservation_order_total_view,
        name="reservation_order_total",
    ),
]
