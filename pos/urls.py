from django.urls import path

from . import views

urlpatterns = [
    path("items/", views.item_list_view, name="pos_item_list"),
    path("items/create/", views.item_create_view, name="pos_item_create"),
    path("items/<int:item_id>/", views.item_detail_view, name="pos_item_detail"),
    path("items/<int:item_id>/update/", views.item_update_view, name="pos_item_update"),
    path("orders/", views.open_orders_view, name="pos_order_list"),
    path("orders/create/", views.order_create_view, name="pos_order_create"),
    path("orders/<int:order_id>/", views.order_detail_view, name="pos_order_detail"),
    path("orders/<int:order_id>/status/", views.order_status_view, name="pos_order_status"),
]
