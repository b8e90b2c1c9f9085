from django.urls import path

from . import views

urlpatterns = [
    path("create/", views.invoice_create_view, name="invoice_create"),
    path("open/", views.open_invoices_view, name="invoice_open"),
    path("<int:invoice_id>/", views.invoice_detail_view, name="invoice_detail"),
    path("<int:invoice_id>/status/", views.invoice_status_view, name="invoice_status"),
]
