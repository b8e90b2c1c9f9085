from django.contrib import admin

from .models import Guest


@admin.register(Guest)
class GuestAdmin(admin.ModelAdmin):
    list_display = (
        "full_name",
        "email",
        "guest_type",
        "current_reservation",
        "credit_balance_usd",
        "created_at",
    )
    list_filter = ("guest_type",)
    search_fields = ("full_name", "email", "phone")
    readonly_fields = ("full_name", "current_reservation")
