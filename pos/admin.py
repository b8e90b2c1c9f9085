from django.contrib import admin

from . import services
from .models import Item, ItemIngredient, ItemOrder, Order


class ItemIngredientInline(admin.TabularInline):
    model = ItemIngredient
    extra = 0


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    inlines = (ItemIngredientInline,)
    list_display = (
        "name",
        "category",
        "price_usd",
        "happy_hour_price_usd",
        "stock_quantity",
        "is_active",
    )
    list_filter = ("category", "is_active")
    search_fields = ("name",)


class ItemOrderInline(admin.TabularInline):
    model = ItemOrder
    extra = 0
    can_delete = False
    readonly_fields = ("item", "quantity", "unit_price_usd", "sub_total_usd")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    inlines = (ItemOrderInline,)
    list_display = (
        "id",
        "guest",
        "reservation",
        "invoice",
        "sub_total_usd",
        "happy_hour",
        "status",
        "order_date",
    )
    list_filter = ("status", "happy_hour", "order_date")
    search_fields = ("guest__full_name", "invoice__invoice_number")
    readonly_fields = ("sub_total_usd", "discount_usd", "happy_hour", "order_date")
    autocomplete_fields = ("guest", "invoice")

    # Orders are rung up through the point of sale.
    def has_add_permission(self, request):
        return False

    def save_model(self, request, obj, form, change):
        changes = {name: form.cleaned_data[name] for name in form.changed_data}
        if changes:
            services.update_order(obj.pk, **changes)
