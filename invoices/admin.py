from django.contrib import admin

from . import services
from .models import Invoice, InvoiceItem, InvoiceNumberSequence


class InvoiceItemInline(admin.TabularInline):
	model = InvoiceItem
	extra = 0
	readonly_fields = ("sub_total_usd",)


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
	inlines = (InvoiceItemInline,)
	list_display = (
		"invoice_number",
		"customer_name",
		"guest",
		"total_usd",
		"remaining_balance_usd",
		"status",
		"created_at",
	)
	list_filter = ("status",)
	search_fields = ("invoice_number", "customer_name", "customer_email", "guest__email")
	readonly_fields = ("invoice_number", "total_usd", "remaining_balance_usd", "created_at")
	fields = (
		"invoice_number",
		"customer_name",
		"customer_email",
		"guest",
		"status",
		"total_usd",
		"remaining_balance_usd",
		"created_at",
	)

	# Invoices are opened by check-in or the invoice create operation.
	def has_add_permission(self, request):
		return False

	def has_delete_permission(self, request, obj=None):
		return False

	def save_model(self, request, obj, form, change):
		changes = {name: form.cleaned_data[name] for name in form.changed_data}
		if changes.get("status"):
			status = changes.pop("status")
			if changes:
				services.update_invoice(obj.pk, **changes)
			services.update_status(obj.pk, status)
		elif changes:
			services.update_invoice(obj.pk, **changes)


@admin.register(InvoiceNumberSequence)
class InvoiceNumberSequenceAdmin(admin.ModelAdmin):
	list_display = ("name", "last_value", "updated_at")

	def has_add_permission(self, request):
		return False

	def has_change_permission(self, request, obj=None):
		return False

	def has_delete_permission(self, request, obj=None):
		return False
