from django.contrib import admin

from . import services
from .forms import AdminReservationForm
from .models import Reservation, ReservationItem


@admin.register(ReservationItem)
class ReservationItemAdmin(admin.ModelAdmin):
	list_display = ("description", "room_type", "room_variant", "board_type", "daily_rate_usd")
	list_filter = ("room_type", "room_variant", "board_type")
	search_fields = ("description",)


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
	form = AdminReservationForm
	list_display = (
		"id",
		"guest_name",
		"room",
		"check_in",
		"check_out",
		"status",
		"payment_status",
		"sub_total_usd",
		"invoice",
	)
	list_filter = ("status", "payment_status", "check_in")
	search_fields = ("guest_name", "guest_email", "room__number", "invoice__invoice_number")
	autocomplete_fields = ("guest", "invoice")

	def has_delete_permission(self, request, obj=None):
		return False

	def save_model(self, request, obj, form, change):
		if change:
			changes = {name: form.cleaned_data[name] for name in form.changed_data}
			services.update_reservation(obj.pk, **changes)
		else:
			obj.pk = services.create_reservation_record(**form.cleaned_data).pk
