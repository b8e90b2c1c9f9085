from django.contrib import admin

from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
	list_display = (
		"number",
		"room_type",
		"variant",
		"capacity",
		"daily_rate_usd",
		"status",
	)
	list_filter = ("status", "room_type", "variant")
	search_fields = ("number",)
