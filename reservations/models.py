from django.db import models

from guests.models import Guest
from invoices.models import Invoice, PaymentStatus
from rooms.models import Room, RoomType, RoomVariant


class ReservationItem(models.Model):
	class BoardType(models.TextChoices):
		ROOM_ONLY = "ROOM_ONLY", "Room only"
		BED_AND_BREAKFAST = "BED_AND_BREAKFAST", "Bed & breakfast"
		HALF_BOARD = "HALF_BOARD", "Half board"
		FULL_BOARD = "FULL_BOARD", "Full board"

	description = models.CharField(max_length=200)
	room_type = models.CharField(max_length=20, choices=RoomType.choices, default=RoomType.STANDARD)
	room_variant = models.CharField(max_length=20, choices=RoomVariant.choices, default=RoomVariant.DOUBLE)
	board_type = models.CharField(max_length=20, choices=BoardType.choices, default=BoardType.ROOM_ONLY)
	daily_rate_usd = models.DecimalField(max_digits=10, decimal_places=2)

	class Meta:
		ordering = ("room_type", "room_variant", "board_type")

	def __str__(self) -> str:
		return self.description


class Reservation(models.Model):
	class Status(models.TextChoices):
		CONFIRMED = "CONFIRMED", "Confirmed"
		CHECKED_IN = "CHECKED_IN", "Checked in"
		FINAL_BILL = "FINAL_BILL", "Final bill"
		CHECKED_OUT = "CHECKED_OUT", "Checked out"
		CANCELLED = "CANCELLED", "Cancelled"

	ACTIVE_STATUSES = (Status.CONFIRMED, Status.CHECKED_IN, Status.FINAL_BILL)
	CANCELLABLE_STATUSES = (Status.CONFIRMED, Status.CHECKED_IN)
	CHECK_OUT_STATUSES = (Status.CHECKED_IN, Status.FINAL_BILL)

	guest_name = models.CharField(max_length=201)
	guest_email = models.EmailField()
	check_in = models.DateField()
	check_out = models.DateField()
	status = models.CharField(max_length=20, choices=Status.choices, default=Status.CONFIRMED)
	payment_status = models.CharField(
		max_length=20,
		choices=PaymentStatus.choices,
		default=PaymentStatus.UNPAID,
	)
	sub_total_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	room = models.ForeignKey(
		Room,
		on_delete=models.SET_NULL,
		null=True,
		blank=True,
		related_name="reservations",
	)
	guest = models.ForeignKey(
		Guest,
		on_delete=models.SET_NULL,
		null=True,
		blank=True,
		related_name="reservations",
	)
	reservation_item = models.ForeignKey(
		ReservationItem,
		on_delete=models.PROTECT,
		null=True,
		blank=True,
		related_name="reservations",
	)
	invoice = models.ForeignKey(
		Invoice,
		on_delete=models.SET_NULL,
		null=True,
		blank=True,
		related_name="reservations",
	)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ("-check_in", "-created_at")

	def __str__(self) -> str:
		return f"Reservation #{self.id} - {self.guest_name}"
