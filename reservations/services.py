import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from guests import services as guest_services
from guests.models import Guest
from hotelpos.exceptions import NotFound, Unprocessable
from invoices import services as invoice_services
from invoices.models import PaymentStatus
from invoices.reconciliation import recompute_invoice_totals, recompute_many
from pos.models import Order
from rooms.models import Room

from .models import Reservation, ReservationItem
from .pricing import duration_of_stay, rate_total

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _locked_reservation(reservation_id) -> Reservation:
	reservation = Reservation.objects.select_for_update().filter(id=reservation_id).first()
	if reservation is None:
		raise NotFound("Reservation not found.")
	return reservation


def create_reservation_record(**fields) -> Reservation:
	with transaction.atomic():
		reservation = Reservation.objects.create(**fields)
		if reservation.invoice_id:
			recompute_invoice_totals(reservation.invoice_id)
	return reservation


def update_reservation(reservation_id, *, strict=None, **changes) -> Reservation:
	"""Apply ``changes`` and reconcile every invoice the change affects.

	A new payment status or sub-total reconciles the invoice the reservation
	was on before the change; moving the reservation to another invoice
	reconciles both the previous and the new one.
	"""
	with transaction.atomic():
		reservation = _locked_reservation(reservation_id)
		previous_invoice_id = reservation.invoice_id
		previous_payment_status = reservation.payment_status
		previous_sub_total = reservation.sub_total_usd

		for field, value in changes.items():
			setattr(reservation, field, value)
		reservation.save()

		invoice_ids = []
		if (
			reservation.payment_status != previous_payment_status
			or reservation.sub_total_usd != previous_sub_total
		):
			invoice_ids.append(previous_invoice_id)
		if reservation.invoice_id != previous_invoice_id:
			invoice_ids.extend([previous_invoice_id, reservation.invoice_id])
		recompute_many(invoice_ids, strict=strict)
	return reservation


def create_reservation(
	*,
	reservation_item_id,
	check_in,
	check_out,
	guest_name: str,
	guest_email: str,
	guest_id=None,
) -> Reservation:
	reservation_item = ReservationItem.objects.filter(id=reservation_item_id).first()
	if reservation_item is None:
		raise NotFound("Reservation Option not found.")

	guest = None
	if guest_id:
		guest = Guest.objects.filter(id=guest_id).first()
		if guest is None:
			raise NotFound("Guest not found.")

	nights = duration_of_stay(check_in, check_out)
	total = rate_total(nights, reservation_item)
	reservation = create_reservation_record(
		guest_name=guest_name,
		guest_email=guest_email,
		check_in=check_in,
		check_out=check_out,
		guest=guest,
		reservation_item=reservation_item,
		sub_total_usd=total.value,
	)
	logger.info("Reservation %s created: %s", reservation.id, total.description)
	return reservation


def check_in(
	reservation_id,
	*,
	room_id,
	first_name: str,
	surname: str,
	guest_email: str,
) -> Reservation:
	"""Check a confirmed reservation in and open its invoice.

	Uses the reservation's guest, else the guest with ``guest_email``, else a
	new guest; a guest still checked in on another reservation is refused.
	A reservation already on an invoice keeps it; otherwise a new
	invoice is numbered and created for it.
	"""
	with transaction.atomic():
		reservation = _locked_reservation(reservation_id)
		if reservation.status != Reservation.Status.CONFIRMED:
			raise Unprocessable(
				f"Only confirmed reservations can be checked in (status is {reservation.status})."
			)

		room = Room.objects.select_for_update().filter(id=room_id).first()
		if room is None:
			raise NotFound("Room not found.")
		if room.status != Room.Status.VACANT:
			raise Unprocessable(f"Room {room.number} is not vacant.")

		guest = reservation.guest or guest_services.find_by_email(guest_email)
		if guest is None:
			guest = guest_services.create_guest(
				first_name=first_name,
				surname=surname,
				email=guest_email,
			)
		if (
			guest.current_reservation_id
			and guest.current_reservation_id != reservation.id
			and guest.current_reservation.status in Reservation.CHECK_OUT_STATUSES
		):
			raise Unprocessable(
				f"{guest.full_name} is still checked in on reservation {guest.current_reservation_id}."
			)
		guest.current_reservation = reservation
		guest.save(update_fields=["current_reservation"])

		room.status = Room.Status.OCCUPIED
		room.save(update_fields=["status"])

		reservation = update_reservation(
			reservation.id,
			status=Reservation.Status.CHECKED_IN,
			guest=guest,
			room=room,
		)

		if not reservation.guest_id:
			raise Unprocessable("Failed to create the Guest record.")
		if not reservation.room_id:
			raise Unprocessable("Failed to attach the room.")
		if not reservation.reservation_item_id:
			raise Unprocessable("Reservation item not found.")

		if reservation.invoice_id is None:
			invoice_services.create_invoice(
				guest=guest,
				customer_name=f"{first_name} {surname}".strip(),
				customer_email=guest_email,
				number_base=settings.CHECK_IN_INVOICE_NUMBER_BASE,
				reservations=[reservation],
			)
		else:
			logger.info(
				"Reservation %s is already on invoice %s, no new invoice created",
				reservation.id,
				reservation.invoice_id,
			)
		reservation.refresh_from_db()

	logger.info("Checked in reservation %s to room %s", reservation.id, room.number)
	return reservation


def calculate_sub_total(reservation_id, *, check_in, check_out) -> Reservation:
	"""Price the stay at the room's daily rate and lock the reservation for billing."""
	with transaction.atomic():
		reservation = _locked_reservation(reservation_id)
		if reservation.status not in Reservation.CHECK_OUT_STATUSES:
			raise Unprocessable(
				f"Only checked-in reservations can be billed (status is {reservation.status})."
			)

		nights = duration_of_stay(check_in, check_out)
		daily_rate = reservation.room.daily_rate_usd if reservation.room_id else None
		sub_total = daily_rate * nights if daily_rate is not None else ZERO
		reservation = update_reservation(
			reservation.id,
			sub_total_usd=sub_total,
			status=Reservation.Status.FINAL_BILL,
		)
	return reservation


def _release(reservation):
	Guest.objects.filter(current_reservation=reservation).update(current_reservation=None)
	if reservation.room_id:
		Room.objects.filter(id=reservation.room_id).update(status=Room.Status.VACANT)


def check_out(reservation_id) -> Reservation:
	with transaction.atomic():
		reservation = _locked_reservation(reservation_id)
		if reservation.status not in Reservation.CHECK_OUT_STATUSES:
			raise Unprocessable(
				f"Only checked-in reservations can be checked out (status is {reservation.status})."
			)
		_release(reservation)
		reservation = update_reservation(reservation.id, status=Reservation.Status.CHECKED_OUT)
	logger.info("Checked out reservation %s", reservation.id)
	return reservation


def cancel_reservation(reservation_id) -> Reservation:
	with transaction.atomic():
		reservation = _locked_reservation(reservation_id)
		if reservation.status not in Reservation.CANCELLABLE_STATUSES:
			raise Unprocessable(
				f"Reservation cannot be cancelled (status is {reservation.status})."
			)
		_release(reservation)
		# Cancelling the last live reservation on an invoice leaves it at zero.
		reservation = update_reservation(
			reservation.id,
			strict=False,
			status=Reservation.Status.CANCELLED,
			payment_status=PaymentStatus.CANCELLED,
		)
	logger.info("Cancelled reservation %s", reservation.id)
	return reservation


def get_all():
	return Reservation.objects.select_related("room", "guest").order_by("-created_at")[
		: settings.RESERVATION_LIST_LIMIT
	]


def get_reservation_items():
	return ReservationItem.objects.all()


def get_by_id(reservation_id) -> Reservation:
	reservation = (
		Reservation.objects.select_related("room", "guest", "reservation_item", "invoice")
		.prefetch_related(
			"orders__items__item",
			"guest__orders__items",
			"guest__invoices__line_items",
		)
		.filter(id=reservation_id)
		.first()
	)
	if reservation is None:
		raise NotFound("Reservation not found.")
	return reservation


def get_active_reservations():
	return (
		Reservation.objects.filter(status__in=Reservation.ACTIVE_STATUSES)
		.select_related("room", "guest", "invoice")
		.prefetch_related("invoice__line_items")
	)


def get_room_reservations(room_id):
	return (
		Reservation.objects.filter(room_id=room_id, check_in__gte=timezone.localdate())
		.select_related("room")
		.order_by("check_in")[: settings.RESERVATION_LIST_LIMIT]
	)


def aggregate_order_total(reservation_id):
	"""Sum of the reservation's orders that are not cancelled."""
	if not Reservation.objects.filter(id=reservation_id).exists():
		raise NotFound("Reservation not found.")
	total = (
		Order.objects.filter(reservation_id=reservation_id)
		.exclude(status=PaymentStatus.CANCELLED)
		.aggregate(total=Sum("sub_total_usd"))["total"]
	)
	return total if total is not None else ZERO
