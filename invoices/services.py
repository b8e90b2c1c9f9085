import logging

from django.db import transaction

from guests import services as guest_services
from guests.models import Guest
from hotelpos.exceptions import NotFound, Unprocessable
from pos.models import Order
from reservations.models import Reservation
from reservations.pricing import duration_of_stay, rate_total

from .models import Invoice, PaymentStatus
from .numbering import Sequence, next_invoice_number
from .reconciliation import recompute_invoice_totals, recompute_many

logger = logging.getLogger(__name__)


def get_open():
	return (
		Invoice.objects.exclude(status=PaymentStatus.CANCELLED)
		.select_related("guest")
		.prefetch_related("reservations__reservation_item", "reservations__room")
	)


def get_by_id(invoice_id) -> Invoice:
	invoice = Invoice.objects.select_related("guest").filter(id=invoice_id).first()
	if invoice is None:
		raise NotFound("Invoice not found.")
	return invoice


def create_invoice(
	*,
	guest=None,
	customer_name="",
	customer_email="",
	invoice_number=None,
	number_base=None,
	reservations=(),
	new_reservations=(),
) -> Invoice:
	"""Create an invoice, link its reservations and reconcile its totals.

	``reservations`` are existing records moved onto the new invoice;
	``new_reservations`` are field dicts for reservations created with it.
	Invoices the existing reservations were previously on are reconciled too.
	"""
	with transaction.atomic():
		if invoice_number is None:
			invoice_number = next_invoice_number(Sequence.NORMAL, base=number_base)
		invoice = Invoice.objects.create(
			invoice_number=invoice_number,
			guest=guest,
			customer_name=customer_name,
			customer_email=customer_email,
		)

		reservation_ids = [reservation.id for reservation in reservations]
		previous_invoice_ids = list(
			Reservation.objects.filter(id__in=reservation_ids, invoice__isnull=False)
			.values_list("invoice_id", flat=True)
			.distinct()
		)
		if reservation_ids:
			Reservation.objects.filter(id__in=reservation_ids).update(invoice=invoice)
		for fields in new_reservations:
			Reservation.objects.create(invoice=invoice, **fields)

		invoice = recompute_invoice_totals(invoice.id)
		recompute_many(previous_invoice_ids)

	logger.info(
		"Created invoice %s for %s with %s reservation(s)",
		invoice.invoice_number,
		customer_email or customer_name or "walk-in",
		len(reservation_ids) + len(new_reservations),
	)
	return invoice


def update_invoice(invoice_id, **changes) -> Invoice:
	"""Apply ``changes``; an invoice entering CANCELLED gets a cancelled-sequence number."""
	with transaction.atomic():
		invoice = Invoice.objects.select_for_update().filter(id=invoice_id).first()
		if invoice is None:
			raise NotFound("Invoice not found.")

		previous_status = invoice.status
		cancelling = (
			changes.get("status") == PaymentStatus.CANCELLED
			and previous_status != PaymentStatus.CANCELLED
		)
		# Drawn before the status is saved so the invoice's own number does
		# not seed the cancelled sequence.
		cancelled_number = next_invoice_number(Sequence.CANCELLED) if cancelling else None

		for field, value in changes.items():
			setattr(invoice, field, value)
		if cancelled_number:
			logger.info(
				"Invoice %s cancelled, renumbered to %s",
				invoice.invoice_number,
				cancelled_number,
			)
			invoice.invoice_number = cancelled_number
		invoice.save()
	return invoice


def update_status(invoice_id, status) -> Invoice:
	"""Settle, reopen or cancel an invoice together with its reservations and orders."""
	with transaction.atomic():
		invoice = update_invoice(invoice_id, status=status)
		Order.objects.filter(invoice=invoice, status=PaymentStatus.UNPAID).update(status=status)
		Reservation.objects.filter(invoice=invoice).update(payment_status=status)
		# A settled or cancelled invoice has no unpaid constituents left; zero is expected.
		invoice = recompute_invoice_totals(invoice.id, strict=False)
	return invoice


def _reservation_fields(entry: dict, *, guest, guest_name: str, guest_email: str) -> dict:
	reservation_item = entry["reservation_item"]
	sub_total = entry.get("sub_total_usd")
	if sub_total is None:
		nights = duration_of_stay(entry["check_in"], entry["check_out"])
		sub_total = rate_total(nights, reservation_item).value
	fields = {
		"reservation_item": reservation_item,
		"check_in": entry["check_in"],
		"check_out": entry["check_out"],
		"sub_total_usd": sub_total,
		"guest": guest,
		"guest_name": guest_name,
		"guest_email": guest_email,
	}
	if entry.get("status"):
		fields["status"] = entry["status"]
	return fields


def create_invoice_for_guest(
	*,
	first_name: str,
	surname: str,
	email: str,
	guest_id=None,
	reservations=(),
) -> Invoice:
	"""Manual/walk-in invoice: find or create the guest, then create the invoice with its reservations."""
	with transaction.atomic():
		if guest_id:
			guest = Guest.objects.filter(id=guest_id).first()
			if guest is None:
				raise Unprocessable("Failed to find the guest.")
		else:
			guest = guest_services.create_guest(
				first_name=first_name,
				surname=surname,
				email=email,
			)

		customer_name = f"{first_name} {surname}".strip()
		new_reservations = [
			_reservation_fields(
				entry,
				guest=guest,
				guest_name=customer_name,
				guest_email=email,
			)
			for entry in reservations
		]
		invoice = create_invoice(
			guest=guest,
			customer_name=customer_name,
			customer_email=email,
			new_reservations=new_reservations,
		)
	return invoice
