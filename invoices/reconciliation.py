"""Keeps an invoice's total and remaining balance in line with its reservations and orders."""
import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Sum

from hotelpos.exceptions import InternalError
from pos.models import Order
from reservations.models import Reservation

from .models import Invoice, PaymentStatus

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class ReconciliationError(InternalError):
	default_message = "Failed to aggregate invoice totals."


def _sum_sub_totals(queryset):
	return queryset.aggregate(total=Sum("sub_total_usd"))["total"]


def _combine(reservation_sum, order_sum, *, strict: bool, invoice_id, label: str):
	if reservation_sum is None and order_sum is None:
		if strict:
			raise ReconciliationError(
				f"Failed to aggregate the {label} of invoice {invoice_id}: "
				"no matching reservations or orders."
			)
		return ZERO
	return (reservation_sum or ZERO) + (order_sum or ZERO)


def recompute_invoice_totals(invoice_id, *, strict=None) -> Invoice:
	"""Recalculate and store ``total_usd`` and ``remaining_balance_usd``.

	The remaining balance sums unpaid reservations and orders; the total sums
	everything that is not cancelled. With ``strict`` (the
	``STRICT_INVOICE_RECONCILIATION`` setting by default) a step that matches
	no reservation and no order raises ``ReconciliationError`` instead of
	storing zero.
	"""
	if strict is None:
		strict = settings.STRICT_INVOICE_RECONCILIATION

	with transaction.atomic():
		invoice = Invoice.objects.select_for_update().filter(id=invoice_id).first()
		if invoice is None:
			raise ReconciliationError(f"Invoice {invoice_id} does not exist.")

		reservations = Reservation.objects.filter(invoice_id=invoice_id)
		orders = Order.objects.filter(invoice_id=invoice_id)

		remaining_balance = _combine(
			_sum_sub_totals(reservations.filter(payment_status=PaymentStatus.UNPAID)),
			_sum_sub_totals(orders.filter(status=PaymentStatus.UNPAID)),
			strict=strict,
			invoice_id=invoice_id,
			label="remaining balance",
		)
		total = _combine(
			_sum_sub_totals(reservations.exclude(payment_status=PaymentStatus.CANCELLED)),
			_sum_sub_totals(orders.exclude(status=PaymentStatus.CANCELLED)),
			strict=strict,
			invoice_id=invoice_id,
			label="total",
		)

		invoice.remaining_balance_usd = remaining_balance
		invoice.total_usd = total
		invoice.save(update_fields=["remaining_balance_usd", "total_usd", "updated_at"])

	logger.info(
		"Invoice %s reconciled: total %s, remaining %s",
		invoice.invoice_number,
		total,
		remaining_balance,
	)
	return invoice


def recompute_many(invoice_ids, *, strict=None):
	"""Reconcile each distinct, non-null invoice id once, in order."""
	seen = set()
	for invoice_id in invoice_ids:
		if invoice_id is None or invoice_id in seen:
			continue
		seen.add(invoice_id)
		recompute_invoice_totals(invoice_id, strict=strict)
