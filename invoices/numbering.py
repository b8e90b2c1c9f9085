"""Sequential invoice numbers.

Each sequence keeps its last issued value in an ``InvoiceNumberSequence`` row.
Allocation locks that row, so concurrent requests are served one after
another and never hand out the same number. A sequence with no row yet is
seeded from the highest number already issued in it, or from its base.
"""
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import IntegerField, Max
from django.db.models.functions import Cast

from .models import Invoice, InvoiceNumberSequence, PaymentStatus

logger = logging.getLogger(__name__)

Sequence = InvoiceNumberSequence.Name


def format_invoice_number(value: int) -> str:
	return str(value).zfill(settings.INVOICE_NUMBER_WIDTH)


def default_base(sequence) -> int:
	if sequence == Sequence.CANCELLED:
		return settings.CANCELLED_INVOICE_NUMBER_BASE
	return settings.INVOICE_NUMBER_BASE


def latest_issued_number(sequence):
	invoices = Invoice.objects.all()
	if sequence == Sequence.CANCELLED:
		invoices = invoices.filter(status=PaymentStatus.CANCELLED)
	else:
		invoices = invoices.exclude(status=PaymentStatus.CANCELLED)
	return invoices.annotate(
		number_value=Cast("invoice_number", IntegerField())
	).aggregate(latest=Max("number_value"))["latest"]


def _locked_sequence(sequence, base: int) -> InvoiceNumberSequence:
	counter = InvoiceNumberSequence.objects.select_for_update().filter(name=sequence).first()
	if counter is not None:
		return counter

	latest = latest_issued_number(sequence)
	seed = latest if latest is not None else max(base - 1, 0)
	try:
		with transaction.atomic():
			InvoiceNumberSequence.objects.create(name=sequence, last_value=seed)
	except IntegrityError:
		logger.warning("Invoice number sequence %s was seeded concurrently", sequence)
	else:
		logger.info("Seeded invoice number sequence %s at %s", sequence, seed)
	return InvoiceNumberSequence.objects.select_for_update().get(name=sequence)


def next_invoice_number(sequence=Sequence.NORMAL, *, base=None) -> str:
	"""Allocate the next number of ``sequence`` as a zero-padded string.

	``base`` is the first number handed out when the sequence has never been
	used and holds no invoices; it defaults to the configured base for the
	sequence. Numbers already held by any invoice are skipped.
	"""
	if base is None:
		base = default_base(sequence)

	with transaction.atomic():
		counter = _locked_sequence(sequence, base)
		candidate = counter.last_value + 1
		while Invoice.objects.filter(invoice_number=format_invoice_number(candidate)).exists():
			candidate += 1
		counter.last_value = candidate
		counter.save(update_fields=["last_value", "updated_at"])

	number = format_invoice_number(candidate)
	logger.info("Allocated %s invoice number %s", sequence, number)
	return number
