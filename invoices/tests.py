import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse

from guests.models import Guest
from hotelpos.exceptions import Conflict, Unprocessable
from pos.models import Order
from pos.services import create_order_record, update_order_status
from reservations.models import Reservation, ReservationItem
from reservations.services import create_reservation_record, update_reservation

from . import services
from .models import Invoice, InvoiceNumberSequence, PaymentStatus
from .numbering import Sequence, next_invoice_number
from .reconciliation import ReconciliationError, recompute_invoice_totals


class InvoiceNumberingTests(TestCase):
	def test_normal_sequence_starts_at_base(self):
		self.assertEqual(next_invoice_number(), "001220")

	def test_numbers_strictly_increase(self):
		numbers = [next_invoice_number() for _ in range(3)]

		self.assertEqual(numbers, ["001220", "001221", "001222"])
		self.assertEqual(
			InvoiceNumberSequence.objects.get(name=Sequence.NORMAL).last_value,
			1222,
		)

	def test_seeds_from_latest_existing_invoice(self):
		Invoice.objects.create(invoice_number="001500")
		Invoice.objects.create(invoice_number="009004", status=PaymentStatus.CANCELLED)

		self.assertEqual(next_invoice_number(), "001501")
		self.assertEqual(next_invoice_number(Sequence.CANCELLED), "009005")

	def test_cancelled_sequence_starts_at_its_own_base(self):
		next_invoice_number()

		self.assertEqual(next_invoice_number(Sequence.CANCELLED), "009000")
		self.assertEqual(next_invoice_number(Sequence.CANCELLED), "009001")

	def test_skips_numbers_held_by_other_invoices(self):
		Invoice.objects.create(invoice_number="001221", status=PaymentStatus.CANCELLED)

		self.assertEqual(next_invoice_number(), "001220")
		self.assertEqual(next_invoice_number(), "001222")

	def test_base_only_applies_to_an_unused_sequence(self):
		self.assertEqual(next_invoice_number(base=2000), "002000")
		self.assertEqual(next_invoice_number(), "002001")
		self.assertEqual(next_invoice_number(base=2000), "002002")

	@override_settings(INVOICE_NUMBER_BASE=7)
	def test_base_comes_from_settings(self):
		self.assertEqual(next_invoice_number(), "000007")


class InvoiceFixturesMixin:
	def setUp(self):
		self.guest = Guest.objects.create(
			first_name="Ada",
			surname="Lovelace",
			email="ada@example.com",
		)
		self.reservation_item = ReservationItem.objects.create(
			description="Deluxe Double",
			daily_rate_usd=Decimal("100.00"),
		)
		self.invoice = Invoice.objects.create(
			invoice_number="001220",
			guest=self.guest,
			customer_name="Ada Lovelace",
			customer_email="ada@example.com",
		)

	def make_reservation(self, sub_total, payment_status=PaymentStatus.UNPAID, **overrides):
		fields = {
			"guest_name": "Ada Lovelace",
			"guest_email": "ada@example.com",
			"check_in": datetime.date(2024, 1, 1),
			"check_out": datetime.date(2024, 1, 4),
			"guest": self.guest,
			"reservation_item": self.reservation_item,
			"sub_total_usd": Decimal(sub_total),
			"payment_status": payment_status,
			"invoice": self.invoice,
		}
		fields.update(overrides)
		return Reservation.objects.create(**fields)

	def make_order(self, sub_total, status=PaymentStatus.UNPAID, **overrides):
		fields = {
			"guest": self.guest,
			"sub_total_usd": Decimal(sub_total),
			"status": status,
			"invoice": self.invoice,
		}
		fields.update(overrides)
		return Order.objects.create(**fields)

	def assertInvoiceTotals(self, invoice, total, remaining):
		invoice.refresh_from_db()
		self.assertEqual(invoice.total_usd, Decimal(total))
		self.assertEqual(invoice.remaining_balance_usd, Decimal(remaining))


class InvoiceReconciliationTests(InvoiceFixturesMixin, TestCase):
	def test_totals_count_non_cancelled_and_balance_counts_unpaid(self):
		self.make_reservation("300.00")
		self.make_reservation("200.00", PaymentStatus.PAID)
		self.make_reservation("50.00", PaymentStatus.CANCELLED)
		self.make_order("40.00")
		self.make_order("10.00", PaymentStatus.CANCELLED)

		recompute_invoice_totals(self.invoice.id)

		self.assertInvoiceTotals(self.invoice, "540.00", "340.00")

	def test_orders_alone_are_enough(self):
		self.make_order("12.50")

		recompute_invoice_totals(self.invoice.id)

		self.assertInvoiceTotals(self.invoice, "12.50", "12.50")

	def test_other_invoices_are_ignored(self):
		other = Invoice.objects.create(invoice_number="001221")
		self.make_reservation("300.00")
		self.make_reservation("999.00", invoice=other)

		recompute_invoice_totals(self.invoice.id)

		self.assertInvoiceTotals(self.invoice, "300.00", "300.00")

	def test_strict_mode_rejects_invoice_without_constituents(self):
		with self.assertRaises(ReconciliationError):
			recompute_invoice_totals(self.invoice.id)

	def test_strict_mode_rejects_invoice_with_nothing_unpaid(self):
		self.make_reservation("300.00", PaymentStatus.PAID)

		with self.assertRaises(ReconciliationError):
			recompute_invoice_totals(self.invoice.id)

	def test_non_strict_mode_stores_zero(self):
		self.make_reservation("300.00", PaymentStatus.PAID)

		recompute_invoice_totals(self.invoice.id, strict=False)

		self.assertInvoiceTotals(self.invoice, "300.00", "0.00")

	@override_settings(STRICT_INVOICE_RECONCILIATION=False)
	def test_strictness_comes_from_settings(self):
		recompute_invoice_totals(self.invoice.id)

		self.assertInvoiceTotals(self.invoice, "0.00", "0.00")


class InvoiceTriggerTests(InvoiceFixturesMixin, TestCase):
	def test_reservation_creation_reconciles_its_invoice(self):
		create_reservation_record(
			guest_name="Ada Lovelace",
			guest_email="ada@example.com",
			check_in=datetime.date(2024, 1, 1),
			check_out=datetime.date(2024, 1, 4),
			sub_total_usd=Decimal("300.00"),
			invoice=self.invoice,
		)

		self.assertInvoiceTotals(self.invoice, "300.00", "300.00")

	def test_payment_status_change_reconciles_invoice(self):
		self.make_order("40.00")
		reservation = self.make_reservation("300.00")
		recompute_invoice_totals(self.invoice.id)

		update_reservation(reservation.id, payment_status=PaymentStatus.PAID)

		self.assertInvoiceTotals(self.invoice, "340.00", "40.00")

	def test_sub_total_change_reconciles_invoice(self):
		reservation = self.make_reservation("300.00")
		recompute_invoice_totals(self.invoice.id)

		update_reservation(reservation.id, sub_total_usd=Decimal("450.00"))

		self.assertInvoiceTotals(self.invoice, "450.00", "450.00")

	def test_moving_reservation_reconciles_both_invoices(self):
		other = Invoice.objects.create(invoice_number="001221")
		self.make_order("40.00")
		reservation = self.make_reservation("300.00")
		recompute_invoice_totals(self.invoice.id)

		update_reservation(reservation.id, invoice=other)

		self.assertInvoiceTotals(self.invoice, "40.00", "40.00")
		self.assertInvoiceTotals(other, "300.00", "300.00")

	def test_unrelated_change_leaves_totals_alone(self):
		reservation = self.make_reservation("300.00")

		update_reservation(reservation.id, guest_name="Augusta Ada King")

		self.assertInvoiceTotals(self.invoice, "0.00", "0.00")

	def test_failed_reconciliation_rolls_back_the_write(self):
		reservation = self.make_reservation("300.00")
		recompute_invoice_totals(self.invoice.id)

		with self.assertRaises(ReconciliationError):
			update_reservation(reservation.id, payment_status=PaymentStatus.PAID)

		reservation.refresh_from_db()
		self.assertEqual(reservation.payment_status, PaymentStatus.UNPAID)
		self.assertInvoiceTotals(self.invoice, "300.00", "300.00")

	def test_order_creation_and_payment_reconcile_invoice(self):
		self.make_reservation("300.00")
		order = create_order_record(sub_total_usd=Decimal("25.00"), invoice=self.invoice)

		self.assertInvoiceTotals(self.invoice, "325.00", "325.00")

		update_order_status(order.id, PaymentStatus.PAID)

		self.assertInvoiceTotals(self.invoice, "325.00", "300.00")

	def test_totals_track_every_mutation(self):
		first = self.make_reservation("300.00")
		recompute_invoice_totals(self.invoice.id)
		second = create_reservation_record(
			guest_name="Ada Lovelace",
			guest_email="ada@example.com",
			check_in=datetime.date(2024, 2, 1),
			check_out=datetime.date(2024, 2, 3),
			sub_total_usd=Decimal("200.00"),
			invoice=self.invoice,
		)
		order = create_order_record(sub_total_usd=Decimal("30.00"), invoice=self.invoice)

		steps = [
			(lambda: update_reservation(first.id, payment_status=PaymentStatus.PAID), "530.00", "230.00"),
			(lambda: update_order_status(order.id, PaymentStatus.CANCELLED), "500.00", "200.00"),
			(
				lambda: update_reservation(second.id, sub_total_usd=Decimal("250.00")),
				"550.00",
				"250.00",
			),
			(
				lambda: update_reservation(first.id, payment_status=PaymentStatus.UNPAID),
				"550.00",
				"550.00",
			),
		]
		for mutate, total, remaining in steps:
			mutate()
			self.assertInvoiceTotals(self.invoice, total, remaining)


class InvoiceLifecycleTests(InvoiceFixturesMixin, TestCase):
	def reservation_entry(self, check_in, check_out, **extra):
		entry = {
			"reservation_item": self.reservation_item,
			"check_in": check_in,
			"check_out": check_out,
			"sub_total_usd": None,
			"status": "",
		}
		entry.update(extra)
		return entry

	def test_create_invoice_for_new_guest_with_reservations(self):
		invoice = services.create_invoice_for_guest(
			first_name="Grace",
			surname="Hopper",
			email="grace@example.com",
			reservations=[
				self.reservation_entry(datetime.date(2024, 1, 1), datetime.date(2024, 1, 4)),
				self.reservation_entry(
					datetime.date(2024, 2, 1),
					datetime.date(2024, 2, 2),
					sub_total_usd=Decimal("80.00"),
				),
			],
		)

		guest = Guest.objects.get(email="grace@example.com")
		self.assertEqual(invoice.guest, guest)
		self.assertEqual(invoice.customer_name, "Grace Hopper")
		self.assertEqual(invoice.invoice_number, "001221")
		self.assertEqual(invoice.reservations.count(), 2)
		for reservation in invoice.reservations.all():
			self.assertEqual(reservation.guest, guest)
			self.assertEqual(reservation.guest_name, "Grace Hopper")
			self.assertEqual(reservation.guest_email, "grace@example.com")
		self.assertInvoiceTotals(invoice, "380.00", "380.00")

	def test_create_invoice_for_existing_guest(self):
		invoice = services.create_invoice_for_guest(
			first_name="Ada",
			surname="Lovelace",
			email="ada@example.com",
			guest_id=self.guest.id,
			reservations=[
				self.reservation_entry(datetime.date(2024, 1, 1), datetime.date(2024, 1, 3)),
			],
		)

		self.assertEqual(invoice.guest, self.guest)
		self.assertEqual(Guest.objects.count(), 1)
		self.assertInvoiceTotals(invoice, "200.00", "200.00")

	def test_duplicate_guest_email_is_a_conflict_and_creates_nothing(self):
		invoice_count = Invoice.objects.count()

		with self.assertRaises(Conflict):
			services.create_invoice_for_guest(
				first_name="Someone",
				surname="Else",
				email="ADA@example.com",
				reservations=[
					self.reservation_entry(datetime.date(2024, 1, 1), datetime.date(2024, 1, 3)),
				],
			)

		self.assertEqual(Invoice.objects.count(), invoice_count)
		self.assertEqual(Guest.objects.count(), 1)
		self.assertEqual(Reservation.objects.count(), 0)

	def test_unknown_guest_id_is_unprocessable(self):
		with self.assertRaises(Unprocessable):
			services.create_invoice_for_guest(
				first_name="Nobody",
				surname="Here",
				email="nobody@example.com",
				guest_id=9999,
			)

	def test_invoice_without_reservations_fails_in_strict_mode(self):
		with self.assertRaises(ReconciliationError):
			services.create_invoice_for_guest(
				first_name="Walk",
				surname="In",
				email="walkin@example.com",
			)

		self.assertFalse(Guest.objects.filter(email="walkin@example.com").exists())
		self.assertEqual(Invoice.objects.count(), 1)

	@override_settings(STRICT_INVOICE_RECONCILIATION=False)
	def test_invoice_without_reservations_allowed_when_not_strict(self):
		invoice = services.create_invoice_for_guest(
			first_name="Walk",
			surname="In",
			email="walkin@example.com",
		)

		self.assertInvoiceTotals(invoice, "0.00", "0.00")

	def test_paying_invoice_settles_reservations_and_orders(self):
		reservation = self.make_reservation("300.00")
		order = self.make_order("40.00")
		cancelled_order = self.make_order("10.00", PaymentStatus.CANCELLED)
		recompute_invoice_totals(self.invoice.id)

		invoice = services.update_status(self.invoice.id, PaymentStatus.PAID)

		self.assertEqual(invoice.status, PaymentStatus.PAID)
		reservation.refresh_from_db()
		order.refresh_from_db()
		cancelled_order.refresh_from_db()
		self.assertEqual(reservation.payment_status, PaymentStatus.PAID)
		self.assertEqual(order.status, PaymentStatus.PAID)
		self.assertEqual(cancelled_order.status, PaymentStatus.CANCELLED)
		self.assertInvoiceTotals(self.invoice, "340.00", "0.00")

	def test_cancelling_invoice_renumbers_from_cancelled_sequence(self):
		reservation = self.make_reservation("300.00")
		recompute_invoice_totals(self.invoice.id)

		invoice = services.update_status(self.invoice.id, PaymentStatus.CANCELLED)

		self.assertEqual(invoice.invoice_number, "009000")
		self.assertEqual(invoice.status, PaymentStatus.CANCELLED)
		reservation.refresh_from_db()
		self.assertEqual(reservation.payment_status, PaymentStatus.CANCELLED)
		self.assertInvoiceTotals(self.invoice, "0.00", "0.00")

	def test_cancelling_invoice_keeps_paid_orders_in_total(self):
		self.make_reservation("300.00")
		unpaid_order = self.make_order("40.00")
		paid_order = self.make_order("15.00", PaymentStatus.PAID)
		recompute_invoice_totals(self.invoice.id)

		services.update_status(self.invoice.id, PaymentStatus.CANCELLED)

		unpaid_order.refresh_from_db()
		paid_order.refresh_from_db()
		self.assertEqual(unpaid_order.status, PaymentStatus.CANCELLED)
		self.assertEqual(paid_order.status, PaymentStatus.PAID)
		self.assertInvoiceTotals(self.invoice, "15.00", "0.00")

	def test_cancelled_numbers_never_collide_with_active_ones(self):
		second = Invoice.objects.create(invoice_number="001221")

		services.update_invoice(self.invoice.id, status=PaymentStatus.CANCELLED)
		services.update_invoice(second.id, status=PaymentStatus.CANCELLED)
		fresh_number = next_invoice_number()

		numbers = set(Invoice.objects.values_list("invoice_number", flat=True))
		self.assertEqual(numbers, {"009000", "009001"})
		self.assertNotIn(fresh_number, numbers)
		self.assertEqual(fresh_number, "001220")

	def test_cancelling_twice_keeps_the_cancelled_number(self):
		services.update_invoice(self.invoice.id, status=PaymentStatus.CANCELLED)
		invoice = services.update_invoice(self.invoice.id, status=PaymentStatus.CANCELLED)

		self.assertEqual(invoice.invoice_number, "009000")

	def test_open_invoices_exclude_cancelled(self):
		Invoice.objects.create(invoice_number="001221", status=PaymentStatus.CANCELLED)

		self.assertEqual(list(services.get_open()), [self.invoice])


class InvoiceEndpointTests(InvoiceFixturesMixin, TestCase):
	def setUp(self):
		super().setUp()
		get_user_model().objects.create_user(
			username="frontdesk",
			email="frontdesk@example.com",
			password="pass1234",
			is_staff=True,
		)
		self.client.login(username="frontdesk", password="pass1234")

	def invoice_payload(self, **overrides):
		payload = {
			"first_name": "Grace",
			"surname": "Hopper",
			"email": "grace@example.com",
			"reservations-TOTAL_FORMS": "1",
			"reservations-INITIAL_FORMS": "0",
			"reservations-0-reservation_item": str(self.reservation_item.id),
			"reservations-0-check_in": "2024-01-01",
			"reservations-0-check_out": "2024-01-04",
		}
		payload.update(overrides)
		return payload

	def test_create_invoice(self):
		response = self.client.post(reverse("invoice_create"), self.invoice_payload())

		self.assertEqual(response.status_code, 201)
		data = response.json()
		self.assertEqual(data["invoice_number"], "001221")
		self.assertEqual(Decimal(data["total_usd"]), Decimal("300"))
		self.assertEqual(data["guest"]["email"], "grace@example.com")

	def test_create_invoice_with_duplicate_email_returns_conflict(self):
		response = self.client.post(
			reverse("invoice_create"),
			self.invoice_payload(email="ada@example.com"),
		)

		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.json()["error"], "CONFLICT")
		self.assertEqual(Invoice.objects.count(), 1)

	def test_create_invoice_rejects_bad_dates(self):
		response = self.client.post(
			reverse("invoice_create"),
			self.invoice_payload(**{"reservations-0-check_out": "2023-12-31"}),
		)

		self.assertEqual(response.status_code, 400)
		self.assertIn("reservations-0", response.json()["errors"])

	def test_create_invoice_without_reservations_is_internal_error(self):
		response = self.client.post(
			reverse("invoice_create"),
			{"first_name": "Walk", "surname": "In", "email": "walkin@example.com"},
		)

		self.assertEqual(response.status_code, 500)
		self.assertEqual(response.json()["error"], "INTERNAL")
		self.assertFalse(Guest.objects.filter(email="walkin@example.com").exists())

	def test_open_invoices(self):
		self.make_reservation("300.00")
		Invoice.objects.create(invoice_number="009000", status=PaymentStatus.CANCELLED)

		response = self.client.get(reverse("invoice_open"))

		self.assertEqual(response.status_code, 200)
		results = response.json()["results"]
		self.assertEqual([row["invoice_number"] for row in results], ["001220"])
		self.assertEqual(len(results[0]["reservations"]), 1)

	def test_get_invoice_by_id(self):
		response = self.client.get(reverse("invoice_detail", kwargs={"invoice_id": self.invoice.id}))

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.json()["guest"]["full_name"], "Ada Lovelace")

	def test_missing_invoice_is_not_found(self):
		response = self.client.get(reverse("invoice_detail", kwargs={"invoice_id": 9999}))

		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.json()["error"], "NOT_FOUND")

	def test_update_status(self):
		self.make_reservation("300.00")
		recompute_invoice_totals(self.invoice.id)

		response = self.client.post(
			reverse("invoice_status", kwargs={"invoice_id": self.invoice.id}),
			{"status": PaymentStatus.PAID},
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.json()["status"], PaymentStatus.PAID)
		self.assertEqual(Decimal(response.json()["remaining_balance_usd"]), Decimal("0"))

	def test_update_status_rejects_unknown_status(self):
		response = self.client.post(
			reverse("invoice_status", kwargs={"invoice_id": self.invoice.id}),
			{"status": "REFUNDED"},
		)

		self.assertEqual(response.status_code, 400)
