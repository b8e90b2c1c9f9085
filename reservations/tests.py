import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from guests.models import Guest
from hotelpos.exceptions import NotFound, Unprocessable
from invoices.models import Invoice, PaymentStatus
from pos.models import Order
from rooms.models import Room

from . import services
from .models import Reservation, ReservationItem
from .pricing import duration_of_stay, rate_total


class StayPricingTests(TestCase):
	def setUp(self):
		self.reservation_item = ReservationItem.objects.create(
			description="Deluxe Double",
			daily_rate_usd=Decimal("100.00"),
		)

	def test_duration_counts_nights(self):
		self.assertEqual(duration_of_stay(datetime.date(2024, 1, 1), datetime.date(2024, 1, 4)), 3)
		self.assertEqual(duration_of_stay(datetime.date(2024, 1, 31), datetime.date(2024, 2, 1)), 1)

	def test_rate_total_multiplies_daily_rate(self):
		total = rate_total(3, self.reservation_item)

		self.assertEqual(total.value, Decimal("300.00"))
		self.assertEqual(total.description, "Deluxe Double x 3 nights")

	def test_rate_total_single_night(self):
		self.assertEqual(rate_total(1, self.reservation_item).description, "Deluxe Double x 1 night")


class ReservationFixturesMixin:
	def setUp(self):
		self.reservation_item = ReservationItem.objects.create(
			description="Deluxe Double",
			daily_rate_usd=Decimal("100.00"),
		)
		self.room = Room.objects.create(number="101", daily_rate_usd=Decimal("120.00"))

	def make_reservation(self, **overrides):
		fields = {
			"reservation_item_id": self.reservation_item.id,
			"check_in": datetime.date(2024, 1, 1),
			"check_out": datetime.date(2024, 1, 4),
			"guest_name": "Ada Lovelace",
			"guest_email": "ada@example.com",
		}
		fields.update(overrides)
		return services.create_reservation(**fields)

	def check_in(self, reservation, **overrides):
		fields = {
			"room_id": self.room.id,
			"first_name": "Ada",
			"surname": "Lovelace",
			"guest_email": "ada@example.com",
		}
		fields.update(overrides)
		return services.check_in(reservation.id, **fields)


class ReservationLifecycleTests(ReservationFixturesMixin, TestCase):
	def test_create_reservation_prices_the_stay(self):
		reservation = self.make_reservation()

		reservation.refresh_from_db()
		self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)
		self.assertEqual(reservation.payment_status, PaymentStatus.UNPAID)
		self.assertEqual(reservation.sub_total_usd, Decimal("300.00"))
		self.assertIsNone(reservation.invoice_id)

	def test_create_reservation_with_unknown_item(self):
		with self.assertRaises(NotFound):
			self.make_reservation(reservation_item_id=9999)

		self.assertEqual(Reservation.objects.count(), 0)

	def test_check_in_occupies_room_and_opens_one_invoice(self):
		reservation = self.make_reservation()

		reservation = self.check_in(reservation)

		self.assertEqual(reservation.status, Reservation.Status.CHECKED_IN)
		self.room.refresh_from_db()
		self.assertEqual(self.room.status, Room.Status.OCCUPIED)
		self.assertEqual(Invoice.objects.count(), 1)

		invoice = Invoice.objects.get()
		self.assertEqual(reservation.invoice, invoice)
		self.assertEqual(invoice.invoice_number, "002000")
		self.assertEqual(invoice.customer_name, "Ada Lovelace")
		self.assertEqual(invoice.total_usd, Decimal("300.00"))
		self.assertEqual(invoice.remaining_balance_usd, Decimal("300.00"))

		guest = Guest.objects.get(email="ada@example.com")
		self.assertEqual(reservation.guest, guest)
		self.assertEqual(invoice.guest, guest)
		self.assertEqual(guest.current_reservation, reservation)

	def test_check_in_continues_existing_invoice_sequence(self):
		Invoice.objects.create(invoice_number="001230")
		reservation = self.make_reservation()

		reservation = self.check_in(reservation)

		self.assertEqual(reservation.invoice.invoice_number, "001231")

	def test_check_in_reuses_guest_with_same_email(self):
		guest = Guest.objects.create(first_name="Ada", surname="Lovelace", email="ada@example.com")
		reservation = self.make_reservation()

		reservation = self.check_in(reservation, guest_email="ADA@example.com")

		self.assertEqual(reservation.guest, guest)
		self.assertEqual(Guest.objects.count(), 1)

	def test_check_in_keeps_existing_invoice(self):
		invoice = Invoice.objects.create(invoice_number="001220")
		reservation = self.make_reservation()
		Reservation.objects.filter(id=reservation.id).update(invoice=invoice)

		reservation = self.check_in(reservation)

		self.assertEqual(reservation.invoice, invoice)
		self.assertEqual(Invoice.objects.count(), 1)

	def test_check_in_requires_confirmed_reservation(self):
		reservation = self.make_reservation()
		Reservation.objects.filter(id=reservation.id).update(status=Reservation.Status.CANCELLED)

		with self.assertRaises(Unprocessable):
			self.check_in(reservation)

		self.assertEqual(Invoice.objects.count(), 0)

	def test_check_in_requires_vacant_room(self):
		self.room.status = Room.Status.MAINTENANCE
		self.room.save()
		reservation = self.make_reservation()

		with self.assertRaises(Unprocessable):
			self.check_in(reservation)

		reservation.refresh_from_db()
		self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)

	def test_check_in_with_unknown_room(self):
		reservation = self.make_reservation()

		with self.assertRaises(NotFound):
			self.check_in(reservation, room_id=9999)

	def test_failed_check_in_rolls_back_everything(self):
		reservation = services.create_reservation_record(
			guest_name="Ada Lovelace",
			guest_email="ada@example.com",
			check_in=datetime.date(2024, 1, 1),
			check_out=datetime.date(2024, 1, 4),
			sub_total_usd=Decimal("300.00"),
		)

		with self.assertRaises(Unprocessable):
			self.check_in(reservation)

		reservation.refresh_from_db()
		self.room.refresh_from_db()
		self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)
		self.assertEqual(self.room.status, Room.Status.VACANT)
		self.assertEqual(Invoice.objects.count(), 0)
		self.assertEqual(Guest.objects.count(), 0)

	def test_calculate_sub_total_uses_room_rate(self):
		reservation = self.check_in(self.make_reservation())

		reservation = services.calculate_sub_total(
			reservation.id,
			check_in=datetime.date(2024, 1, 1),
			check_out=datetime.date(2024, 1, 3),
		)

		self.assertEqual(reservation.status, Reservation.Status.FINAL_BILL)
		self.assertEqual(reservation.sub_total_usd, Decimal("240.00"))
		invoice = Invoice.objects.get()
		self.assertEqual(invoice.total_usd, Decimal("240.00"))
		self.assertEqual(invoice.remaining_balance_usd, Decimal("240.00"))

	def test_calculate_sub_total_for_unknown_reservation(self):
		with self.assertRaises(NotFound):
			services.calculate_sub_total(
				9999,
				check_in=datetime.date(2024, 1, 1),
				check_out=datetime.date(2024, 1, 3),
			)

	def test_calculate_sub_total_requires_checked_in_reservation(self):
		reservation = self.make_reservation()

		with self.assertRaises(Unprocessable):
			services.calculate_sub_total(
				reservation.id,
				check_in=datetime.date(2024, 1, 1),
				check_out=datetime.date(2024, 1, 3),
			)

		reservation.refresh_from_db()
		self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)
		self.assertEqual(reservation.sub_total_usd, Decimal("300.00"))

	def test_cancelled_reservation_cannot_reclaim_its_room(self):
		cancelled = self.check_in(self.make_reservation())
		services.cancel_reservation(cancelled.id)
		current = self.check_in(
			self.make_reservation(guest_name="Grace Hopper", guest_email="grace@example.com"),
			first_name="Grace",
			surname="Hopper",
			guest_email="grace@example.com",
		)

		with self.assertRaises(Unprocessable):
			services.calculate_sub_total(
				cancelled.id,
				check_in=datetime.date(2024, 1, 1),
				check_out=datetime.date(2024, 1, 3),
			)
		with self.assertRaises(Unprocessable):
			services.check_out(cancelled.id)

		cancelled.refresh_from_db()
		current.refresh_from_db()
		self.room.refresh_from_db()
		self.assertEqual(cancelled.status, Reservation.Status.CANCELLED)
		self.assertEqual(current.status, Reservation.Status.CHECKED_IN)
		self.assertEqual(self.room.status, Room.Status.OCCUPIED)

	def test_checked_out_reservation_cannot_be_billed_again(self):
		reservation = self.check_in(self.make_reservation())
		services.check_out(reservation.id)

		with self.assertRaises(Unprocessable):
			services.calculate_sub_total(
				reservation.id,
				check_in=datetime.date(2024, 1, 1),
				check_out=datetime.date(2024, 1, 3),
			)

		reservation.refresh_from_db()
		self.assertEqual(reservation.status, Reservation.Status.CHECKED_OUT)

	def test_guest_still_checked_in_elsewhere_cannot_check_in_again(self):
		first = self.check_in(self.make_reservation())
		second_room = Room.objects.create(number="102", daily_rate_usd=Decimal("90.00"))
		second = self.make_reservation()

		with self.assertRaises(Unprocessable):
			self.check_in(second, room_id=second_room.id)

		second_room.refresh_from_db()
		second.refresh_from_db()
		guest = Guest.objects.get(email="ada@example.com")
		self.assertEqual(second_room.status, Room.Status.VACANT)
		self.assertEqual(second.status, Reservation.Status.CONFIRMED)
		self.assertEqual(guest.current_reservation, first)
		self.assertEqual(Invoice.objects.count(), 1)

	def test_guest_can_check_in_again_after_checking_out(self):
		first = self.check_in(self.make_reservation())
		services.check_out(first.id)

		second = self.check_in(self.make_reservation())

		guest = Guest.objects.get(email="ada@example.com")
		self.assertEqual(second.status, Reservation.Status.CHECKED_IN)
		self.assertEqual(guest.current_reservation, second)

	def test_check_out_frees_room_and_guest(self):
		reservation = self.check_in(self.make_reservation())

		reservation = services.check_out(reservation.id)

		self.assertEqual(reservation.status, Reservation.Status.CHECKED_OUT)
		self.room.refresh_from_db()
		self.assertEqual(self.room.status, Room.Status.VACANT)
		guest = Guest.objects.get(email="ada@example.com")
		self.assertIsNone(guest.current_reservation)

	def test_check_out_after_final_bill(self):
		reservation = self.check_in(self.make_reservation())
		services.calculate_sub_total(
			reservation.id,
			check_in=datetime.date(2024, 1, 1),
			check_out=datetime.date(2024, 1, 3),
		)

		reservation = services.check_out(reservation.id)

		self.assertEqual(reservation.status, Reservation.Status.CHECKED_OUT)

	def test_check_out_requires_checked_in_reservation(self):
		reservation = self.make_reservation()

		with self.assertRaises(Unprocessable):
			services.check_out(reservation.id)

	def test_cancel_checked_in_reservation_zeroes_its_invoice(self):
		reservation = self.check_in(self.make_reservation())

		reservation = services.cancel_reservation(reservation.id)

		self.assertEqual(reservation.status, Reservation.Status.CANCELLED)
		self.assertEqual(reservation.payment_status, PaymentStatus.CANCELLED)
		self.room.refresh_from_db()
		self.assertEqual(self.room.status, Room.Status.VACANT)
		invoice = Invoice.objects.get()
		self.assertEqual(invoice.total_usd, Decimal("0.00"))
		self.assertEqual(invoice.remaining_balance_usd, Decimal("0.00"))

	def test_cancel_checked_out_reservation_is_rejected(self):
		reservation = self.check_in(self.make_reservation())
		services.check_out(reservation.id)

		with self.assertRaises(Unprocessable):
			services.cancel_reservation(reservation.id)

	def test_active_reservations(self):
		confirmed = self.make_reservation()
		checked_out = self.check_in(self.make_reservation(guest_email="grace@example.com"))
		services.check_out(checked_out.id)

		self.assertEqual(list(services.get_active_reservations()), [confirmed])

	def test_room_reservations_only_lists_upcoming_stays(self):
		today = timezone.localdate()
		upcoming = self.make_reservation(
			check_in=today + datetime.timedelta(days=5),
			check_out=today + datetime.timedelta(days=7),
		)
		past = self.make_reservation(
			check_in=today - datetime.timedelta(days=5),
			check_out=today - datetime.timedelta(days=3),
		)
		Reservation.objects.filter(id__in=[upcoming.id, past.id]).update(room=self.room)

		self.assertEqual(list(services.get_room_reservations(self.room.id)), [upcoming])

	def test_aggregate_order_total_skips_cancelled_orders(self):
		reservation = self.make_reservation()
		Order.objects.create(reservation=reservation, sub_total_usd=Decimal("12.50"))
		Order.objects.create(
			reservation=reservation,
			sub_total_usd=Decimal("7.50"),
			status=PaymentStatus.PAID,
		)
		Order.objects.create(
			reservation=reservation,
			sub_total_usd=Decimal("30.00"),
			status=PaymentStatus.CANCELLED,
		)

		self.assertEqual(services.aggregate_order_total(reservation.id), Decimal("20.00"))

	def test_aggregate_order_total_without_orders(self):
		reservation = self.make_reservation()

		self.assertEqual(services.aggregate_order_total(reservation.id), Decimal("0.00"))

		with self.assertRaises(NotFound):
			services.aggregate_order_total(9999)


class ReservationEndpointTests(ReservationFixturesMixin, TestCase):
	def setUp(self):
		super().setUp()
		get_user_model().objects.create_user(
			username="frontdesk",
			email="frontdesk@example.com",
			password="pass1234",
			is_staff=True,
		)
		self.client.login(username="frontdesk", password="pass1234")

	def test_create_reservation(self):
		response = self.client.post(
			reverse("reservation_create"),
			{
				"reservation_item_id": self.reservation_item.id,
				"check_in": "2024-01-01",
				"check_out": "2024-01-04",
				"guest_name": "Ada Lovelace",
				"guest_email": "ada@example.com",
			},
		)

		self.assertEqual(response.status_code, 201)
		data = response.json()
		self.assertEqual(data["status"], Reservation.Status.CONFIRMED)
		self.assertEqual(Decimal(data["sub_total_usd"]), Decimal("300"))
		self.assertEqual(data["reservation_item"]["description"], "Deluxe Double")

	def test_create_reservation_with_unknown_item(self):
		response = self.client.post(
			reverse("reservation_create"),
			{
				"reservation_item_id": 9999,
				"check_in": "2024-01-01",
				"check_out": "2024-01-04",
				"guest_name": "Ada Lovelace",
				"guest_email": "ada@example.com",
			},
		)

		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.json()["error"], "NOT_FOUND")

	def test_create_reservation_rejects_reversed_dates(self):
		response = self.client.post(
			reverse("reservation_create"),
			{
				"reservation_item_id": self.reservation_item.id,
				"check_in": "2024-01-04",
				"check_out": "2024-01-01",
				"guest_name": "Ada Lovelace",
				"guest_email": "ada@example.com",
			},
		)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.json()["error"], "BAD_REQUEST")

	def test_check_in_and_out(self):
		reservation = self.make_reservation()

		response = self.client.post(
			reverse("reservation_check_in", kwargs={"reservation_id": reservation.id}),
			{
				"room_id": self.room.id,
				"first_name": "Ada",
				"surname": "Lovelace",
				"guest_email": "ada@example.com",
			},
		)

		self.assertEqual(response.status_code, 200)
		data = response.json()
		self.assertEqual(data["status"], Reservation.Status.CHECKED_IN)
		self.assertEqual(data["room"]["status"], Room.Status.OCCUPIED)
		self.assertEqual(data["invoice"]["invoice_number"], "002000")

		response = self.client.post(
			reverse("reservation_check_out", kwargs={"reservation_id": reservation.id})
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.json()["status"], Reservation.Status.CHECKED_OUT)

	def test_check_in_twice_is_unprocessable(self):
		reservation = self.check_in(self.make_reservation())
		self.room.refresh_from_db()

		response = self.client.post(
			reverse("reservation_check_in", kwargs={"reservation_id": reservation.id}),
			{
				"room_id": self.room.id,
				"first_name": "Ada",
				"surname": "Lovelace",
				"guest_email": "ada@example.com",
			},
		)

		self.assertEqual(response.status_code, 422)
		self.assertEqual(response.json()["error"], "UNPROCESSABLE")

	def test_calculate_sub_total_on_cancelled_reservation_is_unprocessable(self):
		reservation = self.make_reservation()
		services.cancel_reservation(reservation.id)

		response = self.client.post(
			reverse("reservation_calculate_sub_total", kwargs={"reservation_id": reservation.id}),
			{"check_in": "2024-01-01", "check_out": "2024-01-03"},
		)

		self.assertEqual(response.status_code, 422)
		self.assertEqual(response.json()["error"], "UNPROCESSABLE")

	def test_check_in_requires_room(self):
		reservation = self.make_reservation()

		response = self.client.post(
			reverse("reservation_check_in", kwargs={"reservation_id": reservation.id}),
			{"first_name": "Ada", "surname": "Lovelace", "guest_email": "ada@example.com"},
		)

		self.assertEqual(response.status_code, 400)
		self.assertIn("room_id", response.json()["errors"])

	def test_reservation_detail(self):
		reservation = self.check_in(self.make_reservation())
		Order.objects.create(
			reservation=reservation,
			guest=reservation.guest,
			sub_total_usd=Decimal("8.00"),
		)

		response = self.client.get(
			reverse("reservation_detail", kwargs={"reservation_id": reservation.id})
		)

		self.assertEqual(response.status_code, 200)
		data = response.json()
		self.assertEqual(len(data["orders"]), 1)
		self.assertEqual(data["guest"]["email"], "ada@example.com")
		self.assertEqual(len(data["guest"]["invoices"]), 1)

	def test_order_total(self):
		reservation = self.make_reservation()
		Order.objects.create(reservation=reservation, sub_total_usd=Decimal("12.50"))

		response = self.client.get(
			reverse("reservation_order_total", kwargs={"reservation_id": reservation.id})
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(Decimal(response.json()["order_total_usd"]), Decimal("12.50"))

	def test_anonymous_requests_are_unauthorized(self):
		self.client.logout()

		response = self.client.get(reverse("reservation_list"))

		self.assertEqual(response.status_code, 401)
		self.assertEqual(response.json()["error"], "UNAUTHORIZED")
