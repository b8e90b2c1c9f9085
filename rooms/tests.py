from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from hotelpos.exceptions import NotFound

from . import services
from .models import Room, RoomType, RoomVariant


class RoomServiceTests(TestCase):
	def setUp(self):
		self.room = Room.objects.create(
			number="101",
			room_type=RoomType.DELUXE,
			variant=RoomVariant.DOUBLE,
			daily_rate_usd=Decimal("120.00"),
		)
		Room.objects.create(number="102", status=Room.Status.OCCUPIED)

	def test_rooms_start_vacant(self):
		self.assertEqual(self.room.status, Room.Status.VACANT)

	def test_filter_by_status(self):
		self.assertEqual(list(services.get_all(status=Room.Status.VACANT)), [self.room])
		self.assertEqual(services.get_all().count(), 2)

	def test_set_status(self):
		services.set_status(self.room.id, Room.Status.MAINTENANCE)

		self.room.refresh_from_db()
		self.assertEqual(self.room.status, Room.Status.MAINTENANCE)

	def test_set_status_on_missing_room(self):
		with self.assertRaises(NotFound):
			services.set_status(9999, Room.Status.VACANT)


class RoomEndpointTests(TestCase):
	def setUp(self):
		get_user_model().objects.create_user(
			username="housekeeping",
			email="housekeeping@example.com",
			password="pass1234",
			is_staff=True,
		)
		self.client.login(username="housekeeping", password="pass1234")
		self.room = Room.objects.create(number="101", daily_rate_usd=Decimal("120.00"))

	def test_create_room(self):
		response = self.client.post(
			reverse("room_create"),
			{
				"number": " 2a ",
				"room_type": RoomType.SUITE,
				"variant": RoomVariant.TWIN,
				"status": Room.Status.VACANT,
				"capacity": "3",
				"daily_rate_usd": "250.00",
			},
		)

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.json()["number"], "2A")

	def test_create_room_with_taken_number(self):
		response = self.client.post(
			reverse("room_create"),
			{
				"number": "101",
				"room_type": RoomType.STANDARD,
				"variant": RoomVariant.DOUBLE,
				"status": Room.Status.VACANT,
				"capacity": "2",
				"daily_rate_usd": "90.00",
			},
		)

		self.assertEqual(response.status_code, 400)
		self.assertIn("number", response.json()["errors"])

	def test_list_rooms_by_status(self):
		Room.objects.create(number="102", status=Room.Status.OCCUPIED)

		response = self.client.get(reverse("room_list"), {"status": "occupied"})

		self.assertEqual([room["number"] for room in response.json()["results"]], ["102"])

	def test_update_status(self):
		response = self.client.post(
			reverse("room_status", kwargs={"room_id": self.room.id}),
			{"status": Room.Status.MAINTENANCE},
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.json()["status"], Room.Status.MAINTENANCE)

	def test_missing_room_is_json_not_found(self):
		response = self.client.get(reverse("room_detail", kwargs={"room_id": 9999}))

		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.json()["error"], "NOT_FOUND")
