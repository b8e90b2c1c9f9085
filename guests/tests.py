from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from hotelpos.exceptions import Conflict, NotFound

from . import services
from .models import Guest


class GuestServiceTests(TestCase):
    def setUp(self):
        self.guest = services.create_guest(
            first_name=" Ada ",
            surname="Lovelace",
            email="Ada@Example.com",
        )

    def test_create_guest_normalises_fields(self):
        self.assertEqual(self.guest.first_name, "Ada")
        self.assertEqual(self.guest.full_name, "Ada Lovelace")
        self.assertEqual(self.guest.email, "ada@example.com")

    def test_duplicate_email_is_a_conflict(self):
        with self.assertRaises(Conflict) as caught:
            services.create_guest(first_name="Other", email="ADA@example.com")

        self.assertEqual(caught.exception.message, services.DUPLICATE_EMAIL_MESSAGE)
        self.assertEqual(Guest.objects.count(), 1)

    def test_find_by_email_ignores_case(self):
        self.assertEqual(services.find_by_email("ADA@EXAMPLE.COM"), self.guest)
        self.assertIsNone(services.find_by_email("nobody@example.com"))

    def test_update_guest_refreshes_full_name(self):
        guest = services.update_guest(self.guest.id, surname="King")

        guest.refresh_from_db()
        self.assertEqual(guest.full_name, "Ada King")

    def test_full_name_follows_partial_saves(self):
        self.guest.first_name = "Augusta"
        self.guest.save(update_fields=["first_name"])

        self.guest.refresh_from_db()
        self.assertEqual(self.guest.full_name, "Augusta Lovelace")

    def test_update_guest_rejects_taken_email(self):
        other = services.create_guest(first_name="Grace", surname="Hopper", email="grace@example.com")

        with self.assertRaises(Conflict):
            services.update_guest(other.id, email="ada@example.com")

    def test_missing_guest(self):
        with self.assertRaises(NotFound):
            services.get_by_id(9999)


class GuestEndpointTests(TestCase):
    def setUp(self):
        get_user_model().objects.create_user(
            username="frontdesk",
            email="frontdesk@example.com",
            password="pass1234",
            is_staff=True,
        )
        self.client.login(username="frontdesk", password="pass1234")

    def guest_payload(self, **overrides):
        payload = {
            "first_name": "Ada",
            "surname": "Lovelace",
            "email": "ada@example.com",
            "phone": "",
            "guest_type": Guest.GuestType.HOTEL,
            "credit_balance_usd": "0",
        }
        payload.update(overrides)
        return payload

    def test_create_guest(self):
        response = self.client.post(reverse("guest_create"), self.guest_payload())

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["full_name"], "Ada Lovelace")

    def test_create_guest_with_duplicate_email(self):
        self.client.post(reverse("guest_create"), self.guest_payload())

        response = self.client.post(
            reverse("guest_create"),
            self.guest_payload(first_name="Someone", email="ADA@example.com"),
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "CONFLICT")
        self.assertEqual(Guest.objects.count(), 1)

    def test_update_guest(self):
        guest = services.create_guest(first_name="Ada", surname="Lovelace", email="ada@example.com")

        response = self.client.post(
            reverse("guest_update", kwargs={"guest_id": guest.id}),
            self.guest_payload(phone=" 555-0100 "),
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["phone"], "555-0100")

    def test_list_guests(self):
        services.create_guest(first_name="Ada", surname="Lovelace", email="ada@example.com")

        response = self.client.get(reverse("guest_list"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["results"]), 1)

    def test_update_guest_to_taken_email_is_a_conflict(self):
        services.create_guest(first_name="Ada", surname="Lovelace", email="ada@example.com")
        other = services.create_guest(first_name="Grace", surname="Hopper", email="grace@example.com")

        response = self.client.post(
            reverse("guest_update", kwargs={"guest_id": other.id}),
            self.guest_payload(first_name="Grace", surname="Hopper", email="ADA@example.com"),
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "CONFLICT")
        other.refresh_from_db()
        self.assertEqual(other.email, "grace@example.com")

    def test_update_missing_guest_is_not_found(self):
        response = self.client.post(
            reverse("guest_update", kwargs={"guest_id": 9999}),
            self.guest_payload(),
        )

        self.assertEqual(response.status_code, 404)
