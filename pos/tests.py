import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from guests.models import Guest
from hotelpos.exceptions import Conflict, NotFound, Unprocessable
from invoices.models import Invoice, PaymentStatus
from reservations.models import Reservation

from . import services
from .models import Item, ItemIngredient, ItemOrder, Order


class HappyHourTests(TestCase):
    def at(self, hour, minute=0):
        return timezone.make_aware(datetime.datetime(2024, 1, 1, hour, minute))

    def test_window_is_half_open(self):
        self.assertFalse(services.is_happy_hour(self.at(16, 59)))
        self.assertTrue(services.is_happy_hour(self.at(17, 0)))
        self.assertTrue(services.is_happy_hour(self.at(18, 59)))
        self.assertFalse(services.is_happy_hour(self.at(19, 0)))

    @override_settings(HAPPY_HOUR_START=datetime.time(12, 0), HAPPY_HOUR_END=datetime.time(13, 0))
    def test_window_comes_from_settings(self):
        self.assertTrue(services.is_happy_hour(self.at(12, 30)))
        self.assertFalse(services.is_happy_hour(self.at(17, 30)))

    def test_start_of_day(self):
        midnight = services.start_of_day(self.at(18, 45))

        self.assertEqual(midnight, self.at(0, 0))


class OrderTests(TestCase):
    def setUp(self):
        self.beer = Item.objects.create(
            name="Draft Beer",
            category=Item.Category.DRINK,
            price_usd=Decimal("5.00"),
            happy_hour_price_usd=Decimal("3.00"),
            stock_quantity=10,
        )
        self.fries = Item.objects.create(
            name="Fries",
            category=Item.Category.SNACK,
            price_usd=Decimal("4.00"),
        )
        self.guest = Guest.objects.create(first_name="Ada", surname="Lovelace", email="ada@example.com")
        self.invoice = Invoice.objects.create(invoice_number="001220", guest=self.guest)
        self.reservation = Reservation.objects.create(
            guest_name="Ada Lovelace",
            guest_email="ada@example.com",
            check_in=datetime.date(2024, 1, 1),
            check_out=datetime.date(2024, 1, 4),
            sub_total_usd=Decimal("300.00"),
            guest=self.guest,
            invoice=self.invoice,
        )

    def test_regular_prices(self):
        order = services.create_order(
            lines=[{"item_id": self.beer.id, "quantity": 2}, {"item_id": self.fries.id, "quantity": 1}],
            happy_hour=False,
        )

        self.assertEqual(order.sub_total_usd, Decimal("14.00"))
        self.assertFalse(order.happy_hour)
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(timezone.localtime(order.order_date).time(), datetime.time(0, 0))

    def test_happy_hour_prices_fall_back_to_regular(self):
        order = services.create_order(
            lines=[{"item_id": self.beer.id, "quantity": 2}, {"item_id": self.fries.id, "quantity": 1}],
            happy_hour=True,
        )

        self.assertEqual(order.sub_total_usd, Decimal("10.00"))
        beer_line = ItemOrder.objects.get(order=order, item=self.beer)
        self.assertEqual(beer_line.unit_price_usd, Decimal("3.00"))
        self.assertEqual(beer_line.sub_total_usd, Decimal("6.00"))

    def test_repeated_items_are_merged(self):
        order = services.create_order(
            lines=[{"item_id": self.beer.id, "quantity": 1}, {"item_id": self.beer.id, "quantity": 2}],
            happy_hour=False,
        )

        line = order.items.get()
        self.assertEqual(line.quantity, 3)
        self.assertEqual(order.sub_total_usd, Decimal("15.00"))

    def test_discount_never_goes_below_zero(self):
        discounted = services.create_order(
            lines=[{"item_id": self.fries.id, "quantity": 2}],
            happy_hour=False,
            discount_usd=Decimal("3.00"),
        )
        free = services.create_order(
            lines=[{"item_id": self.fries.id, "quantity": 1}],
            happy_hour=False,
            discount_usd=Decimal("10.00"),
        )

        self.assertEqual(discounted.sub_total_usd, Decimal("5.00"))
        self.assertEqual(free.sub_total_usd, Decimal("0.00"))

    def test_stock_is_decremented(self):
        services.create_order(lines=[{"item_id": self.beer.id, "quantity": 4}], happy_hour=False)

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock_quantity, 6)

    def test_insufficient_stock_creates_nothing(self):
        with self.assertRaises(Unprocessable):
            services.create_order(
                lines=[{"item_id": self.fries.id, "quantity": 1}, {"item_id": self.beer.id, "quantity": 11}],
                happy_hour=False,
            )

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock_quantity, 10)
        self.assertEqual(Order.objects.count(), 0)

    def test_inactive_item_is_unprocessable(self):
        self.fries.is_active = False
        self.fries.save()

        with self.assertRaises(Unprocessable):
            services.create_order(lines=[{"item_id": self.fries.id, "quantity": 1}], happy_hour=False)

    def test_unknown_item_is_not_found(self):
        with self.assertRaises(NotFound):
            services.create_order(lines=[{"item_id": 9999, "quantity": 1}], happy_hour=False)

    def test_order_needs_lines(self):
        with self.assertRaises(Unprocessable):
            services.create_order(lines=[])

    def test_room_charge_lands_on_guest_invoice(self):
        order = services.create_order(
            lines=[{"item_id": self.fries.id, "quantity": 2}],
            reservation_id=self.reservation.id,
            happy_hour=False,
        )

        self.assertEqual(order.guest, self.guest)
        self.assertEqual(order.invoice_id, self.invoice.id)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.total_usd, Decimal("308.00"))
        self.assertEqual(self.invoice.remaining_balance_usd, Decimal("308.00"))

    def test_paying_order_reduces_invoice_balance(self):
        order = services.create_order(
            lines=[{"item_id": self.fries.id, "quantity": 2}],
            reservation_id=self.reservation.id,
            happy_hour=False,
        )

        services.update_order_status(order.id, PaymentStatus.PAID)

        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.total_usd, Decimal("308.00"))
        self.assertEqual(self.invoice.remaining_balance_usd, Decimal("300.00"))

    def test_unknown_reservation_is_not_found(self):
        with self.assertRaises(NotFound):
            services.create_order(
                lines=[{"item_id": self.fries.id, "quantity": 1}],
                reservation_id=9999,
            )


class ItemTests(TestCase):
    def test_duplicate_name_is_a_conflict(self):
        services.create_item(name="Espresso", price_usd=Decimal("2.50"))

        with self.assertRaises(Conflict):
            services.create_item(name="Espresso", price_usd=Decimal("3.00"))

    def test_inactive_items_are_hidden_by_default(self):
        services.create_item(name="Espresso", price_usd=Decimal("2.50"))
        services.create_item(name="Mulled Wine", price_usd=Decimal("6.00"), is_active=False)

        self.assertEqual([item.name for item in services.get_items()], ["Espresso"])
        self.assertEqual(len(services.get_items(include_inactive=True)), 2)

    def test_ingredient_label(self):
        item = services.create_item(name="Mojito", price_usd=Decimal("8.00"))
        ingredient = ItemIngredient.objects.create(item=item, name="Rum", quantity=Decimal("0.050"), unit="l")

        self.assertEqual(str(ingredient), "Rum (0.050l)")


class PosEndpointTests(TestCase):
    def setUp(self):
        get_user_model().objects.create_user(
            username="bartender",
            email="bar@example.com",
            password="pass1234",
            is_staff=True,
        )
        self.client.login(username="bartender", password="pass1234")
        self.item = Item.objects.create(
            name="Draft Beer",
            category=Item.Category.DRINK,
            price_usd=Decimal("5.00"),
            happy_hour_price_usd=Decimal("3.00"),
        )

    def test_create_item(self):
        response = self.client.post(
            reverse("pos_item_create"),
            {"name": "Club Sandwich", "category": Item.Category.FOOD, "price_usd": "9.50"},
        )

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json()["is_active"])

    def test_create_item_with_duplicate_name(self):
        response = self.client.post(
            reverse("pos_item_create"),
            {"name": "Draft Beer", "category": Item.Category.DRINK, "price_usd": "6.00"},
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "CONFLICT")

    def test_update_item(self):
        response = self.client.post(
            reverse("pos_item_update", kwargs={"item_id": self.item.id}),
            {"name": "Draft Lager", "category": Item.Category.DRINK, "price_usd": "5.50", "stock_quantity": "24"},
        )

        self.assertEqual(response.status_code, 200)
        self.item.refresh_from_db()
        self.assertEqual(self.item.name, "Draft Lager")
        self.assertEqual(self.item.stock_quantity, 24)
        self.assertIsNone(self.item.happy_hour_price_usd)

    def test_rename_item_to_taken_name_is_a_conflict(self):
        other = Item.objects.create(name="Cider", category=Item.Category.DRINK, price_usd=Decimal("6.00"))

        response = self.client.post(
            reverse("pos_item_update", kwargs={"item_id": other.id}),
            {"name": "Draft Beer", "category": Item.Category.DRINK, "price_usd": "6.00"},
        )

        self.assertEqual(response.status_code, 409)
        other.refresh_from_db()
        self.assertEqual(other.name, "Cider")

    def test_happy_hour_price_cannot_exceed_price(self):
        response = self.client.post(
            reverse("pos_item_create"),
            {
                "name": "House Wine",
                "category": Item.Category.DRINK,
                "price_usd": "6.00",
                "happy_hour_price_usd": "7.00",
            },
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("happy_hour_price_usd", response.json()["errors"])

    def test_create_order(self):
        response = self.client.post(
            reverse("pos_order_create"),
            {
                "happy_hour": "true",
                "items-TOTAL_FORMS": "1",
                "items-INITIAL_FORMS": "0",
                "items-0-item_id": str(self.item.id),
                "items-0-quantity": "3",
            },
        )

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertTrue(data["happy_hour"])
        self.assertEqual(Decimal(data["sub_total_usd"]), Decimal("9"))
        self.assertEqual(data["items"][0]["item_name"], "Draft Beer")

    def test_create_order_without_lines(self):
        response = self.client.post(
            reverse("pos_order_create"),
            {"items-TOTAL_FORMS": "0", "items-INITIAL_FORMS": "0"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("items", response.json()["errors"])

    def test_pay_order(self):
        order = services.create_order(lines=[{"item_id": self.item.id, "quantity": 1}], happy_hour=False)

        response = self.client.post(
            reverse("pos_order_status", kwargs={"order_id": order.id}),
            {"status": PaymentStatus.PAID},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], PaymentStatus.PAID)
        self.assertEqual(self.client.get(reverse("pos_order_list")).json()["results"], [])

    def test_missing_order(self):
        response = self.client.get(reverse("pos_order_detail", kwargs={"order_id": 9999}))

        self.assertEqual(response.status_code, 404)
