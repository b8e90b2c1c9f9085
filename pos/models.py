from django.db import models

from guests.models import Guest
from invoices.models import Invoice, PaymentStatus
from reservations.models import Reservation


class Item(models.Model):
    class Category(models.TextChoices):
        FOOD = "FOOD", "Food"
        DRINK = "DRINK", "Drink"
        SNACK = "SNACK", "Snack"
        OTHER = "OTHER", "Other"

    name = models.CharField(max_length=150, unique=True)
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.OTHER)
    price_usd = models.DecimalField(max_digits=10, decimal_places=2)
    happy_hour_price_usd = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    # None means stock is not tracked for the item.
    stock_quantity = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("category", "name")

    def __str__(self) -> str:
        return self.name

    def unit_price(self, *, happy_hour: bool):
        if happy_hour and self.happy_hour_price_usd is not None:
            return self.happy_hour_price_usd
        return self.price_usd


class ItemIngredient(models.Model):
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name="ingredients")
    name = models.CharField(max_length=150)
    quantity = models.DecimalField(max_digits=8, decimal_places=3)
    unit = models.CharField(max_length=20, blank=True, default="")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["item", "name"], name="unique_ingredient_per_item")
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.quantity}{self.unit})"


class Order(models.Model):
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
    )
    happy_hour = models.BooleanField(default=False)
    discount_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    sub_total_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    # Start of the local day the order was placed; used to group sales reports.
    order_date = models.DateTimeField(null=True, blank=True)
    reservation = models.ForeignKey(
        Reservation,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    guest = models.ForeignKey(
        Guest,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"Order #{self.id} ({self.status})"


class ItemOrder(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name="order_lines")
    quantity = models.PositiveIntegerField(default=1)
    unit_price_usd = models.DecimalField(max_digits=10, decimal_places=2)
    sub_total_usd = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        verbose_name = "order line"

    def __str__(self) -> str:
        return f"{self.quantity} x {self.item}"
