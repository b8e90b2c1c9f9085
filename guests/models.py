from django.db import models


class Guest(models.Model):
    class GuestType(models.TextChoices):
        HOTEL = "HOTEL", "Hotel guest"
        OUTSIDE = "OUTSIDE", "Outside guest"
        STAFF = "STAFF", "Staff"

    first_name = models.CharField(max_length=100)
    surname = models.CharField(max_length=100, blank=True, default="")
    full_name = models.CharField(max_length=201, blank=True, default="")
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True, default="")
    guest_type = models.CharField(
        max_length=20, choices=GuestType.choices, default=GuestType.HOTEL
    )
    current_reservation = models.ForeignKey(
        "reservations.Reservation",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="current_guests",
    )
    credit_balance_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("surname", "first_name")

    def save(self, *args, **kwargs):
        self.full_name = f"{self.first_name} {self.surname}".strip()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and {"first_name", "surname"} & set(update_fields):
            kwargs["update_fields"] = {*update_fields, "full_name"}
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.full_name} <{self.email}>"
