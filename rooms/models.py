from django.db import models


class RoomType(models.TextChoices):
	STANDARD = "STANDARD", "Standard"
	DELUXE = "DELUXE", "Deluxe"
	SUITE = "SUITE", "Suite"
	FAMILY = "FAMILY", "Family"


class RoomVariant(models.TextChoices):
	SINGLE = "SINGLE", "Single"
	DOUBLE = "DOUBLE", "Double"
	TWIN = "TWIN", "Twin"
	TRIPLE = "TRIPLE", "Triple"


class Room(models.Model):
	class Status(models.TextChoices):
		VACANT = "VACANT", "Vacant"
		OCCUPIED = "OCCUPIED", "Occupied"
		MAINTENANCE = "MAINTENANCE", "Maintenance"

	number = models.CharField(max_length=10, unique=True)
	room_type = models.CharField(max_length=20, choices=RoomType.choices, default=RoomType.STANDARD)
	variant = models.CharField(max_length=20, choices=RoomVariant.choices, default=RoomVariant.DOUBLE)
	status = models.CharField(max_length=20, choices=Status.choices, default=Status.VACANT)
	capacity = models.PositiveIntegerField(default=2)
	daily_rate_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ("number",)

	def __str__(self) -> str:
		return f"Room {self.number} ({self.get_room_type_display()} {self.get_variant_display()})"
