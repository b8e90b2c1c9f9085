from django.db import models

from guests.models import Guest


class PaymentStatus(models.TextChoices):
	UNPAID = "UNPAID", "Unpaid"
	PAID = "PAID", "Paid"
	CANCELLED = "CANCELLED", "Cancelled"


class Invoice(models.Model):
	invoice_number = models.CharField(max_length=12, unique=True)
	customer_name = models.CharField(max_length=201, blank=True, default="")
	customer_email = models.EmailField(blank=True, default="")
	guest = models.ForeignKey(
		Guest,
		on_delete=models.PROTECT,
		null=True,
		blank=True,
		related_name="invoices",
	)
	total_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	remaining_balance_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	status = models.CharField(
		max_length=20,
		choices=PaymentStatus.choices,
		default=PaymentStatus.UNPAID,
	)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ("-created_at",)

	def __str__(self) -> str:
		return f"Invoice {self.invoice_number}"


class InvoiceItem(models.Model):
	invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name="line_items")
	description = models.CharField(max_length=255)
	quantity = models.PositiveIntegerField(default=1)
	unit_price_usd = models.DecimalField(max_digits=10, decimal_places=2)
	sub_total_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)

	def save(self, *args, **kwargs):
		self.sub_total_usd = self.unit_price_usd * self.quantity
		super().save(*args, **kwargs)

	def __str__(self) -> str:
		return f"{self.quantity} x {self.description}"


class InvoiceNumberSequence(models.Model):
	class Name(models.TextChoices):
		NORMAL = "NORMAL", "Normal"
		CANCELLED = "CANCELLED", "Cancelled"

	name = models.CharField(max_length=20, choices=Name.choices, unique=True)
	last_value = models.PositiveIntegerField()
	updated_at = models.DateTimeField(auto_now=True)

	def __str__(self) -> str:
		return f"{self.name}: {self.last_value}"
