from decimal import Decimal

from django import forms

from reservations.forms import StayDatesForm
from reservations.models import Reservation, ReservationItem

from .models import PaymentStatus


class InvoiceCreateForm(forms.Form):
    guest_id = forms.IntegerField(min_value=1, required=False)
    first_name = forms.CharField(max_length=100)
    surname = forms.CharField(max_length=100)
    email = forms.EmailField()

    def clean_email(self):
        return self.cleaned_data["email"].strip().lower()


class InvoiceReservationForm(StayDatesForm):
    reservation_item = forms.ModelChoiceField(queryset=ReservationItem.objects.all())
    sub_total_usd = forms.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0.01"),
        required=False,
    )
    status = forms.ChoiceField(choices=Reservation.Status.choices, required=False)


InvoiceReservationFormSet = forms.formset_factory(InvoiceReservationForm, extra=0)


class InvoiceStatusForm(forms.Form):
    status = forms.ChoiceField(choices=PaymentStatus.choices)
