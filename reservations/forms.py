from django import forms
from django.core.exceptions import ValidationError

from .models import Reservation


class StayDatesForm(forms.Form):
    check_in = forms.DateField()
    check_out = forms.DateField()

    def clean(self):
        cleaned_data = super().clean()
        check_in = cleaned_data.get("check_in")
        check_out = cleaned_data.get("check_out")

        if check_in and check_out and check_out <= check_in:
            raise ValidationError("Check-out date must be after check-in date.")

        return cleaned_data


class ReservationCreateForm(StayDatesForm):
    reservation_item_id = forms.IntegerField(min_value=1)
    guest_name = forms.CharField(max_length=201)
    guest_email = forms.EmailField()
    guest_id = forms.IntegerField(min_value=1, required=False)

    def clean_guest_name(self):
        return self.cleaned_data["guest_name"].strip()

    def clean_guest_email(self):
        return self.cleaned_data["guest_email"].strip().lower()


class CheckInForm(forms.Form):
    room_id = forms.IntegerField(min_value=1)
    first_name = forms.CharField(max_length=100)
    surname = forms.CharField(max_length=100)
    guest_email = forms.EmailField()

    def clean_guest_email(self):
        return self.cleaned_data["guest_email"].strip().lower()


class AdminReservationForm(forms.ModelForm):
    class Meta:
        model = Reservation
        fields = [
            "guest_name",
            "guest_email",
            "check_in",
            "check_out",
            "status",
            "payment_status",
            "sub_total_usd",
            "room",
            "guest",
            "reservation_item",
            "invoice",
        ]

    def clean(self):
        cleaned_data = super().clean()
        check_in = cleaned_data.get("check_in")
        check_out = cleaned_data.get("check_out")

        if check_in and check_out and check_out <= check_in:
            raise ValidationError("Check-out date must be after check-in date.")

        return cleaned_data
