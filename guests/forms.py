from django import forms

from .models import Guest


class GuestForm(forms.Form):
    first_name = forms.CharField(max_length=100)
    surname = forms.CharField(max_length=100, required=False)
    email = forms.EmailField()
    phone = forms.CharField(max_length=30, required=False)
    guest_type = forms.ChoiceField(choices=Guest.GuestType.choices)
    credit_balance_usd = forms.DecimalField(max_digits=10, decimal_places=2)

    def clean_email(self):
        return self.cleaned_data["email"].strip().lower()

    def clean_phone(self):
        return self.cleaned_data["phone"].strip()
