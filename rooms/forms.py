from django import forms

from .models import Room


class RoomForm(forms.ModelForm):
    class Meta:
        model = Room
        fields = [
            "number",
            "room_type",
            "variant",
            "status",
            "capacity",
            "daily_rate_usd",
        ]

    def clean_number(self):
        return self.cleaned_data["number"].strip().upper()


class RoomStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Room.Status.choices)
