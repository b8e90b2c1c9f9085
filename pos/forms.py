from decimal import Decimal

from django import forms

from invoices.models import PaymentStatus

from .models import Item


class ItemForm(forms.Form):
    name = forms.CharField(max_length=150)
    category = forms.ChoiceField(choices=Item.Category.choices)
    price_usd = forms.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    happy_hour_price_usd = forms.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
    )
    stock_quantity = forms.IntegerField(min_value=0, required=False)

    def clean_name(self):
        return self.cleaned_data["name"].strip()

    def clean(self):
        cleaned_data = super().clean()
        price = cleaned_data.get("price_usd")
        happy_hour_price = cleaned_data.get("happy_hour_price_usd")

        if price is not None and happy_hour_price is not None and happy_hour_price > price:
            self.add_error("happy_hour_price_usd", "Happy hour price can't exceed the regular price.")

        return cleaned_data


class OrderCreateForm(forms.Form):
    guest_id = forms.IntegerField(min_value=1, required=False)
    reservation_id = forms.IntegerField(min_value=1, required=False)
    invoice_id = forms.IntegerField(min_value=1, required=False)
    happy_hour = forms.NullBooleanField(required=False)
    discount_usd = forms.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
    )

    def clean_discount_usd(self):
        return self.cleaned_data["discount_usd"] or Decimal("0.00")


class OrderLineForm(forms.Form):
    item_id = forms.IntegerField(min_value=1)
    quantity = forms.IntegerField(min_value=1)


OrderLineFormSet = forms.formset_factory(OrderLineForm, extra=0, min_num=1, validate_min=True)


class OrderStatusForm(forms.Form):
    status = forms.ChoiceField(choices=PaymentStatus.choices)
