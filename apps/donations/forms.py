from decimal import Decimal

from django import forms

INVALID_AMOUNT = "Masukkan jumlah donasi yang valid."


class DonationForm(forms.Form):
    amount = forms.DecimalField(
        label="Jumlah Donasi (Rp)",
        decimal_places=2,
        max_digits=15,
        error_messages={"required": INVALID_AMOUNT, "invalid": INVALID_AMOUNT},
        widget=forms.NumberInput(attrs={"placeholder": "Masukkan jumlah donasi", "min": "1"}),
    )

    def clean_amount(self):
        amount = self.cleaned_data["amount"]
        if amount <= Decimal("0"):
            raise forms.ValidationError(INVALID_AMOUNT)
        return amount

    def amount_value(self):
        amount = self.cleaned_data["amount"]
        return int(amount) if amount == amount.to_integral_value() else float(amount)
