import re

from django import forms
from django.core.validators import RegexValidator

from .passwords import SPECIAL_CHARACTERS, STRENGTH_LABELS, password_strength, validate_password

E164_RE = re.compile(r"^\+[1-9]\d{1,14}$")

GENDER_CHOICES = [
    ("", "Pilih jenis kelamin"),
    ("Male", "Male"),
    ("Female", "Female"),
    ("Other", "Other"),
]


def normalize_phone(value: str) -> str:
    phone = re.sub(r"\s+", "", value or "")
    if phone and not phone.startswith("+"):
        phone = f"+{phone}"
    return phone


class SignUpForm(forms.Form):
    first_name = forms.CharField(label="Nama Depan", min_length=2, max_length=50)
    last_name = forms.CharField(label="Nama Belakang", min_length=2, max_length=50)
    username = forms.CharField(
        min_length=3,
        max_length=20,
        validators=[RegexValidator(r"^[a-zA-Z0-9]+$", "3-20 karakter alfanumerik saja")],
        widget=forms.TextInput(attrs={"placeholder": "johndoe123"}),
    )
    email = forms.EmailField(max_length=100, widget=forms.EmailInput(attrs={"placeholder": "john@example.com"}))
    phone = forms.CharField(label="Nomor Telepon", widget=forms.TextInput(attrs={"placeholder": "+6281234567890"}))
    password = forms.CharField(
        min_length=8,
        max_length=72,
        strip=False,
        widget=forms.PasswordInput(attrs={"placeholder": "Minimal 8 karakter"}),
    )
    address = forms.CharField(
        label="Alamat (Opsional)",
        required=False,
        max_length=255,
        widget=forms.Textarea(attrs={"rows": 3}),
    )

    def clean_phone(self):
        phone = normalize_phone(self.cleaned_data.get("phone"))
        if not E164_RE.match(phone):
            raise forms.ValidationError("Harap masukkan nomor telepon yang valid. Contoh: +6281234567890")
        return phone

    def clean_password(self):
        password = self.cleaned_data.get("password") or ""
        if not validate_password(password)["is_valid"]:
            strength = STRENGTH_LABELS[password_strength(password)]
            raise forms.ValidationError([
                f"Password harus mengandung huruf besar, angka, dan karakter khusus ({SPECIAL_CHARACTERS})",
                f"Kekuatan password: {strength}",
            ])
        return password

    def to_payload(self) -> dict:
        data = self.cleaned_data
        return {
            "first_name": data["first_name"],
            "last_name": data["last_name"],
            "username": data["username"],
            "phone": data["phone"],
            "address": data.get("address", ""),
            "email": data["email"],
            "password": data["password"],
            "isAdmin": False,
        }


class SignInForm(forms.Form):
    value = forms.CharField(
        label="Email atau Username",
        min_length=3,
        max_length=100,
        widget=forms.TextInput(attrs={"placeholder": "Email atau Username"}),
    )
    password = forms.CharField(widget=forms.PasswordInput(attrs={"placeholder": "Password"}))

    def to_payload(self) -> dict:
        return {"value": self.cleaned_data["value"], "password": self.cleaned_data["password"]}


class ForgotPasswordForm(forms.Form):
    email = forms.EmailField(
        label="Alamat Email",
        error_messages={"invalid": "Harap masukkan alamat email yang valid"},
        widget=forms.EmailInput(attrs={"placeholder": "Masukkan email terdaftar"}),
    )


class ResetPasswordForm(forms.Form):
    password = forms.CharField(
        label="Password baru",
        strip=False,
        min_length=8,
        error_messages={"min_length": "Password minimal 8 karakter"},
        widget=forms.PasswordInput(attrs={"placeholder": "Masukkan password baru"}),
    )
    confirm_password = forms.CharField(
        label="Konfirmasi password",
        strip=False,
        widget=forms.PasswordInput(attrs={"placeholder": "Konfirmasi password baru"}),
    )

    def clean(self):
        cleaned = super().clean()
        password = cleaned.get("password")
        confirm = cleaned.get("confirm_password")
        if password and confirm and password != confirm:
            self.add_error("confirm_password", "Password tidak cocok")
        return cleaned


class EditProfileForm(forms.Form):
    name = forms.CharField(max_length=100)
    email = forms.EmailField()
    phone = forms.CharField(required=False)
    address = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))
    gender = forms.ChoiceField(choices=GENDER_CHOICES, required=False)

    @classmethod
    def for_user(cls, user):
        return cls(initial={
            "name": user.name if user else "",
            "email": user.email if user else "",
            "phone": user.phone if user else "",
            "address": user.address if user else "",
            "gender": user.gender if user else "",
        })

    def to_payload(self) -> dict:
        return {key: self.cleaned_data.get(key, "") for key in ("name", "email", "phone", "address", "gender")}


class ChangePasswordForm(forms.Form):
    old_password = forms.CharField(label="Old Password", strip=False, widget=forms.PasswordInput(attrs={"placeholder": "Type your old password"}))
    new_password = forms.CharField(label="New Password", strip=False, widget=forms.PasswordInput(attrs={"placeholder": "Type your new password"}))
    confirm_new_password = forms.CharField(
        label="Confirm New Password",
        strip=False,
        widget=forms.PasswordInput(attrs={"placeholder": "Confirm your new password"}),
    )

    def clean(self):
        cleaned = super().clean()
        new = cleaned.get("new_password")
        confirm = cleaned.get("confirm_new_password")
        if new is None or confirm is None:
            return cleaned
        if new != confirm:
            raise forms.ValidationError("New passwords don't match!")
        if len(new) < 8:
            raise forms.ValidationError("Password must be at least 8 characters long")
        return cleaned

    def to_payload(self) -> dict:
        return {
            "old_password": self.cleaned_data["old_password"],
            "new_password": self.cleaned_data["new_password"],
        }


class ChangeImageForm(forms.Form):
    photo = forms.ImageField(label="Foto profil", widget=forms.ClearableFileInput(attrs={"accept": "image/*"}))
