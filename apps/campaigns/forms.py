from django import forms

CATEGORY_OTHER = "lainnya"

CATEGORY_CHOICES = [
    ("", "Pilih kategori"),
    ("pendidikan", "Pendidikan"),
    ("kesehatan", "Kesehatan"),
    ("sosial", "Sosial"),
    ("bencana", "Bencana Alam"),
    (CATEGORY_OTHER, "Lainnya"),
]

STATUS_CHOICES = [
    ("active", "Aktif"),
    ("inactive", "Nonaktif"),
    ("completed", "Selesai"),
]


class CampaignForm(forms.Form):
    title = forms.CharField(label="Judul Campaign", max_length=200)
    description = forms.CharField(label="Deskripsi Singkat", widget=forms.Textarea(attrs={"rows": 3}))
    details = forms.CharField(label="Detail Campaign", required=False, widget=forms.Textarea(attrs={"rows": 6}))
    start = forms.DateField(label="Tanggal Mulai", widget=forms.DateInput(attrs={"type": "date"}))
    end = forms.DateField(label="Tanggal Berakhir", widget=forms.DateInput(attrs={"type": "date"}))
    target_total = forms.DecimalField(label="Target Total (Rp)", decimal_places=2, max_digits=15)
    category = forms.ChoiceField(label="Kategori", choices=CATEGORY_CHOICES)
    custom_category = forms.CharField(label="Kategori lainnya", required=False, max_length=100)
    location = forms.CharField(label="Lokasi", required=False, max_length=200)
    cpocket = forms.CharField(label="Rekening / Kantong Donasi", required=False, max_length=200)
    status = forms.ChoiceField(choices=STATUS_CHOICES, initial="active")
    photo = forms.ImageField(label="Foto Campaign", required=False, widget=forms.ClearableFileInput(attrs={"accept": "image/*"}))

    def __init__(self, *args, require_photo=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["photo"].required = require_photo

    @classmethod
    def initial_from(cls, campaign) -> dict:
        """Form values of an existing campaign; unknown categories go to 'lainnya'."""
        known = {key for key, _ in CATEGORY_CHOICES if key}
        category = campaign.category or ""
        custom = ""
        if category and category not in known:
            category, custom = CATEGORY_OTHER, campaign.category
        return {
            "title": campaign.title,
            "description": campaign.description,
            "details": campaign.details,
            "start": campaign.start.date() if campaign.start else None,
            "end": campaign.end.date() if campaign.end else None,
            "target_total": campaign.target_total,
            "category": category,
            "custom_category": custom,
            "location": campaign.location,
            "cpocket": campaign.cpocket,
            "status": campaign.status or "active",
        }

    def clean(self):
        cleaned = super().clean()
        start = cleaned.get("start")
        end = cleaned.get("end")
        if start and end and end <= start:
            self.add_error("end", "Tanggal berakhir harus setelah tanggal mulai")

        target = cleaned.get("target_total")
        if target is not None and target <= 0:
            self.add_error("target_total", "Target total harus lebih besar dari nol")

        if cleaned.get("category") == CATEGORY_OTHER and not (cleaned.get("custom_category") or "").strip():
            self.add_error("custom_category", "Harap masukkan kategori lainnya")
        return cleaned

    def category_value(self) -> str:
        if self.cleaned_data["category"] == CATEGORY_OTHER:
            return self.cleaned_data["custom_category"].strip()
        return self.cleaned_data["category"]

    def to_payload(self) -> dict:
        data = self.cleaned_data
        target = data["target_total"]
        return {
            "title": data["title"],
            "description": data["description"],
            "details": data.get("details", ""),
            "start": f"{data['start'].isoformat()}T00:00:00Z",
            "end": f"{data['end'].isoformat()}T00:00:00Z",
            "target_total": int(target) if target == target.to_integral_value() else float(target),
            "category": self.category_value(),
            "location": data.get("location", ""),
            "cpocket": data.get("cpocket", ""),
            "status": data["status"],
        }

    def photo_file(self):
        """``requests`` file tuple for the attached photo, or None."""
        photo = self.cleaned_data.get("photo")
        if not photo:
            return None
        photo.seek(0)
        return (photo.name, photo.read(), getattr(photo, "content_type", None) or "application/octet-stream")

    def send(self, client, method: str, path: str):
        """Multipart when a photo is attached, JSON otherwise."""
        photo = self.photo_file()
        payload = self.to_payload()
        if photo:
            data = {key: str(value) for key, value in payload.items()}
            return client.request(method, path, data=data, files={"photo": photo})
        return client.request(method, path, json=payload)
