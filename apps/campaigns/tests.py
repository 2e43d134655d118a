from datetime import timedelta
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone

from apps.core.testing import ADMIN, MEMBER, ApiTestMixin, fail, ok

from .forms import CampaignForm
from .records import Campaign, DonationSummary, parse_campaign_listing

SMALL_GIF = (
    b"\x47\x49\x46\x38\x39\x61\x01\x00\x01\x00\x00\x00\x00\x21\xf9\x04"
    b"\x01\x0a\x00\x01\x00\x2c\x00\x00\x00\x00\x01\x00\x01\x00"
    b"\x00\x02\x02\x4c\x01\x00\x3b"
)

FORM_DATA = {
    "title": "Sumur untuk Desa",
    "description": "Air bersih untuk warga",
    "details": "",
    "start": "2025-07-01",
    "end": "2025-08-01",
    "target_total": "15000000",
    "category": "sosial",
    "custom_category": "",
    "location": "Garut",
    "cpocket": "BSI 123",
    "status": "active",
}

CAMPAIGN = {
    "id": 9,
    "title": "Sumur untuk Desa",
    "description": "Air bersih untuk warga",
    "start": "2025-07-01T00:00:00Z",
    "end": "2099-08-01T00:00:00Z",
    "target_total": 15000000,
    "total_collected": 3000000,
    "category": "air bersih",
    "status": "active",
}


def gif():
    return SimpleUploadedFile("sumur.gif", SMALL_GIF, content_type="image/gif")


# =====================
# DONNEES
# =====================
class CampaignRecordTests(SimpleTestCase):
    def test_progress_is_capped(self):
        campaign = Campaign.from_api({"target_total": 100, "total_collected": 250})
        self.assertEqual(campaign.progress_percent, 100.0)
        self.assertEqual(Campaign.from_api({"target_total": 0}).progress_percent, 0.0)

    def test_days_left_never_negative(self):
        past = (timezone.now() - timedelta(days=3)).isoformat()
        future = (timezone.now() + timedelta(days=2, hours=1)).isoformat()
        self.assertEqual(Campaign.from_api({"end": past}).days_left, 0)
        self.assertEqual(Campaign.from_api({"end": future}).days_left, 3)

    def test_status_label(self):
        self.assertEqual(Campaign.from_api({"status": "active"}).status_label, "Aktif")
        self.assertEqual(Campaign.from_api({"status": "completed"}).status_label, "Selesai")
        self.assertEqual(Campaign.from_api({"status": "inactive"}).status_label, "Nonaktif")

    def test_listing_keeps_backend_totals(self):
        campaigns, summary = parse_campaign_listing({
            "campaigns": [CAMPAIGN],
            "total_campaigns": 1,
            "total_collected": 99000000,
            "total_transactions": 5,
        })
        self.assertEqual(len(campaigns), 1)
        self.assertEqual(summary.total_collected, Decimal("99000000"))

    def test_donation_summary_reads_backend_keys(self):
        summary = DonationSummary.from_api({"total_transactions": 12, "total_amount": "2500000"})
        self.assertEqual(summary.total_transactions, 12)
        self.assertEqual(summary.total_amount, Decimal("2500000"))
        self.assertEqual(DonationSummary.from_api(None).total_transactions, 0)


# =====================
# FORMULAIRE
# =====================
class CampaignFormTests(SimpleTestCase):
    def test_end_must_follow_start(self):
        form = CampaignForm(data={**FORM_DATA, "end": "2025-07-01"})
        self.assertFalse(form.is_valid())
        self.assertIn("Tanggal berakhir harus setelah tanggal mulai", form.errors["end"])

    def test_target_must_be_positive(self):
        form = CampaignForm(data={**FORM_DATA, "target_total": "0"})
        self.assertFalse(form.is_valid())
        self.assertIn("Target total harus lebih besar dari nol", form.errors["target_total"])

    def test_other_category_needs_text(self):
        form = CampaignForm(data={**FORM_DATA, "category": "lainnya"})
        self.assertFalse(form.is_valid())
        self.assertIn("custom_category", form.errors)

        form = CampaignForm(data={**FORM_DATA, "category": "lainnya", "custom_category": "Air bersih"})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.to_payload()["category"], "Air bersih")

    def test_photo_required_only_on_create(self):
        self.assertFalse(CampaignForm(data=FORM_DATA, require_photo=True).is_valid())
        self.assertTrue(CampaignForm(data=FORM_DATA).is_valid())

    def test_payload_dates_and_amount(self):
        form = CampaignForm(data=FORM_DATA)
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload()
        self.assertEqual(payload["start"], "2025-07-01T00:00:00Z")
        self.assertEqual(payload["end"], "2025-08-01T00:00:00Z")
        self.assertEqual(payload["target_total"], 15000000)

    def test_unknown_category_prefills_as_other(self):
        initial = CampaignForm.initial_from(Campaign.from_api(CAMPAIGN))
        self.assertEqual(initial["category"], "lainnya")
        self.assertEqual(initial["custom_category"], "air bersih")


# =====================
# PAGE DE DETAIL
# =====================
class CampaignDetailTests(ApiTestMixin, TestCase):
    def test_detail_shows_progress(self):
        self.mock_api({("GET", "/campaigns/9"): ok(CAMPAIGN)})

        response = self.client.get(reverse("campaigns:detail", args=[9]))

        self.assertContains(response, "Sumur untuk Desa")
        self.assertContains(response, "Rp 3.000.000")
        self.assertContains(response, "20%")

    def test_failure_falls_back_to_placeholder(self):
        self.mock_api({("GET", "/campaigns/3"): fail("boom", status=500)})

        response = self.client.get(reverse("campaigns:detail", args=[3]))

        self.assertContains(response, "Donasi Darurat Kemanusiaan Palestina")

    def test_unknown_campaign_is_not_found(self):
        self.mock_api()

        response = self.client.get(reverse("campaigns:detail", args=[404]))

        self.assertContains(response, "Data tidak ditemukan", status_code=404)

    def test_admin_controls_only_for_admin(self):
        api = self.mock_api({("GET", "/campaigns/9"): ok(CAMPAIGN)})
        response = self.client.get(reverse("campaigns:detail", args=[9]))
        self.assertNotContains(response, reverse("campaigns:delete", args=[9]))

        self.sign_in_as(ADMIN, api)
        response = self.client.get(reverse("campaigns:detail", args=[9]))
        self.assertContains(response, reverse("campaigns:delete", args=[9]))


# =====================
# ADMINISTRATION
# =====================
class CampaignAdminTests(ApiTestMixin, TestCase):
    def setUp(self):
        self.api = self.mock_api()
        self.sign_in_as(ADMIN, self.api)

    def test_invalid_dates_never_reach_api(self):
        response = self.client.post(reverse("campaigns:add"), {**FORM_DATA, "end": "2025-06-01", "photo": gif()})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Tanggal berakhir harus setelah tanggal mulai")
        self.assertEqual(self.api.called("POST", "/campaigns/add"), [])

    def test_create_sends_multipart_with_photo(self):
        self.api.routes[("POST", "/campaigns/add")] = ok(CAMPAIGN, status=201)

        response = self.client.post(reverse("campaigns:add"), {**FORM_DATA, "photo": gif()})

        self.assertRedirects(response, reverse("campaigns:dashboard"), fetch_redirect_response=False)
        call = self.api.called("POST", "/campaigns/add")[0]
        self.assertEqual(call.kwargs["files"]["photo"][0], "sumur.gif")
        self.assertEqual(call.kwargs["data"]["title"], "Sumur untuk Desa")
        self.assertEqual(call.headers["Authorization"], "Bearer test-token")

    def test_create_requires_photo(self):
        response = self.client.post(reverse("campaigns:add"), FORM_DATA)

        self.assertIn("photo", response.context["form"].errors)
        self.assertEqual(self.api.called("POST", "/campaigns/add"), [])

    def test_create_error_is_shown_inline(self):
        self.api.routes[("POST", "/campaigns/add")] = fail("Judul sudah dipakai")

        response = self.client.post(reverse("campaigns:add"), {**FORM_DATA, "photo": gif()})

        self.assertContains(response, "Judul sudah dipakai")

    def test_edit_prefills_from_api(self):
        self.api.routes[("GET", "/campaigns/9")] = ok(CAMPAIGN)

        response = self.client.get(reverse("campaigns:edit", args=[9]))

        form = response.context["form"]
        self.assertEqual(form.initial["title"], "Sumur untuk Desa")
        self.assertEqual(form.initial["category"], "lainnya")

    def test_edit_load_failure(self):
        response = self.client.get(reverse("campaigns:edit", args=[9]))

        self.assertContains(response, "Not found")

    def test_edit_without_photo_sends_json(self):
        self.api.routes[("PUT", "/campaigns/edit/9")] = ok(CAMPAIGN)

        response = self.client.post(reverse("campaigns:edit", args=[9]), FORM_DATA)

        self.assertRedirects(response, reverse("campaigns:dashboard"), fetch_redirect_response=False)
        call = self.api.called("PUT", "/campaigns/edit/9")[0]
        self.assertEqual(call.kwargs["json"]["status"], "active")
        self.assertNotIn("files", call.kwargs)

    def test_delete(self):
        self.api.routes[("DELETE", "/campaigns/9")] = ok(None)

        response = self.client.post(reverse("campaigns:delete", args=[9]))

        self.assertRedirects(response, reverse("core:home"), fetch_redirect_response=False)
        self.assertEqual(len(self.api.called("DELETE", "/campaigns/9")), 1)

    def test_dashboard_warns_about_placeholders(self):
        self.api.routes[("GET", "/campaigns")] = fail("boom", status=500)

        response = self.client.get(reverse("campaigns:dashboard"))

        self.assertTrue(response.context["using_placeholders"])
        self.assertContains(response, "placeholder")

    def test_dashboard_lists_campaigns(self):
        self.api.routes[("GET", "/campaigns")] = ok({"campaigns": [CAMPAIGN], "total_collected": 3000000})
        self.api.routes[("GET", "/donations/summary")] = ok({"total_transactions": 1234, "total_amount": 45750000})

        response = self.client.get(reverse("campaigns:dashboard"))

        self.assertFalse(response.context["using_placeholders"])
        self.assertContains(response, "Sumur untuk Desa")
        self.assertContains(response, "Aktif")
        self.assertEqual(response.context["donation_summary"].total_transactions, 1234)
        self.assertContains(response, "Rp 45.750.000")
        self.assertContains(response, "1.234")
        self.assertNotContains(response, "total_amount")


class CampaignMemberAccessTests(ApiTestMixin, TestCase):
    def test_member_cannot_delete(self):
        api = self.mock_api()
        self.sign_in_as(MEMBER, api)

        response = self.client.post(reverse("campaigns:delete", args=[9]))

        self.assertRedirects(response, reverse("accounts:profile"), fetch_redirect_response=False)
        self.assertEqual(api.called("DELETE", "/campaigns/9"), [])
