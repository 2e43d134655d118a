from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from apps.core.testing import ADMIN, MEMBER, ApiTestMixin, fail, ok

from .forms import DonationForm
from .records import Donation, parse_created_donation, parse_donations

CAMPAIGN = {
    "id": 9,
    "title": "Sumur untuk Desa",
    "description": "Air bersih untuk warga",
    "end": "2099-08-01T00:00:00Z",
    "target_total": 15000000,
    "total_collected": 3000000,
    "status": "active",
}

DONATIONS = [
    {"id": 1, "amount": 50000, "status_payment": "success", "payment_method": "gopay",
     "user": {"id": 7, "first_name": "Siti"}, "campaign": {"id": 9, "title": "Sumur untuk Desa"},
     "created_at": "2025-07-02T10:00:00Z"},
    {"id": 2, "amount": 75000, "status": "pending", "user_id": 8, "campaign_id": 9,
     "campaign": "Beasiswa Yatim", "created_at": "2025-07-03T10:00:00Z"},
]


# =====================
# DONNEES
# =====================
class DonationRecordTests(SimpleTestCase):
    def test_nested_and_flat_shapes(self):
        first, second = parse_donations(DONATIONS)

        self.assertEqual((first.user_id, first.campaign_id, first.campaign_title), (7, 9, "Sumur untuk Desa"))
        self.assertEqual((second.user_id, second.campaign_title), (8, "Beasiswa Yatim"))
        self.assertEqual(second.status_payment, "pending")

    def test_created_donation_is_unwrapped(self):
        donation = parse_created_donation({
            "donation": {"amount": 75000, "status": "pending", "user_id": 7, "campaign_id": 9},
            "payment_url": "snap-token-xyz",
        })

        self.assertEqual(donation.amount, 75000)
        self.assertEqual(donation.campaign_id, 9)
        self.assertEqual(donation.payment_url, "snap-token-xyz")
        self.assertFalse(donation.redirects_to_gateway)

    def test_payment_url_kind(self):
        self.assertTrue(Donation.from_api({"payment_url": "https://pay.test/x"}).redirects_to_gateway)
        self.assertFalse(Donation.from_api({"payment_url": "snap-token-123"}).redirects_to_gateway)


class DonationFormTests(SimpleTestCase):
    def test_amount_must_be_positive(self):
        for amount in ("0", "-5000", "abc", ""):
            form = DonationForm(data={"amount": amount})
            self.assertFalse(form.is_valid(), amount)
            self.assertIn("Masukkan jumlah donasi yang valid.", form.errors["amount"])

        form = DonationForm(data={"amount": "25000"})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.amount_value(), 25000)


# =====================
# PAIEMENT
# =====================
class DonateViewTests(ApiTestMixin, TestCase):
    def setUp(self):
        self.api = self.mock_api({("GET", "/campaigns/9"): ok(CAMPAIGN)})
        self.url = reverse("donations:donate", args=[9])

    def test_anonymous_gets_signin_modal_and_no_donation(self):
        response = self.client.post(self.url, {"amount": "50000"})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'id="signin-modal"')
        self.assertEqual(self.api.called("POST", "/donations"), [])

    def test_non_positive_amount_never_reaches_api(self):
        self.sign_in_as(MEMBER, self.api)

        response = self.client.post(self.url, {"amount": "0"})

        self.assertContains(response, "Masukkan jumlah donasi yang valid.")
        self.assertEqual(self.api.called("POST", "/donations"), [])

    def test_snap_token_renders_checkout(self):
        self.sign_in_as(MEMBER, self.api)
        self.api.routes[("POST", "/donations")] = ok({
            "donation": {"amount": 50000, "status": "pending", "user_id": 7, "campaign_id": 9},
            "payment_url": "snap-token-abc",
        })

        response = self.client.post(self.url, {"amount": "50000"})

        self.assertTemplateUsed(response, "donations/checkout.html")
        self.assertContains(response, "snap-token-abc")
        self.assertContains(response, "Rp 50.000")
        self.assertContains(response, "snap.pay")
        payload = self.api.called("POST", "/donations")[0].kwargs["json"]
        self.assertEqual(payload, {"amount": 50000, "status": "pending", "user_id": 7, "campaign_id": 9})

    def test_payment_url_redirects(self):
        self.sign_in_as(MEMBER, self.api)
        self.api.routes[("POST", "/donations")] = ok({
            "donation": {"amount": 50000, "status": "pending", "user_id": 7, "campaign_id": 9},
            "payment_url": "https://pay.test/checkout/3",
        })

        response = self.client.post(self.url, {"amount": "50000"})

        self.assertRedirects(response, "https://pay.test/checkout/3", fetch_redirect_response=False)

    def test_api_failure_shows_generic_error(self):
        self.sign_in_as(MEMBER, self.api)
        self.api.routes[("POST", "/donations")] = fail("midtrans down", status=500)

        response = self.client.post(self.url, {"amount": "50000"})

        self.assertContains(response, "Terjadi kesalahan saat memproses donasi")

    def test_donate_requires_post(self):
        self.assertEqual(self.client.get(self.url).status_code, 405)


class PaymentResultTests(ApiTestMixin, TestCase):
    def test_result_pages(self):
        self.mock_api()
        expectations = {
            "donations:success": "Terima kasih!",
            "donations:pending": "Menunggu Pembayaran",
            "donations:cancelled": "Transaksi dibatalkan.",
        }
        for name, text in expectations.items():
            self.assertContains(self.client.get(reverse(name)), text)


# =====================
# HISTORIQUE
# =====================
class DonationListTests(ApiTestMixin, TestCase):
    def test_history_only_shows_own_donations(self):
        api = self.mock_api({("GET", "/donations"): ok(DONATIONS)})
        self.sign_in_as(MEMBER, api)

        for name in ("donations:history", "donations:my_donations"):
            response = self.client.get(reverse(name))
            self.assertEqual([d.id for d in response.context["donations"]], [1])
            self.assertContains(response, "Rp 50.000")

    def test_history_failure_shows_empty_list(self):
        api = self.mock_api({("GET", "/donations"): fail("boom", status=500)})
        self.sign_in_as(MEMBER, api)

        response = self.client.get(reverse("donations:history"))

        self.assertContains(response, "boom")
        self.assertContains(response, "No donation history available.")

    def test_admin_sees_all_donations(self):
        api = self.mock_api({("GET", "/donations/admin/all"): ok(DONATIONS)})
        self.sign_in_as(ADMIN, api)

        response = self.client.get(reverse("donations:all"))

        self.assertEqual(len(response.context["donations"]), 2)
        self.assertContains(response, "Beasiswa Yatim")
