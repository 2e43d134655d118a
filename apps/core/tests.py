from decimal import Decimal
from unittest.mock import Mock, patch

import requests
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from apps.campaigns.records import Campaign

from .api import PLACEHOLDER_IMAGE_URL, ApiClient, ApiError, get_image_url
from .formatting import format_rupiah, format_thousands, parse_api_datetime
from .search import match_keywords, run_search, search_campaigns, search_pages
from .testing import ADMIN, MEMBER, ApiTestMixin, FakeApi, fail, ok, unreachable

CAMPAIGN = {
    "id": 4,
    "title": "Sumur untuk Desa",
    "description": "Air bersih untuk warga",
    "start": "2025-01-01T00:00:00Z",
    "end": "2099-01-01T00:00:00Z",
    "target_total": 10000000,
    "total_collected": 5000,
    "status": "active",
}


# =====================
# CLIENT API
# =====================
@override_settings(AMALSAS_API_BASE_URL="http://api.test/api/v1", AMALSAS_API_TIMEOUT=3)
class ApiClientTests(SimpleTestCase):
    def test_unwraps_data_member(self):
        api = FakeApi({("GET", "/campaigns"): ok({"campaigns": []})})
        with patch("apps.core.api.requests.request", side_effect=api):
            data = ApiClient().get("/campaigns")

        self.assertEqual(data, {"campaigns": []})
        self.assertEqual(api.calls[0].kwargs["timeout"], 3)

    def test_bearer_header_follows_token(self):
        client = ApiClient(token="abc")
        self.assertEqual(client.headers["Authorization"], "Bearer abc")
        self.assertEqual(client.token, "abc")

        client.set_auth_token(None)
        self.assertNotIn("Authorization", client.headers)
        self.assertIsNone(client.token)

    def test_error_carries_server_message_and_status(self):
        api = FakeApi({("POST", "/signin"): fail("Email tidak terdaftar", status=404)})
        with patch("apps.core.api.requests.request", side_effect=api):
            with self.assertRaises(ApiError) as ctx:
                ApiClient().post("/signin", json={"value": "x", "password": "y"})

        self.assertEqual(ctx.exception.message, "Email tidak terdaftar")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_transport_failure_becomes_api_error(self):
        with patch("apps.core.api.requests.request", side_effect=unreachable):
            with self.assertRaises(ApiError) as ctx:
                ApiClient().get("/campaigns")

        self.assertIsNone(ctx.exception.status_code)
        self.assertEqual(ctx.exception.message_or("fallback"), "fallback")
        self.assertIsInstance(ctx.exception.__cause__, requests.ConnectionError)

    def test_non_json_body_is_an_error(self):
        response = Mock(status_code=200, content=b"<html>oops</html>")
        response.json.side_effect = ValueError("not json")
        with patch("apps.core.api.requests.request", return_value=response):
            with self.assertRaises(ApiError):
                ApiClient().get("/campaigns")

    def test_files_are_sent_as_multipart(self):
        api = FakeApi({("PATCH", "/change-image"): ok({})})
        with patch("apps.core.api.requests.request", side_effect=api):
            ApiClient().patch("/change-image", data={"a": "1"}, files={"photo": ("a.gif", b"GIF", "image/gif")})

        kwargs = api.calls[0].kwargs
        self.assertIn("files", kwargs)
        self.assertEqual(kwargs["data"], {"a": "1"})
        self.assertNotIn("json", kwargs)

    @override_settings(AMALSAS_IMAGE_BASE_URL="http://img.test/")
    def test_image_url(self):
        self.assertEqual(get_image_url(""), PLACEHOLDER_IMAGE_URL)
        self.assertEqual(get_image_url("https://cdn.test/a.png"), "https://cdn.test/a.png")
        self.assertEqual(get_image_url("a.png"), "http://img.test/uploads/a.png")


# =====================
# FORMATAGE
# =====================
class FormattingTests(SimpleTestCase):
    def test_thousands_use_dots(self):
        self.assertEqual(format_thousands(92714567), "92.714.567")
        self.assertEqual(format_thousands("1500.5"), "1.501")
        self.assertEqual(format_thousands(None), "0")
        self.assertEqual(format_rupiah(Decimal("2500000")), "Rp 2.500.000")

    def test_parse_api_datetime(self):
        self.assertEqual(parse_api_datetime("2025-06-01T00:00:00Z").year, 2025)
        self.assertEqual(parse_api_datetime("2025-06-01").day, 1)
        self.assertIsNone(parse_api_datetime(""))
        self.assertIsNone(parse_api_datetime("not a date"))


# =====================
# RECHERCHE
# =====================
class SearchTests(SimpleTestCase):
    def setUp(self):
        self.campaigns = [
            Campaign.from_api(CAMPAIGN),
            Campaign.from_api({"id": 5, "title": "Beasiswa", "description": "Pendidikan anak yatim"}),
        ]

    def test_campaigns_match_title_or_description(self):
        self.assertEqual([c.id for c in search_campaigns(self.campaigns, "SUMUR")], [4])
        self.assertEqual([c.id for c in search_campaigns(self.campaigns, "yatim")], [5])
        self.assertEqual(search_campaigns(self.campaigns, "   "), [])

    def test_admin_pages_are_hidden_from_members(self):
        self.assertEqual(search_pages("dashboard"), [])
        self.assertEqual([p.id for p in search_pages("dashboard", is_admin=True)], ["dashboard"])

    def test_keywords(self):
        ids = [k.id for k in match_keywords("mau login dulu")]
        self.assertEqual(ids, ["signin"])
        self.assertIn("history", [k.id for k in match_keywords("riwayat donasi")])
        self.assertEqual([k.id for k in match_keywords("tambah kampanye")], [])
        self.assertEqual([k.id for k in match_keywords("tambah kampanye", is_admin=True)], ["add-campaign"])

    def test_run_search_combines_groups(self):
        results = run_search("about", self.campaigns)
        self.assertEqual([p.id for p in results.pages], ["about-us"])
        self.assertEqual([k.id for k in results.keywords], ["about-us"])
        self.assertFalse(results.is_empty)
        self.assertTrue(run_search("zzz", self.campaigns).is_empty)


class SearchViewTests(ApiTestMixin, TestCase):
    def test_search_lists_campaign_hits(self):
        self.mock_api({("GET", "/campaigns"): ok({"campaigns": [CAMPAIGN]})})

        response = self.client.get(reverse("core:search"), {"q": "sumur"})

        self.assertContains(response, "Sumur untuk Desa")

    def test_search_survives_api_failure(self):
        self.mock_api({("GET", "/campaigns"): fail("boom", status=500)})

        response = self.client.get(reverse("core:search"), {"q": "xyz"})

        self.assertContains(response, "Tidak ada hasil")

    def test_empty_query_makes_no_call(self):
        api = self.mock_api()

        response = self.client.get(reverse("core:search"))

        self.assertContains(response, "Masukkan kata kunci")
        self.assertEqual(api.called("GET", "/campaigns"), [])

    def test_admin_keywords_depend_on_role(self):
        api = self.mock_api({("GET", "/campaigns"): ok({"campaigns": []})})
        response = self.client.get(reverse("core:search"), {"q": "dashboard"})
        self.assertNotContains(response, "Admin Dashboard")

        self.sign_in_as(ADMIN, api)
        response = self.client.get(reverse("core:search"), {"q": "dashboard"})
        self.assertContains(response, "Admin Dashboard")


# =====================
# ACCUEIL
# =====================
class HomeViewTests(ApiTestMixin, TestCase):
    def test_total_collected_comes_from_backend_summary(self):
        self.mock_api({("GET", "/campaigns"): ok({
            "campaigns": [CAMPAIGN],
            "total_campaigns": 1,
            "total_collected": 120000000,
            "total_transactions": 42,
        })})

        response = self.client.get(reverse("core:home"))

        self.assertContains(response, "Rp 120.000.000")
        self.assertContains(response, "Sumur untuk Desa")
        self.assertEqual(response.context["summary"].total_transactions, 42)

    def test_falls_back_to_placeholders_silently(self):
        with patch("apps.core.api.requests.request", side_effect=unreachable):
            response = self.client.get(reverse("core:home"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Jum&#x27;at Berkah")
        self.assertContains(response, "Donasi Darurat Kemanusiaan Palestina")

    def test_empty_list_also_uses_placeholders(self):
        self.mock_api({("GET", "/campaigns"): ok({"campaigns": [], "total_collected": 0})})

        response = self.client.get(reverse("core:home"))

        self.assertEqual(len(response.context["campaigns"]), 3)

    def test_member_sees_history_link(self):
        api = self.mock_api({("GET", "/campaigns"): ok({"campaigns": [CAMPAIGN]})})
        self.sign_in_as(MEMBER, api)

        response = self.client.get(reverse("core:home"))

        self.assertContains(response, reverse("donations:history"))
        self.assertContains(response, "Siti Aminah")


# =====================
# PAGES STATIQUES
# =====================
class StaticPageTests(ApiTestMixin, TestCase):
    def test_static_pages_render(self):
        self.mock_api()
        for name in ("core:about_us", "core:vision_mission", "core:contact_us"):
            self.assertEqual(self.client.get(reverse(name)).status_code, 200)

    def test_contact_page_lists_channels(self):
        self.mock_api()
        response = self.client.get(reverse("core:contact_us"))
        for label in ("Email", "Instagram", "WhatsApp"):
            self.assertContains(response, label)

    def test_not_found(self):
        self.mock_api()
        self.assertEqual(self.client.get(reverse("core:not_found")).status_code, 404)
        response = self.client.get("/does-not-exist/")
        self.assertEqual(response.status_code, 404)
        self.assertContains(response, "Halaman yang Anda cari tidak ditemukan", status_code=404)
