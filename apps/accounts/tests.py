import requests
from django.core.files.uploadedfile import SimpleUploadedFile
from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, TestCase
from django.urls import reverse

from apps.core.api import TOKEN_SESSION_KEY
from apps.core.testing import ADMIN, MEMBER, ApiTestMixin, fail, ok

from .forms import SignUpForm, normalize_phone
from .guards import ADMIN as ADMIN_TIER
from .guards import PRIVATE, PUBLIC, admin_required, resolve_access, signin_required
from .passwords import password_strength, validate_password
from .records import User
from .session import AUTH_ERROR, LOGGED_OUT, LOGIN_SUCCESS, LOGOUT, USER_SUCCESS, AuthState, reduce

SMALL_GIF = (
    b"\x47\x49\x46\x38\x39\x61\x01\x00\x01\x00\x00\x00\x00\x21\xf9\x04"
    b"\x01\x0a\x00\x01\x00\x2c\x00\x00\x00\x00\x01\x00\x01\x00"
    b"\x00\x02\x02\x4c\x01\x00\x3b"
)


# =====================
# ETAT DE SESSION
# =====================
# Le reducer est une fonction pure sur quatre actions.
class ReducerTests(SimpleTestCase):
    def test_login_success_sets_user_and_keeps_token(self):
        state = reduce(LOGGED_OUT, LOGIN_SUCCESS, {**MEMBER, "token": "abc"})

        self.assertTrue(state.is_login)
        self.assertEqual(state.user.username, "siti")
        self.assertEqual(state.token, "abc")
        self.assertFalse(state.is_admin)

    def test_user_success_reads_both_admin_spellings(self):
        self.assertTrue(reduce(LOGGED_OUT, USER_SUCCESS, {"id": 1, "isAdmin": True}).is_admin)
        self.assertTrue(reduce(LOGGED_OUT, USER_SUCCESS, {"id": 1, "is_admin": True}).is_admin)
        self.assertFalse(reduce(LOGGED_OUT, USER_SUCCESS, {"id": 1, "isAdmin": False, "is_admin": True}).is_admin)

    def test_auth_error_and_logout_reset_state(self):
        state = reduce(LOGGED_OUT, USER_SUCCESS, MEMBER)

        self.assertEqual(reduce(state, AUTH_ERROR), LOGGED_OUT)
        self.assertEqual(reduce(state, LOGOUT), LOGGED_OUT)

    def test_unknown_action_leaves_state_untouched(self):
        state = reduce(LOGGED_OUT, USER_SUCCESS, MEMBER)

        self.assertIs(reduce(state, "SOMETHING_ELSE", {"id": 99}), state)

    def test_name_falls_back_to_first_and_last(self):
        self.assertEqual(User.from_api(MEMBER).display_name, "Siti Aminah")
        self.assertEqual(User.from_api({"email": "x@example.com"}).display_name, "x@example.com")


# =====================
# CONTROLE D'ACCES
# =====================
class ResolveAccessTests(SimpleTestCase):
    def setUp(self):
        self.member = reduce(LOGGED_OUT, USER_SUCCESS, MEMBER)
        self.admin = reduce(LOGGED_OUT, USER_SUCCESS, ADMIN)

    def test_public_never_redirects(self):
        for state in (LOGGED_OUT, self.member, self.admin):
            self.assertIsNone(resolve_access(state, PUBLIC))

    def test_private_requires_login(self):
        self.assertEqual(resolve_access(LOGGED_OUT, PRIVATE), "core:home")
        self.assertIsNone(resolve_access(self.member, PRIVATE))

    def test_admin_tier(self):
        self.assertEqual(resolve_access(LOGGED_OUT, ADMIN_TIER), "core:home")
        self.assertEqual(resolve_access(self.member, ADMIN_TIER), "accounts:profile")
        self.assertIsNone(resolve_access(self.admin, ADMIN_TIER))

    def test_login_flag_without_user_is_not_admin(self):
        self.assertFalse(AuthState(is_login=True, user=None).is_admin)


class GuardDecoratorTests(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()

        @admin_required
        def admin_view(request):
            return HttpResponse("ok")

        @signin_required
        def member_view(request):
            return HttpResponse("ok")

        self.admin_view = admin_view
        self.member_view = member_view

    def request_as(self, state):
        request = self.factory.get("/")
        request.auth = state
        return request

    def test_decorators_redirect_or_pass(self):
        member = reduce(LOGGED_OUT, USER_SUCCESS, MEMBER)
        admin = reduce(LOGGED_OUT, USER_SUCCESS, ADMIN)

        self.assertEqual(self.member_view(self.request_as(LOGGED_OUT))["Location"], reverse("core:home"))
        self.assertEqual(self.member_view(self.request_as(member)).content, b"ok")
        self.assertEqual(self.admin_view(self.request_as(member))["Location"], reverse("accounts:profile"))
        self.assertEqual(self.admin_view(self.request_as(admin)).content, b"ok")


# Un visiteur anonyme est renvoyé vers l'accueil, un membre vers son profil.
class GuardRedirectTests(ApiTestMixin, TestCase):
    def test_anonymous_on_private_route_goes_home(self):
        self.mock_api()
        response = self.client.get(reverse("accounts:profile"))
        self.assertRedirects(response, reverse("core:home"), fetch_redirect_response=False)

    def test_anonymous_on_admin_route_goes_home(self):
        self.mock_api()
        response = self.client.get(reverse("campaigns:dashboard"))
        self.assertRedirects(response, reverse("core:home"), fetch_redirect_response=False)

    def test_member_on_admin_route_goes_to_profile(self):
        api = self.mock_api()
        self.sign_in_as(MEMBER, api)

        for name in ("campaigns:dashboard", "campaigns:add", "donations:all"):
            response = self.client.get(reverse(name))
            self.assertRedirects(response, reverse("accounts:profile"), fetch_redirect_response=False)

    def test_rejected_token_is_cleared(self):
        api = self.mock_api()
        self.sign_in_as(MEMBER, api)
        api.routes[("GET", "/check-auth")] = fail("token expired", status=401)

        response = self.client.get(reverse("accounts:profile"))

        self.assertRedirects(response, reverse("core:home"), fetch_redirect_response=False)
        self.assertNotIn(TOKEN_SESSION_KEY, self.client.session)


# =====================
# CONNEXION / DECONNEXION
# =====================
class SignInTests(ApiTestMixin, TestCase):
    def test_signin_stores_token_and_later_calls_carry_it(self):
        api = self.mock_api({
            ("POST", "/signin"): ok({"token": "tok-123", "user": MEMBER}),
            ("GET", "/check-auth"): ok(MEMBER),
            ("GET", "/users/7"): ok(MEMBER),
        })

        response = self.client.post(reverse("accounts:signin"), {"value": "siti", "password": "Secret1!"})

        self.assertRedirects(response, reverse("core:home"), fetch_redirect_response=False)
        self.assertEqual(self.client.session[TOKEN_SESSION_KEY], "tok-123")
        self.assertEqual(api.called("POST", "/signin")[0].kwargs["json"], {"value": "siti", "password": "Secret1!"})

        self.client.get(reverse("accounts:profile"))
        for path in ("/check-auth", "/users/7"):
            call = api.called("GET", path)[0]
            self.assertEqual(call.headers["Authorization"], "Bearer tok-123")

    def test_signin_rotates_session_key(self):
        self.mock_api({("POST", "/signin"): ok({"token": "tok-123", "user": MEMBER})})
        session = self.client.session
        session["planted"] = "yes"
        session.save()
        key_before = session.session_key

        self.client.post(reverse("accounts:signin"), {"value": "siti", "password": "Secret1!"})

        self.assertNotEqual(self.client.session.session_key, key_before)
        self.assertEqual(self.client.session[TOKEN_SESSION_KEY], "tok-123")

    def test_signin_follows_same_host_next_only(self):
        self.mock_api({("POST", "/signin"): ok({"token": "tok", "user": MEMBER})})

        response = self.client.post(
            reverse("accounts:signin"),
            {"value": "siti", "password": "Secret1!", "next": "/campaigns/3/"},
        )
        self.assertRedirects(response, "/campaigns/3/", fetch_redirect_response=False)

        response = self.client.post(
            reverse("accounts:signin"),
            {"value": "siti", "password": "Secret1!", "next": "https://evil.example.com/"},
        )
        self.assertRedirects(response, reverse("core:home"), fetch_redirect_response=False)

    def test_signin_failure_shows_server_message(self):
        self.mock_api({("POST", "/signin"): fail("Password salah", status=401)})

        response = self.client.post(reverse("accounts:signin"), {"value": "siti", "password": "nope"})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Password salah")
        self.assertContains(response, 'id="signin-modal"')
        self.assertNotIn(TOKEN_SESSION_KEY, self.client.session)

    def test_signin_without_token_fails(self):
        self.mock_api({("POST", "/signin"): ok({"user": MEMBER})})

        response = self.client.post(reverse("accounts:signin"), {"value": "siti", "password": "Secret1!"})

        self.assertContains(response, "Login gagal")

    def test_unreachable_api_uses_default_message(self):
        self.mock_api({("POST", "/signin"): requests.ConnectionError("down")})

        response = self.client.post(reverse("accounts:signin"), {"value": "siti", "password": "Secret1!"})

        self.assertContains(response, "Login gagal")


class LogoutTests(ApiTestMixin, TestCase):
    def test_logout_removes_token_and_protects_routes(self):
        api = self.mock_api()
        self.sign_in_as(MEMBER, api)

        response = self.client.post(reverse("accounts:logout"))

        self.assertRedirects(response, reverse("core:home"), fetch_redirect_response=False)
        self.assertNotIn(TOKEN_SESSION_KEY, self.client.session)

        response = self.client.get(reverse("donations:history"))
        self.assertRedirects(response, reverse("core:home"), fetch_redirect_response=False)

    def test_logout_flushes_whole_session(self):
        api = self.mock_api()
        self.sign_in_as(MEMBER, api)
        session = self.client.session
        session["leftover"] = "value"
        session.save()
        key_before = session.session_key

        self.client.post(reverse("accounts:logout"))

        self.assertNotIn("leftover", self.client.session)
        self.assertNotEqual(self.client.session.session_key, key_before)

    def test_logout_requires_post(self):
        self.mock_api()
        response = self.client.get(reverse("accounts:logout"))
        self.assertEqual(response.status_code, 405)


# =====================
# INSCRIPTION
# =====================
SIGNUP_DATA = {
    "first_name": "Siti",
    "last_name": "Aminah",
    "username": "siti123",
    "email": "siti@example.com",
    "phone": "62 812 3456 7890",
    "password": "Secret123!",
    "address": "",
}


class SignUpTests(ApiTestMixin, TestCase):
    def test_signup_sends_normalized_payload(self):
        api = self.mock_api({("POST", "/signup"): ok(MEMBER, status=201)})

        response = self.client.post(reverse("accounts:signup"), SIGNUP_DATA)

        self.assertRedirects(response, reverse("accounts:signin"), fetch_redirect_response=False)
        payload = api.called("POST", "/signup")[0].kwargs["json"]
        self.assertEqual(payload["phone"], "+6281234567890")
        self.assertIs(payload["isAdmin"], False)

    def test_weak_password_is_rejected_without_call(self):
        api = self.mock_api()

        response = self.client.post(reverse("accounts:signup"), {**SIGNUP_DATA, "password": "password"})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Kekuatan password: lemah")
        self.assertEqual(api.called("POST", "/signup"), [])

    def test_server_error_is_shown(self):
        self.mock_api({("POST", "/signup"): fail("Email sudah terdaftar")})

        response = self.client.post(reverse("accounts:signup"), SIGNUP_DATA)

        self.assertContains(response, "Email sudah terdaftar")


class SignUpFormTests(SimpleTestCase):
    def test_username_must_be_alphanumeric(self):
        form = SignUpForm(data={**SIGNUP_DATA, "username": "siti_123"})
        self.assertFalse(form.is_valid())
        self.assertIn("username", form.errors)

    def test_phone_must_be_e164(self):
        form = SignUpForm(data={**SIGNUP_DATA, "phone": "0812"})
        self.assertFalse(form.is_valid())
        self.assertIn("phone", form.errors)

    def test_weak_password_reports_strength(self):
        form = SignUpForm(data={**SIGNUP_DATA, "password": "password1"})
        self.assertFalse(form.is_valid())
        self.assertIn("Kekuatan password: sedang", form.errors["password"])

    def test_normalize_phone(self):
        self.assertEqual(normalize_phone(" +62 812 3456 "), "+628123456")
        self.assertEqual(normalize_phone("62812"), "+62812")
        self.assertEqual(normalize_phone(""), "")


class PasswordHelperTests(SimpleTestCase):
    def test_validate_password_reports_each_criterion(self):
        result = validate_password("abc")
        self.assertEqual(result, {
            "is_valid": False,
            "min_length": False,
            "has_upper_case": False,
            "has_number": False,
            "has_special_char": False,
        })
        self.assertTrue(validate_password("Secret123!")["is_valid"])

    def test_strength(self):
        self.assertEqual(password_strength("abc"), "weak")
        self.assertEqual(password_strength("abcdefgh1"), "medium")
        self.assertEqual(password_strength("Secret123!"), "strong")


# =====================
# MOT DE PASSE OUBLIE
# =====================
class PasswordRecoveryTests(ApiTestMixin, TestCase):
    def test_forgot_password_shows_sent_state(self):
        api = self.mock_api({("POST", "/forgot-password"): ok(None)})

        response = self.client.post(reverse("accounts:forgot_password"), {"email": "siti@example.com"})

        self.assertContains(response, "siti@example.com")
        self.assertTrue(response.context["sent"])
        self.assertEqual(api.called("POST", "/forgot-password")[0].kwargs["json"], {"email": "siti@example.com"})

    def test_invalid_reset_token_hides_form(self):
        self.mock_api({("GET", "/verify-reset-token"): fail("Token tidak valid")})

        response = self.client.get(reverse("accounts:reset_password") + "?token=bad&email=siti@example.com")

        self.assertContains(response, "Token tidak valid")
        self.assertNotContains(response, 'name="confirm_password"')

    def test_reset_password_posts_token_and_new_password(self):
        api = self.mock_api({("POST", "/reset-password"): ok(None)})

        response = self.client.post(
            reverse("accounts:reset_password") + "?token=good",
            {"token": "good", "password": "Newpass1!", "confirm_password": "Newpass1!"},
        )

        self.assertTrue(response.context["done"])
        self.assertEqual(
            api.called("POST", "/reset-password")[0].kwargs["json"],
            {"token": "good", "new_password": "Newpass1!"},
        )

    def test_reset_password_mismatch_is_rejected(self):
        api = self.mock_api()

        response = self.client.post(
            reverse("accounts:reset_password") + "?token=good",
            {"token": "good", "password": "Newpass1!", "confirm_password": "Other1!!"},
        )

        self.assertContains(response, "Password tidak cocok")
        self.assertEqual(api.called("POST", "/reset-password"), [])


# =====================
# PROFIL
# =====================
class ProfileTests(ApiTestMixin, TestCase):
    def setUp(self):
        self.api = self.mock_api()
        self.sign_in_as(MEMBER, self.api)

    def test_profile_merges_fresh_user_data(self):
        self.api.routes[("GET", "/users/7")] = ok({"id": 7, "address": "Jl. Merdeka 1"})

        response = self.client.get(reverse("accounts:profile"))

        self.assertContains(response, "Jl. Merdeka 1")
        self.assertContains(response, "Siti Aminah")

    def test_profile_falls_back_to_session_user(self):
        response = self.client.get(reverse("accounts:profile"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "siti@example.com")

    def test_edit_profile_patches_users(self):
        self.api.routes[("PATCH", "/users")] = ok({"id": 7, "name": "Siti A."})

        response = self.client.post(reverse("accounts:edit_profile"), {
            "name": "Siti A.",
            "email": "siti@example.com",
            "phone": "+6281234567890",
            "address": "",
            "gender": "Female",
        })

        self.assertRedirects(response, reverse("accounts:profile"), fetch_redirect_response=False)
        self.assertEqual(self.api.called("PATCH", "/users")[0].kwargs["json"]["gender"], "Female")

    def test_change_password_mismatch_never_calls_api(self):
        response = self.client.post(reverse("accounts:change_password"), {
            "old_password": "Old12345!",
            "new_password": "Newpass1!",
            "confirm_new_password": "Different1!",
        })

        self.assertContains(response, "New passwords don&#x27;t match!")
        self.assertEqual(self.api.called("PUT", "/users/change-password"), [])

    def test_change_password_too_short(self):
        response = self.client.post(reverse("accounts:change_password"), {
            "old_password": "Old12345!",
            "new_password": "short",
            "confirm_new_password": "short",
        })

        self.assertContains(response, "Password must be at least 8 characters long")

    def test_change_password_server_error_keeps_modal_open(self):
        self.api.routes[("PUT", "/users/change-password")] = fail("Old password is incorrect")

        response = self.client.post(reverse("accounts:change_password"), {
            "old_password": "Wrong123!",
            "new_password": "Newpass1!",
            "confirm_new_password": "Newpass1!",
        })

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Old password is incorrect")

    def test_change_image_uploads_photo_field(self):
        self.api.routes[("PATCH", "/change-image")] = ok({"id": 7, "photo": "avatar.gif"})
        photo = SimpleUploadedFile("avatar.gif", SMALL_GIF, content_type="image/gif")

        response = self.client.post(reverse("accounts:change_image"), {"photo": photo})

        self.assertRedirects(response, reverse("accounts:profile"), fetch_redirect_response=False)
        call = self.api.called("PATCH", "/change-image")[0]
        self.assertEqual(call.kwargs["files"]["photo"][0], "avatar.gif")
        self.assertNotIn("json", call.kwargs)


class ContextProcessorTests(ApiTestMixin, TestCase):
    def test_modal_query_parameter_opens_modal(self):
        self.mock_api()
        response = self.client.get(reverse("core:about_us") + "?modal=signup")
        self.assertEqual(response.context["active_modal"], "signup")
        self.assertContains(response, 'id="signup-modal"')

    def test_unknown_modal_is_ignored(self):
        self.mock_api()
        response = self.client.get(reverse("core:about_us") + "?modal=admin")
        self.assertIsNone(response.context["active_modal"])
