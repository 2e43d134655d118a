import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse, reverse_lazy
from django.utils.decorators import method_decorator
from django.utils.http import url_has_allowed_host_and_scheme
from django.views import View
from django.views.decorators.http import require_POST
from django.views.generic import FormView, TemplateView

from apps.core.api import ApiError, get_api_client

from .forms import (
    ChangeImageForm,
    ChangePasswordForm,
    EditProfileForm,
    ForgotPasswordForm,
    ResetPasswordForm,
    SignInForm,
    SignUpForm,
)
from .guards import SignInRequiredMixin
from .session import LOGIN_SUCCESS, LOGOUT, USER_SUCCESS, dispatch

logger = logging.getLogger(__name__)


class ApiFormView(FormView):
    """
    A modal backed by one API call.

    ``submit`` performs the call; an ``ApiError`` keeps the modal open with the
    server's message (or ``error_message``) as a non-field error.
    """
    error_message = "Permintaan gagal"

    def submit(self, form, client):
        raise NotImplementedError

    def form_valid(self, form):
        client = get_api_client(self.request)
        try:
            response = self.submit(form, client)
        except ApiError as exc:
            form.add_error(None, exc.message_or(self.error_message))
            return self.form_invalid(form)
        return response or super().form_valid(form)


#-----------------
# Sign in / sign up / logout
#-----------------
class SignInView(ApiFormView):
    template_name = "accounts/signin.html"
    form_class = SignInForm
    error_message = "Login gagal"

    def get_success_url(self):
        next_url = self.request.POST.get("next") or self.request.GET.get("next")
        if next_url and url_has_allowed_host_and_scheme(
            next_url, allowed_hosts={self.request.get_host()}, require_https=self.request.is_secure()
        ):
            return next_url
        return reverse("core:home")

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["next"] = self.request.POST.get("next") or self.request.GET.get("next", "")
        context["active_modal"] = "signin"
        return context

    def submit(self, form, client):
        data = client.post("/signin", json=form.to_payload()) or {}
        token = data.get("token")
        if not token:
            raise ApiError("Login gagal")
        dispatch(self.request, LOGIN_SUCCESS, {**(data.get("user") or {}), "token": token})
        logger.info("Visitor signed in as %s", self.request.auth.user.username or self.request.auth.user.email)


class SignUpView(ApiFormView):
    template_name = "accounts/signup.html"
    form_class = SignUpForm
    success_url = reverse_lazy("accounts:signin")
    error_message = "Registrasi gagal. Silakan coba lagi."

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["active_modal"] = "signup"
        return context

    def submit(self, form, client):
        client.post("/signup", json=form.to_payload())
        messages.success(self.request, "Registrasi berhasil! Silakan masuk dengan akun Anda.")


@method_decorator(require_POST, name="dispatch")
class LogoutView(View):
    def post(self, request, *args, **kwargs):
        dispatch(request, LOGOUT)
        return redirect("core:home")


#-----------------
# Password recovery
#-----------------
class ForgotPasswordView(ApiFormView):
    template_name = "accounts/forgot_password.html"
    form_class = ForgotPasswordForm
    error_message = "Gagal mengirim tautan reset"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["active_modal"] = "forgot"
        return context

    def submit(self, form, client):
        email = form.cleaned_data["email"]
        client.post("/forgot-password", json={"email": email})
        return self.render_to_response(self.get_context_data(form=form, sent=True, email=email))


class ResetPasswordView(ApiFormView):
    """
    Landing page of the reset link: ``/reset-password/?token=...&email=...``.
    The token is checked first; an invalid or expired one never shows the form.
    """
    template_name = "accounts/reset_password.html"
    form_class = ResetPasswordForm
    error_message = "Gagal reset password. Silakan coba lagi."

    def dispatch(self, request, *args, **kwargs):
        self.token = request.POST.get("token") or request.GET.get("token") or ""
        self.email = request.GET.get("email", "")
        return super().dispatch(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update({"token": self.token, "email": self.email})
        return context

    def get(self, request, *args, **kwargs):
        if not self.token:
            return self.render_to_response(self.get_context_data(invalid_token="Tautan reset tidak valid"))
        try:
            get_api_client(request).get("/verify-reset-token", params={"token": self.token})
        except ApiError as exc:
            return self.render_to_response(
                self.get_context_data(invalid_token=exc.message_or("Tautan reset tidak valid atau sudah kedaluwarsa"))
            )
        return super().get(request, *args, **kwargs)

    def submit(self, form, client):
        if not self.token:
            raise ApiError("Tautan reset tidak valid")
        client.post("/reset-password", json={"token": self.token, "new_password": form.cleaned_data["password"]})
        return self.render_to_response(self.get_context_data(form=form, done=True))


#-----------------
# Profile
#-----------------
class ProfileView(SignInRequiredMixin, TemplateView):
    template_name = "accounts/profile.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        user = self.request.auth.user
        profile = user
        if user and user.id is not None:
            try:
                profile = user.merged(get_api_client(self.request).get(f"/users/{user.id}"))
            except ApiError as exc:
                logger.warning("Profile of user %s unavailable, using session data: %s", user.id, exc)
        context["profile"] = profile
        return context


class ProfileModalView(SignInRequiredMixin, ApiFormView):
    """A modal opened over the profile page; success closes it and returns there."""
    success_url = reverse_lazy("accounts:profile")
    success_message = ""

    def form_valid(self, form):
        response = super().form_valid(form)
        if not form.errors and self.success_message:
            messages.success(self.request, self.success_message)
        return response


class EditProfileView(ProfileModalView):
    template_name = "accounts/edit_profile.html"
    form_class = EditProfileForm
    error_message = "Failed to update profile"
    success_message = "Profile updated successfully!"

    def get_form(self, form_class=None):
        if self.request.method == "POST":
            return EditProfileForm(self.request.POST)
        return EditProfileForm.for_user(self.request.auth.user)

    def submit(self, form, client):
        data = client.patch("/users", json=form.to_payload())
        user = self.request.auth.user
        dispatch(self.request, USER_SUCCESS, user.merged(data or form.to_payload()).as_dict())


class ChangePasswordView(ProfileModalView):
    template_name = "accounts/change_password.html"
    form_class = ChangePasswordForm
    error_message = "Failed to change password"
    success_message = "Password changed successfully!"

    def submit(self, form, client):
        client.put("/users/change-password", json=form.to_payload())


class ChangeImageView(ProfileModalView):
    template_name = "accounts/change_image.html"
    form_class = ChangeImageForm
    error_message = "Failed to update image"
    success_message = "Profile image updated successfully!"

    def submit(self, form, client):
        photo = form.cleaned_data["photo"]
        photo.seek(0)
        data = client.patch(
            "/change-image",
            files={"photo": (photo.name, photo.read(), getattr(photo, "content_type", None) or "application/octet-stream")},
        )
        if isinstance(data, dict) and data:
            dispatch(self.request, USER_SUCCESS, self.request.auth.user.merged(data).as_dict())
