from django.urls import path
from .views import (
    ChangeImageView,
    ChangePasswordView,
    EditProfileView,
    ForgotPasswordView,
    LogoutView,
    ProfileView,
    ResetPasswordView,
    SignInView,
    SignUpView,
)

app_name = "accounts"

urlpatterns = [
    path("signup/", SignUpView.as_view(), name="signup"),
    path("signin/", SignInView.as_view(), name="signin"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("forgot-password/", ForgotPasswordView.as_view(), name="forgot_password"),
    path("reset-password/", ResetPasswordView.as_view(), name="reset_password"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("profile/edit/", EditProfileView.as_view(), name="edit_profile"),
    path("profile/change-password/", ChangePasswordView.as_view(), name="change_password"),
    path("profile/change-image/", ChangeImageView.as_view(), name="change_image"),
]
