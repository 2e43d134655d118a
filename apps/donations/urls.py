from django.urls import path

from .views import AllDonationsView, DonateView, MyDonationsView, PaymentResultView

app_name = "donations"

urlpatterns = [
    path("campaigns/<int:pk>/donate/", DonateView.as_view(), name="donate"),
    path("donations/", MyDonationsView.as_view(), name="my_donations"),
    path("history/", MyDonationsView.as_view(), name="history"),
    path("admin/donations/", AllDonationsView.as_view(), name="all"),
    path("donation-success/", PaymentResultView.as_view(result="success"), name="success"),
    path("donation-pending/", PaymentResultView.as_view(result="pending"), name="pending"),
    path("donation-cancelled/", PaymentResultView.as_view(result="cancelled"), name="cancelled"),
]
