import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.http import require_POST
from django.views.generic import TemplateView

from apps.accounts.guards import AdminRequiredMixin, SignInRequiredMixin
from apps.campaigns.views import render_campaign_detail
from apps.core.api import ApiError, get_api_client

from .forms import DonationForm
from .records import parse_created_donation, parse_donations

logger = logging.getLogger(__name__)

DONATION_FAILED = "Terjadi kesalahan saat memproses donasi"


#-----------------
# Checkout
#-----------------
@method_decorator(require_POST, name="dispatch")
class DonateView(View):
    """
    Start a donation on a campaign page.

    Anonymous visitors get the page back with the sign-in modal open; no
    donation is created for them. The API answers with ``payment_url``: an
    absolute URL is followed, anything else is a Snap token paid on the
    checkout page.
    """

    def post(self, request, pk):
        auth = request.auth
        if not auth.is_login:
            return render_campaign_detail(request, pk, active_modal="signin", next=reverse("campaigns:detail", args=[pk]))

        form = DonationForm(request.POST)
        if not form.is_valid():
            return render_campaign_detail(request, pk, donation_form=form)

        payload = {
            "amount": form.amount_value(),
            "status": "pending",
            "user_id": auth.user.id,
            "campaign_id": pk,
        }
        try:
            data = get_api_client(request).post("/donations", json=payload)
        except ApiError as exc:
            logger.warning("Donation on campaign %s failed: %s", pk, exc)
            messages.error(request, DONATION_FAILED)
            return render_campaign_detail(request, pk, donation_form=form)

        donation = parse_created_donation(data)
        if not donation.payment_url:
            messages.error(request, DONATION_FAILED)
            return render_campaign_detail(request, pk, donation_form=form)
        if donation.redirects_to_gateway:
            return redirect(donation.payment_url)
        return render(request, "donations/checkout.html", {
            "donation": donation,
            "campaign_id": pk,
            "snap_token": donation.payment_url,
        })


class PaymentResultView(TemplateView):
    template_name = "donations/payment_result.html"
    result = "success"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["result"] = self.result
        return context


#-----------------
# Listings
#-----------------
class MyDonationsView(SignInRequiredMixin, TemplateView):
    template_name = "donations/my_donations.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        user = self.request.auth.user
        try:
            donations = parse_donations(get_api_client(self.request).get("/donations"))
        except ApiError as exc:
            messages.error(self.request, exc.message_or("Gagal memuat riwayat donasi"))
            donations = []
        context["donations"] = [d for d in donations if d.user_id == user.id]
        return context


class AllDonationsView(AdminRequiredMixin, TemplateView):
    template_name = "donations/all_donations.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        try:
            donations = parse_donations(get_api_client(self.request).get("/donations/admin/all"))
        except ApiError as exc:
            messages.error(self.request, exc.message_or("Gagal memuat data donasi"))
            donations = []
        context["donations"] = donations
        return context
