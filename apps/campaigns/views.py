import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse_lazy
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.http import require_POST
from django.views.generic import TemplateView

from apps.accounts.guards import AdminRequiredMixin
from apps.accounts.views import ApiFormView
from apps.core.api import ApiError, get_api_client
from apps.donations.forms import DonationForm

from .forms import CampaignForm
from .records import Campaign
from .services import fetch_donation_summary, load_campaign, load_campaigns

logger = logging.getLogger(__name__)


def render_campaign_detail(request, campaign_id, donation_form=None, **extra):
    """Campaign page; shared with the donation flow which re-renders it on errors."""
    campaign = load_campaign(get_api_client(request), campaign_id)
    context = {
        "campaign": campaign,
        "campaign_id": campaign_id,
        "donation_form": donation_form or DonationForm(),
        **extra,
    }
    return render(request, "campaigns/detail.html", context, status=200 if campaign else 404)


#-----------------
# Public pages
#-----------------
class CampaignDetailView(View):
    def get(self, request, pk):
        return render_campaign_detail(request, pk)


#-----------------
# Administration
#-----------------
class DashboardView(AdminRequiredMixin, TemplateView):
    template_name = "campaigns/dashboard.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        client = get_api_client(self.request)
        campaigns, summary, placeholders = load_campaigns(client)
        context.update({
            "campaigns": campaigns,
            "summary": summary,
            "using_placeholders": placeholders,
            "donation_summary": fetch_donation_summary(client),
        })
        return context


class CampaignFormView(AdminRequiredMixin, ApiFormView):
    template_name = "campaigns/campaign_form.html"
    form_class = CampaignForm
    success_url = reverse_lazy("campaigns:dashboard")
    require_photo = False
    success_message = ""

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["require_photo"] = self.require_photo
        return kwargs

    def form_valid(self, form):
        response = super().form_valid(form)
        if not form.errors:
            messages.success(self.request, self.success_message)
        return response


class CampaignCreateView(CampaignFormView):
    require_photo = True
    error_message = "Gagal membuat campaign"
    success_message = "Campaign berhasil dibuat!"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["is_edit"] = False
        return context

    def submit(self, form, client):
        form.send(client, "POST", "/campaigns/add")
        logger.info("Campaign %r created", form.cleaned_data["title"])


class CampaignEditView(CampaignFormView):
    error_message = "Gagal memperbarui campaign"
    success_message = "Campaign berhasil diperbarui!"

    def dispatch(self, request, *args, **kwargs):
        self.campaign = None
        self.load_error = None
        return super().dispatch(request, *args, **kwargs)

    def load(self):
        if self.campaign is None and self.load_error is None:
            try:
                data = get_api_client(self.request).get(f"/campaigns/{self.kwargs['pk']}")
            except ApiError as exc:
                self.load_error = exc.message_or("Gagal memuat data campaign")
                return None
            if isinstance(data, dict) and isinstance(data.get("campaign"), dict):
                data = data["campaign"]
            self.campaign = Campaign.from_api(data)
        return self.campaign

    def get(self, request, *args, **kwargs):
        if self.load() is None:
            return self.render_to_response({"load_error": self.load_error or "Gagal memuat data campaign", "is_edit": True})
        return super().get(request, *args, **kwargs)

    def get_initial(self):
        if self.request.method != "GET":
            return {}
        campaign = self.load()
        return CampaignForm.initial_from(campaign) if campaign else {}

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["is_edit"] = True
        context["campaign"] = self.campaign
        context["campaign_id"] = self.kwargs["pk"]
        return context

    def submit(self, form, client):
        form.send(client, "PUT", f"/campaigns/edit/{self.kwargs['pk']}")
        logger.info("Campaign %s updated", self.kwargs["pk"])


@method_decorator(require_POST, name="dispatch")
class CampaignDeleteView(AdminRequiredMixin, View):
    def post(self, request, pk):
        try:
            get_api_client(request).delete(f"/campaigns/{pk}")
        except ApiError as exc:
            messages.error(request, exc.message_or("Gagal menghapus campaign"))
            return redirect("campaigns:detail", pk=pk)
        logger.info("Campaign %s deleted", pk)
        messages.success(request, "Campaign berhasil dihapus")
        return redirect("core:home")
