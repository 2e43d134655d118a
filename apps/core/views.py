from django.shortcuts import render
from django.views.generic import TemplateView

from apps.campaigns.services import fetch_campaigns, load_campaigns
from apps.core.api import ApiError, get_api_client

from .search import run_search


class HomeView(TemplateView):
    template_name = "core/home.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        campaigns, summary, _ = load_campaigns(get_api_client(self.request))
        context["campaigns"] = campaigns
        context["summary"] = summary
        return context


class AboutUsView(TemplateView):
    template_name = "core/about_us.html"


class VisionMissionView(TemplateView):
    template_name = "core/vision_mission.html"


class ContactUsView(TemplateView):
    template_name = "core/contact_us.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["contacts"] = [
            {"label": "Email", "value": "info@amalsas.id", "href": "mailto:info@amalsas.id"},
            {"label": "Instagram", "value": "@amalsas.id", "href": "https://instagram.com/amalsas.id"},
            {"label": "WhatsApp", "value": "+62 812-3456-7890", "href": "https://wa.me/6281234567890"},
        ]
        return context


class SearchView(TemplateView):
    template_name = "core/search_results.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        query = self.request.GET.get("q", "").strip()
        campaigns = []
        if query:
            try:
                campaigns, _ = fetch_campaigns(get_api_client(self.request))
            except ApiError:
                campaigns = []
        context["query"] = query
        context["results"] = run_search(query, campaigns, is_admin=self.request.auth.is_admin)
        return context


class NotFoundView(TemplateView):
    template_name = "core/404.html"

    def render_to_response(self, context, **response_kwargs):
        response_kwargs.setdefault("status", 404)
        return super().render_to_response(context, **response_kwargs)


def page_not_found(request, exception=None):
    return render(request, "core/404.html", status=404)
