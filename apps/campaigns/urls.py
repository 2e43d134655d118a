from django.urls import path

from .views import (
    CampaignCreateView,
    CampaignDeleteView,
    CampaignDetailView,
    CampaignEditView,
    DashboardView,
)

app_name = "campaigns"

urlpatterns = [
    path("campaigns/<int:pk>/", CampaignDetailView.as_view(), name="detail"),
    path("campaigns/<int:pk>/delete/", CampaignDeleteView.as_view(), name="delete"),
    path("admin/dashboard/", DashboardView.as_view(), name="dashboard"),
    path("admin/campaigns/add/", CampaignCreateView.as_view(), name="add"),
    path("admin/campaigns/edit/<int:pk>/", CampaignEditView.as_view(), name="edit"),
]
