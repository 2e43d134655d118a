"""
URL configuration for the AmalSAS.id site.

Every app mounts its routes at the root: the public pages, the account
modals, the campaign pages and the donation flow each own a set of paths
(``/``, ``/profile/``, ``/campaigns/<id>/``, ``/admin/dashboard/`` ...).
"""

from django.urls import path, include

urlpatterns = [
    path("", include("apps.core.urls")),
    path("", include(("apps.accounts.urls", "accounts"), namespace="accounts")),
    path("", include("apps.campaigns.urls")),
    path("", include("apps.donations.urls")),
]

handler404 = "apps.core.views.page_not_found"
