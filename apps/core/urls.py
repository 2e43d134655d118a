from django.urls import path

from .views import (
    AboutUsView,
    ContactUsView,
    HomeView,
    NotFoundView,
    SearchView,
    VisionMissionView,
)

app_name = "core"

urlpatterns = [
    path("", HomeView.as_view(), name="home"),
    path("about-us/", AboutUsView.as_view(), name="about_us"),
    path("vision-mission/", VisionMissionView.as_view(), name="vision_mission"),
    path("contact-us/", ContactUsView.as_view(), name="contact_us"),
    path("search/", SearchView.as_view(), name="search"),
    path("404/", NotFoundView.as_view(), name="not_found"),
]
