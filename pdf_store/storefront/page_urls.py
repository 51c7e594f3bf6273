# storefront/page_urls.py
"""
STOREFRONT PAGE URLS

Mounted at the site root in backend/urls.py:
- GET  /
- GET  /success/
- POST /home/
"""

from django.urls import path

from storefront.views.pages import ReturnHomeView, StorefrontView, SuccessPageView

app_name = "storefront_pages"

urlpatterns = [
    path("", StorefrontView.as_view(), name="home"),
    path("success/", SuccessPageView.as_view(), name="success"),
    path("home/", ReturnHomeView.as_view(), name="return-home"),
]
