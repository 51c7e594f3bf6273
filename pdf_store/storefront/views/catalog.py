# storefront/views/catalog.py
"""
STOREFRONT CATALOG

GET /api/store/catalog/
GET /api/store/catalog/<product_id>/

Rules:
- AllowAny (public)
- Backend is source of truth for product data
- Download links are NOT exposed here (only after payment success)

Security hardening:
- Throttle to reduce scraping/abuse
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from storefront.catalog import get_product, list_products
from storefront.serializers import ProductSerializer
from storefront.services.exceptions import UnknownProductError


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "public_catalog"


class CatalogView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]

    @extend_schema(
        tags=["Storefront"],
        responses={
            200: ProductSerializer(many=True),
            429: OpenApiResponse(description="Rate limited"),
        },
        description="Static PDF catalog, in display order.",
    )
    def get(self, request, *args, **kwargs):
        payload = ProductSerializer(list_products(), many=True).data
        return Response(payload, status=status.HTTP_200_OK)


class ProductDetailView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]

    @extend_schema(
        tags=["Storefront"],
        responses={
            200: ProductSerializer,
            404: OpenApiResponse(description="Product not found"),
            429: OpenApiResponse(description="Rate limited"),
        },
    )
    def get(self, request, product_id, *args, **kwargs):
        try:
            product = get_product(product_id)
        except UnknownProductError:
            return Response({"detail": "Product not found"}, status=status.HTTP_404_NOT_FOUND)

        return Response(ProductSerializer(product).data, status=status.HTTP_200_OK)
