"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.

Version claims travel either in the request body (``version``), as a
``?version=`` query parameter on DELETE, or as an ``If-Match`` header.
Every response carrying a product also carries ``ETag: "<version>"``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import (
    MAX_INTEGER,
    CreateProductDTO,
    ReplaceProductDTO,
    UpdateProductDTO,
)
from modules.products.exceptions import (
    ProductNotFound,
    ProductValidationError,
    ProductVersionConflict,
)
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import (
    SEARCH_FIELDS,
    ProductDjangoRepository,
)
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

IF_MATCH_RE = re.compile(r'^\s*(?:W/)?"?(\d+)"?\s*$')

UPDATE_KEYS = ("name", "price", "description", "quantity", "version")


class InvalidVersionClaim(ValueError):
    """A version claim was present but not a non-negative integer."""


def parse_version_claim(raw: Optional[str]) -> Optional[int]:
    """Parse an ``If-Match`` value or ``version`` query parameter.

    Accepts ``3``, ``"3"`` and ``W/"3"``.  Returns ``None`` when absent.
    """
    if raw is None or raw == "":
        return None
    match = IF_MATCH_RE.match(raw)
    if not match:
        raise InvalidVersionClaim(f"Invalid version claim: {raw!r}.")
    claimed = int(match.group(1))
    if claimed > MAX_INTEGER:
        raise InvalidVersionClaim(f"Version claim out of range: {raw!r}.")
    return claimed


def _not_found() -> Response:
    return Response(
        {"detail": "Product not found."},
        status=status.HTTP_404_NOT_FOUND,
    )


def _bad_request(exc: Exception) -> Response:
    return Response(
        {"detail": str(exc)},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _conflict(exc: ProductVersionConflict) -> Response:
    return Response(
        {
            "detail": str(exc),
            "expected_version": exc.expected,
            "current_version": exc.actual,
        },
        status=status.HTTP_409_CONFLICT,
        headers={"ETag": f'"{exc.actual}"'},
    )


def _product_response(product: Product, status_code: int = status.HTTP_200_OK) -> Response:
    return Response(
        ProductSerializer(product).data,
        status=status_code,
        headers={"ETag": product.etag()},
    )


class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer, so every write is version-guarded.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    filterset_class = ProductFilter
    search_fields = list(SEARCH_FIELDS)
    ordering_fields = [
        "id",
        "name",
        "price",
        "quantity",
        "version",
        "created_at",
        "updated_at",
    ]
    ordering = ["id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    lookup_value_regex = r"\d+"
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?name=&min_price=&max_price=&search=&ordering="""
        filterset = ProductFilter(request.query_params, queryset=Product.objects.none())
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        # OrderingFilter drops unknown fields and falls back to ``ordering``.
        products = self._service.list_products(
            filterset.to_lookups() or None,
            search_terms=SearchFilter().get_search_terms(request) or None,
            ordering=OrderingFilter().get_ordering(
                request, Product.objects.none(), self
            ),
        )
        return Response(ProductSerializer(products, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(int(pk))
        except ProductNotFound:
            return _not_found()
        return _product_response(product)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/

        A ``version`` in the payload is ignored: new products start at 0.
        """
        data = request.data
        if not isinstance(data, Mapping):
            return _bad_request(ValueError("Expected a JSON object."))

        try:
            dto = CreateProductDTO(
                name=data.get("name"),
                price=data.get("price"),
                description=data.get("description", ""),
                quantity=data.get("quantity", 0),
            )
        except (PydanticValidationError, ValueError) as exc:
            return _bad_request(exc)

        product = self._service.create_product(dto)
        return _product_response(product, status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/: replaces the full state."""
        return self._guarded_update(request, int(pk), ReplaceProductDTO)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/: writes only supplied fields."""
        return self._guarded_update(request, int(pk), UpdateProductDTO)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/?version=N (or If-Match)."""
        product_id = int(pk)
        try:
            claimed = parse_version_claim(
                request.query_params.get("version")
                or request.headers.get("If-Match")
            )
        except InvalidVersionClaim as exc:
            return self._bad_request_unless_missing(product_id, exc)

        try:
            self._service.delete_product(product_id, claimed)
        except ProductNotFound:
            return _not_found()
        except ProductVersionConflict as exc:
            return _conflict(exc)
        except ProductValidationError as exc:
            return _bad_request(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _guarded_update(self, request: Request, product_id: int, dto_class: Any) -> Response:
        data = request.data
        if not isinstance(data, Mapping):
            return self._bad_request_unless_missing(
                product_id, ValueError("Expected a JSON object.")
            )

        try:
            dto = dto_class(**{key: data[key] for key in UPDATE_KEYS if key in data})
            claimed = dto.version
            if claimed is None:
                claimed = parse_version_claim(request.headers.get("If-Match"))
        except (PydanticValidationError, ValueError) as exc:
            return self._bad_request_unless_missing(product_id, exc)

        try:
            product = self._service.update_product(product_id, dto, claimed)
        except ProductNotFound:
            return _not_found()
        except ProductVersionConflict as exc:
            return _conflict(exc)
        except ProductValidationError as exc:
            return _bad_request(exc)
        return _product_response(product)

    def _bad_request_unless_missing(self, product_id: int, exc: Exception) -> Response:
        """Report 404 ahead of 400 when the target does not exist."""
        try:
            self._service.get_product(product_id)
        except ProductNotFound:
            return _not_found()
        return _bad_request(exc)
