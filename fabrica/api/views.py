"""
Fabrica API ViewSets.

Views are thin: they validate the request shape with a serializer and call
the facade. FabError subclasses are translated by FabErrorMixin:

    NotFound                               → 404
    InvalidArgument, DuplicateIdentity,
    InsufficientStock, Conflict            → 400  {"code": ..., **details}
"""

import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fabrica.exceptions import FabError, NotFound
from fabrica.models import Product, ProductionOrder, Recipe
from fabrica.service import Fab

from .serializers import (
    OrderCreateSerializer,
    OrderStatusSerializer,
    ProductCreateSerializer,
    ProductionOrderSerializer,
    ProductionRequestSerializer,
    ProductSerializer,
    RecipeDefineSerializer,
    RecipeSerializer,
    StockMovementSerializer,
)

logger = logging.getLogger(__name__)


class FabErrorMixin:
    """Turn domain errors into 404/400 responses with the error code."""

    def handle_exception(self, exc):
        if isinstance(exc, FabError):
            http_status = (
                status.HTTP_404_NOT_FOUND
                if isinstance(exc, NotFound)
                else status.HTTP_400_BAD_REQUEST
            )
            logger.info(
                f"{self.request.method} {self.request.path} → {http_status}: {exc}",
                extra={"error": exc.code},
            )
            return Response(exc.as_dict(), status=http_status)
        return super().handle_exception(exc)


def _user_tag(request) -> str:
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return f"user:{user.get_username()}"
    return "api"


class ProductViewSet(
    FabErrorMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for Product.

    list: List products (?kind=raw_material|finished_good)
    create: Create a product (code optional)
    retrieve: Get a product by code
    destroy: Delete a product (cascades to its recipe)
    receive: Credit stock
    issue: Debit stock
    """

    permission_classes = [IsAuthenticated]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    lookup_field = "code"
    lookup_value_regex = "[^/]+"

    def get_queryset(self):
        return Fab.list_products(self.request.query_params.get("kind") or None)

    def get_object(self):
        return Fab.get_product(self.kwargs["code"])

    def create(self, request, *args, **kwargs):
        """
        POST /api/fabrica/products/
        {"code": "01", "name": "Açúcar", "unit": "kg", "kind": "raw_material"}
        """
        serializer = ProductCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = Fab.create_product(
            data.get("code"),
            data["name"],
            description=data.get("description", ""),
            unit=data.get("unit", "un"),
            kind=data["kind"],
        )
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, code=None):
        Fab.delete_product(code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def receive(self, request, code=None):
        """
        Dar entrada.

        POST /api/fabrica/products/{code}/receive/
        {"quantity": "100"}
        """
        serializer = StockMovementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = Fab.receive(code, serializer.validated_data["quantity"])
        return Response(ProductSerializer(product).data)

    @action(detail=True, methods=["post"])
    def issue(self, request, code=None):
        """
        Dar baixa.

        POST /api/fabrica/products/{code}/issue/
        {"quantity": "10"}
        """
        serializer = StockMovementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = Fab.issue(code, serializer.validated_data["quantity"])
        return Response(ProductSerializer(product).data)


class RecipeViewSet(
    FabErrorMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for Recipe, addressed by finished-good code.

    list: List all recipes
    retrieve: Get the recipe of a finished good
    update: Define or replace the recipe of a finished good (PUT)
    """

    permission_classes = [IsAuthenticated]
    queryset = Recipe.objects.all()
    serializer_class = RecipeSerializer
    lookup_field = "product"
    lookup_value_regex = "[^/]+"

    def get_queryset(self):
        return Fab.list_recipes()

    def get_object(self):
        return Fab.get_recipe(self.kwargs["product"])

    def update(self, request, product=None):
        """
        PUT /api/fabrica/recipes/{product}/
        {"name": "Barra de Chocolate", "lines": [{"material": "01", "quantity": "0.1"}]}
        """
        serializer = RecipeDefineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        recipe = Fab.define_recipe(
            product,
            [dict(line) for line in data["lines"]],
            name=data.get("name") or None,
            description=data.get("description", ""),
            unit=data.get("unit", "un"),
        )
        return Response(RecipeSerializer(recipe).data)


class ProductionViewSet(FabErrorMixin, viewsets.ViewSet):
    """
    Feasibility and execution.

    feasibility: Check stock for a quantity (read-only)
    execute: Produce a quantity (all-or-nothing)
    """

    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=["post"])
    def feasibility(self, request):
        """
        POST /api/fabrica/production/feasibility/
        {"product": "CHOC", "quantity": "500"}

        200 either way; "feasible": false carries the first shortage.
        """
        serializer = ProductionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = Fab.check_feasibility(data["product"], data["quantity"])
        return Response(result.as_dict())

    @action(detail=False, methods=["post"])
    def execute(self, request):
        """
        POST /api/fabrica/production/execute/
        {"product": "CHOC", "quantity": "500"}

        Out of stock → 400 {"code": "INSUFFICIENT_STOCK", "product", "needed", "available"}
        """
        serializer = ProductionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = Fab.execute(data["product"], data["quantity"])
        return Response(result.as_dict())


class ProductionOrderViewSet(
    FabErrorMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for ProductionOrder.

    list: List orders (?status=PENDING&product=CHOC)
    create: Register a PENDING order
    retrieve: Get an order by code
    destroy: Delete an order record
    status: Move the order to a new status (EXECUTED runs production)
    """

    permission_classes = [IsAuthenticated]
    queryset = ProductionOrder.objects.all()
    serializer_class = ProductionOrderSerializer
    lookup_field = "code"
    lookup_value_regex = "[^/]+"

    def get_queryset(self):
        return Fab.list_orders(
            status=self.request.query_params.get("status") or None,
            product=self.request.query_params.get("product") or None,
        )

    def get_object(self):
        return Fab.get_order(self.kwargs["code"])

    def create(self, request, *args, **kwargs):
        """
        POST /api/fabrica/orders/
        {"product": "CHOC", "quantity": "500", "notes": ""}
        """
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = Fab.order(
            data["product"],
            data["quantity"],
            notes=data.get("notes", ""),
            created_by=_user_tag(request),
        )
        return Response(
            ProductionOrderSerializer(order).data, status=status.HTTP_201_CREATED
        )

    def destroy(self, request, code=None):
        Fab.delete_order(code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, code=None):
        """
        PATCH /api/fabrica/orders/{code}/status/
        {"status": "APPROVED"}
        """
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = Fab.set_order_status(
            code, serializer.validated_data["status"], user=request.user
        )
        return Response(ProductionOrderSerializer(order).data)
