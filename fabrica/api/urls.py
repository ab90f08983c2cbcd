"""
Fabrica API URLs.

Include this in your project's urlpatterns:

    path('api/fabrica/', include('fabrica.api.urls')),
"""

from rest_framework.routers import DefaultRouter

from .views import ProductionOrderViewSet, ProductionViewSet, ProductViewSet, RecipeViewSet

router = DefaultRouter()
router.register("products", ProductViewSet)
router.register("recipes", RecipeViewSet)
router.register("production", ProductionViewSet, basename="production")
router.register("orders", ProductionOrderViewSet)

urlpatterns = router.urls
