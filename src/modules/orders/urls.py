"""Order URL configuration.

Routes:
- ``POST orders/update-status/``
- ``GET  orders/{pk}/``
- ``GET  orders/{pk}/transitions/``
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

router = SimpleRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
