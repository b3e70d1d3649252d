from __future__ import annotations

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from modules.accounts.constants import Role
from modules.accounts.models import RoleGrant, ShopperProfile, VendorProfile
from modules.orders.constants import OrderStatus
from modules.orders.models import Order

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Marketplace actors
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user():
    """Factory: ``make_user("name", Role.VENDOR, ...)`` with role grants."""

    def _make(username: str, *roles: str):
        user = User.objects.create_user(username=username, password="testpass123")
        for role in roles:
            RoleGrant.objects.create(user=user, role=role)
        return user

    return _make


@pytest.fixture()
def consumer(make_user):
    return make_user("ama", Role.CONSUMER)


@pytest.fixture()
def other_consumer(make_user):
    return make_user("kwame", Role.CONSUMER)


@pytest.fixture()
def vendor_user(make_user):
    return make_user("kofi", Role.CONSUMER, Role.VENDOR)


@pytest.fixture()
def vendor_profile(vendor_user):
    return VendorProfile.objects.create(user=vendor_user, business_name="Kofi's Shop")


@pytest.fixture()
def shopper_user(make_user):
    return make_user("yaw", Role.SHOPPER)


@pytest.fixture()
def shopper_profile(shopper_user):
    return ShopperProfile.objects.create(user=shopper_user, display_name="Yaw")


@pytest.fixture()
def admin_user(make_user):
    return make_user("efua", Role.ADMIN)


@pytest.fixture()
def make_order(consumer, vendor_profile, shopper_profile):
    """Factory: an order owned by ``consumer`` / ``vendor_profile``.

    The shopper is assigned unless ``with_shopper=False``.
    """

    def _make(status: str = OrderStatus.PENDING, with_shopper: bool = True) -> Order:
        return Order.objects.create(
            consumer=consumer,
            vendor=vendor_profile,
            shopper=shopper_profile if with_shopper else None,
            status=status,
            total=Decimal("42.00"),
        )

    return _make


@pytest.fixture()
def client_for():
    """Factory: an APIClient carrying a real SimpleJWT bearer token."""

    def _client(user) -> APIClient:
        client = APIClient()
        token = RefreshToken.for_user(user).access_token
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client

    return _client
