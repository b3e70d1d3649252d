"""State machine tests for OrderStatusService against the database.

Covers:
- The six reference scenarios (vendor accept, vendor skip, shopper pickup,
  admin reopening a completed order, stranger consumer, stale read).
- A full happy-path lifecycle walked by the three ordinary roles.
- History recording on every accepted transition, none on rejection.
- ``updated_at`` moves on success and only on success.
- Model-level helpers.
"""

from __future__ import annotations

from unittest.mock import patch
from uuid import uuid4

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.accounts.repositories.django_repository import (
    ProfileDjangoRepository,
    RoleGrantDjangoRepository,
)
from modules.orders.access import RoleResolver
from modules.orders.constants import EffectiveRole, OrderStatus
from modules.orders.dtos import UpdateOrderStatusDTO
from modules.orders.exceptions import (
    InvalidStatusTransition,
    OrderAccessDenied,
    OrderNotFound,
    OrderStatusConflict,
)
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderStatusService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _build_service(order_repository=None) -> OrderStatusService:
    return OrderStatusService(
        order_repository=order_repository or OrderDjangoRepository(),
        role_resolver=RoleResolver(
            role_grant_repository=RoleGrantDjangoRepository(),
            profile_repository=ProfileDjangoRepository(),
        ),
    )


@pytest.fixture()
def service():
    return _build_service()


def _move(service: OrderStatusService, user, order: Order, new_status: str):
    return service.update_status(
        user.pk, UpdateOrderStatusDTO(order_id=str(order.id), new_status=new_status)
    )


# ===========================================================================
# Reference scenarios
# ===========================================================================


class TestScenarios:
    def test_vendor_accepts_pending_order(self, service, make_order, vendor_user):
        order = make_order(OrderStatus.PENDING)

        result = _move(service, vendor_user, order, OrderStatus.ACCEPTED)

        assert result.previous_status == "pending"
        assert result.new_status == "accepted"
        order.refresh_from_db()
        assert order.status == OrderStatus.ACCEPTED

    def test_vendor_cannot_jump_pending_to_ready(self, service, make_order, vendor_user):
        order = make_order(OrderStatus.PENDING)

        with pytest.raises(InvalidStatusTransition, match="not allowed for vendor"):
            _move(service, vendor_user, order, OrderStatus.READY)

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_shopper_picks_up_ready_order(self, service, make_order, shopper_user):
        order = make_order(OrderStatus.READY)

        result = _move(service, shopper_user, order, OrderStatus.PICKED_UP)

        assert result.new_status == "picked_up"

    def test_admin_cannot_reopen_completed_order(self, service, make_order, admin_user):
        order = make_order(OrderStatus.COMPLETED)

        with pytest.raises(InvalidStatusTransition) as exc_info:
            _move(service, admin_user, order, OrderStatus.PENDING)

        assert exc_info.value.role == "admin"
        assert "'completed' to 'pending'" in str(exc_info.value)

    def test_other_consumer_is_forbidden(self, service, make_order, other_consumer):
        order = make_order(OrderStatus.INSPECTING)

        with pytest.raises(OrderAccessDenied):
            _move(service, other_consumer, order, OrderStatus.APPROVED)

    def test_stale_read_loses_to_concurrent_writer(
        self, make_order, shopper_user, admin_user
    ):
        """Both callers read ``ready``; the shopper writes first."""
        order = make_order(OrderStatus.READY)

        class StaleReadRepository(OrderDjangoRepository):
            """Returns the order as read, then lets a rival commit first."""

            def get_by_id(self, id):
                snapshot = super().get_by_id(id)
                _move(_build_service(), shopper_user, order, OrderStatus.PICKED_UP)
                return snapshot

        racing_service = _build_service(StaleReadRepository())
        dto = UpdateOrderStatusDTO(
            order_id=str(order.id), new_status=OrderStatus.CANCELLED
        )

        # Unwrapped so the failed attempt does not roll back the rival's write.
        with pytest.raises(OrderStatusConflict):
            OrderStatusService.update_status.__wrapped__(
                racing_service, admin_user.pk, dto
            )

        order.refresh_from_db()
        assert order.status == OrderStatus.PICKED_UP
        assert not OrderStatusHistory.objects.filter(
            order=order, new_status=OrderStatus.CANCELLED
        ).exists()


# ===========================================================================
# Lifecycle
# ===========================================================================


class TestLifecycle:
    def test_full_lifecycle_by_ordinary_roles(
        self, service, make_order, consumer, vendor_user, shopper_user
    ):
        order = make_order(OrderStatus.PENDING)
        steps = [
            (vendor_user, OrderStatus.ACCEPTED),
            (vendor_user, OrderStatus.PREPARING),
            (vendor_user, OrderStatus.READY),
            (shopper_user, OrderStatus.PICKED_UP),
            (shopper_user, OrderStatus.INSPECTING),
            (consumer, OrderStatus.APPROVED),
            (consumer, OrderStatus.COMPLETED),
        ]
        for user, target in steps:
            _move(service, user, order, target)

        order.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED
        assert OrderStatusHistory.objects.filter(order=order).count() == len(steps)

    def test_consumer_disputes_then_admin_settles(
        self, service, make_order, consumer, admin_user
    ):
        order = make_order(OrderStatus.INSPECTING)

        _move(service, consumer, order, OrderStatus.DISPUTED)
        result = _move(service, admin_user, order, OrderStatus.COMPLETED)

        assert result.previous_status == "disputed"

    def test_vendor_cancels_pending_then_nobody_moves_it(
        self, service, make_order, vendor_user, admin_user
    ):
        order = make_order(OrderStatus.PENDING)
        _move(service, vendor_user, order, OrderStatus.CANCELLED)

        for target in OrderStatus.values:
            with pytest.raises(InvalidStatusTransition):
                _move(service, admin_user, order, target)

    def test_consumer_cannot_approve_before_inspection(
        self, service, make_order, consumer
    ):
        order = make_order(OrderStatus.PICKED_UP)

        with pytest.raises(InvalidStatusTransition, match="not allowed for consumer"):
            _move(service, consumer, order, OrderStatus.APPROVED)

    def test_unknown_status_is_an_invalid_transition(
        self, service, make_order, admin_user
    ):
        order = make_order(OrderStatus.PENDING)

        with pytest.raises(InvalidStatusTransition):
            _move(service, admin_user, order, "shipped")

    def test_missing_order(self, service, consumer):
        with pytest.raises(OrderNotFound):
            service.update_status(
                consumer.pk,
                UpdateOrderStatusDTO(order_id=str(uuid4()), new_status="accepted"),
            )

    def test_malformed_order_id_is_not_found(self, service, consumer):
        with pytest.raises(OrderNotFound):
            service.update_status(
                consumer.pk,
                UpdateOrderStatusDTO(order_id="not-a-uuid", new_status="accepted"),
            )


# ===========================================================================
# Persistence side effects
# ===========================================================================


class TestPersistence:
    def test_history_captures_transition(self, service, make_order, vendor_user):
        order = make_order(OrderStatus.PENDING)

        _move(service, vendor_user, order, OrderStatus.ACCEPTED)

        history = OrderStatusHistory.objects.get(order=order)
        assert history.old_status == OrderStatus.PENDING
        assert history.new_status == OrderStatus.ACCEPTED
        assert history.user_id == vendor_user.pk
        assert history.role == EffectiveRole.VENDOR

    def test_admin_acting_on_own_shop_recorded_as_admin(
        self, service, make_order, vendor_user
    ):
        from modules.accounts.models import RoleGrant

        RoleGrant.objects.create(user=vendor_user, role="admin")
        order = make_order(OrderStatus.PENDING)

        _move(service, vendor_user, order, OrderStatus.READY)

        assert OrderStatusHistory.objects.get(order=order).role == "admin"

    def test_rejection_writes_nothing(self, service, make_order, vendor_user):
        order = make_order(OrderStatus.PENDING)
        before = Order.objects.values_list("updated_at", flat=True).get(pk=order.pk)

        with pytest.raises(InvalidStatusTransition):
            _move(service, vendor_user, order, OrderStatus.COMPLETED)

        after = Order.objects.values_list("updated_at", flat=True).get(pk=order.pk)
        assert before == after
        assert not OrderStatusHistory.objects.filter(order=order).exists()

    def test_success_moves_updated_at(self, service, make_order, vendor_user):
        with freeze_time("2026-03-02 09:00:00"):
            order = make_order(OrderStatus.PENDING)

        with freeze_time("2026-03-02 09:05:00"):
            _move(service, vendor_user, order, OrderStatus.ACCEPTED)
            expected = timezone.now()

        order.refresh_from_db()
        assert order.updated_at == expected
        assert order.created_at < expected

    def test_conditional_update_reports_mismatch(self, make_order):
        order = make_order(OrderStatus.ACCEPTED)
        repo = OrderDjangoRepository()

        assert repo.conditional_update(
            order.id, "pending", "accepted", timezone.now()
        ) is False
        assert repo.conditional_update(
            order.id, "accepted", "preparing", timezone.now()
        ) is True

    def test_history_failure_rolls_back_status(self, service, make_order, vendor_user):
        from django.db import DatabaseError

        from modules.orders.exceptions import OrderStoreUnavailable

        order = make_order(OrderStatus.PENDING)

        with patch.object(
            OrderDjangoRepository, "add_history", side_effect=DatabaseError("boom")
        ):
            with pytest.raises(OrderStoreUnavailable):
                _move(service, vendor_user, order, OrderStatus.ACCEPTED)

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING


# ===========================================================================
# Model helpers
# ===========================================================================


class TestModelHelpers:
    def test_can_transition_to(self, make_order):
        order = make_order(OrderStatus.PREPARING)
        assert order.can_transition_to("ready", EffectiveRole.VENDOR) is True
        assert order.can_transition_to("ready", EffectiveRole.SHOPPER) is False

    def test_allowed_next_for(self, make_order):
        order = make_order(OrderStatus.APPROVED)
        assert order.allowed_next_for(EffectiveRole.CONSUMER) == {"completed"}
        assert order.allowed_next_for(EffectiveRole.NO_ACCESS) == frozenset()
