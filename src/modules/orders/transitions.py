"""Role-aware order status transition table.

Each ordinary role owns one contiguous segment of the pipeline:

- vendor: preparation (``pending`` → ``accepted`` → ``preparing`` → ``ready``,
  or rejecting a ``pending`` order as ``cancelled``);
- shopper: fulfilment (``ready`` → ``picked_up`` → ``inspecting``);
- consumer: acceptance of the delivered goods (``inspecting`` →
  ``approved`` | ``disputed``, then ``approved`` → ``completed``).

Admins may move an open order to any other status for operational
recovery.  From the settled states they only get narrow moves
(``completed`` → ``disputed``; ``disputed`` → ``completed`` | ``cancelled``)
and ``cancelled`` is terminal even for them.

The table is built once at import time from immutable mappings and
``frozenset`` values, so concurrent readers need no locking.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from modules.orders.constants import EffectiveRole, OrderStatus

_S = OrderStatus

ALL_STATUSES: tuple[str, ...] = tuple(OrderStatus.values)

_ADMIN_SETTLED: dict[str, frozenset[str]] = {
    _S.COMPLETED.value: frozenset({_S.DISPUTED.value}),
    _S.DISPUTED.value: frozenset({_S.COMPLETED.value, _S.CANCELLED.value}),
    _S.CANCELLED.value: frozenset(),
}


def _admin_transitions() -> dict[str, frozenset[str]]:
    table = {
        status: frozenset(s for s in ALL_STATUSES if s != status)
        for status in ALL_STATUSES
        if status not in _ADMIN_SETTLED
    }
    table.update(_ADMIN_SETTLED)
    return table


def _freeze(table: Mapping[str, Any]) -> Mapping[str, frozenset[str]]:
    return MappingProxyType({k: frozenset(v) for k, v in table.items()})


ROLE_STATUS_TRANSITIONS: Mapping[str, Mapping[str, frozenset[str]]] = MappingProxyType(
    {
        EffectiveRole.CONSUMER.value: _freeze(
            {
                _S.INSPECTING.value: {_S.APPROVED.value, _S.DISPUTED.value},
                _S.APPROVED.value: {_S.COMPLETED.value},
            }
        ),
        EffectiveRole.VENDOR.value: _freeze(
            {
                _S.PENDING.value: {_S.ACCEPTED.value, _S.CANCELLED.value},
                _S.ACCEPTED.value: {_S.PREPARING.value},
                _S.PREPARING.value: {_S.READY.value},
            }
        ),
        EffectiveRole.SHOPPER.value: _freeze(
            {
                _S.READY.value: {_S.PICKED_UP.value},
                _S.PICKED_UP.value: {_S.INSPECTING.value},
            }
        ),
        EffectiveRole.ADMIN.value: _freeze(_admin_transitions()),
    }
)

_EMPTY: frozenset[str] = frozenset()


def allowed_next(role: Any, current_status: Any) -> frozenset[str]:
    """Statuses *role* may move an order into from *current_status*.

    Unknown roles (including ``NO_ACCESS``) and unknown statuses yield an
    empty set.
    """
    if not isinstance(role, str) or not isinstance(current_status, str):
        return _EMPTY
    return ROLE_STATUS_TRANSITIONS.get(str(role), {}).get(str(current_status), _EMPTY)


def is_allowed(role: Any, current_status: Any, requested_status: Any) -> bool:
    """Return ``True`` if *role* may move an order from *current_status* to
    *requested_status*.  Never raises."""
    if not isinstance(requested_status, str):
        return False
    return str(requested_status) in allowed_next(role, current_status)


def ordered(statuses: frozenset[str]) -> list[str]:
    """Sort *statuses* in lifecycle order (the ``OrderStatus`` order)."""
    return [s for s in ALL_STATUSES if s in statuses]
