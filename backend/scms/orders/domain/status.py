import logging
from enum import Enum
from typing import FrozenSet, List, Union

from scms.orders.domain.exceptions import InvalidOrderStatusException, OrderStatusTransitionException

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def values(cls) -> List[str]:
        return [s.value for s in cls]

    @classmethod
    def parse(cls, value: Union[str, "OrderStatus"]) -> "OrderStatus":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for status in cls:
                if status.value.lower() == value.strip().lower():
                    return status
        raise InvalidOrderStatusException(str(value), cls.values())


TERMINAL_ORDER_STATUSES: FrozenSet[OrderStatus] = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class OrderStatusMachine:
    """Cycle de vie d'une commande.

    - Delivered et Cancelled sont terminaux : plus aucun changement accepté.
    - Shipped ne peut pas revenir à Pending.
    - Toute autre transition est permise ; reposer le statut courant est sans effet.
    """

    def can_transition(self, current: OrderStatus, new: OrderStatus) -> bool:
        if current in TERMINAL_ORDER_STATUSES:
            return False
        if current == OrderStatus.SHIPPED and new == OrderStatus.PENDING:
            return False
        return True

    def set_status(self, order, new_status: Union[str, OrderStatus]):
        target = OrderStatus.parse(new_status)
        if order.status == target and target not in TERMINAL_ORDER_STATUSES:
            return order
        if not self.can_transition(order.status, target):
            logger.warning(f"Transition refusée commande {order.id}: '{order.status.value}' -> '{target.value}'.")
            raise OrderStatusTransitionException(order.id, order.status.value, target.value)
        logger.info(f"Commande {order.id}: statut '{order.status.value}' -> '{target.value}'.")
        return order.model_copy(update={"status": target})
