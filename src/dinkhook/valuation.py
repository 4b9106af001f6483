from __future__ import annotations

from typing import Iterable, Optional

from dinkhook.schemas.envelope import ItemStack
from dinkhook.schemas.extras import (
    BarbarianAssaultGambleExtra,
    ClueExtra,
    CollectionExtra,
    DeathExtra,
    GrandExchangeExtra,
    GroupStorageExtra,
    LootExtra,
    PlayerKillExtra,
    TradeExtra,
)


def stack_value(item: ItemStack) -> int:
    return item.quantity * item.price_each


def total_value(items: Iterable[ItemStack]) -> int:
    return sum(stack_value(i) for i in items)


def loot_value(extra: LootExtra) -> int:
    return total_value(extra.items)


def grand_exchange_proceeds(extra: GrandExchangeExtra) -> int:
    """Gross value of the offer minus the seller tax (0 when not reported).

    For a SOLD offer of 2 items at 3 gp each with no tax this is 6.
    """
    if extra.item is None:
        return 0
    return stack_value(extra.item) - (extra.seller_tax or 0)


def trade_net(extra: TradeExtra) -> int:
    received = extra.received_value if extra.received_value is not None else total_value(extra.received_items)
    given = extra.given_value if extra.given_value is not None else total_value(extra.given_items)
    return received - given


def group_storage_net(extra: GroupStorageExtra) -> int:
    if extra.net_value is not None:
        return extra.net_value
    return total_value(extra.deposits) - total_value(extra.withdrawals)


def death_value_lost(extra: DeathExtra) -> int:
    if extra.value_lost is not None:
        return extra.value_lost
    return total_value(extra.lost_items)


def equipment_value(extra: PlayerKillExtra) -> int:
    return sum(piece.price_each for piece in extra.victim_equipment.values())


def extra_value(extra) -> Optional[int]:
    """Monetary value of a typed extra, or None when the type carries none."""
    if isinstance(extra, LootExtra):
        return loot_value(extra)
    if isinstance(extra, GrandExchangeExtra):
        return grand_exchange_proceeds(extra)
    if isinstance(extra, TradeExtra):
        return trade_net(extra)
    if isinstance(extra, GroupStorageExtra):
        return group_storage_net(extra)
    if isinstance(extra, DeathExtra):
        return death_value_lost(extra)
    if isinstance(extra, PlayerKillExtra):
        return equipment_value(extra)
    if isinstance(extra, (ClueExtra, BarbarianAssaultGambleExtra)):
        return total_value(extra.items)
    if isinstance(extra, CollectionExtra):
        return extra.price
    return None


def notification_value(notification) -> Optional[int]:
    return extra_value(notification.extra)
