from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for everything the plugin sends.

    Attributes are snake_case, the wire names are camelCase. Unknown keys are
    kept so that newer plugin versions can add fields without being rejected,
    and ``to_wire`` gives back exactly the keys that were received.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class ItemStack(WireModel):
    id: int
    quantity: int = Field(..., ge=0)
    price_each: int
    name: str
    # drop probability, only attached to loot when rarity filtering is enabled
    rarity: Optional[float] = Field(None, ge=0.0, le=1.0)
    # which loot filters the item satisfied, e.g. ["VALUE", "RARITY"]
    criteria: Optional[List[str]] = None

    @property
    def value(self) -> int:
        return self.quantity * self.price_each


class DiscordUser(WireModel):
    id: str
    name: Optional[str] = None
    avatar_hash: Optional[str] = None


ACCOUNT_TYPES = (
    "NORMAL",
    "IRONMAN",
    "ULTIMATE_IRONMAN",
    "HARDCORE_IRONMAN",
    "GROUP_IRONMAN",
    "HARDCORE_GROUP_IRONMAN",
    "UNRANKED_GROUP_IRONMAN",
)


class Envelope(WireModel):
    """Top-level object carried in the ``payload_json`` form field.

    ``type`` selects the shape of ``extra``; the remaining fields are player
    metadata attached to every notification. Which optional fields appear
    depends on the sender's plugin settings, so none of them are required.
    """

    type: str
    extra: Optional[Dict[str, Any]] = None
    content: Optional[str] = None
    player_name: Optional[str] = None
    account_type: Optional[str] = None
    seasonal_world: Optional[bool] = None
    dink_account_hash: Optional[str] = None
    clan_name: Optional[str] = None
    group_iron_clan_name: Optional[str] = None
    discord_user: Optional[DiscordUser] = None
    world: Optional[int] = None
    region_id: Optional[int] = None
    embeds: Optional[List[Dict[str, Any]]] = None

    @property
    def player(self) -> str:
        return self.player_name or "unknown player"
