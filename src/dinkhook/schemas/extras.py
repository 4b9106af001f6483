from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import Field

from .envelope import ItemStack, WireModel


EventType = Literal[
    "LOOT",
    "GRAND_EXCHANGE",
    "DEATH",
    "LEVEL",
    "COLLECTION",
    "SLAYER",
    "QUEST",
    "CLUE",
    "KILL_COUNT",
    "COMBAT_ACHIEVEMENT",
    "ACHIEVEMENT_DIARY",
    "PET",
    "SPEEDRUN",
    "BARBARIAN_ASSAULT_GAMBLE",
    "PLAYER_KILL",
    "GROUP_STORAGE",
    "TRADE",
    "LEAGUES_AREA",
    "LEAGUES_RELIC",
    "LEAGUES_TASK",
    "LEAGUES_MASTERY",
    "CHAT",
    "EXTERNAL_PLUGIN",
    "LOGIN",
    "LOGOUT",
    "XP_MILESTONE",
    "TOA_UNIQUE",
]


class LootExtra(WireModel):
    items: List[ItemStack] = Field(default_factory=list)
    source: Optional[str] = None
    # NPC, PLAYER, EVENT, PICKPOCKET, ...
    category: Optional[str] = None
    kill_count: Optional[int] = None
    rarest_probability: Optional[float] = None
    party: Optional[List[str]] = None


GE_STATUSES = ("BOUGHT", "SOLD", "CANCELLED_BUY", "CANCELLED_SELL", "BUYING", "SELLING", "EMPTY")


class GrandExchangeExtra(WireModel):
    slot: Optional[int] = None
    status: Optional[str] = None
    item: Optional[ItemStack] = None
    market_price: Optional[int] = None
    target_price: Optional[int] = None
    target_quantity: Optional[int] = None
    seller_tax: Optional[int] = None

    @property
    def is_sale(self) -> bool:
        return self.status in ("SOLD", "SELLING", "CANCELLED_SELL")


class DeathLocation(WireModel):
    region_id: Optional[int] = None
    plane: Optional[int] = None
    instanced: Optional[bool] = None


class DeathExtra(WireModel):
    value_lost: Optional[int] = None
    is_pvp: Optional[bool] = None
    killer_name: Optional[str] = None
    killer_npc_id: Optional[int] = None
    kept_items: List[ItemStack] = Field(default_factory=list)
    lost_items: List[ItemStack] = Field(default_factory=list)
    location: Optional[DeathLocation] = None


class CombatLevel(WireModel):
    value: int
    increased: bool = False


class LevelExtra(WireModel):
    levelled_skills: Dict[str, int] = Field(default_factory=dict)
    all_skills: Dict[str, int] = Field(default_factory=dict)
    combat_level: Optional[CombatLevel] = None


class CollectionExtra(WireModel):
    item_name: Optional[str] = None
    item_id: Optional[int] = None
    price: Optional[int] = None
    completed_entries: Optional[int] = None
    total_entries: Optional[int] = None
    current_rank: Optional[str] = None
    rank_progress: Optional[int] = None
    logs_needed_for_next_rank: Optional[int] = None
    next_rank: Optional[str] = None
    just_completed_rank: Optional[str] = None
    dropper_name: Optional[str] = None
    dropper_type: Optional[str] = None
    dropper_kill_count: Optional[int] = None


class SlayerExtra(WireModel):
    slayer_task: Optional[str] = None
    # the plugin reports these as strings
    slayer_completed: Optional[Union[str, int]] = None
    slayer_points: Optional[Union[str, int]] = None
    kill_count: Optional[int] = None
    monster: Optional[str] = None


class QuestExtra(WireModel):
    quest_name: Optional[str] = None
    completed_quests: Optional[int] = None
    total_quests: Optional[int] = None
    quest_points: Optional[int] = None
    total_quest_points: Optional[int] = None


class ClueExtra(WireModel):
    clue_type: Optional[str] = None
    number_completed: Optional[int] = None
    items: List[ItemStack] = Field(default_factory=list)


class KillCountExtra(WireModel):
    boss: Optional[str] = None
    count: Optional[int] = None
    game_message: Optional[str] = None
    # ISO-8601 durations such as "PT1M30.6S"
    time: Optional[str] = None
    is_personal_best: Optional[bool] = None
    personal_best: Optional[str] = None
    party: Optional[List[str]] = None


class CombatAchievementExtra(WireModel):
    tier: Optional[str] = None
    task: Optional[str] = None
    task_points: Optional[int] = None
    total_points: Optional[int] = None
    tier_progress: Optional[int] = None
    tier_total_points: Optional[int] = None
    total_possible_points: Optional[int] = None
    current_tier: Optional[str] = None
    next_tier: Optional[str] = None
    just_completed_tier: Optional[str] = None


class AchievementDiaryExtra(WireModel):
    area: Optional[str] = None
    difficulty: Optional[str] = None
    total: Optional[int] = None
    tasks_completed: Optional[int] = None
    tasks_total: Optional[int] = None
    area_tasks_completed: Optional[int] = None
    area_tasks_total: Optional[int] = None


class PetExtra(WireModel):
    pet_name: Optional[str] = None
    milestone: Optional[str] = None
    duplicate: Optional[bool] = None
    previously_owned: Optional[bool] = None


class SpeedrunExtra(WireModel):
    quest_name: Optional[str] = None
    personal_best: Optional[str] = None
    current_time: Optional[str] = None
    is_personal_best: Optional[bool] = None


class BarbarianAssaultGambleExtra(WireModel):
    gamble_count: Optional[int] = None
    items: List[ItemStack] = Field(default_factory=list)


class EquipmentPiece(WireModel):
    id: int
    price_each: int = 0
    name: Optional[str] = None


class WorldLocation(WireModel):
    x: int
    y: int
    plane: int = 0


class PlayerKillExtra(WireModel):
    victim_name: Optional[str] = None
    victim_combat_level: Optional[int] = None
    victim_equipment: Dict[str, EquipmentPiece] = Field(default_factory=dict)
    world: Optional[int] = None
    location: Optional[WorldLocation] = None
    my_hitpoints: Optional[int] = None
    my_last_damage: Optional[int] = None


class GroupStorageExtra(WireModel):
    group_name: Optional[str] = None
    deposits: List[ItemStack] = Field(default_factory=list)
    withdrawals: List[ItemStack] = Field(default_factory=list)
    net_value: Optional[int] = None
    is_shared_bank: Optional[bool] = None


class TradeExtra(WireModel):
    counterparty: Optional[str] = None
    received_items: List[ItemStack] = Field(default_factory=list)
    given_items: List[ItemStack] = Field(default_factory=list)
    received_value: Optional[int] = None
    given_value: Optional[int] = None


class LeaguesAreaExtra(WireModel):
    area: Optional[str] = None
    index: Optional[int] = None
    tasks_completed: Optional[int] = None
    tasks_until_next_area: Optional[int] = None


class LeaguesRelicExtra(WireModel):
    relic: Optional[str] = None
    tier: Optional[int] = None
    required_points: Optional[int] = None
    total_points: Optional[int] = None
    points_until_next_tier: Optional[int] = None


class LeaguesTaskExtra(WireModel):
    task_name: Optional[str] = None
    difficulty: Optional[str] = None
    task_points: Optional[int] = None
    total_points: Optional[int] = None
    tasks_completed: Optional[int] = None
    tasks_until_next_area: Optional[int] = None
    points_until_next_relic: Optional[int] = None
    points_until_next_trophy: Optional[int] = None
    earned_trophy: Optional[str] = None


class LeaguesMasteryExtra(WireModel):
    mastery_type: Optional[str] = None
    mastery_tier: Optional[int] = None


class ChatExtra(WireModel):
    # chat message type, e.g. GAMEMESSAGE or CLAN_CHAT; unrelated to the envelope tag
    type: Optional[str] = None
    message: Optional[str] = None
    source: Optional[str] = None
    sender: Optional[str] = None
    clan_title: Optional[Dict[str, Any]] = None


class ExternalPluginExtra(WireModel):
    source_plugin: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Progress(WireModel):
    completed: Optional[int] = None
    total: Optional[int] = None


class BarbarianAssaultStats(WireModel):
    high_gamble_count: Optional[int] = None


class SkillsSnapshot(WireModel):
    total_experience: Optional[int] = None
    total_level: Optional[int] = None
    levels: Dict[str, int] = Field(default_factory=dict)
    experience: Dict[str, int] = Field(default_factory=dict)


class SlayerStats(WireModel):
    points: Optional[int] = None
    streak: Optional[int] = None


class OwnedPet(WireModel):
    item_id: Optional[int] = None
    name: Optional[str] = None


class LoginExtra(WireModel):
    world: Optional[int] = None
    collection_log: Optional[Progress] = None
    combat_achievement_points: Optional[Progress] = None
    achievement_diary: Optional[Progress] = None
    achievement_diary_tasks: Optional[Progress] = None
    barbarian_assault: Optional[BarbarianAssaultStats] = None
    skills: Optional[SkillsSnapshot] = None
    quest_count: Optional[Progress] = None
    quest_points: Optional[Progress] = None
    slayer: Optional[SlayerStats] = None
    pets: List[OwnedPet] = Field(default_factory=list)


class LogoutExtra(WireModel):
    pass


class XpMilestoneExtra(WireModel):
    xp_data: Dict[str, int] = Field(default_factory=dict)
    milestone_achieved: List[str] = Field(default_factory=list)
    interval: Optional[int] = None


class ToaUniqueExtra(WireModel):
    party: List[str] = Field(default_factory=list)
    reward_chest_weight: Optional[int] = None
    raid_levels: Optional[int] = None
    probability: Optional[float] = None


EXTRA_MODELS: Dict[str, Type[WireModel]] = {
    "LOOT": LootExtra,
    "GRAND_EXCHANGE": GrandExchangeExtra,
    "DEATH": DeathExtra,
    "LEVEL": LevelExtra,
    "COLLECTION": CollectionExtra,
    "SLAYER": SlayerExtra,
    "QUEST": QuestExtra,
    "CLUE": ClueExtra,
    "KILL_COUNT": KillCountExtra,
    "COMBAT_ACHIEVEMENT": CombatAchievementExtra,
    "ACHIEVEMENT_DIARY": AchievementDiaryExtra,
    "PET": PetExtra,
    "SPEEDRUN": SpeedrunExtra,
    "BARBARIAN_ASSAULT_GAMBLE": BarbarianAssaultGambleExtra,
    "PLAYER_KILL": PlayerKillExtra,
    "GROUP_STORAGE": GroupStorageExtra,
    "TRADE": TradeExtra,
    "LEAGUES_AREA": LeaguesAreaExtra,
    "LEAGUES_RELIC": LeaguesRelicExtra,
    "LEAGUES_TASK": LeaguesTaskExtra,
    "LEAGUES_MASTERY": LeaguesMasteryExtra,
    "CHAT": ChatExtra,
    "EXTERNAL_PLUGIN": ExternalPluginExtra,
    "LOGIN": LoginExtra,
    "LOGOUT": LogoutExtra,
    "XP_MILESTONE": XpMilestoneExtra,
    "TOA_UNIQUE": ToaUniqueExtra,
}

KNOWN_TYPES = frozenset(EXTRA_MODELS)


def parse_extra(event_type: str, extra: Optional[Dict[str, Any]]) -> Optional[WireModel]:
    """Validate ``extra`` against the model registered for ``event_type``.

    Returns None for tags without a model. A missing or null extra on a known
    tag yields an empty model. Raises pydantic.ValidationError on mismatch.
    """
    model = EXTRA_MODELS.get(event_type)
    if model is None:
        return None
    return model.model_validate(extra or {})
