"""Human readable one-liners for notifications.

Wording follows the plugin's default message templates so that log output
reads like what players see in their Discord channel.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Callable, Dict, Iterable, Optional

from dinkhook.schemas.envelope import ItemStack
from dinkhook import valuation

_ISO_DURATION = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)

_FORMATTERS: Dict[str, Callable] = {}


def parse_duration(value: Optional[str]) -> Optional[timedelta]:
    """Parse an ISO-8601 duration like ``PT1M30.6S``; None if absent or unparseable."""
    if not value:
        return None
    m = _ISO_DURATION.match(value.strip())
    if not m or value.strip() in ("P", "PT"):
        return None
    parts = {k: float(v) for k, v in m.groupdict().items() if v is not None}
    return timedelta(**parts)


def format_duration(td: timedelta) -> str:
    """Render as ``m:ss.cc`` or ``h:mm:ss.cc`` the way in-game timers do."""
    centis = round(td.total_seconds() * 100)
    hours, rem = divmod(centis, 360000)
    minutes, rem = divmod(rem, 6000)
    seconds, centis = divmod(rem, 100)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}.{centis:02d}"
    return f"{minutes}:{seconds:02d}.{centis:02d}"


def _display_time(value: Optional[str]) -> Optional[str]:
    td = parse_duration(value)
    return format_duration(td) if td is not None else value


def gp(value: int) -> str:
    return f"{value:,} gp"


def describe_items(items: Iterable[ItemStack]) -> str:
    return ", ".join(f"{i.quantity:,} x {i.name} ({valuation.stack_value(i):,})" for i in items)


def _formatter(event_type: str):
    def deco(fn):
        _FORMATTERS[event_type] = fn
        return fn
    return deco


def _lower(value: Optional[str]) -> str:
    return (value or "").replace("_", " ").lower()


@_formatter("LOOT")
def _loot(player, e):
    text = f"{player} has looted {describe_items(e.items) or 'nothing'}"
    if e.source:
        text += f" from {e.source}"
    return f"{text} (total {gp(valuation.loot_value(e))})"


_GE_VERBS = {
    "BOUGHT": "bought",
    "SOLD": "sold",
    "BUYING": "is buying",
    "SELLING": "is selling",
    "CANCELLED_BUY": "cancelled an offer to buy",
    "CANCELLED_SELL": "cancelled an offer to sell",
}


@_formatter("GRAND_EXCHANGE")
def _grand_exchange(player, e):
    verb = _GE_VERBS.get(e.status or "", _lower(e.status) or "updated")
    if e.item is None:
        return f"{player} {verb} an offer on the GE"
    return f"{player} {verb} {e.item.quantity:,} x {e.item.name} on the GE for {gp(valuation.grand_exchange_proceeds(e))}"


@_formatter("DEATH")
def _death(player, e):
    text = f"{player} has died"
    if e.killer_name:
        text += f" to {e.killer_name}"
    return f"{text}, losing {gp(valuation.death_value_lost(e))}"


@_formatter("LEVEL")
def _level(player, e):
    skills = ", ".join(f"{skill} to {level}" for skill, level in e.levelled_skills.items())
    text = f"{player} has levelled {skills or 'a skill'}"
    if e.combat_level is not None and e.combat_level.increased:
        text += f" and reached combat level {e.combat_level.value}"
    return text


@_formatter("COLLECTION")
def _collection(player, e):
    text = f"{player} has added {e.item_name or 'a new item'} to their collection log"
    if e.completed_entries is not None and e.total_entries:
        text += f" ({e.completed_entries}/{e.total_entries})"
    return text


@_formatter("SLAYER")
def _slayer(player, e):
    text = f"{player} has completed a slayer task"
    if e.slayer_task:
        text += f": {e.slayer_task}"
    if e.slayer_points is not None:
        text += f", getting {e.slayer_points} points"
    if e.slayer_completed is not None:
        text += f" and making that {e.slayer_completed} tasks completed"
    return text


@_formatter("QUEST")
def _quest(player, e):
    if e.quest_name:
        return f"{player} has completed a quest: {e.quest_name}"
    return f"{player} has completed a quest"


@_formatter("CLUE")
def _clue(player, e):
    text = f"{player} has completed a {_lower(e.clue_type) or 'treasure trail'} clue"
    if e.number_completed is not None:
        text += f", for a total of {e.number_completed}"
    if e.items:
        text += f". They obtained: {describe_items(e.items)}"
    return text


@_formatter("KILL_COUNT")
def _kill_count(player, e):
    text = f"{player} has defeated {e.boss or 'a boss'}"
    if e.count is not None:
        text += f" with a completion count of {e.count}"
    if e.time:
        text += f" in {_display_time(e.time)}"
    if e.is_personal_best:
        text += " (new personal best)"
    return text


@_formatter("COMBAT_ACHIEVEMENT")
def _combat_achievement(player, e):
    tier = f"{_lower(e.tier)} " if e.tier else ""
    text = f"{player} has completed {tier}combat task"
    if e.task:
        text += f": {e.task}"
    if e.just_completed_tier:
        text += f", unlocking the {_lower(e.just_completed_tier)} tier"
    return text


@_formatter("ACHIEVEMENT_DIARY")
def _diary(player, e):
    words = " ".join(w for w in (_lower(e.difficulty), e.area) if w)
    return f"{player} has completed the {words + ' ' if words else ''}Achievement Diary"


@_formatter("PET")
def _pet(player, e):
    text = f"{player} has a funny feeling they are being followed"
    if e.pet_name:
        text += f": {e.pet_name}"
    if e.duplicate:
        text += " (duplicate)"
    return text


@_formatter("SPEEDRUN")
def _speedrun(player, e):
    quest = f" of {e.quest_name}" if e.quest_name else ""
    if e.is_personal_best:
        text = f"{player} has just beaten their personal best in a speedrun{quest}"
    else:
        text = f"{player} has just finished a speedrun{quest}"
    if e.current_time:
        text += f" with a time of {_display_time(e.current_time)}"
    if not e.is_personal_best and e.personal_best:
        text += f" (personal best {_display_time(e.personal_best)})"
    return text


@_formatter("BARBARIAN_ASSAULT_GAMBLE")
def _ba_gamble(player, e):
    if e.gamble_count is None:
        return f"{player} has made a high gamble"
    return f"{player} has reached {e.gamble_count} high gambles"


@_formatter("PLAYER_KILL")
def _player_kill(player, e):
    text = f"{player} has PK'd {e.victim_name or 'another player'}"
    if e.victim_combat_level is not None:
        text += f" (level {e.victim_combat_level})"
    return text


@_formatter("GROUP_STORAGE")
def _group_storage(player, e):
    where = f"{e.group_name}'s group storage" if e.group_name else "group storage"
    return (
        f"{player} has deposited {len(e.deposits)} and withdrawn {len(e.withdrawals)} item stacks "
        f"in {where} (net {gp(valuation.group_storage_net(e))})"
    )


@_formatter("TRADE")
def _trade(player, e):
    who = f" with {e.counterparty}" if e.counterparty else ""
    return f"{player} traded{who} (net {gp(valuation.trade_net(e))})"


@_formatter("LEAGUES_AREA")
def _leagues_area(player, e):
    if e.area:
        return f"{player} selected a league area: {e.area}"
    return f"{player} selected a league area"


@_formatter("LEAGUES_RELIC")
def _leagues_relic(player, e):
    tier = f"Tier {e.tier} " if e.tier is not None else ""
    text = f"{player} unlocked a {tier}Relic"
    if e.relic:
        text += f": {e.relic}"
    return text


@_formatter("LEAGUES_TASK")
def _leagues_task(player, e):
    difficulty = f"{_lower(e.difficulty)} " if e.difficulty else ""
    text = f"{player} completed a {difficulty}task"
    if e.task_name:
        text += f": {e.task_name}"
    return text


@_formatter("LEAGUES_MASTERY")
def _leagues_mastery(player, e):
    parts = [p for p in (f"Tier {e.mastery_tier}" if e.mastery_tier is not None else None, e.mastery_type) if p]
    return f"{player} unlocked a {' '.join(parts + ['Combat Mastery'])}"


@_formatter("CHAT")
def _chat(player, e):
    if e.message:
        return f"{player} received a chat message: {e.message}"
    return f"{player} received a chat message"


@_formatter("LOGIN")
def _login(player, e):
    if e.world is not None:
        return f"{player} logged into World {e.world}"
    return f"{player} logged in"


@_formatter("LOGOUT")
def _logout(player, e):
    return f"{player} logged out"


@_formatter("XP_MILESTONE")
def _xp_milestone(player, e):
    reached = ", ".join(f"{e.xp_data.get(skill, 0):,} XP in {skill}" for skill in e.milestone_achieved)
    return f"{player} has reached {reached or 'an XP milestone'}"


@_formatter("TOA_UNIQUE")
def _toa_unique(player, e):
    text = f"{player} received a Tombs of Amascut unique"
    if e.raid_levels is not None:
        text += f" at raid level {e.raid_levels}"
    return text


def summarize(notification) -> str:
    """One line describing ``notification``.

    Types without a dedicated formatter (EXTERNAL_PLUGIN and unknown tags) use
    the envelope's ``content`` with the player name substituted.
    """
    env = notification.envelope
    player = env.player
    fn = _FORMATTERS.get(env.type)
    if fn is not None and notification.extra is not None:
        return fn(player, notification.extra)
    if env.content:
        return " ".join(env.content.replace("%USERNAME%", player).split())
    return f"{player} sent {env.type}"
