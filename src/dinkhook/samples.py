"""Example notifications, one per known type.

These mirror the example payloads published with the plugin's JSON
documentation. They are used by the test-suite and by
``scripts/send_sample.py`` to exercise a running receiver.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, Optional

PLAYER_NAME = "Zezima"
ACCOUNT_HASH = "a3f1c0de9b7e4f2a8d6c5b4a39281706"


def _envelope(event_type: str, extra: Optional[Dict[str, Any]], content: str, **metadata) -> Dict[str, Any]:
    payload = {
        "content": content,
        "extra": extra,
        "type": event_type,
        "playerName": PLAYER_NAME,
        "accountType": "NORMAL",
        "seasonalWorld": False,
        "dinkAccountHash": ACCOUNT_HASH,
        "embeds": [],
    }
    payload.update(metadata)
    return payload


SAMPLE_PAYLOADS: Dict[str, Dict[str, Any]] = {
    "LOOT": _envelope(
        "LOOT",
        {
            "items": [
                {"id": 1234, "quantity": 1, "priceEach": 25000000, "name": "Dragon warhammer", "criteria": ["VALUE"], "rarity": 0.0002},
                {"id": 4321, "quantity": 1, "priceEach": 100, "name": "Bones", "criteria": ["VALUE"]},
            ],
            "source": "Lizardman shaman",
            "category": "NPC",
            "killCount": 60,
            "rarestProbability": 0.0002,
        },
        "%USERNAME% has looted: \n\n%LOOT%\nFrom: %SOURCE%",
        clanName="Dink QA",
        world=302,
        regionId=5275,
    ),
    "GRAND_EXCHANGE": _envelope(
        "GRAND_EXCHANGE",
        {
            "slot": 1,
            "status": "SOLD",
            "item": {"id": 314, "quantity": 2, "priceEach": 3, "name": "Feather"},
            "marketPrice": 2,
            "targetPrice": 3,
            "targetQuantity": 2,
            "sellerTax": 0,
        },
        "%USERNAME% %TYPE% %ITEM% on the GE",
    ),
    "DEATH": _envelope(
        "DEATH",
        {
            "valueLost": 300,
            "isPvp": True,
            "killerName": "%PVP_ENEMY%",
            "keptItems": [{"id": 22975, "quantity": 1, "priceEach": 29000000, "name": "Ghrazi rapier"}],
            "lostItems": [{"id": 314, "quantity": 100, "priceEach": 3, "name": "Feather"}],
            "location": {"regionId": 10546, "plane": 0, "instanced": False},
        },
        "%USERNAME% has died...",
        discordUser={"id": "012345678910111213", "name": "Gamer", "avatarHash": "abc123def345abc123def345abc123de"},
    ),
    "LEVEL": _envelope(
        "LEVEL",
        {
            "levelledSkills": {"Hunter": 62},
            "allSkills": {"Attack": 99, "Strength": 99, "Defence": 90, "Hunter": 62, "Hitpoints": 99},
            "combatLevel": {"value": 126, "increased": False},
        },
        "%USERNAME% has levelled %SKILL%",
    ),
    "COLLECTION": _envelope(
        "COLLECTION",
        {
            "itemName": "Zamorak chaps",
            "itemId": 10372,
            "price": 500812,
            "completedEntries": 10,
            "totalEntries": 1443,
            "currentRank": "BRONZE",
            "rankProgress": 10,
            "logsNeededForNextRank": 90,
            "nextRank": "IRON",
            "dropperName": "Clue Scroll (Hard)",
            "dropperType": "EVENT",
            "dropperKillCount": 1500,
        },
        "%USERNAME% has added %ITEM% to their collection",
    ),
    "SLAYER": _envelope(
        "SLAYER",
        {
            "slayerTask": "Kalphites",
            "slayerCompleted": "30",
            "slayerPoints": "15",
            "killCount": 135,
            "monster": "Kalphite",
        },
        "%USERNAME% has completed a slayer task: %TASK%, getting %POINTS% points and making that %TASKCOUNT% tasks completed",
    ),
    "QUEST": _envelope(
        "QUEST",
        {
            "questName": "Dragon Slayer I",
            "completedQuests": 22,
            "totalQuests": 156,
            "questPoints": 44,
            "totalQuestPoints": 293,
        },
        "%USERNAME% has completed a quest: %QUEST%",
    ),
    "CLUE": _envelope(
        "CLUE",
        {
            "clueType": "Beginner",
            "numberCompleted": 123,
            "items": [{"id": 1337, "quantity": 1, "priceEach": 42069, "name": "Dragon sword"}],
        },
        "%USERNAME% has completed a %CLUE% clue, for a total of %COUNT%. They obtained:\n\n%LOOT%",
    ),
    "KILL_COUNT": _envelope(
        "KILL_COUNT",
        {
            "boss": "King Black Dragon",
            "count": 69,
            "gameMessage": "Your King Black Dragon kill count is: 69.",
            "time": "PT1M30.6S",
            "isPersonalBest": True,
            "personalBest": "PT1M30.6S",
        },
        "%USERNAME% has defeated %BOSS% with a completion count of %COUNT%",
    ),
    "COMBAT_ACHIEVEMENT": _envelope(
        "COMBAT_ACHIEVEMENT",
        {
            "tier": "GRANDMASTER",
            "task": "Peach Conjurer",
            "taskPoints": 6,
            "totalPoints": 1337,
            "tierProgress": 517,
            "tierTotalPoints": 645,
            "totalPossiblePoints": 2005,
            "currentTier": "MASTER",
            "nextTier": "GRANDMASTER",
        },
        "%USERNAME% has completed %TIER% combat task: %TASK%",
    ),
    "ACHIEVEMENT_DIARY": _envelope(
        "ACHIEVEMENT_DIARY",
        {
            "area": "Varrock",
            "difficulty": "HARD",
            "total": 15,
            "tasksCompleted": 152,
            "tasksTotal": 492,
            "areaTasksCompleted": 37,
            "areaTasksTotal": 42,
        },
        "%USERNAME% has completed the %DIFFICULTY% %DIARY% Achievement Diary",
    ),
    "PET": _envelope(
        "PET",
        {
            "petName": "Ikkle hydra",
            "milestone": "5,000 killcount",
            "duplicate": False,
            "previouslyOwned": False,
        },
        "%USERNAME% has a funny feeling they are being followed",
    ),
    "SPEEDRUN": _envelope(
        "SPEEDRUN",
        {
            "questName": "Cook's Assistant",
            "personalBest": "1:13.20",
            "currentTime": "1:04.20",
            "isPersonalBest": True,
        },
        "%USERNAME% has just beaten their personal best in a speedrun of %QUEST% with a time of %TIME%",
    ),
    "BARBARIAN_ASSAULT_GAMBLE": _envelope(
        "BARBARIAN_ASSAULT_GAMBLE",
        {
            "gambleCount": 500,
            "items": [
                {"id": 3122, "quantity": 1, "priceEach": 35500, "name": "Granite shield"},
                {"id": 1442, "quantity": 25, "priceEach": 271, "name": "Fire talisman"},
            ],
        },
        "%USERNAME% has reached %COUNT% high gambles",
    ),
    "PLAYER_KILL": _envelope(
        "PLAYER_KILL",
        {
            "victimName": "Some Noob",
            "victimCombatLevel": 69,
            "victimEquipment": {
                "AMULET": {"id": 1704, "priceEach": 164, "name": "Amulet of glory"},
                "WEAPON": {"id": 1333, "priceEach": 14473, "name": "Rune scimitar"},
                "TORSO": {"id": 1135, "priceEach": 4000, "name": "Green d'hide body"},
            },
            "world": 394,
            "location": {"x": 3334, "y": 4761, "plane": 0},
            "myHitpoints": 20,
            "myLastDamage": 12,
        },
        "%USERNAME% has PK'd %TARGET%",
    ),
    "GROUP_STORAGE": _envelope(
        "GROUP_STORAGE",
        {
            "groupName": "Dink QA",
            "deposits": [{"id": 315, "quantity": 2, "priceEach": 56, "name": "Shrimps"}],
            "withdrawals": [
                {"id": 1205, "quantity": 1, "priceEach": 84, "name": "Bronze dagger"},
                {"id": 1265, "quantity": 1, "priceEach": 29, "name": "Bronze pickaxe"},
            ],
            "netValue": -1,
            "isSharedBank": True,
        },
        "%USERNAME% has deposited:\n%DEPOSITED%\n\n%USERNAME% has withdrawn:\n%WITHDRAWN%",
        accountType="GROUP_IRONMAN",
        groupIronClanName="Dink QA",
    ),
    "TRADE": _envelope(
        "TRADE",
        {
            "counterparty": "Billy",
            "receivedItems": [{"id": 314, "quantity": 100, "priceEach": 2, "name": "Feather"}],
            "givenItems": [{"id": 2, "quantity": 3, "priceEach": 150, "name": "Cannonball"}],
            "receivedValue": 200,
            "givenValue": 450,
        },
        "%USERNAME% traded with %COUNTERPARTY%",
    ),
    "LEAGUES_AREA": _envelope(
        "LEAGUES_AREA",
        {"area": "Kandarin", "index": 2, "tasksCompleted": 200, "tasksUntilNextArea": 200},
        "%USERNAME% selected their second region: Kandarin.",
        seasonalWorld=True,
    ),
    "LEAGUES_RELIC": _envelope(
        "LEAGUES_RELIC",
        {"relic": "Production Prodigy", "tier": 1, "requiredPoints": 0, "totalPoints": 20, "pointsUntilNextTier": 480},
        "%USERNAME% unlocked a Tier 1 Relic: Production Prodigy.",
        seasonalWorld=True,
    ),
    "LEAGUES_TASK": _envelope(
        "LEAGUES_TASK",
        {
            "taskName": "Pickpocket a Citizen",
            "difficulty": "EASY",
            "taskPoints": 10,
            "totalPoints": 30,
            "tasksCompleted": 3,
            "tasksUntilNextArea": 57,
            "pointsUntilNextRelic": 470,
            "pointsUntilNextTrophy": 2470,
        },
        "%USERNAME% completed a Easy task: Pickpocket a Citizen.",
        seasonalWorld=True,
    ),
    "LEAGUES_MASTERY": _envelope(
        "LEAGUES_MASTERY",
        {"masteryType": "Melee", "masteryTier": 1},
        "%USERNAME% unlocked a Tier 1 Melee Combat Mastery.",
        seasonalWorld=True,
    ),
    "CHAT": _envelope(
        "CHAT",
        {"type": "GAMEMESSAGE", "message": "You've completed 1,000 laps of the Seers' Village Rooftop Course.", "source": "GAMEMESSAGE"},
        "%USERNAME% received a chat message:\n\n```\n%MESSAGE%\n```",
    ),
    "EXTERNAL_PLUGIN": _envelope(
        "EXTERNAL_PLUGIN",
        {"sourcePlugin": "My External Plugin", "metadata": {"hello": "world"}},
        "Zezima has experienced a cool event!",
    ),
    "LOGIN": _envelope(
        "LOGIN",
        {
            "world": 338,
            "collectionLog": {"completed": 651, "total": 1477},
            "combatAchievementPoints": {"completed": 503, "total": 2005},
            "achievementDiary": {"completed": 42, "total": 48},
            "achievementDiaryTasks": {"completed": 477, "total": 492},
            "barbarianAssault": {"highGambleCount": 0},
            "skills": {
                "totalExperience": 346380298,
                "totalLevel": 2164,
                "levels": {"Attack": 99, "Hunter": 91},
                "experience": {"Attack": 13034431, "Hunter": 5902831},
            },
            "questCount": {"completed": 156, "total": 158},
            "questPoints": {"completed": 296, "total": 300},
            "slayer": {"points": 2204, "streak": 1340},
            "pets": [{"itemId": 11995, "name": "Pet chaos elemental"}],
        },
        "%USERNAME% logged into World %WORLD%",
    ),
    "LOGOUT": _envelope("LOGOUT", None, "%USERNAME% logged out"),
    "XP_MILESTONE": _envelope(
        "XP_MILESTONE",
        {"xpData": {"Attack": 5000000, "Strength": 4500000}, "milestoneAchieved": ["Attack"], "interval": 5000000},
        "%USERNAME% has reached %XP% XP in Attack",
    ),
    "TOA_UNIQUE": _envelope(
        "TOA_UNIQUE",
        {"party": ["Zezima", "Lynx Titan"], "rewardChestWeight": 12345, "raidLevels": 300, "probability": 0.0231},
        "%USERNAME% received a Tombs of Amascut unique",
    ),
}


def sample_payload(event_type: str, **overrides) -> Dict[str, Any]:
    """Return a deep copy of the sample for ``event_type`` with top-level overrides applied."""
    payload = copy.deepcopy(SAMPLE_PAYLOADS[event_type])
    payload.update(overrides)
    return payload


def sample_json(event_type: str, **overrides) -> str:
    return json.dumps(sample_payload(event_type, **overrides))
