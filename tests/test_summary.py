from datetime import timedelta

import pytest

from dinkhook.samples import SAMPLE_PAYLOADS
from dinkhook.summary import format_duration, parse_duration, summarize


@pytest.mark.parametrize("raw,expected", [
    ("PT1M30.6S", timedelta(minutes=1, seconds=30.6)),
    ("PT45S", timedelta(seconds=45)),
    ("PT1H2M3S", timedelta(hours=1, minutes=2, seconds=3)),
    ("P1DT1S", timedelta(days=1, seconds=1)),
])
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "PT", "1:04.20", "soon"])
def test_parse_duration_rejects(raw):
    assert parse_duration(raw) is None


def test_format_duration():
    assert format_duration(timedelta(minutes=1, seconds=30.6)) == "1:30.60"
    assert format_duration(timedelta(hours=1, minutes=2, seconds=3)) == "1:02:03.00"


def test_loot_summary(make_notification):
    text = summarize(make_notification("LOOT"))
    assert text.startswith("Zezima has looted 1 x Dragon warhammer (25,000,000)")
    assert "from Lizardman shaman" in text
    assert text.endswith("(total 25,000,100 gp)")


def test_grand_exchange_summary(make_notification):
    assert summarize(make_notification("GRAND_EXCHANGE")) == "Zezima sold 2 x Feather on the GE for 6 gp"


def test_kill_count_summary_formats_time(make_notification):
    text = summarize(make_notification("KILL_COUNT"))
    assert text == "Zezima has defeated King Black Dragon with a completion count of 69 in 1:30.60 (new personal best)"


def test_speedrun_keeps_clock_style_times(make_notification):
    assert summarize(make_notification("SPEEDRUN")).endswith("with a time of 1:04.20")


def test_level_summary(make_notification):
    assert summarize(make_notification("LEVEL")) == "Zezima has levelled Hunter to 62"


def test_logout_summary(make_notification):
    assert summarize(make_notification("LOGOUT")) == "Zezima logged out"


def test_every_sample_has_a_summary(make_notification):
    for t in SAMPLE_PAYLOADS:
        text = summarize(make_notification(t))
        assert text and "Zezima" in text


def test_external_plugin_uses_content(make_notification):
    assert summarize(make_notification("EXTERNAL_PLUGIN")) == "Zezima has experienced a cool event!"


def test_unknown_type_falls_back_to_content():
    from dinkhook.dispatch import Notification
    from dinkhook.schemas import Envelope

    env = Envelope.model_validate({"type": "NEW_THING", "playerName": "Lynx Titan", "content": "%USERNAME% did  a new thing"})
    assert summarize(Notification(envelope=env)) == "Lynx Titan did a new thing"
    bare = Envelope.model_validate({"type": "NEW_THING", "playerName": "Lynx Titan"})
    assert summarize(Notification(envelope=bare)) == "Lynx Titan sent NEW_THING"


@pytest.mark.parametrize("event_type", sorted(SAMPLE_PAYLOADS))
def test_sparse_extra_never_prints_none(make_notification, event_type):
    text = summarize(make_notification(event_type, extra={}))
    assert "None" not in text
    assert text.startswith("Zezima")


def test_sparse_slayer_and_quest(make_notification):
    assert summarize(make_notification("QUEST", extra={})) == "Zezima has completed a quest"
    slayer = make_notification("SLAYER", extra={"slayerTask": "Kalphites"})
    assert summarize(slayer) == "Zezima has completed a slayer task: Kalphites"
