import pytest
from pydantic import ValidationError

from dinkhook.schemas import EXTRA_MODELS, KNOWN_TYPES, Envelope, ItemStack, parse_extra
from dinkhook.schemas.extras import GrandExchangeExtra, LogoutExtra, LootExtra
from dinkhook.samples import SAMPLE_PAYLOADS, sample_payload


def test_envelope_minimal_valid():
    env = Envelope.model_validate({"type": "LOGOUT"})
    assert env.type == "LOGOUT"
    assert env.extra is None
    assert env.player == "unknown player"


def test_envelope_reads_camel_case_metadata():
    env = Envelope.model_validate(SAMPLE_PAYLOADS["DEATH"])
    assert env.player_name == "Zezima"
    assert env.account_type == "NORMAL"
    assert env.seasonal_world is False
    assert env.dink_account_hash == "a3f1c0de9b7e4f2a8d6c5b4a39281706"
    assert env.discord_user.avatar_hash == "abc123def345abc123def345abc123de"


def test_envelope_missing_type_fails():
    with pytest.raises(ValidationError):
        Envelope.model_validate({"extra": {}})


def test_envelope_type_must_be_string():
    with pytest.raises(ValidationError):
        Envelope.model_validate({"type": 7, "extra": {}})


def test_envelope_extra_must_be_object():
    with pytest.raises(ValidationError):
        Envelope.model_validate({"type": "LOOT", "extra": ["not", "an", "object"]})


def test_unknown_fields_are_kept():
    payload = sample_payload("QUEST", someNewField={"a": 1})
    env = Envelope.model_validate(payload)
    assert env.to_wire()["someNewField"] == {"a": 1}


def test_item_stack_value():
    item = ItemStack.model_validate({"id": 1, "quantity": 3, "priceEach": 250, "name": "Coal"})
    assert item.value == 750


def test_item_stack_rejects_negative_quantity():
    with pytest.raises(ValidationError):
        ItemStack.model_validate({"id": 1, "quantity": -1, "priceEach": 1, "name": "Coal"})


def test_every_known_type_has_a_sample():
    assert set(SAMPLE_PAYLOADS) == KNOWN_TYPES == set(EXTRA_MODELS)


def test_parse_extra_typed_models():
    loot = parse_extra("LOOT", SAMPLE_PAYLOADS["LOOT"]["extra"])
    assert isinstance(loot, LootExtra)
    assert loot.items[0].price_each == 25000000
    assert loot.items[0].criteria == ["VALUE"]
    ge = parse_extra("GRAND_EXCHANGE", SAMPLE_PAYLOADS["GRAND_EXCHANGE"]["extra"])
    assert isinstance(ge, GrandExchangeExtra) and ge.is_sale


def test_parse_extra_unknown_type_is_none():
    assert parse_extra("SOMETHING_NEW", {"x": 1}) is None


def test_parse_extra_null_extra_gives_empty_model():
    assert isinstance(parse_extra("LOGOUT", None), LogoutExtra)


def test_parse_extra_rejects_wrong_shape():
    with pytest.raises(ValidationError):
        parse_extra("LOOT", {"items": [{"id": "x", "name": "Bones"}]})


@pytest.mark.parametrize("event_type", sorted(t for t, p in SAMPLE_PAYLOADS.items() if p["extra"] is not None))
def test_sample_extra_round_trips(event_type):
    extra = SAMPLE_PAYLOADS[event_type]["extra"]
    assert parse_extra(event_type, extra).to_wire() == extra


def test_envelope_round_trips():
    for payload in SAMPLE_PAYLOADS.values():
        assert Envelope.model_validate(payload).to_wire() == payload
