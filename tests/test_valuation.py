from dinkhook import valuation
from dinkhook.schemas import parse_extra
from dinkhook.samples import SAMPLE_PAYLOADS


def _extra(event_type, **changes):
    data = dict(SAMPLE_PAYLOADS[event_type]["extra"])
    data.update(changes)
    return parse_extra(event_type, data)


def test_grand_exchange_sold_proceeds():
    # SOLD, quantity 2 at 3 gp each, no tax
    assert valuation.grand_exchange_proceeds(_extra("GRAND_EXCHANGE")) == 6


def test_grand_exchange_seller_tax_is_deducted():
    ge = _extra("GRAND_EXCHANGE", item={"id": 1, "quantity": 10, "priceEach": 1000, "name": "Rune bar"}, sellerTax=100)
    assert valuation.grand_exchange_proceeds(ge) == 9900


def test_grand_exchange_without_item():
    assert valuation.grand_exchange_proceeds(parse_extra("GRAND_EXCHANGE", {"status": "EMPTY"})) == 0


def test_loot_value_sums_stacks():
    assert valuation.loot_value(_extra("LOOT")) == 25000100


def test_trade_net_uses_reported_totals():
    assert valuation.trade_net(_extra("TRADE")) == 200 - 450


def test_trade_net_falls_back_to_items():
    trade = parse_extra("TRADE", {
        "counterparty": "Billy",
        "receivedItems": [{"id": 1, "quantity": 5, "priceEach": 10, "name": "a"}],
        "givenItems": [{"id": 2, "quantity": 1, "priceEach": 20, "name": "b"}],
    })
    assert valuation.trade_net(trade) == 30


def test_group_storage_net():
    assert valuation.group_storage_net(_extra("GROUP_STORAGE")) == -1
    computed = _extra("GROUP_STORAGE", netValue=None)
    assert valuation.group_storage_net(computed) == 112 - 113


def test_death_value_lost():
    assert valuation.death_value_lost(_extra("DEATH")) == 300
    assert valuation.death_value_lost(_extra("DEATH", valueLost=None)) == 300


def test_player_kill_equipment_value():
    assert valuation.equipment_value(_extra("PLAYER_KILL")) == 164 + 14473 + 4000


def test_extra_value_dispatches_by_type():
    assert valuation.extra_value(_extra("CLUE")) == 42069
    assert valuation.extra_value(_extra("COLLECTION")) == 500812
    assert valuation.extra_value(_extra("BARBARIAN_ASSAULT_GAMBLE")) == 35500 + 25 * 271
    assert valuation.extra_value(_extra("LEVEL")) is None
    assert valuation.extra_value(None) is None
