"""Assets, exchanges and palette entries offered by the editor."""

from dataclasses import dataclass

from tradeflow.models.nodes import (
    ActionConfig,
    ActionKind,
    PositionSide,
    TriggerCondition,
    TriggerConfig,
)


@dataclass(frozen=True)
class Asset:
    symbol: str
    name: str


@dataclass(frozen=True)
class Exchange:
    id: str
    name: str


@dataclass(frozen=True)
class PaletteEntry:
    id: str
    title: str
    description: str


ASSETS = (
    Asset("SOL", "Solana"),
    Asset("BTC", "Bitcoin"),
    Asset("ETH", "Ethereum"),
    Asset("BNB", "Binance Coin"),
    Asset("ADA", "Cardano"),
    Asset("XRP", "Ripple"),
    Asset("DOT", "Polkadot"),
    Asset("DOGE", "Dogecoin"),
)

EXCHANGES = (
    Exchange("binance", "Binance"),
    Exchange("bybit", "Bybit"),
    Exchange("okx", "OKX"),
    Exchange("kucoin", "KuCoin"),
)

TRIGGER_PALETTE = (
    PaletteEntry("price_threshold", "Price Threshold", "Trigger when price crosses threshold"),
)

ACTION_PALETTE = {
    ActionKind.long_position: PaletteEntry("long_position", "Open Long", "Buy/Long position"),
    ActionKind.short_position: PaletteEntry("short_position", "Open Short", "Sell/Short position"),
    ActionKind.close_position: PaletteEntry("close_position", "Close Position", "Close existing position"),
    ActionKind.place_order: PaletteEntry("place_order", "Limit Order", "Place limit order"),
    ActionKind.stop_loss: PaletteEntry("stop_loss", "Stop Loss", "Set stop loss"),
    ActionKind.take_profit: PaletteEntry("take_profit", "Take Profit", "Set take profit"),
}

# defaults the editor pre-fills in its forms
DEFAULT_ASSET = "SOL"
DEFAULT_THRESHOLD = 100.0
DEFAULT_EXCHANGE = "binance"
DEFAULT_PAIR = "SOLUSDT"
DEFAULT_AMOUNT_USD = 100.0
DEFAULT_LEVERAGE = 10
DEFAULT_POSITION = PositionSide.long


def default_trigger_config() -> TriggerConfig:
    return TriggerConfig(
        asset=DEFAULT_ASSET,
        condition=TriggerCondition.crosses_above,
        threshold=DEFAULT_THRESHOLD,
    )


def default_action_config() -> ActionConfig:
    return ActionConfig(
        exchange=DEFAULT_EXCHANGE,
        pair=DEFAULT_PAIR,
        position=DEFAULT_POSITION,
        amount_usd=DEFAULT_AMOUNT_USD,
        leverage=DEFAULT_LEVERAGE,
    )


def asset_symbols() -> list[str]:
    return [asset.symbol for asset in ASSETS]


def is_known_exchange(exchange_id: str) -> bool:
    return any(exchange.id == exchange_id for exchange in EXCHANGES)
