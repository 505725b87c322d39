"""Static instrument universe and asset class membership.

These tables are compiled-in configuration: built once at import, never
mutated, and not overridable from YAML.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Instrument:
    """A tradable instrument in the fixed universe."""
    symbol: str            # Internal symbol, e.g. "/ES"
    provider_symbol: str   # Upstream chart symbol, e.g. "ES=F"
    description: str


@dataclass(frozen=True)
class AssetClass:
    """A configured grouping of instruments treated as one unit."""
    key: str
    display_name: str
    members: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError(f"Asset class {self.key!r} must have at least one member")


INSTRUMENTS: tuple[Instrument, ...] = (
    Instrument("/ES", "ES=F", "E-mini S&P 500"),
    Instrument("/NQ", "NQ=F", "E-mini Nasdaq-100"),
    Instrument("/ZB", "ZB=F", "30-Year Treasury Bond"),
    Instrument("/GC", "GC=F", "Gold"),
    Instrument("/SI", "SI=F", "Silver"),
    Instrument("/CL", "CL=F", "Crude Oil WTI"),
    Instrument("/HG", "HG=F", "Copper"),
    Instrument("/ZC", "ZC=F", "Corn"),
    Instrument("/ZS", "ZS=F", "Soybeans"),
    Instrument("/ZW", "ZW=F", "Wheat"),
    Instrument("/6E", "EURUSD=X", "Euro FX"),
    Instrument("/6J", "USDJPY=X", "Japanese Yen"),
    Instrument("/6B", "GBPUSD=X", "British Pound"),
    Instrument("/6A", "AUDUSD=X", "Australian Dollar"),
)

UNIVERSE: tuple[str, ...] = tuple(instrument.symbol for instrument in INSTRUMENTS)

PROVIDER_SYMBOLS: Mapping[str, str] = MappingProxyType(
    {instrument.symbol: instrument.provider_symbol for instrument in INSTRUMENTS}
)

# Order matters: it breaks ties when ranking asset classes by score
ASSET_CLASSES: tuple[AssetClass, ...] = (
    AssetClass("stocks", "Equity Indices", ("/ES", "/NQ")),
    AssetClass("bonds", "Fixed Income", ("/ZB",)),
    AssetClass("commodities", "Commodities", ("/GC", "/SI", "/CL", "/HG", "/ZC", "/ZS", "/ZW")),
    AssetClass("currencies", "Currencies", ("/6E", "/6J", "/6B", "/6A")),
)

ASSET_CLASSES_BY_KEY: Mapping[str, AssetClass] = MappingProxyType(
    {asset_class.key: asset_class for asset_class in ASSET_CLASSES}
)

# (from, to) -> narrative for well-known rotations
FLOW_NARRATIVES: Mapping[tuple[str, str], str] = MappingProxyType({
    ("stocks", "bonds"): "Flight to safety - investors moving from equities to bonds",
    ("bonds", "commodities"): "Inflation hedge - capital rotating from bonds to real assets",
    ("stocks", "commodities"): "Risk-off rotation - moving from growth assets to inflation hedges",
    ("currencies", "bonds"): "Safe haven demand - foreign capital flowing into US bonds",
})

REGIME_DESCRIPTIONS: Mapping[str, str] = MappingProxyType({
    "risk_off": "Risk-off environment: Capital fleeing to safe havens like bonds and gold",
    "risk_on": "Risk-on environment: Investors embracing stocks and risk assets",
    "inflation_hedge": "Inflation concerns: Money rotating into commodities and real assets",
    "neutral": "Neutral environment: Balanced flows across asset classes",
})


def get_asset_class(key: str) -> AssetClass:
    """Look up an asset class by key."""
    return ASSET_CLASSES_BY_KEY[key]


def get_provider_symbol(symbol: str) -> str:
    """Map an internal symbol to the upstream chart symbol, passing unknown symbols through."""
    return PROVIDER_SYMBOLS.get(symbol, symbol)
