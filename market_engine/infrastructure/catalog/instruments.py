"""
Static instrument catalog and synthetic price profiles.
Read-only lookup tables; used as the instrument listing fallback and to
parameterize the synthetic series generator.
"""

from dataclasses import dataclass

from market_engine.domain.entities.market_data import Instrument


@dataclass(frozen=True)
class PriceProfile:
    base_price: float
    volatility_multiplier: float


DEFAULT_PROFILE = PriceProfile(base_price=100.0, volatility_multiplier=1.0)

PRICE_PROFILES: dict[str, PriceProfile] = {
    "BTC-USD": PriceProfile(45000.0, 2.0),
    "ETH-USD": PriceProfile(2800.0, 2.2),
    "SPY": PriceProfile(450.0, 0.8),
    "QQQ": PriceProfile(380.0, 1.0),
    "AAPL": PriceProfile(175.0, 1.2),
    "TSLA": PriceProfile(240.0, 1.8),
}


def price_profile(instrument: str) -> PriceProfile:
    return PRICE_PROFILES.get(instrument, DEFAULT_PROFILE)


INSTRUMENT_CATALOG: tuple[Instrument, ...] = (
    Instrument("BTC-USD", "Bitcoin (BTC)", "Major"),
    Instrument("ETH-USD", "Ethereum (ETH)", "Major"),
    Instrument("BNB-USD", "Binance Coin (BNB)", "Major"),
    Instrument("XRP-USD", "Ripple (XRP)", "Major"),
    Instrument("ADA-USD", "Cardano (ADA)", "Major"),
    Instrument("SOL-USD", "Solana (SOL)", "Major"),
    Instrument("DOGE-USD", "Dogecoin (DOGE)", "Major"),
    Instrument("DOT-USD", "Polkadot (DOT)", "Major"),
    Instrument("UNI-USD", "Uniswap (UNI)", "DeFi"),
    Instrument("LINK-USD", "Chainlink (LINK)", "DeFi"),
    Instrument("AAVE-USD", "Aave (AAVE)", "DeFi"),
    Instrument("MKR-USD", "Maker (MKR)", "DeFi"),
    Instrument("AVAX-USD", "Avalanche (AVAX)", "Layer 1"),
    Instrument("ALGO-USD", "Algorand (ALGO)", "Layer 1"),
    Instrument("ATOM-USD", "Cosmos (ATOM)", "Layer 1"),
    Instrument("NEAR-USD", "NEAR Protocol (NEAR)", "Layer 1"),
    Instrument("OP-USD", "Optimism (OP)", "Layer 2"),
    Instrument("IMX-USD", "Immutable X (IMX)", "Layer 2"),
    Instrument("PEPE-USD", "Pepe (PEPE)", "Meme"),
    Instrument("SAND-USD", "The Sandbox (SAND)", "Gaming"),
    Instrument("XMR-USD", "Monero (XMR)", "Privacy"),
    Instrument("CRO-USD", "Cronos (CRO)", "Exchange"),
    Instrument("USDC-USD", "USD Coin (USDC)", "Stablecoin"),
    Instrument("DAI-USD", "Dai (DAI)", "Stablecoin"),
    Instrument("SPY", "S&P 500 ETF (SPY)", "Traditional"),
    Instrument("QQQ", "Nasdaq ETF (QQQ)", "Traditional"),
    Instrument("AAPL", "Apple Inc. (AAPL)", "Traditional"),
    Instrument("TSLA", "Tesla Inc. (TSLA)", "Traditional"),
    Instrument("MSFT", "Microsoft (MSFT)", "Traditional"),
    Instrument("GOOGL", "Alphabet (GOOGL)", "Traditional"),
    Instrument("AMZN", "Amazon (AMZN)", "Traditional"),
    Instrument("NVDA", "NVIDIA (NVDA)", "Traditional"),
)
