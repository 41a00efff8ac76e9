# lightning_yield/config/settings.py

from lightning_yield.config.env import APP_ENV

# --- Projection horizon ---

# Fixed 5-year horizon, compounded quarterly
PROJECTION_YEARS = 5
QUARTERS_PER_YEAR = 4
PROJECTION_QUARTERS = PROJECTION_YEARS * QUARTERS_PER_YEAR
SATS_PER_BTC = 100_000_000

# --- Calculator defaults (illustrative treasury) ---

DEFAULT_BTC_RESERVES = 5021
DEFAULT_SHARES_OUTSTANDING = 14_805_000
DEFAULT_LIGHTNING_ALLOCATION_PCT = 15.0
DEFAULT_LIGHTNING_YIELD_PCT = 4.0
# CAGR is left blank on purpose: the user must state a price assumption
DEFAULT_BTC_CAGR_PCT = None
DEFAULT_REINVEST_YIELD = True

# Slider bounds (expressed as %)
ALLOCATION_SLIDER_MIN_PCT = 0.0
ALLOCATION_SLIDER_MAX_PCT = 100.0
ALLOCATION_SLIDER_STEP_PCT = 1.0
YIELD_SLIDER_MIN_PCT = 0.0
YIELD_SLIDER_MAX_PCT = 10.0
YIELD_SLIDER_STEP_PCT = 0.1

# --- Preset scenarios (allocation %, Lightning yield %, BTC CAGR %) ---

PRESET_BEAR = (10.0, 2.5, 21.0)
PRESET_BASE = (15.0, 4.0, 29.0)
PRESET_BULL = (25.0, 6.0, 37.0)

# --- Live price ---
# CoinGecko - free public API, no key required
# CoinDesk BPI - legacy endpoint, kept as a secondary source
# Coinbase - spot price, no key required
COINGECKO_SIMPLE_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"
COINDESK_CURRENT_PRICE_URL = "https://api.coindesk.com/v1/bpi/currentprice.json"
COINBASE_SPOT_PRICE_URL = "https://api.coinbase.com/v2/prices/spot"

# Order in which price providers are tried
PRICE_PROVIDER_ORDER = ("coingecko", "coindesk", "coinbase")

LIVE_DATA_REQUEST_TIMEOUT_S = 10
# Price refreshes every 5 minutes in prod
LIVE_DATA_CACHE_TTL_S = 60 * 60 if APP_ENV == "dev" else 5 * 60
LIVE_DATA_USER_AGENT = "LightningYieldCalculator/0.1 (contact: you@example.com)"

# Used when every price provider fails
DEFAULT_BTC_PRICE_USD = 65000.0

# --- Chart styling ---

EPS_BAR_COLOR = "#16a34a"
CHART_Y_PAD_PCT = 0.15
DELTA_POSITIVE_COLOR = "green"
DELTA_NEGATIVE_COLOR = "red"
DELTA_NEUTRAL_COLOR = "gray"
