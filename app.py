import logging

import streamlit as st

from lightning_yield.config.env import LOG_LEVEL
from lightning_yield.config.logging_setup import setup_logging
from lightning_yield.config.settings import LIVE_DATA_CACHE_TTL_S
from lightning_yield.core.live_data import (
    LiveDataError,
    PriceSnapshot,
    default_price_snapshot,
    get_live_btc_price,
)
from lightning_yield.ui.layout import render_dashboard

logger = logging.getLogger(__name__)


@st.cache_data(ttl=LIVE_DATA_CACHE_TTL_S)
def load_live_btc_price() -> PriceSnapshot | None:
    try:
        return get_live_btc_price()
    except LiveDataError as e:
        logger.warning("Using default BTC price: %s", e)
        st.warning(f"Could not load the live BTC price, using a default instead. ({e})")
        return None


def main() -> None:
    setup_logging(LOG_LEVEL)
    st.set_page_config(
        page_title="Bitcoin Treasury Lightning Yield",
        layout="centered",
    )
    price = load_live_btc_price() or default_price_snapshot()
    render_dashboard(price)


if __name__ == "__main__":
    main()
