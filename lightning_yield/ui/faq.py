# lightning_yield/ui/faq.py
from __future__ import annotations

from typing import List, Tuple

import streamlit as st

from lightning_yield.core.projection_models import CompoundingPolicy

FAQ_ENTRIES: List[Tuple[str, str]] = [
    (
        "How does Lightning yield work?",
        "Lightning Network lets a bitcoin treasury earn yield by providing "
        "liquidity for payment routing. Funds remain in company custody while "
        "collecting routing fees in bitcoin.",
    ),
    (
        "What yield is expected from well-managed channels?",
        "Typical annual yield ranges from 2% to 7%. Optimised nodes with high "
        "liquidity and connectivity can reach the upper end of this range.",
    ),
    (
        "How does this impact GAAP accounting?",
        "Under ASC 350-60, bitcoin allocated to Lightning can be treated as a "
        "productive asset. Routing fees flow through net income, allowing "
        "non-dilutive EPS recognition.",
    ),
    (
        "What are the risks?",
        "Key risks include liquidity management, network monitoring and "
        "operational overhead. Bitcoin custody remains under company control.",
    ),
    (
        "Why focus on EPS impact?",
        "Lightning yield contributes to quarterly EPS without issuing new "
        "shares.",
    ),
]

POLICY_EXPLANATIONS = {
    CompoundingPolicy.REINVEST: (
        "The initial Lightning allocation compounds on its own; its share of "
        "the total treasury grows over time."
    ),
    CompoundingPolicy.REBALANCE: (
        "The Lightning allocation is adjusted every quarter to keep its target "
        "percentage of the total growing treasury."
    ),
}


def methodology_points(policy: CompoundingPolicy) -> List[str]:
    return [
        "**Scope:** static BTC treasury with no debt financing, equity "
        "issuance or trading; only yield earned natively from Lightning.",
        "**Inputs:** BTC reserves, Lightning allocation %, projected Lightning "
        "yield, BTC CAGR and share count.",
        f"**Allocation:** {POLICY_EXPLANATIONS[policy]}",
        "**Compounding:** BTC price CAGR and Lightning yield are compounded "
        "quarterly.",
        "**Pricing path:** quarterly BTC prices derived geometrically from the "
        "current price and the assumed annual CAGR.",
        "**EPS calc:** each quarter's Lightning-earned BTC is converted to USD "
        "at that quarter's starting price and divided by fully diluted shares. "
        "Year-1 run-rate EPS uplift is the sum of the first four quarters; "
        "5-year EPS gain is the sum of all 20.",
        "**Disclaimer:** planning estimates only; not investment advice or "
        "forward-looking guidance.",
    ]


def render_faq() -> None:
    with st.expander("How Lightning Yield Works & Methodology", expanded=False):
        for question, answer in FAQ_ENTRIES:
            st.markdown(f"**{question}**")
            st.write(answer)


def render_methodology(policy: CompoundingPolicy) -> None:
    with st.expander("Methodology & Assumptions", expanded=False):
        st.markdown("\n".join(f"- {point}" for point in methodology_points(policy)))
