# streamlit_app/charts.py
"""
Turn report JSON into pandas frames and plotly figures.

Kept free of Streamlit calls so the shaping can be tested on its own.
"""

from typing import Dict, List, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

# one palette per pie, cycled by material position on the page
PIE_PALETTES: List[List[str]] = [
    ["#433A3F", "#6B6067", "#93868F", "#BBACB7", "#DFDFDF"],
    ["#333333", "#555555", "#777777", "#999999", "#AAAAAA"],
    ["#4E364D", "#6B536A", "#887087", "#A58DA4", "#B8AEBA"],
    ["#B8E1FF", "#C4B5D9", "#D08AB3", "#DC5F8D", "#C08497"],
    ["#FF928B", "#E4776F", "#C95C53", "#AE4137", "#4E0110"],
]

LINE_COLORS = ["#353ADD", "#FF6B6B", "#20B2AA", "#FFA500", "#8A2BE2", "#2F4F4F"]

# report keys that are not a single material name
MATERIAL_LABELS: Dict[str, str] = {
    "potashpotassium": "Potash & Potassium",
}


def material_label(key: str) -> str:
    return MATERIAL_LABELS.get(key, key.capitalize())


def producers_frame(entries: List[Dict]) -> pd.DataFrame:
    """country/count frame for one material, in report order."""
    df = pd.DataFrame(entries, columns=["country", "count"])
    df["count"] = pd.to_numeric(df["count"]).astype(int)
    return df


def producer_pie(entries: List[Dict], material_key: str, palette_index: int = 0) -> go.Figure:
    df = producers_frame(entries)
    fig = px.pie(
        df,
        values="count",
        names="country",
        title=f"Active {material_label(material_key)} Mines by Country",
        color_discrete_sequence=PIE_PALETTES[palette_index % len(PIE_PALETTES)],
    )
    fig.update_traces(marker=dict(line=dict(width=2)))
    fig.update_layout(legend=dict(orientation="h"))
    return fig


def price_frame(stock_prices: Optional[Dict[str, List[Dict]]]) -> pd.DataFrame:
    """Long frame (date, price, material) across every symbol in `stockPrices`."""
    frames = []
    for key, points in (stock_prices or {}).items():
        if not points:
            continue
        df = pd.DataFrame(points, columns=["date", "price"])
        df["material"] = material_label(key)
        frames.append(df)

    if not frames:
        return pd.DataFrame(columns=["date", "price", "material"])

    out = pd.concat(frames, ignore_index=True)
    out["date"] = pd.to_datetime(out["date"])
    out["price"] = pd.to_numeric(out["price"])
    return out.sort_values(["material", "date"], ignore_index=True)


def price_line_chart(stock_prices: Optional[Dict[str, List[Dict]]]) -> Optional[go.Figure]:
    """One line per symbol; None when there is nothing to plot."""
    df = price_frame(stock_prices)
    if df.empty:
        return None

    fig = px.line(
        df,
        x="date",
        y="price",
        color="material",
        color_discrete_sequence=LINE_COLORS,
        line_shape="spline",
        labels={"date": "Date", "price": "Price", "material": "Material"},
    )
    fig.update_layout(hovermode="x unified", legend=dict(orientation="h", y=1.1))
    fig.update_xaxes(tickformat="%b %d")
    return fig
