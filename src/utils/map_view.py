"""Plotly map figure for the selected profile."""

from typing import Any, Dict, Optional

import plotly.graph_objects as go

from src.utils.profiles import Profile

# Centralized Plotly configuration used by the map chart
PLOTLY_CONFIG = {"displaylogo": False, "scrollZoom": True}

MARKER_COLOR = "#2563eb"


def map_view_state(selected: Optional[Profile], map_config: Dict[str, Any]) -> Dict[str, Any]:
    """Center and zoom for the map: the selected profile's location, or the default overview."""
    if selected is not None and selected.location is not None:
        return {
            "lat": selected.location.lat,
            "lng": selected.location.lng,
            "zoom": map_config["selected_zoom"],
        }
    return {
        "lat": map_config["default_center_lat"],
        "lng": map_config["default_center_lng"],
        "zoom": map_config["default_zoom"],
    }


def build_profile_map(selected: Optional[Profile], map_config: Dict[str, Any], height: int = 560) -> go.Figure:
    """
    Build the map figure, with a single marker when a located profile is selected.

    Args:
        selected: Profile to mark, or None for the overview map
        map_config: Output of ``get_map_config()``
        height: Figure height in pixels

    Returns:
        go.Figure ready for ``st.plotly_chart``
    """
    view = map_view_state(selected, map_config)
    fig = go.Figure()
    if selected is not None and selected.location is not None:
        fig.add_trace(
            go.Scattermap(
                lat=[selected.location.lat],
                lon=[selected.location.lng],
                mode="markers",
                marker={"size": 16, "color": MARKER_COLOR},
                text=[selected.name],
                customdata=[selected.address],
                hovertemplate="<b>%{text}</b><br>%{customdata}<extra></extra>",
                name=selected.name,
            )
        )
    fig.update_layout(
        map={"style": "open-street-map", "center": {"lat": view["lat"], "lon": view["lng"]}, "zoom": view["zoom"]},
        margin={"l": 0, "r": 0, "t": 0, "b": 0},
        height=height,
        showlegend=False,
    )
    return fig
