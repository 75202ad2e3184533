"""
Visualization module for the Biohazard Plume Triage System.

Provides Plotly-based interactive plots for the Streamlit interface.
"""

import numpy as np
import plotly.graph_objects as go
from typing import Optional, Sequence, Tuple

from mapping.contours import PlumePolygon
from models.gaussian_plume import ConcentrationPoint
from triage.types import TriageResult


def _hex_to_rgba(color: str, opacity: float) -> str:
    """'#rrggbb' -> 'rgba(r,g,b,a)' for fill colors."""
    h = color.lstrip("#")
    r, g, b = (int(h[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r},{g},{b},{opacity})"


def _map_center(
    points: Sequence[ConcentrationPoint],
    source_lat_lon: Tuple[float, float],
) -> Tuple[float, float]:
    if not points:
        return source_lat_lon
    lats = [p.lat for p in points] + [source_lat_lon[0]]
    lons = [p.lon for p in points] + [source_lat_lon[1]]
    return (min(lats) + max(lats)) / 2, (min(lons) + max(lons)) / 2


def create_plume_figure(
    points: Sequence[ConcentrationPoint],
    polygons: Sequence[PlumePolygon],
    source_lat_lon: Tuple[float, float],
    show_points: bool = False,
    zoom: float = 11.0,
) -> go.Figure:
    """Map of contour polygons (outer rings first) with the release site."""
    fig = go.Figure()

    # Polygons arrive sorted by level ascending; draw large rings underneath
    for poly in polygons:
        lats = [c[0] for c in poly.coordinates]
        lons = [c[1] for c in poly.coordinates]
        fig.add_trace(
            go.Scattermap(
                lat=lats,
                lon=lons,
                mode="lines",
                fill="toself",
                fillcolor=_hex_to_rgba(poly.color, poly.opacity),
                line=dict(color=poly.color, width=1),
                name=f"{poly.concentration_level:.2e} g/m³",
                hovertemplate=f"Level: {poly.concentration_level:.3e} g/m³<extra></extra>",
            )
        )

    if show_points and points:
        conc = np.array([p.concentration for p in points])
        fig.add_trace(
            go.Scattermap(
                lat=[p.lat for p in points],
                lon=[p.lon for p in points],
                mode="markers",
                marker=dict(
                    size=4,
                    color=np.log10(np.maximum(conc, 1e-12)),
                    colorscale="Hot",
                    reversescale=True,
                    colorbar=dict(title="log10(g/m³)"),
                ),
                name="Samples",
                hovertemplate="%{lat:.5f}, %{lon:.5f}<extra></extra>",
            )
        )

    fig.add_trace(
        go.Scattermap(
            lat=[source_lat_lon[0]],
            lon=[source_lat_lon[1]],
            mode="markers",
            marker=dict(size=14, color="lime"),
            name="Release Site",
            hovertemplate="Source<br>%{lat:.5f}, %{lon:.5f}<extra></extra>",
        )
    )

    center_lat, center_lon = _map_center(points, source_lat_lon)
    fig.update_layout(
        map=dict(
            style="carto-darkmatter",
            center=dict(lat=center_lat, lon=center_lon),
            zoom=zoom,
        ),
        height=650,
        template="plotly_dark",
        legend=dict(
            orientation="h",
            yanchor="bottom",
            y=-0.12,
            xanchor="center",
            x=0.5,
        ),
        margin=dict(l=10, r=10, t=40, b=80),
    )
    return fig


def create_triage_figure(
    result: Optional[TriageResult],
    top_n: int = 10,
) -> go.Figure:
    """Bar chart of the highest-ranked pathogens; non-viable ones in grey."""
    if result is None or not result.scores:
        fig = go.Figure()
        fig.add_annotation(text="No triage results available", showarrow=False)
        return fig

    scores = list(result.scores[:top_n])
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=[s.pathogen_name for s in scores],
            y=[s.score for s in scores],
            marker_color=["crimson" if s.is_viable else "grey" for s in scores],
            name="Match Score",
            customdata=[["viable" if s.is_viable else "non-viable"] for s in scores],
            hovertemplate="%{x}<br>Score: %{y:.0f}<br>%{customdata[0]}<extra></extra>",
        )
    )

    fig.update_layout(
        title=f"Pathogen Match Scores (humidity {result.conditions.humidity:.0f}%)",
        xaxis_title="Pathogen",
        yaxis_title="Score",
        yaxis_range=[0, 100],
        template="plotly_dark",
        height=350,
    )
    return fig
