"""
Chart and table helpers for the presentation layer.
"""

from typing import List, Sequence

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .models import ScheduleRecommendation, SlotRating, TimeSlot
from .rounding import round_half_up

RATING_COLORS = {
    SlotRating.EXCELLENT: '#22c55e',
    SlotRating.GOOD: '#6366f1',
    SlotRating.FAIR: '#FFC107',
    SlotRating.AVOID: '#f44336',
}

BEST_HOURS_SHOWN = 4


def forecast_frame(forecast: Sequence[TimeSlot]) -> pd.DataFrame:
    """One row per hour, ordered by hour."""
    rows = [slot.to_dict() for slot in sorted(forecast, key=lambda s: s.hour)]
    columns = ['hour', 'label', 'carbon_intensity', 'spot_price_multiplier',
               'renewable_pct', 'recommendation']
    return pd.DataFrame(rows, columns=columns)


def best_hours_chips(slots: Sequence[TimeSlot], shown: int = BEST_HOURS_SHOWN) -> List[str]:
    """Labels of the first few optimal hours plus a "+N" overflow marker."""
    chips = [slot.label for slot in slots[:shown]]
    if len(slots) > shown:
        chips.append(f"+{len(slots) - shown}")
    return chips


def recommendations_frame(recommendations: Sequence[ScheduleRecommendation]) -> pd.DataFrame:
    """Ranking table in the order given (rank 1 = first element)."""
    rows = []
    for rank, rec in enumerate(recommendations, start=1):
        savings = rec.estimated_savings
        rows.append({
            'rank': rank,
            'region_code': rec.location.region_code,
            'region_name': rec.location.region_name,
            'provider': rec.location.provider,
            'score': round_half_up(rec.score, 1),
            'cost_savings_usd': savings.cost_usd,
            'cost_savings_pct': savings.cost_pct,
            'carbon_savings_kg': savings.carbon_kg,
            'carbon_savings_pct': savings.carbon_pct,
            'best_hours': ' '.join(best_hours_chips(rec.optimal_slots)),
            'pue': rec.location.pue,
            'grid_co2_kg_per_kwh': rec.location.grid_co2_kg_per_kwh,
            'renewable_pct': rec.location.renewable_pct,
        })
    return pd.DataFrame(rows)


def create_forecast_chart(forecast: Sequence[TimeSlot], title: str = '24-Hour Carbon Intensity Forecast'):
    """Carbon intensity and renewable share on the left axis, spot price bars on the right."""
    df = forecast_frame(forecast)
    colors = [RATING_COLORS[SlotRating(rating)] for rating in df['recommendation']]

    fig = make_subplots(specs=[[{'secondary_y': True}]])

    fig.add_trace(go.Scatter(
        x=df['label'],
        y=df['renewable_pct'],
        name='Renewable %',
        mode='lines',
        fill='tozeroy',
        line=dict(color='#22c55e', width=1),
        opacity=0.3,
        hovertemplate='%{x}<br>Renewable: %{y}%<extra></extra>'
    ), secondary_y=False)

    fig.add_trace(go.Scatter(
        x=df['label'],
        y=df['carbon_intensity'],
        name='Carbon Intensity',
        mode='lines+markers',
        line=dict(color='#f44336', width=2),
        marker=dict(size=8, color=colors, line=dict(width=1, color='white')),
        hovertemplate='%{x}<br>CI: %{y:.3f} kg CO₂/kWh<extra></extra>'
    ), secondary_y=False)

    fig.add_trace(go.Bar(
        x=df['label'],
        y=df['spot_price_multiplier'],
        name='Spot Price',
        marker_color='#2196F3',
        opacity=0.5,
        hovertemplate='%{x}<br>Spot: %{y}x<extra></extra>'
    ), secondary_y=True)

    fig.update_layout(
        title={'text': title, 'x': 0.5},
        xaxis={'title': 'Hour'},
        height=420,
        hovermode='x unified',
        plot_bgcolor='rgba(255,255,255,0.05)',
        paper_bgcolor='rgba(0,0,0,0)',
    )
    fig.update_yaxes(title_text='kg CO₂/kWh | Renewable %', secondary_y=False)
    fig.update_yaxes(title_text='Spot price multiplier', secondary_y=True)
    return fig


def create_ranking_chart(recommendations: Sequence[ScheduleRecommendation], top: int = 5):
    """Horizontal bars of location score for the top-ranked locations."""
    df = recommendations_frame(recommendations[:top])

    fig = go.Figure(data=[
        go.Bar(
            x=df['score'] if not df.empty else [],
            y=df['region_code'] if not df.empty else [],
            orientation='h',
            marker_color='#2E7D32',
            text=[f'{score:.1f}' for score in df['score']] if not df.empty else [],
            textposition='outside',
        )
    ])
    fig.update_layout(
        title={'text': 'Region Sustainability Score', 'x': 0.5},
        xaxis={'title': 'Score'},
        yaxis={'autorange': 'reversed'},
        height=120 + 40 * len(df),
        showlegend=False,
        paper_bgcolor='rgba(0,0,0,0)',
    )
    return fig
