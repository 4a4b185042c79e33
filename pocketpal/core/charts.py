# pocketpal/core/charts.py
import io
import logging
from datetime import date, tzinfo
from typing import Dict, List, Optional, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd

from pocketpal.core import aggregation
from pocketpal.core.models import MoneyRecord

logger = logging.getLogger(__name__)

plt.style.use('seaborn-v0_8-darkgrid')
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['legend.fontsize'] = 10

COLORS = {
    'Income': '#28a745',
    'Expenses': '#dc3545',
    'Net': '#007bff',
    'Slices': ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd', '#8c564b', '#e377c2', '#7f7f7f'],
}

CATEGORY_LABELS = {
    "gig": "Gig Work",
    "allowance": "Allowance",
    "job": "Part-time Job",
    "other": "Other",
    "food": "Food & Drinks",
    "shopping": "Shopping",
    "tech": "Tech & Apps",
    "entertainment": "Entertainment",
}


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf


def _rollup_frame(rows: List[Dict[str, object]], label_key: str) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    df = df.set_index(label_key)
    for column in ('income', 'expenses', 'net'):
        if column in df:
            df[column] = df[column].astype(float)
    return df.rename(columns={'income': 'Income', 'expenses': 'Expenses', 'net': 'Net'})


def generate_monthly_chart(records: List[MoneyRecord], today: date, months: int = 6,
                           tz: Optional[tzinfo] = None) -> Union[io.BytesIO, None]:
    """Income vs. expenses (and net) per month."""
    if not records:
        return None
    rows = aggregation.monthly_rollup(records, today, months=months, tz=tz)
    df = _rollup_frame(rows, 'month')

    fig, ax = plt.subplots(figsize=(10, 6))
    df[['Income', 'Expenses', 'Net']].plot(
        kind='bar', ax=ax, color=[COLORS['Income'], COLORS['Expenses'], COLORS['Net']]
    )
    ax.set_title('Monthly Trend: Income vs. Expenses', fontweight='bold')
    ax.set_ylabel('Amount ($)')
    ax.set_xlabel('')
    ax.tick_params(axis='x', rotation=45)
    ax.yaxis.set_major_formatter(mticker.FormatStrFormatter('$%.2f'))
    for container in ax.containers:
        ax.bar_label(container, fmt='$%.0f', fontsize=8, padding=2)
    fig.tight_layout()
    return _to_png(fig)


def generate_weekly_chart(records: List[MoneyRecord], today: date,
                          tz: Optional[tzinfo] = None) -> Union[io.BytesIO, None]:
    """Daily income and expenses over the last 7 days."""
    if not records:
        return None
    rows = aggregation.weekly_rollup(records, today, tz=tz)
    df = _rollup_frame(rows, 'day').drop(columns=['date'])

    fig, ax = plt.subplots(figsize=(10, 6))
    df['Income'].plot(ax=ax, marker='o', color=COLORS['Income'], label='Income')
    df['Expenses'].plot(ax=ax, marker='o', color=COLORS['Expenses'], label='Expenses')
    ax.set_title('This Week', fontweight='bold')
    ax.set_ylabel('Amount ($)')
    ax.set_xlabel('')
    ax.legend()
    ax.yaxis.set_major_formatter(mticker.FormatStrFormatter('$%.2f'))
    fig.tight_layout()
    return _to_png(fig)


def generate_breakdown_chart(records: List[MoneyRecord], title: str) -> Union[io.BytesIO, None]:
    """Pie chart of totals per category."""
    totals = aggregation.category_breakdown(records)
    # All-zero totals have no slices to draw
    if not totals or sum(totals.values()) == 0:
        return None

    series = pd.Series({CATEGORY_LABELS.get(k, k): float(v) for k, v in totals.items()})
    fig, ax = plt.subplots(figsize=(8, 8))
    ax.pie(
        series.values,
        labels=series.index,
        autopct='%1.0f%%',
        colors=COLORS['Slices'][:len(series)],
        startangle=90,
    )
    ax.set_title(title, fontweight='bold')
    fig.tight_layout()
    return _to_png(fig)
