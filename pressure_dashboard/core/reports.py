"""
================================================================================
Reports - Session Export
================================================================================

Writes a patient's sessions to disk for sharing outside the dashboard.

    export_sessions_csv: one row per session
    export_trend_graph:  PPI and contact area over time as an image

matplotlib is optional. Check EXPORT_AVAILABLE before offering the
graph export.
"""

import csv
from pathlib import Path
from typing import Mapping

from .session_store import Session, trend_series

# Optional export libraries
try:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    EXPORT_AVAILABLE = True
except ImportError:
    plt = None
    EXPORT_AVAILABLE = False

CSV_HEADER = ['date', 'file', 'frames', 'ppi', 'contact_percent', 'status', 'alert']


def export_sessions_csv(sessions: Mapping[str, Session], filepath: str) -> int:
    """
    Export session metrics as CSV.

    Args:
        sessions: Date-keyed sessions
        filepath: Destination file

    Returns:
        Number of rows written (excluding the header)
    """
    Path(filepath).parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(filepath, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for date_key in sorted(sessions):
            s = sessions[date_key]
            writer.writerow([
                date_key,
                s.filename,
                s.frame_count,
                f"{s.peak_pressure_index:.1f}",
                f"{s.contact_area_percent:.1f}",
                s.status.value,
                int(s.alert),
            ])
            count += 1
    return count


def export_trend_graph(sessions: Mapping[str, Session], filepath: str, title: str = "") -> None:
    """
    Save the PPI / contact area trend as an image.

    Raises:
        RuntimeError: matplotlib is not installed
    """
    if not EXPORT_AVAILABLE:
        raise RuntimeError("matplotlib is required for graph export")

    series = trend_series(sessions)
    fig, ax_ppi = plt.subplots(figsize=(8, 4))
    ax_ppi.plot(series.labels, series.ppi, color='#6c5ce7', marker='o', label='PPI')
    ax_ppi.set_ylabel('Peak Pressure Index')

    ax_contact = ax_ppi.twinx()
    ax_contact.plot(series.labels, series.contact, color='#00b894', marker='s', label='Contact %')
    ax_contact.set_ylabel('Contact Area (%)')

    if title:
        ax_ppi.set_title(title)
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
