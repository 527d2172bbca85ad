from __future__ import annotations
from typing import List, Optional, Tuple
import matplotlib.pyplot as plt

from .index_map import Interval

def _bars(ax, row: int, spans: List[Interval], alpha: float = 0.6):
    if not spans:
        return
    ax.broken_barh([(float(iv.start), float(iv.length)) for iv in spans], (row - 0.4, 0.8), alpha=alpha)

def plot_stage_intervals(
    trace: List[Tuple[str, List[Interval]]],
    title: str = "",
    show: bool = True,
    save_path: Optional[str] = None,
):
    """One row per stage with the working interval set after that stage.
    First row is the input set.
    """
    fig, ax = plt.subplots(figsize=(12, 1 + 0.5 * max(1, len(trace))))
    for row, (_, spans) in enumerate(trace):
        _bars(ax, row, spans)
    ax.set_yticks(range(len(trace)))
    ax.set_yticklabels(["%s (%d)" % (name, len(spans)) for name, spans in trace], fontsize=8)
    ax.invert_yaxis()
    ax.set_title(title)
    ax.set_xlabel("Value")
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
