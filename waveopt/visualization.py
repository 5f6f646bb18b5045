"""
Visualization for Wave Order Picking

Plots GA convergence, per-aisle stock utilization and order scores for a
selected wave.
"""

import matplotlib.pyplot as plt
import numpy as np
from typing import Dict, List, Any, Optional, Tuple

from .wave_selection import WaveInstance, Candidate, OrderScore


class WaveVisualizer:
    """Visualization system for wave selection analysis"""

    def __init__(self, instance: WaveInstance):
        self.instance = instance
        self.selected_color = "tab:blue"
        self.rejected_color = "lightgray"

    def plot_summary(self,
                     candidate: Candidate,
                     metrics: Dict[str, Any],
                     history: Optional[List[Any]] = None,
                     scores: Optional[List[OrderScore]] = None,
                     figsize: Tuple[int, int] = (14, 10),
                     save_path: Optional[str] = None):
        """
        Create a multi-panel summary of one wave

        Args:
            candidate: Selected wave
            metrics: Analysis metrics from WaveMetrics
            history: Optional GenerationRecord list from a genetic run
            scores: Optional greedy order scores
            figsize: Figure size (width, height)
            save_path: Optional path to save the figure

        Returns:
            The matplotlib figure
        """
        fig = plt.figure(figsize=figsize)
        gs = fig.add_gridspec(2, 2, height_ratios=[1, 1])

        ax_util = fig.add_subplot(gs[0, :])
        self.plot_aisle_utilization(metrics, ax_util)

        ax_scores = fig.add_subplot(gs[1, 0])
        self.plot_order_scores(scores or [], candidate, ax_scores)

        ax_conv = fig.add_subplot(gs[1, 1])
        self.plot_convergence(history or [], ax_conv)

        fig.suptitle(
            f"Wave: {len(candidate.orders)} orders, {len(candidate.aisles)} aisles, "
            f"objective {metrics.get('objective', 0.0):.3f}"
        )
        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')

        return fig

    def plot_aisle_utilization(self, metrics: Dict[str, Any], ax: plt.Axes = None):
        """Bar chart of drawn stock share for every visited aisle"""
        if ax is None:
            fig, ax = plt.subplots(figsize=(10, 4))

        utilization = metrics.get('aisle_utilization', {})
        if not utilization:
            ax.text(0.5, 0.5, "No aisles visited", ha='center', va='center', transform=ax.transAxes)
            ax.set_title('Aisle Utilization')
            return

        aisles = list(utilization.keys())
        shares = [utilization[a] for a in aisles]
        x = np.arange(len(aisles))

        ax.bar(x, shares, color=self.selected_color, alpha=0.7)
        ax.set_xticks(x)
        ax.set_xticklabels([str(a) for a in aisles], rotation=90 if len(aisles) > 20 else 0)
        ax.set_xlabel('Aisle')
        ax.set_ylabel('Stock share drawn')
        ax.set_ylim(0, 1.1)
        ax.set_title('Aisle Utilization')
        ax.grid(True, axis='y', alpha=0.3)

    def plot_order_scores(self, scores: List[OrderScore], candidate: Candidate, ax: plt.Axes = None):
        """Ranked greedy scores, selected orders highlighted"""
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 5))

        finite = [s for s in scores if np.isfinite(s.score) and s.num_aisles > 0]
        if not finite:
            ax.text(0.5, 0.5, "No order scores", ha='center', va='center', transform=ax.transAxes)
            ax.set_title('Order Scores')
            return

        colors = [self.selected_color if s.order_id in candidate.orders else self.rejected_color
                  for s in finite]
        ax.bar(np.arange(len(finite)), [s.score for s in finite], color=colors, width=1.0)
        ax.set_xlabel('Rank')
        ax.set_ylabel('Units per required aisle')
        ax.set_title('Order Scores (selected in color)')

    def plot_convergence(self, history: List[Any], ax: plt.Axes = None):
        """Best and mean feasible fitness per generation"""
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 5))

        if not history:
            ax.text(0.5, 0.5, "No genetic history", ha='center', va='center', transform=ax.transAxes)
            ax.set_title('Convergence')
            return

        generations = [r.generation for r in history]
        best = [r.best_fitness if r.best_fitness >= 0 else np.nan for r in history]
        feasible_share = [r.feasible_count / r.population_size if r.population_size else 0.0
                          for r in history]

        ax.plot(generations, best, color=self.selected_color, label='Best fitness')
        ax.set_xlabel('Generation')
        ax.set_ylabel('Objective')
        ax.set_title('Convergence')
        ax.grid(True, alpha=0.3)

        ax_share = ax.twinx()
        ax_share.plot(generations, feasible_share, color='tab:green', alpha=0.6,
                      linestyle='--', label='Feasible share')
        ax_share.set_ylim(0, 1.05)
        ax_share.set_ylabel('Feasible share')

        lines = ax.get_lines() + ax_share.get_lines()
        ax.legend(lines, [l.get_label() for l in lines], loc='lower right')
