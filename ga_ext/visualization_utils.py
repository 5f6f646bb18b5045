"""
Visualization utilities for GA extension.

Renders the convergence curve of a refinement run to PNG.
"""

from pathlib import Path
from typing import List, Tuple, Union

import matplotlib.pyplot as plt

from waveopt.visualization import WaveVisualizer

from .data_models import GenerationRecord


def plot_generation_history(
    history: List[GenerationRecord],
    output_path: Union[str, Path],
    figsize: Tuple[int, int] = (10, 6),
    visualizer: WaveVisualizer = None
) -> Path:
    """
    Save the convergence plot of a refinement run.

    Args:
        history: GenerationRecord list, e.g. from load_generation_history
        output_path: Path to save PNG file
        figsize: Figure size (width, height) in inches
        visualizer: Optional visualizer to reuse its styling

    Returns:
        Path to the written image
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if visualizer is None:
        visualizer = WaveVisualizer(instance=None)

    fig, ax = plt.subplots(figsize=figsize)
    visualizer.plot_convergence(history, ax)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    return output_path
