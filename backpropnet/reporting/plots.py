"""Headless-safe learning-curve plots."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Tuple


class PlotAdapter:
    """Collect loss and accuracy per epoch and optionally write ``loss.png``."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots:
            return
        self._history.append(
            (epoch, float(metrics.get("loss", 0.0)), float(metrics.get("accuracy", 0.0)))
        )

    def close(self) -> Path | None:
        if not self.enable_plots or not self._history:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        epochs, losses, accuracies = zip(*self._history)
        fig, (loss_ax, acc_ax) = plt.subplots(1, 2, figsize=(10, 4))
        loss_ax.plot(epochs, losses)
        loss_ax.set_xlabel("Epoch")
        loss_ax.set_ylabel("Loss")
        loss_ax.set_title("Training Loss")
        acc_ax.plot(epochs, accuracies)
        acc_ax.set_xlabel("Epoch")
        acc_ax.set_ylabel("Accuracy")
        acc_ax.set_ylim(0.0, 1.05)
        acc_ax.set_title("Training Accuracy")
        plot_path = self.run_dir / "loss.png"
        fig.tight_layout()
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    __call__ = on_epoch


__all__ = ["PlotAdapter"]
