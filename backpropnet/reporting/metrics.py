"""Metrics sinks attached to :meth:`Engine.fit` as epoch callbacks."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, Mapping

from ..training.config import TrainingConfig

# Hyperparameters stamped onto every record so runs can be compared side by side.
RUN_FIELDS = ("activation", "loss_function", "learning_rate", "seed")
CSV_FIELDS = ("epoch", "split", "loss", "accuracy") + RUN_FIELDS


class _EpochSink:
    def __init__(
        self, path: str | Path, *, split: str, config: TrainingConfig | None
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.split = split
        self.run: Dict[str, object] = (
            {name: getattr(config, name) for name in RUN_FIELDS} if config is not None else {}
        )

    def record(self, epoch: int, metrics: Mapping[str, float]) -> Dict[str, object]:
        row: Dict[str, object] = {"epoch": int(epoch), "split": self.split}
        row.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        row.update(self.run)
        return row

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        raise NotImplementedError

    def __call__(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.on_epoch(epoch, metrics)


class JsonlSink(_EpochSink):
    """One JSON object per epoch; the file is truncated when the sink is created."""

    def __init__(
        self, path: str | Path, *, split: str = "train", config: TrainingConfig | None = None
    ) -> None:
        super().__init__(path, split=split, config=config)
        self.path.write_text("")

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(self.record(epoch, metrics)) + "\n")


class CsvSink(_EpochSink):
    """CSV rows with the fixed :data:`CSV_FIELDS` columns.

    Run fields are left blank when no config is given; metrics other than
    loss and accuracy are dropped.
    """

    def __init__(
        self, path: str | Path, *, split: str = "train", config: TrainingConfig | None = None
    ) -> None:
        super().__init__(path, split=split, config=config)
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            csv.DictWriter(handle, fieldnames=CSV_FIELDS).writeheader()

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(
                handle, fieldnames=CSV_FIELDS, restval="", extrasaction="ignore"
            )
            writer.writerow(self.record(epoch, metrics))


__all__ = ["CSV_FIELDS", "RUN_FIELDS", "JsonlSink", "CsvSink"]
