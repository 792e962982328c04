"""Command line entry point for BackpropNet demo runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable, Mapping

from backpropnet.reporting import CsvSink, JsonlSink, PlotAdapter
from backpropnet.training import Engine, check_gradients, config as config_mod
from backpropnet.training.datasets import load_dataset


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(config_mod.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--epochs", type=int, help="Override the number of training epochs")
    parser.add_argument("--seed", type=int, help="Seed used for weight initialisation")
    parser.add_argument("--run-dir", type=Path, help="Directory for metrics and plots")
    parser.add_argument("--enable-plots", action="store_true", help="Write loss.png into the run directory")
    parser.add_argument(
        "--check-gradients",
        action="store_true",
        help="Verify analytic gradients against finite differences after training",
    )
    parser.add_argument("--verbose", action="store_true", help="Print progress every 10 epochs")
    parser.add_argument("--list-presets", action="store_true", help="List available presets and exit")
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> dict:
    """Return the run configuration after applying the file and flag overrides."""

    config = config_mod.load_preset(args.preset)
    if args.config:
        override = config_mod.load_config(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = dict(override)
        else:
            config = config_mod.merge_config(config, override)

    train_cfg = dict(config.get("train", {}))
    model_cfg = dict(config.get("model", {}))
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.seed is not None:
        model_cfg["seed"] = int(args.seed)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    config["train"] = train_cfg
    config["model"] = model_cfg
    return config


def _learning_curve(history, every: int = 100) -> str:
    lines = ["epoch      loss  accuracy"]
    last = len(history) - 1
    for record in history:
        if record.epoch % every == 0 or record.epoch == last:
            lines.append(f"{record.epoch:5d}  {record.loss:8.5f}  {record.accuracy * 100:7.2f}%")
    return "\n".join(lines)


def _predictions(engine: Engine, X, y) -> str:
    proba = engine.predict_proba(X)
    labels = engine.predict(X)
    lines = []
    for row, target, out, label in zip(X, y, proba, labels):
        inputs = ", ".join(f"{v:g}" for v in row)
        outputs = ", ".join(f"{v:.3f}" for v in out)
        expected = ", ".join(f"{v:g}" for v in target)
        lines.append(f"[{inputs}] -> [{outputs}] predicted={int(label)} expected=[{expected}]")
    return "\n".join(lines)


def run(config: Mapping[str, object], *, verbose: bool = False, gradients: bool = False) -> dict:
    """Train the configured network and return the JSON-serialisable result."""

    model_cfg = config.get("model", {})
    data_cfg = config.get("data", {})
    train_cfg = config.get("train", {})

    engine = Engine.from_dict(model_cfg)  # type: ignore[arg-type]
    X, y = load_dataset(data_cfg)  # type: ignore[arg-type]
    run_dir = Path(str(train_cfg.get("run_dir", "runs/default")))
    epochs = int(train_cfg.get("epochs", 100))

    metrics_path = run_dir / "metrics.jsonl"
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    callbacks = [
        JsonlSink(metrics_path, config=engine.config),
        CsvSink(run_dir / "metrics.csv", config=engine.config),
        plots,
    ]
    history = engine.fit(X, y, epochs=epochs, verbose=verbose, callbacks=callbacks)
    plot_path = plots.close()

    print(_predictions(engine, X, y))
    if len(history):
        print(_learning_curve(history))

    final = engine.evaluate(X, y)
    result: dict = {
        "epochs": epochs,
        "final_loss": final["loss"],
        "final_accuracy": final["accuracy"],
        "metrics": str(metrics_path),
    }
    if plot_path is not None:
        result["plot"] = str(plot_path)
    if gradients:
        result["gradient_check"] = check_gradients(engine, X, y).to_dict()
    return result


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(config_mod.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = resolve_config(args)
    result = run(config, verbose=args.verbose, gradients=args.check_gradients)
    print(json.dumps(result, sort_keys=True))


if __name__ == "__main__":
    main()
