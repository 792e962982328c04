import csv
import json

from backpropnet.reporting import CsvSink, JsonlSink, PlotAdapter
from backpropnet.reporting.metrics import CSV_FIELDS
from backpropnet.training import TrainingConfig

CONFIG = TrainingConfig(
    input_size=2,
    hidden_size=3,
    output_size=1,
    activation="tanh",
    learning_rate=0.25,
    loss_function="binary_crossentropy",
    seed=3,
)


def test_jsonl_sink_stamps_run_hyperparameters(tmp_path):
    sink = JsonlSink(tmp_path / "run" / "metrics.jsonl", config=CONFIG)
    sink.on_epoch(0, {"loss": 0.5, "accuracy": 0.25})
    sink(1, {"loss": 0.4, "accuracy": 0.5})
    records = [json.loads(line) for line in sink.path.read_text().splitlines()]
    assert [r["epoch"] for r in records] == [0, 1]
    assert records[1]["split"] == "train"
    assert records[1]["loss"] == 0.4
    assert records[0]["activation"] == "tanh"
    assert records[0]["loss_function"] == "binary_crossentropy"
    assert records[0]["learning_rate"] == 0.25
    assert records[0]["seed"] == 3


def test_jsonl_sink_without_config_has_only_metrics(tmp_path):
    sink = JsonlSink(tmp_path / "metrics.jsonl")
    sink.on_epoch(0, {"loss": 1.0, "note": "ignored"})
    record = json.loads(sink.path.read_text())
    assert record == {"epoch": 0, "split": "train", "loss": 1.0}


def test_csv_sink_has_fixed_columns(tmp_path):
    sink = CsvSink(tmp_path / "metrics.csv", config=CONFIG)
    sink.on_epoch(0, {"loss": 1.0, "accuracy": 0.0, "grad_norm": 3.0})
    sink.on_epoch(1, {"loss": 0.5, "accuracy": 1.0})
    with sink.path.open(newline="") as handle:
        reader = csv.DictReader(handle)
        rows = list(reader)
    assert tuple(reader.fieldnames) == CSV_FIELDS
    assert len(rows) == 2
    assert rows[1]["loss"] == "0.5"
    assert rows[0]["activation"] == "tanh"
    assert "grad_norm" not in rows[0]


def test_csv_sink_header_written_even_without_epochs(tmp_path):
    sink = CsvSink(tmp_path / "empty.csv")
    assert sink.path.read_text().strip() == ",".join(CSV_FIELDS)


def test_plot_adapter_writes_png_only_when_enabled(tmp_path):
    disabled = PlotAdapter(tmp_path / "off")
    disabled.on_epoch(0, {"loss": 1.0})
    assert disabled.close() is None
    assert not (tmp_path / "off").exists()

    enabled = PlotAdapter(tmp_path / "on", enable_plots=True)
    for epoch in range(3):
        enabled.on_epoch(epoch, {"loss": 1.0 / (epoch + 1), "accuracy": 0.5})
    path = enabled.close()
    assert path is not None and path.exists()
    assert path.name == "loss.png"
