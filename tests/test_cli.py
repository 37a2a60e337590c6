# tests/test_cli.py - CLI commands against a recording console

import io
import json

import pytest
from rich.console import Console

from markov_chain_model.cli import CLI, main
from markov_chain_model.utils.config_manager import Config
from markov_chain_model.utils.logger_utils import DEFAULT_LOG_PATH, Log


@pytest.fixture
def cfg(tmp_path):
    c = Config(str(tmp_path / "cfg.json"))
    c.data["model_path"] = str(tmp_path / "model.json")
    c.data["log_path"] = str(tmp_path / "cli.log")
    c.data["order"] = 2
    return c


@pytest.fixture
def cli(cfg):
    console = Console(file=io.StringIO(), record=True, width=100)
    return CLI(cfg, console=console)


def _out(cli):
    return cli.console.export_text()


def test_learn_then_predict(cli):
    cli.handle("/learn the cat sat")
    cli.handle("/learn the cat ran")
    preds = cli.show_predictions("the cat")
    assert preds == [("sat", 50), ("ran", 50)]
    assert "Predictions" in _out(cli)


def test_plain_text_predicts(cli):
    cli.handle("/learn a b")
    cli.handle("a")
    assert "b" in _out(cli)


def test_unknown_context(cli):
    cli.handle("nothing here")
    assert "no predictions" in _out(cli)


def test_train_files(cli, tmp_path):
    f1 = tmp_path / "one.txt"
    f2 = tmp_path / "two.txt"
    f1.write_text("x y z\n\nx y w\n", encoding="utf-8")
    f2.write_text("x y z\n", encoding="utf-8")
    assert cli.train_files([str(f1), str(f2)]) == 3
    assert cli.model.predict(["x", "y"], 2) == [("z", 67), ("w", 33)]


def test_train_missing_file_reports(cli, tmp_path):
    cli.handle(f"/train {tmp_path / 'missing.txt'}")
    assert "Cannot read corpus" in _out(cli)
    assert cli.model.stats()["contexts"] == 0


def test_save_empty_model_reports_nothing(cli, cfg, tmp_path):
    cli.handle("/save")
    assert "Nothing to save" in _out(cli)
    assert not (tmp_path / "model.json").exists()


def test_save_and_load(cli, cfg, tmp_path):
    cli.handle("/learn a b c")
    cli.handle("/save")
    doc = json.loads((tmp_path / "model.json").read_text(encoding="utf-8"))
    assert doc["order"] == 2

    fresh = CLI(cfg, console=Console(file=io.StringIO(), record=True))
    fresh.load_if_present()
    assert fresh.model.predict(["a", "b"], 1) == [("c", 100)]


def test_load_errors_are_reported_not_raised(cli, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"order": 2, "transitions": {"oops": {"a": 1}}}', encoding="utf-8")
    cli.handle(f"/load {bad}")
    cli.handle(f"/load {tmp_path / 'absent.json'}")
    out = _out(cli)
    assert out.count("Error:") == 2


def test_int_tokens(cfg):
    cfg.data["token_type"] = "int"
    cli = CLI(cfg, console=Console(file=io.StringIO(), record=True))
    cli.handle("/learn 1 2 3")
    assert cli.model.predict([1, 2], 1) == [(3, 100)]
    cli.handle("/learn 1 two")
    assert "Error:" in cli.console.export_text()


def test_config_and_stats(cli):
    cli.handle("/config top_tokens 1")
    assert cli.cfg["top_tokens"] == 1
    cli.handle("/config nope 1")
    cli.handle("/learn a b")
    cli.handle("/stats")
    out = _out(cli)
    assert "no such option" in out
    assert "observations" in out


def test_quit_and_unknown(cli):
    cli.handle("/frobnicate")
    cli.handle("/quit")
    assert "Unknown command" in _out(cli)
    assert cli.running is False


def test_main_one_shot(tmp_path, capsys):
    corpus = tmp_path / "corpus.txt"
    corpus.write_text("red green blue\nred green yellow\n", encoding="utf-8")
    model = tmp_path / "m.json"
    cfg_path = tmp_path / "cfg.json"
    log_path = tmp_path / "run.log"
    cfg_path.write_text(json.dumps({"log_path": str(log_path)}), encoding="utf-8")

    rc = main(["--config", str(cfg_path), "--model", str(model), "--order", "2",
               "--train", str(corpus), "--predict", "red green"])
    assert rc == 0
    assert model.exists()
    out = capsys.readouterr().out
    assert "blue" in out and "yellow" in out


def test_run_overrides_survive_config_command_unsaved(cfg, tmp_path):
    cfg.override("model_path", str(tmp_path / "elsewhere" / "override.json"))
    cli = CLI(cfg, console=Console(file=io.StringIO(), record=True))
    cli.handle("/config top_tokens 2")
    saved = json.loads((tmp_path / "cfg.json").read_text(encoding="utf-8"))
    assert saved["top_tokens"] == 2
    assert "override.json" not in saved["model_path"]
    assert cli.cfg["model_path"].endswith("override.json")


def test_main_does_not_move_the_default_log(tmp_path, capsys):
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text(json.dumps({"log_path": str(tmp_path / "run.log")}), encoding="utf-8")
    rc = main(["--config", str(cfg_path), "--model", str(tmp_path / "m.json"), "--predict", "a"])
    assert rc == 0
    assert Log().path == DEFAULT_LOG_PATH
