"""
cli.py - command line wrapper around the Markov model
Features:
- Interactive loop: type text to see the most likely next tokens
- /learn and /train feed sequences to the model, /save and /load persist it
- Corpus files are read in parallel, one sequence per non-empty line
- Uses Rich for tables and formatting
"""

import argparse
import logging
import os
import shlex
from typing import List, Optional, Sequence

# ui styling with Rich
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from markov_chain_model.core.errors import MarkovModelError
from markov_chain_model.core.markov_model import MarkovModel
from markov_chain_model.core.persistence import SaveResult
from markov_chain_model.core.shared_model import SharedMarkovModel
from markov_chain_model.core.token_codec import get_token_codec
from markov_chain_model.utils.config_manager import Config
from markov_chain_model.utils.logger_utils import Log
from markov_chain_model.utils.threaded_runner import run_parallel

HELP = """\
<text>               show predictions for the tokens of <text>
/predict <text>      same as above
/learn <text>        train on the tokens of <text>
/train <file>...     train on every non-empty line of each file
/save [path]         save the model (default: configured model_path)
/load [path]         load a model file
/stats               table statistics
/config [key val]    show or change settings
/help                this text
/quit                exit"""


def build_model(cfg: Config) -> SharedMarkovModel:
    """Model as configured: order, token type and context key format."""
    model = MarkovModel(
        int(cfg["order"]),
        token_codec=get_token_codec(cfg["token_type"]),
        key_format=cfg["key_format"],
    )
    return SharedMarkovModel(model)


def _read_sequences(path: str) -> List[List[str]]:
    with open(path, "r", encoding="utf8") as f:
        return [ln.split() for ln in f if ln.strip()]


class CLI:
    """Interactive shell over one shared model instance."""

    def __init__(self, cfg: Optional[Config] = None, console: Optional[Console] = None):
        self.cfg = cfg or Config()
        self.console = console or Console()
        self.log = Log(path=self.cfg["log_path"], echo=False)
        self.codec = get_token_codec(self.cfg["token_type"])
        self.model = build_model(self.cfg)
        self.running = True

    def run(self):
        """Main loop: prompt, dispatch, repeat until /quit or EOF."""
        self.console.rule("[bold magenta]Markov Chain Model[/bold magenta]")
        self.console.print(f"[cyan]order={self.model.order}[/cyan]  type /help for commands\n")

        while self.running:
            try:
                line = Prompt.ask("[green]>[/green]", default="", console=self.console)
            except (EOFError, KeyboardInterrupt):
                self.handle("/quit")
                break
            self.handle(line)

    # COMMAND HANDLING ---------------------------------------------------------
    def handle(self, line: str) -> None:
        line = line.strip()
        if not line:
            return
        try:
            if line.startswith("/"):
                self._handle_command(line)
            else:
                self.show_predictions(line)
        except (MarkovModelError, ValueError) as e:
            # decode errors, bad tokens, unbalanced quotes, bad top_tokens
            self.log.error(str(e))
            self.console.print(f"[red]Error:[/red] {escape(str(e))}")

    def _handle_command(self, line: str):
        parts = shlex.split(line)
        cmd, args = parts[0].lower(), parts[1:]

        if cmd in ("/q", "/quit", "/exit"):
            self._exit()
        elif cmd == "/help":
            self.console.print(Panel(escape(HELP), title="Commands", border_style="cyan"))
        elif cmd == "/predict" and args:
            self.show_predictions(" ".join(args))
        elif cmd == "/learn" and args:
            self.learn(" ".join(args))
        elif cmd == "/train" and args:
            self.train_files(args)
        elif cmd == "/save":
            self.save(args[0] if args else None)
        elif cmd == "/load":
            self.load(args[0] if args else None)
        elif cmd == "/stats":
            self.show_stats()
        elif cmd == "/config":
            self._config(args)
        else:
            self.console.print(f"[red]Unknown command:[/red] {escape(line)}")

    # MODEL OPERATIONS -----------------------------------------------------------
    def tokens(self, text: str) -> list:
        # whitespace split, then the configured codec turns text into tokens
        return [self.codec.decode(t) for t in text.split()]

    def show_predictions(self, text: str, top: Optional[int] = None):
        top = top or int(self.cfg["top_tokens"])
        preds = self.model.predict(self.tokens(text), top)
        if not preds:
            self.console.print("[dim](no predictions)[/dim]")
            return preds

        table = Table(title="Predictions", box=box.SIMPLE, show_edge=False)
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Token", style="bold")
        table.add_column("%", justify="right", style="magenta")
        for i, (tok, pct) in enumerate(preds, 1):
            table.add_row(str(i), Text(str(tok)), str(pct))
        self.console.print(table)
        return preds

    def learn(self, text: str):
        self.model.train(self.tokens(text))
        self.console.print(f"[cyan]Learnt:[/cyan] {escape(text)}")
        self._autosave()

    def train_files(self, paths: Sequence[str]):
        """Read the files in parallel, then train in the order given."""
        try:
            per_file = run_parallel([lambda p=p: _read_sequences(p) for p in paths])
        except OSError as e:
            self.log.error(f"train: {e}")
            self.console.print(f"[red]Cannot read corpus:[/red] {escape(str(e))}")
            return 0

        seqs = [[self.codec.decode(t) for t in s] for lines in per_file for s in lines]
        with Log.time_block("train", path=self.log.path):
            self.model.train_many(seqs)
        self.log.info(f"trained on {len(seqs)} sequences from {len(paths)} file(s)")
        self.console.print(f"[green]Trained[/green] on {len(seqs)} sequences from {len(paths)} file(s)")
        self._autosave()
        return len(seqs)

    def save(self, path: Optional[str] = None) -> SaveResult:
        path = path or self.cfg["model_path"]
        result = self.model.save(path)
        if result is SaveResult.NOTHING_TO_PERSIST:
            self.console.print("[yellow]Nothing to save: the model is empty.[/yellow]")
        else:
            self.log.info(f"saved model to {path}")
            self.console.print(f"[green]Saved[/green] {escape(path)}")
        return result

    def load(self, path: Optional[str] = None):
        path = path or self.cfg["model_path"]
        self.model.load(path)
        self.log.info(f"loaded model from {path}")
        self.console.print(f"[green]Loaded[/green] {escape(path)} (order={self.model.order})")

    def load_if_present(self):
        path = self.cfg["model_path"]
        if path and os.path.exists(path):
            self.handle(f"/load {shlex.quote(path)}")

    def show_stats(self):
        st = self.model.stats()
        t = Table(title="Model", box=box.MINIMAL)
        t.add_column("Metric", style="cyan")
        t.add_column("Value", style="white")
        for k in ("order", "contexts", "transitions", "observations"):
            t.add_row(k, str(st[k]))
        for length, n in st["contexts_by_length"].items():
            t.add_row(f"contexts of length {length}", str(n))
        self.console.print(t)

    def _config(self, args: List[str]):
        if not args:
            self.console.print(Panel(escape(self.cfg.show()), title="Config", border_style="cyan"))
        elif len(args) == 2:
            self.cfg.set(args[0], args[1])
            self.console.print(escape(f"{args[0]} = {self.cfg[args[0]]}"))
            if args[0] in ("order", "token_type", "key_format"):
                self.console.print("[dim]takes effect for the next session[/dim]")
        else:
            self.console.print("usage: /config [key val]")

    # EXIT ---------------------------------------------------------------------
    def _autosave(self):
        if self.cfg["autosave"]:
            self.save()

    def _exit(self):
        self.console.rule("[red]Exiting[/red]")
        self._autosave()
        self.running = False


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="markov-chain", description="Variable-order Markov chain model")
    parser.add_argument("--config", default="markov_config.json", help="settings file")
    parser.add_argument("--order", type=int, help="maximum context length (new models)")
    parser.add_argument("--model", help="model file to load/save")
    parser.add_argument("--top", type=int, help="number of predictions to show")
    parser.add_argument("--key-format", choices=["json", "legacy"], help="context key format when saving")
    parser.add_argument("--train", nargs="+", metavar="FILE", help="train on corpus files, save, and exit")
    parser.add_argument("--predict", metavar="TEXT", help="print predictions for TEXT and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = Config(args.config)
    # command line overrides are for this run only
    for key, val in (("order", args.order), ("model_path", args.model),
                     ("top_tokens", args.top), ("key_format", args.key_format)):
        if val is not None:
            cfg.override(key, val)

    try:
        cli = CLI(cfg)
    except (ValueError, KeyError) as e:
        print(f"invalid configuration: {e}")
        return 2
    cli.load_if_present()

    if args.train or args.predict:
        if args.train:
            cli.handle("/train " + " ".join(shlex.quote(p) for p in args.train))
            cli.handle("/save")
        if args.predict:
            cli.handle("/predict " + shlex.quote(args.predict))
        return 0

    cli.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
