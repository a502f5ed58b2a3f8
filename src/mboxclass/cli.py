"""mboxclass command-line interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .config import Config, ConfigurationError, load_config
from .logging import configure_logging
from .mailbox import MailboxError, open_mailbox
from .pipeline import classify_sources, parse_source
from .report import score_lines
from .statistics import SyntheticCollection
from .types import MailSource
from .vocabulary import EmptyVocabularyError, tokenize

app = typer.Typer(help="Classify an email against mail collections with naive Bayes.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None


@app.callback()
def _mboxclass(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to config (env MBOXCLASS_CONFIG or ~/.config/mboxclass/config.yaml).",
        ),
    ] = None,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved)


@app.command()
def classify(
    ctx: typer.Context,
    sources: Annotated[
        list[str] | None,
        typer.Argument(
            help="Mail collections followed by the email to classify ('-' reads stdin).",
            show_default=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Print the probability of every collection."),
    ] = False,
    spam: Annotated[
        str | None,
        typer.Option(
            "-s",
            "--spam",
            metavar="EMAILS:MATCHES",
            help="Add a synthetic spam collection of EMAILS messages averaging MATCHES per word.",
        ),
    ] = None,
    spam_label: Annotated[
        str | None,
        typer.Option("--spam-label", help="Label reported for the synthetic collection."),
    ] = None,
) -> None:
    """Print the collection the last source's email most likely belongs to."""

    config = _load_environment(ctx)
    try:
        synthetic = _synthetic_collection(config, spam, spam_label)
        mail_sources = [parse_source(value) for value in sources or []]
        LOGGER.debug("Classifying with %s mail source(s)", len(mail_sources))
        classification = classify_sources(
            mail_sources,
            synthetic=synthetic,
            encoding=config.encoding,
        )
    except ConfigurationError as exc:
        _config_failure(exc)
    except (MailboxError, EmptyVocabularyError) as exc:
        _fatal(exc)

    if verbose:
        for line in score_lines(classification, config.precision):
            typer.echo(line)
    typer.echo(classification.label)


@app.command("inspect")
def inspect_sources(
    ctx: typer.Context,
    sources: Annotated[
        list[str],
        typer.Argument(help="Mail sources to summarise ('-' reads stdin)."),
    ],
) -> None:
    """Report email and distinct word counts for each mail source."""

    config = _load_environment(ctx)
    try:
        summaries = [_summarise(parse_source(value), config) for value in sources]
    except ConfigurationError as exc:
        _config_failure(exc)
    except MailboxError as exc:
        _fatal(exc)

    for label, emails, words in summaries:
        typer.echo(f"{label}: {emails} email(s), {words} distinct word(s)")


@app.command()
def version() -> None:
    """Print the installed mboxclass version."""

    typer.echo(__version__)


def _summarise(source: MailSource, config: Config) -> tuple[str, int, int]:
    emails = 0
    words: set[str] = set()
    with open_mailbox(source, encoding=config.encoding) as reader:
        for email in reader:
            if not email.strip():
                continue
            emails += 1
            words.update(tokenize(email))
    return source.label, emails, len(words)


def _synthetic_collection(
    config: Config,
    descriptor: str | None,
    label: str | None,
) -> SyntheticCollection | None:
    chosen_label = label if label is not None else config.spam.label
    if not chosen_label.strip():
        raise ConfigurationError("Synthetic collection label cannot be empty.")
    if descriptor is not None:
        return SyntheticCollection.parse(descriptor, label=chosen_label)
    emails, matches = config.spam.emails, config.spam.matches
    if emails is not None and matches is not None:
        return SyntheticCollection(
            email_count=emails,
            matches=matches,
            label=chosen_label,
        )
    return None


def _load_environment(ctx: typer.Context) -> Config:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    try:
        config = load_config(state.config_path)
        configure_logging(config.logging)
    except ConfigurationError as exc:
        _config_failure(exc)
    return config


def _config_failure(exc: ConfigurationError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def _fatal(exc: Exception) -> NoReturn:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1) from exc


def main() -> None:  # pragma: no cover - delegated to Typer
    app()


__all__ = ["app", "main"]
