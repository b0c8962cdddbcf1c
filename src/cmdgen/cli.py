"""Command line entry point."""

from __future__ import annotations

import asyncio

import typer

from .config import Settings, ShellEnvironment, get_settings
from .engine import RequestEngine, SessionCommandCommitter
from .errors import CmdgenError
from .interactive import InteractiveCli
from .llm import RepublicGateway
from .logging_utils import configure_logging
from .model import MetaStore, ModelResolver, ResolvedModel
from .output import print_error, print_generated_result, print_model_list, print_session_hint
from .postprocess import default_post_processor
from .session import SessionRecord, SessionStore
from .validation import default_command_validator

app = typer.Typer(
    name="cmdgen",
    help="Turn a natural language request into one validated shell command.",
    add_completion=False,
)


def build_engine(settings: Settings, *, copy: bool = False, explanation: bool = False) -> RequestEngine:
    """Wire the default gateway, pipeline, validator and committer."""

    env = ShellEnvironment.from_os(settings)
    store = SessionStore(settings.sessions_dir)
    return RequestEngine(
        settings=settings,
        env=env,
        gateway=RepublicGateway(settings),
        post_processor=default_post_processor(),
        validator=default_command_validator(env),
        committer=SessionCommandCommitter(store, copy=copy, explanation=explanation),
        store=store,
        explanation=explanation,
    )


def open_session(store: SessionStore, resume: str | None) -> SessionRecord | None:
    if resume:
        return store.load(resume.strip())
    return None


def start_session(store: SessionStore, resolved: ResolvedModel, resumed: SessionRecord | None) -> SessionRecord:
    """Create a new session or point the resumed one at the resolved model, then persist it."""

    if resumed is None:
        session = SessionRecord.new(resolved.provider.value, resolved.model)
    else:
        session = resumed
        session.provider = resolved.provider.value
        session.model = resolved.model
    store.save(session)
    return session


@app.command()
def main(
    once: str | None = typer.Option(None, "--once", help="Generate one command for this request and exit"),
    model: str | None = typer.Option(
        None, "--model", "-m", help="provider:model, a provider name, or a model name"
    ),
    key: str | None = typer.Option(None, "--key", "-k", help="API key for the provider"),
    copy: bool = typer.Option(False, "--copy", "-c", help="Copy the generated command to the clipboard"),
    resume: str | None = typer.Option(None, "--resume", "-r", help="Resume a session by UUID"),
    history_lines: int | None = typer.Option(None, "--history-lines", help="Shell history lines in the prompt"),
    generated_history_lines: int | None = typer.Option(
        None, "--generated-history-lines", help="Previously generated commands in the prompt"
    ),
    context_turns: int | None = typer.Option(None, "--context-turns", help="Session turns in the prompt"),
    max_attempts: int | None = typer.Option(None, "--max-attempts", help="Validated attempts per request"),
    explanation: bool = typer.Option(False, "--explanation", "-e", help="Ask for and print explanation items"),
    show_models_list: bool = typer.Option(
        False, "--show-models-list", help="Print the models available for the provider and exit"
    ),
) -> None:
    """Generate shell commands from natural language."""

    configure_logging(profile="cli")
    try:
        settings = get_settings(
            model=model,
            api_key=key,
            history_lines=history_lines,
            generated_history_lines=generated_history_lines,
            context_turns=context_turns,
            max_attempts=max_attempts,
        )
        configure_logging(profile="cli", level=settings.log_level)
        resumed = open_session(SessionStore(settings.sessions_dir), resume)
        resolver = ModelResolver(MetaStore(settings.cache_dir))
        if show_models_list:
            print_model_list(resolver.list_models(settings.model, settings.api_key, resumed))
            return
        resolved = resolver.resolve(settings.model, settings.api_key, resumed)
        settings = settings.model_copy(update={"model": resolved.qualified_name, "api_key": resolved.api_key})
        engine = build_engine(settings, copy=copy, explanation=explanation)
        session = start_session(engine.store, resolved, resumed)
    except CmdgenError as exc:
        print_error(str(exc))
        raise typer.Exit(1) from exc

    print_session_hint(session.uuid)
    if once is not None:
        try:
            result = asyncio.run(engine.generate(once, session))
        except CmdgenError as exc:
            print_error(str(exc))
            raise typer.Exit(1) from exc
        print_generated_result(result, explanation)
        return

    interactive = InteractiveCli(engine, session, explanation=explanation)
    asyncio.run(interactive.run(resumed=bool(resume), context_turns=settings.context_turns))
