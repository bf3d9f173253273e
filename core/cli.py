"""
Command-line interface for the readiness scoring engine
"""
import json
from functools import wraps
from pathlib import Path

import click
import yaml

from core.config import settings
from core.exceptions import ReadinessError
from core.logging import get_logger

logger = get_logger(__name__)


def get_service():
    from batch_runner.service import get_service as _get_service

    return _get_service()


def handle_errors(func):
    """Report domain errors as a clean CLI failure"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ReadinessError as e:
            raise click.ClickException(f"{e.error_code}: {e.message}") from e

    return wrapper


def _load_document(path: str) -> dict:
    """Read a JSON or YAML mapping from disk"""
    with Path(path).open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a mapping")
    return data


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _describe_configuration(configuration) -> str:
    status = "active" if configuration.is_active else "inactive"
    reason = configuration.change_reason or ""
    return f"v{configuration.version:<4} {configuration.config_name:<20} {status:<9} {reason}"


@click.group()
@click.version_option(version=settings.app_version)
def cli():
    """Investment readiness scoring CLI"""
    pass


@cli.command()
def init_db():
    """Initialize database with tables"""
    import database.models  # noqa: F401
    from database.base import Base
    from database.session import engine

    click.echo("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    click.echo("Database initialized successfully!")


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to")
@click.option("--port", default=8000, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def runserver(host: str, port: int, reload: bool):
    """Run the FastAPI development server"""
    import uvicorn

    click.echo(f"Starting {settings.app_name} server on {host}:{port}")
    click.echo(f"Environment: {settings.environment}")

    uvicorn.run("main:app", host=host, port=port, reload=reload, log_level=settings.log_level.lower())


@cli.command()
@click.argument("answers_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--normalize", is_flag=True, help="Fill absent answers with documented defaults")
@click.option("--persist", is_flag=True, help="Store the assessment and its score")
@click.option("--user-id", default=None, help="Owner of a persisted assessment")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@handle_errors
def score(answers_file: str, normalize: bool, persist: bool, user_id: str, as_json: bool):
    """Score the answers in ANSWERS_FILE (JSON or YAML)"""
    answers = _load_document(answers_file)
    service = get_service()

    assessment_id = None
    if persist:
        assessment_id, result = service.submit_assessment(answers, user_id=user_id, normalize=normalize)
    else:
        result = service.compute_score(answers, normalize=normalize)

    if as_json:
        _echo_json({"assessment_id": assessment_id, **result.to_dict()})
        return

    if assessment_id:
        click.echo(f"Assessment: {assessment_id}")
    click.echo(f"Total score: {result.total_score} ({result.readiness})")
    click.echo(f"Sector: {result.sector}, stage: {result.stage}, config version: {result.config_version}")
    for category in ("business_idea", "financials", "team", "traction"):
        sub = getattr(result, category)
        click.echo(f"  {category:<14} {sub.score:>3}  {sub.explanation}")


@cli.group()
def config():
    """Manage scoring weight configuration versions"""
    pass


@config.command("active")
@click.option("--json", "as_json", is_flag=True, help="Print the full configuration as JSON")
@handle_errors
def config_active(as_json: bool):
    """Show the active configuration"""
    configuration = get_service().get_active_configuration()
    if as_json:
        _echo_json(configuration.to_dict())
    else:
        click.echo(_describe_configuration(configuration))


@config.command("history")
@click.option("--limit", type=int, default=None, help="Show at most this many versions")
@handle_errors
def config_history(limit: int):
    """List configuration versions, newest first"""
    versions = get_service().get_scoring_history(limit=limit)
    if not versions:
        click.echo("No configuration versions stored")
        return
    for configuration in versions:
        click.echo(_describe_configuration(configuration))


@config.command("create")
@click.argument("document_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--reason", required=True, help="Why the weights are changing")
@click.option("--actor", default=None, help="Who is making the change")
@handle_errors
def config_create(document_file: str, reason: str, actor: str):
    """Store and activate the weights in DOCUMENT_FILE"""
    created = get_service().create_scoring_version(_load_document(document_file), reason, actor=actor)
    click.echo(f"Created and activated version {created.version}")


@config.command("revert")
@click.argument("version", type=int)
@click.option("--reason", required=True, help="Why the old weights are coming back")
@click.option("--actor", default=None, help="Who is making the change")
@handle_errors
def config_revert(version: int, reason: str, actor: str):
    """Publish VERSION's weights as a new active version"""
    created = get_service().revert_to_version(version, reason, actor=actor)
    click.echo(f"Reverted to version {version} as new version {created.version}")


@config.command("seed")
@click.option("--actor", default="system", help="Recorded as the creator")
@handle_errors
def config_seed(actor: str):
    """Store the default weights as version 1 if no version is active"""
    configuration = get_service().ensure_default_configuration(actor=actor)
    click.echo(f"Active configuration: version {configuration.version}")


@cli.command()
@click.argument("assessment_id", required=False)
@click.option("--all", "rescore_everything", is_flag=True, help="Rescore every stored assessment")
@click.option("--concurrency", type=click.IntRange(1, 32), default=None, help="Worker threads for --all")
@click.option(
    "--normalize", is_flag=True, help="Fill missing stored answers with documented defaults instead of failing"
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@handle_errors
def rescore(assessment_id: str, rescore_everything: bool, concurrency: int, as_json: bool, normalize: bool):
    """Recompute stored scores with the active configuration"""
    if bool(assessment_id) == rescore_everything:
        raise click.UsageError("Pass either an ASSESSMENT_ID or --all")

    service = get_service()
    if normalize:
        service.processor.normalize = True

    if assessment_id:
        result = service.rescore_one(assessment_id)
        if as_json:
            _echo_json(result.to_dict())
        else:
            click.echo(f"{assessment_id}: {result.old_score} -> {result.new_score} ({result.new_readiness})")
        return

    if concurrency:
        service.processor.max_concurrency = concurrency
    summary = service.run_rescore()

    if as_json:
        _echo_json(summary.to_dict())
        return

    for result in summary.results:
        if result.success:
            click.echo(f"✓ {result.assessment_id}: {result.old_score} -> {result.new_score}")
        else:
            click.echo(f"✗ {result.assessment_id}: {result.error}", err=True)
    click.echo(
        f"Rescored {summary.total} assessments with version {summary.config_version}: "
        f"{summary.successful} successful, {summary.failed} failed, {summary.changed} changed"
    )


@cli.command()
def env_info():
    """Display environment information"""
    click.echo(f"{settings.app_name} v{settings.app_version}")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Database: {settings.database_url}")
    click.echo(f"Cache backend: {settings.cache_backend}")
    click.echo(f"Config cache TTL: {settings.config_cache_ttl_seconds}s")
    click.echo(f"Rescore concurrency: {settings.rescore_max_concurrency}")


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
