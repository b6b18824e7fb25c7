"""
Trigger Deploy CLI
Adds trigger-deploy.yml to the repository git-xargs runs it in
"""

import logging
import os
from pathlib import Path

import typer

from .identity import XARGS_REPO_ENV_VAR, RepositoryIdentityError, resolve_repository_identity
from .targets import UnknownRepositoryError, resolve_deployment_target
from .workflow import WORKFLOW_PATH, WorkflowRenderError, WorkflowWriteError, write_workflow

logger = logging.getLogger()

app = typer.Typer(help="Add the trigger-deploy workflow to an application repository.")


@app.command()
def add_trigger_deploy() -> None:
    """Write .github/workflows/trigger-deploy.yml for the current repository."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    repo_root = Path.cwd()

    try:
        identity = resolve_repository_identity(cwd=repo_root)
    except RepositoryIdentityError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error

    xargs_repo_name = os.environ.get(XARGS_REPO_ENV_VAR) or "not set"
    typer.echo(f"Processing repo: {identity.name} ({XARGS_REPO_ENV_VAR}={xargs_repo_name})")
    logger.info(f"Repository name resolved from {identity.source}")

    try:
        target = resolve_deployment_target(identity.name)
    except UnknownRepositoryError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error

    if not target.is_container_deployed:
        logger.warning(f"{target.app_name} is not deployed to ECS; dispatch payload will carry N/A values")

    try:
        write_workflow(target, repo_root)
    except (WorkflowRenderError, WorkflowWriteError) as error:
        typer.echo(f"Failed to create {WORKFLOW_PATH.as_posix()}: {error}", err=True)
        raise typer.Exit(code=1) from error

    typer.echo(f"Created {WORKFLOW_PATH.as_posix()} for {target.app_name}")


if __name__ == "__main__":
    app()
