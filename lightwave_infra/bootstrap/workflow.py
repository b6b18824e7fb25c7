"""
Workflow Emitter
Renders trigger-deploy.yml for a deployment target and writes it into a repository
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict

import yaml
from jinja2 import TemplateError

from .targets import DeploymentTarget
from .workflow_template import get_trigger_deploy_template

logger = logging.getLogger()

WORKFLOW_PATH = Path(".github") / "workflows" / "trigger-deploy.yml"


class WorkflowRenderError(ValueError):
    """Raised when a rendered workflow is not the document it should be"""


class WorkflowWriteError(OSError):
    """Raised when the workflow file cannot be written"""


def workflow_env(target: DeploymentTarget) -> Dict[str, str]:
    """The four env entries injected into the workflow"""
    return {
        "APP_NAME": target.app_name,
        "ECR_REPOSITORY": target.ecr_repository,
        "ECS_CLUSTER": target.ecs_cluster,
        "ECS_SERVICE": target.ecs_service,
    }


def render_workflow(target: DeploymentTarget) -> str:
    """Render the workflow document for a target"""
    expected_env = workflow_env(target)
    try:
        content = get_trigger_deploy_template().render(**expected_env)
    except TemplateError as e:
        raise WorkflowRenderError(f"Failed to render workflow for {target.app_name}: {e}") from e

    # A value that breaks the YAML structure must never reach a repository
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise WorkflowRenderError(f"Rendered workflow for {target.app_name} is not valid YAML: {e}") from e

    rendered_env = {key: str(value) for key, value in document.get("env", {}).items()}
    if rendered_env != expected_env:
        raise WorkflowRenderError(
            f"Rendered workflow env for {target.app_name} does not match its target: {rendered_env}"
        )

    return content


def write_workflow(target: DeploymentTarget, repo_root: Path) -> Path:
    """Write the rendered workflow under repo_root, replacing any existing file"""
    content = render_workflow(target)
    destination = Path(repo_root) / WORKFLOW_PATH

    temp_path = None
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        # Write beside the destination so the final rename is atomic
        fd, temp_path = tempfile.mkstemp(
            dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
        # mkstemp creates 0600 files; committed workflows are world-readable
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, destination)
        temp_path = None
    except OSError as e:
        raise WorkflowWriteError(f"Failed to write {destination}: {e}") from e
    finally:
        if temp_path is not None and os.path.exists(temp_path):
            os.unlink(temp_path)

    logger.info(f"Wrote {destination} for {target.app_name}")
    return destination
