"""
Bootstrap Module
Adds the trigger-deploy workflow to application repositories
"""

from .targets import (
    DEPLOYMENT_TARGETS,
    NOT_APPLICABLE,
    DeploymentTarget,
    UnknownRepositoryError,
    resolve_deployment_target,
)
from .identity import RepositoryIdentity, RepositoryIdentityError, resolve_repository_identity
from .workflow import (
    WORKFLOW_PATH,
    WorkflowRenderError,
    WorkflowWriteError,
    render_workflow,
    write_workflow,
)

__all__ = [
    'DEPLOYMENT_TARGETS',
    'NOT_APPLICABLE',
    'DeploymentTarget',
    'UnknownRepositoryError',
    'resolve_deployment_target',
    'RepositoryIdentity',
    'RepositoryIdentityError',
    'resolve_repository_identity',
    'WORKFLOW_PATH',
    'WorkflowRenderError',
    'WorkflowWriteError',
    'render_workflow',
    'write_workflow',
]
