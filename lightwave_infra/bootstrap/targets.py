"""
Deployment Targets
Maps application repositories to the ECR/ECS resources they deploy to
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


NOT_APPLICABLE = "N/A"

ECR_REGISTRY = "738605694078.dkr.ecr.us-east-1.amazonaws.com"


class UnknownRepositoryError(LookupError):
    """Raised when a repository has no deployment target"""

    def __init__(self, repo_name: str):
        super().__init__(f"Unknown repository: {repo_name}")
        self.repo_name = repo_name


@dataclass(frozen=True)
class DeploymentTarget:
    """Where an application repository's image and service live"""
    app_name: str
    ecr_repository: str
    ecs_cluster: str
    ecs_service: str

    @property
    def is_container_deployed(self) -> bool:
        return NOT_APPLICABLE not in (self.ecr_repository, self.ecs_cluster, self.ecs_service)


def _ecs_target(app_name: str) -> DeploymentTarget:
    """Target following the <registry>/<app> and <app>-prod naming convention"""
    return DeploymentTarget(
        app_name=app_name,
        ecr_repository=f"{ECR_REGISTRY}/{app_name}",
        ecs_cluster=f"{app_name}-prod",
        ecs_service=f"{app_name}-prod",
    )


def _external_target(app_name: str) -> DeploymentTarget:
    """Target for sites hosted outside ECS"""
    return DeploymentTarget(
        app_name=app_name,
        ecr_repository=NOT_APPLICABLE,
        ecs_cluster=NOT_APPLICABLE,
        ecs_service=NOT_APPLICABLE,
    )


DEPLOYMENT_TARGETS: Mapping[str, DeploymentTarget] = MappingProxyType({
    "cineos": _ecs_target("cineos"),
    "photographos": _ecs_target("photographos"),
    "createos": _ecs_target("createos"),
    "lightwave-backend": _ecs_target("lightwave-backend"),
    # Cloudflare Pages site; the workflow is emitted for consistency only
    "lightwave-media-site": _external_target("lightwave-media-site"),
})


def resolve_deployment_target(repo_name: str) -> DeploymentTarget:
    """Look up the deployment target for a repository by exact name"""
    if not repo_name:
        raise ValueError("Repository name must not be empty")

    try:
        return DEPLOYMENT_TARGETS[repo_name]
    except KeyError:
        raise UnknownRepositoryError(repo_name) from None
