"""
Unit tests for trigger-deploy workflow rendering and writing
"""
import json
import os

import pytest
import yaml
from jinja2 import UndefinedError

from lightwave_infra.bootstrap import WorkflowRenderError, workflow, workflow_template
from lightwave_infra.bootstrap.targets import DeploymentTarget, resolve_deployment_target
from lightwave_infra.bootstrap.workflow import (
    WORKFLOW_PATH,
    WorkflowWriteError,
    render_workflow,
    write_workflow,
)


ENV_KEYS = ("APP_NAME", "ECR_REPOSITORY", "ECS_CLUSTER", "ECS_SERVICE")


def _fixed_zones(content: str) -> str:
    """The rendered document with the four injected env lines removed"""
    return "".join(
        line for line in content.splitlines(keepends=True)
        if not line.lstrip().startswith(tuple(f"{key}:" for key in ENV_KEYS))
    )


@pytest.fixture
def cineos():
    return resolve_deployment_target("cineos")


class TestRenderWorkflow:
    """Test the rendered document"""

    def test_injected_env_matches_target(self, cineos):
        document = yaml.safe_load(render_workflow(cineos))

        assert document["env"] == {
            "APP_NAME": "cineos",
            "ECR_REPOSITORY": "738605694078.dkr.ecr.us-east-1.amazonaws.com/cineos",
            "ECS_CLUSTER": "cineos-prod",
            "ECS_SERVICE": "cineos-prod",
        }

    def test_injected_lines(self, cineos):
        content = render_workflow(cineos)

        assert (
            "  APP_NAME: cineos\n"
            "  ECR_REPOSITORY: 738605694078.dkr.ecr.us-east-1.amazonaws.com/cineos\n"
            "  ECS_CLUSTER: cineos-prod\n"
            "  ECS_SERVICE: cineos-prod\n"
            "\n"
            "jobs:\n"
        ) in content

    def test_static_site_renders_sentinel_values(self):
        document = yaml.safe_load(render_workflow(resolve_deployment_target("lightwave-media-site")))

        assert document["env"] == {
            "APP_NAME": "lightwave-media-site",
            "ECR_REPOSITORY": "N/A",
            "ECS_CLUSTER": "N/A",
            "ECS_SERVICE": "N/A",
        }

    def test_render_is_deterministic(self, cineos):
        assert render_workflow(cineos) == render_workflow(cineos)

    def test_fixed_zones_identical_across_targets(self):
        rendered = [
            _fixed_zones(render_workflow(resolve_deployment_target(name)))
            for name in ("cineos", "lightwave-backend", "lightwave-media-site")
        ]

        assert rendered[0] == rendered[1] == rendered[2]

    def test_github_expressions_pass_through(self, cineos):
        content = render_workflow(cineos)

        assert "${{ secrets.INFRASTRUCTURE_DISPATCH_TOKEN }}" in content
        assert "${{ inputs.environment || 'prod' }}" in content
        assert "[[" not in content

    def test_triggers(self, cineos):
        document = yaml.safe_load(render_workflow(cineos))
        # YAML 1.1 reads the bare "on" key as boolean true
        triggers = document[True]

        assert triggers["push"]["branches"] == ["main"]
        environment_input = triggers["workflow_dispatch"]["inputs"]["environment"]
        assert environment_input["options"] == ["prod", "staging", "dev"]
        assert environment_input["default"] == "prod"

    def test_test_job_blocks_on_failures_but_not_missing_dependencies(self, cineos):
        steps = yaml.safe_load(render_workflow(cineos))["jobs"]["test"]["steps"]
        by_name = {step["name"]: step for step in steps}

        assert by_name["Install dependencies"]["continue-on-error"] is True
        assert by_name["Run tests"]["continue-on-error"] is False
        assert "make test" in by_name["Run tests"]["run"]

    def test_dispatch_payload(self, cineos):
        job = yaml.safe_load(render_workflow(cineos))["jobs"]["trigger-deploy"]
        dispatch = job["steps"][0]

        assert job["needs"] == "test"
        assert dispatch["uses"] == "peter-evans/repository-dispatch@v3"
        assert dispatch["with"]["repository"] == "lightwave-media/lightwave-infrastructure-live"
        assert dispatch["with"]["event-type"] == "deploy-app"

        payload = json.loads(dispatch["with"]["client-payload"])
        assert list(payload) == [
            "app_name", "git_ref", "environment", "task_type", "ecr_repository",
            "ecs_cluster", "ecs_service", "triggered_by", "commit_message",
        ]
        assert payload["task_type"] == "app_deployer"
        assert payload["environment"] == "${{ inputs.environment || 'prod' }}"
        assert payload["app_name"] == "${{ env.APP_NAME }}"

    def test_value_breaking_structure_rejected(self):
        target = DeploymentTarget("bad\n  EXTRA: injected", "repo", "cluster", "service")

        with pytest.raises(WorkflowRenderError):
            render_workflow(target)

    def test_missing_value_is_an_error(self):
        with pytest.raises(UndefinedError, match="ECS_SERVICE"):
            workflow_template.get_trigger_deploy_template().render(
                APP_NAME="cineos", ECR_REPOSITORY="repo", ECS_CLUSTER="cluster"
            )


class TestWriteWorkflow:
    """Test writing the workflow into a repository"""

    def test_creates_directories_and_file(self, tmp_path, cineos):
        path = write_workflow(cineos, tmp_path)

        assert path == tmp_path / ".github" / "workflows" / "trigger-deploy.yml"
        assert path.read_text(encoding="utf-8") == render_workflow(cineos)

    def test_rewrite_is_byte_identical(self, tmp_path, cineos):
        first = write_workflow(cineos, tmp_path).read_bytes()
        second = write_workflow(cineos, tmp_path).read_bytes()

        assert first == second

    def test_overwrites_existing_file(self, tmp_path, cineos):
        existing = tmp_path / WORKFLOW_PATH
        existing.parent.mkdir(parents=True)
        existing.write_text("name: Old Workflow\n")

        write_workflow(cineos, tmp_path)

        assert existing.read_text(encoding="utf-8") == render_workflow(cineos)

    def test_no_temporary_files_left(self, tmp_path, cineos):
        write_workflow(cineos, tmp_path)

        assert os.listdir(tmp_path / WORKFLOW_PATH.parent) == ["trigger-deploy.yml"]

    def test_file_is_readable(self, tmp_path, cineos):
        path = write_workflow(cineos, tmp_path)

        assert path.stat().st_mode & 0o777 == 0o644

    def test_directory_failure(self, tmp_path, cineos):
        blocked_root = tmp_path / "repo"
        blocked_root.mkdir()
        # A file where the .github directory should go
        (blocked_root / ".github").write_text("")

        with pytest.raises(WorkflowWriteError):
            write_workflow(cineos, blocked_root)

    def test_write_failure_cleans_up(self, tmp_path, cineos, monkeypatch):
        def failing_replace(src, dst):
            raise PermissionError("read-only destination")

        monkeypatch.setattr(workflow.os, "replace", failing_replace)

        with pytest.raises(WorkflowWriteError, match="read-only destination"):
            write_workflow(cineos, tmp_path)

        assert os.listdir(tmp_path / WORKFLOW_PATH.parent) == []
