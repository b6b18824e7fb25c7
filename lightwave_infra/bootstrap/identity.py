"""
Repository Identity
Works out which repository the bootstrapper is running in
"""
import logging
import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

logger = logging.getLogger()

# Variable set by git-xargs for each repository it runs a script in
XARGS_REPO_ENV_VAR = "XARGS_REPO_NAME"


class RepositoryIdentityError(RuntimeError):
    """Raised when no provider can name the current repository"""


@dataclass(frozen=True)
class RepositoryIdentity:
    name: str
    source: str


class EnvironmentIdentityProvider:
    """Reads the repository name from an environment variable"""

    def __init__(self, variable: str = XARGS_REPO_ENV_VAR):
        self.variable = variable
        self.source = f"environment variable {variable}"

    def __call__(self, cwd: Path) -> Optional[str]:
        return os.environ.get(self.variable)


class GitRemoteIdentityProvider:
    """Derives the repository name from a git remote URL"""

    def __init__(self, remote: str = "origin", timeout_seconds: float = 10.0):
        self.remote = remote
        self.timeout_seconds = timeout_seconds
        self.source = f"git remote {remote}"

    def __call__(self, cwd: Path) -> Optional[str]:
        try:
            result = subprocess.run(
                ["git", "remote", "get-url", self.remote],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout_seconds,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"git remote lookup unavailable: {e}")
            return None

        if result.returncode != 0:
            return None
        return repo_name_from_remote_url(result.stdout.strip())


class WorkingDirectoryIdentityProvider:
    """Uses the working directory's name as the repository name"""

    source = "working directory"

    def __call__(self, cwd: Path) -> Optional[str]:
        return Path(cwd).resolve().name


IdentityProvider = Callable[[Path], Optional[str]]

DEFAULT_PROVIDERS: Sequence[IdentityProvider] = (
    EnvironmentIdentityProvider(),
    GitRemoteIdentityProvider(),
    WorkingDirectoryIdentityProvider(),
)


def repo_name_from_remote_url(url: str) -> Optional[str]:
    """Last path segment of an https or scp-style remote, without .git"""
    url = url.strip().rstrip("/")
    if not url:
        return None
    name = re.split(r"[/:]", url)[-1]
    if name.endswith(".git"):
        name = name[:-len(".git")]
    return name or None


def resolve_repository_identity(cwd: Optional[Path] = None,
                                providers: Sequence[IdentityProvider] = DEFAULT_PROVIDERS) -> RepositoryIdentity:
    """Return the first non-empty name from the providers, tried in order"""
    cwd = Path.cwd() if cwd is None else Path(cwd)

    for provider in providers:
        name = provider(cwd)
        if name and name.strip():
            source = getattr(provider, "source", type(provider).__name__)
            return RepositoryIdentity(name=name.strip(), source=source)

    raise RepositoryIdentityError(f"Could not determine repository name for {cwd}")
