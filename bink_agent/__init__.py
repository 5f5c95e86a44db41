from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path


def _read_local_pyproject_version() -> str | None:
    """Read the version from the local pyproject when running from source."""
    pyproject_path = Path(__file__).resolve().parents[1] / "pyproject.toml"
    if not pyproject_path.exists():
        return None
    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None
    version = data.get("project", {}).get("version")
    if isinstance(version, str) and version.strip():
        return version.strip()
    return None


def _resolve_version() -> str:
    try:
        return _dist_version("bink-agent")
    except PackageNotFoundError:
        pass
    return _read_local_pyproject_version() or "0.0.0"


__version__: str = _resolve_version()

from bink_agent.agents import BinkAgent  # noqa: E402
from bink_agent.errors import (  # noqa: E402
    BinkAgentError,
    InvalidConfiguration,
    InvalidState,
    MalformedOutput,
    ModelError,
    NetworkUnavailableError,
    ToolExecutionError,
)
from bink_agent.schema import AgentMode, AgentRunOptions, AgentState  # noqa: E402

__all__ = [
    "__version__",
    "BinkAgent",
    "AgentMode",
    "AgentRunOptions",
    "AgentState",
    "BinkAgentError",
    "InvalidConfiguration",
    "InvalidState",
    "MalformedOutput",
    "ModelError",
    "NetworkUnavailableError",
    "ToolExecutionError",
]
