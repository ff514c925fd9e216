"""Build and runtime information of the running program."""

from __future__ import annotations

import platform
from collections.abc import Mapping
from dataclasses import dataclass, field

__all__ = ["BuildInfo"]

_TEMPLATE = """
{program}, version {version} (branch: {branch}, revision: {revision})
  build user:       {build_user}
  build date:       {build_date}
  python version:   {runtime_version}
  platform:         {platform}
"""


@dataclass(frozen=True)
class BuildInfo:
    """Version, revision and build details, with the runtime platform."""

    version: str = ""
    revision: str = ""
    branch: str = ""
    build_user: str = ""
    build_date: str = ""
    runtime_version: str = ""
    os: str = ""
    arch: str = ""
    vcs: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def current(cls) -> BuildInfo:
        """Information about the running interpreter; build fields are empty."""
        return cls(
            runtime_version=platform.python_version(),
            os=platform.system().lower(),
            arch=platform.machine().lower(),
        )

    @property
    def platform(self) -> str:
        return f"{self.os}/{self.arch}"

    def effective_revision(self) -> str:
        """The set revision, or one derived from the version-control settings."""
        if self.revision:
            return self.revision
        rev = self.vcs.get("vcs.revision", "unknown")
        if self.vcs.get("vcs.modified") == "true":
            return rev + "-modified"
        return rev

    def print(self, program: str) -> str:
        """Multi-line version report for program."""
        return _TEMPLATE.format(
            program=program,
            version=self.version,
            branch=self.branch,
            revision=self.effective_revision(),
            build_user=self.build_user,
            build_date=self.build_date,
            runtime_version=self.runtime_version,
            platform=self.platform,
        ).strip()

    def info(self) -> str:
        """Version, branch and revision in one line."""
        return (
            f"(version={self.version}, branch={self.branch}, "
            f"revision={self.effective_revision()})"
        )

    def build_context(self) -> str:
        """Runtime version, platform, build user and build date in one line."""
        return (
            f"(python={self.runtime_version}, platform={self.platform}, "
            f"user={self.build_user}, date={self.build_date})"
        )