"""Hatch build hook that records the source commit in built packages."""

import subprocess
from pathlib import Path

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

METADATA_SOURCE = "src/civicscore/_build_metadata.py"
METADATA_TARGET = "civicscore/_build_metadata.py"


class VersionMetadataHook(BuildHookInterface):
    """Writes ``civicscore/_build_metadata.py`` with ``GIT_COMMIT``."""

    def initialize(self, version: str, build_data: dict) -> None:
        # Editable installs read the commit from the checkout at runtime
        if version == "editable":
            return

        path = Path(self.root) / METADATA_SOURCE
        path.write_text(
            f'# Generated by build_hook.py\nGIT_COMMIT = "{self._git_commit()}"\n'
        )
        build_data["force_include"][METADATA_SOURCE] = METADATA_TARGET

    def _git_commit(self) -> str:
        try:
            result = subprocess.run(
                ["git", "rev-parse", "HEAD"],
                cwd=self.root,
                capture_output=True,
                text=True,
                timeout=5,
                check=True,
            )
        except (OSError, subprocess.SubprocessError):
            return "unknown"
        return result.stdout.strip()
