"""Package-manager script runner for the build phases of a release."""

from __future__ import annotations

from .config import ReleaseConfig
from .errors import BuildStepFailed
from .project import Project
from .shell import run

FORMAT_SCRIPT = "format:package-json"
TEST_SCRIPT = "test"
VERIFY_SCRIPT = "verify"
PACKAGE_SCRIPT = "package"


class BuildProvider:
    """Runs package.json scripts through the configured package manager.

    Scripts are optional unless listed in config.required_scripts: an
    undefined optional script is skipped, an undefined required one fails.
    """

    def __init__(self, project: Project, config: ReleaseConfig) -> None:
        self.project = project
        self.config = config

    def format_manifest(self) -> None:
        self._run_phase(FORMAT_SCRIPT)

    def test(self) -> None:
        self._run_phase(TEST_SCRIPT)

    def verify(self) -> None:
        self._run_phase(VERIFY_SCRIPT)

    def package(self) -> None:
        self._run_phase(PACKAGE_SCRIPT)

    def _run_phase(self, script_name: str) -> None:
        if script_name in self.config.required_scripts:
            self.run_required_script(script_name)
        else:
            self.run_optional_script(script_name)

    def run_optional_script(self, script_name: str, *args: str) -> None:
        """Run a script if package.json defines it, otherwise skip it."""
        if not self.project.has_script(script_name):
            print(f'  Skipping optional script "{script_name}"')
            return
        self._run_script(script_name, *args)

    def run_required_script(self, script_name: str, *args: str) -> None:
        """Run a script that must exist in package.json.

        Raises:
            BuildStepFailed: If the script is missing, exits non-zero or
                the package manager cannot be started.
        """
        if not self.project.has_script(script_name):
            raise BuildStepFailed(script_name)
        self._run_script(script_name, *args)

    def _run_script(self, script_name: str, *args: str) -> None:
        print(f"  {self.config.package_manager} run {script_name}")
        try:
            result = run(
                self.config.package_manager,
                "run",
                script_name,
                *args,
                check=False,
                cwd=self.project.base_path,
            )
        except OSError as exc:
            raise BuildStepFailed(script_name, error=str(exc)) from exc
        if result.returncode != 0:
            raise BuildStepFailed(script_name, result.returncode)
