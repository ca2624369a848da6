"""Connect an inspected project to cost controls.

Writes ``cost-controls-config.json``, adds ignore entries and wires
``package.json`` scripts so every deploy passes the budget guardrail first.
The project's own source files are never touched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import CONFIG_FILENAME, ConnectSettings, CostControlConfig, build_cost_control_config
from .exceptions import ConnectorError
from .inspection import ProjectInspector, ProjectProfile
from .inspection.identity import GitConfigReader

logger = logging.getLogger(__name__)

GITIGNORE_ENTRIES = [
    "# Cost Control Template",
    "cost-control-stack.json",
    "deployment-report-*.json",
]

GUARDRAIL_COMMAND = "costguard estimate --block-exit"


@dataclass
class ConnectResult:
    """What a connect run produced."""
    profile: ProjectProfile
    config: CostControlConfig
    deploy_command: Optional[str]
    written: List[str] = field(default_factory=list)
    dry_run: bool = False


def detect_deploy_command(root: Path, manifest: Optional[Dict[str, Any]]) -> Optional[str]:
    """Best guess at how the project deploys today."""
    scripts = (manifest or {}).get("scripts") or {}
    if scripts.get("deploy"):
        return "npm run deploy"
    if scripts.get("cdk:deploy"):
        return "npm run cdk:deploy"
    if (root / "cdk.json").exists():
        return "cdk deploy --all"
    if (root / "serverless.yml").exists():
        return "serverless deploy"
    return None


def cost_control_scripts(deploy_command: Optional[str]) -> Dict[str, str]:
    """npm scripts added to the project's ``package.json``."""
    guarded_deploy = GUARDRAIL_COMMAND
    if deploy_command:
        guarded_deploy = f"{GUARDRAIL_COMMAND} && {deploy_command}"
    return {
        "deploy-with-cost-controls": guarded_deploy,
        "cost-estimate": "costguard estimate",
        "cost-report": 'echo "Cost reports available in CloudWatch dashboard"',
    }


class ProjectConnector:
    """Inspects a project and writes the cost-control files into it."""

    def __init__(
        self,
        root: str | Path = ".",
        settings: Optional[ConnectSettings] = None,
        git_config: Optional[GitConfigReader] = None,
    ):
        self.root = Path(root).resolve()
        self.settings = settings or ConnectSettings()
        self.inspector = ProjectInspector(str(self.root), git_config=git_config)

    @property
    def manifest_path(self) -> Path:
        return self.root / "package.json"

    def _read_manifest(self) -> Optional[Dict[str, Any]]:
        if not self.manifest_path.exists():
            return None
        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot read package.json, scripts will not be updated: {e}")
            return None
        return data if isinstance(data, dict) else None

    def connect(self, dry_run: bool = False) -> ConnectResult:
        """Inspect the project and write the cost-control files.

        Args:
            dry_run: Compute everything but write nothing

        Returns:
            Summary of the run

        Raises:
            ProjectDetectionError: If the directory is not a recognizable project
            ConnectorError: If a file cannot be written
        """
        profile = self.inspector.inspect()
        config = build_cost_control_config(profile, self.settings)
        manifest = self._read_manifest()
        deploy_command = detect_deploy_command(self.root, manifest)

        result = ConnectResult(
            profile=profile,
            config=config,
            deploy_command=deploy_command,
            dry_run=dry_run,
        )
        if dry_run:
            logger.info("Dry run, no files written")
            return result

        result.written.append(self.write_config(config))
        if self.update_gitignore():
            result.written.append(".gitignore")
        if manifest is not None:
            self.update_package_json(manifest, deploy_command)
            result.written.append("package.json")

        return result

    def write_config(self, config: CostControlConfig) -> str:
        path = self.root / CONFIG_FILENAME
        self._write(path, json.dumps(config.to_json_dict(), indent=2, ensure_ascii=False) + "\n")
        logger.info(f"Wrote {path}")
        return CONFIG_FILENAME

    def update_gitignore(self) -> bool:
        """Append missing ignore entries; returns True if the file changed."""
        path = self.root / ".gitignore"
        if not path.exists():
            self._write(path, "\n".join(GITIGNORE_ENTRIES) + "\n")
            return True

        existing = path.read_text(encoding="utf-8")
        missing = [entry for entry in GITIGNORE_ENTRIES if entry not in existing]
        if not missing:
            return False

        self._write(path, existing + "\n" + "\n".join(missing) + "\n")
        return True

    def update_package_json(self, manifest: Dict[str, Any], deploy_command: Optional[str]) -> Dict[str, Any]:
        """Add cost-control scripts, backing up an existing ``deploy`` script."""
        scripts = manifest.get("scripts")
        if not isinstance(scripts, dict):
            scripts = {}
            manifest["scripts"] = scripts

        scripts.update(cost_control_scripts(deploy_command))
        if scripts.get("deploy") and "deploy-original" not in scripts:
            scripts["deploy-original"] = scripts["deploy"]

        self._write(self.manifest_path, json.dumps(manifest, indent=2, ensure_ascii=False) + "\n")
        logger.info("Updated package.json with cost control scripts")
        return manifest

    def _write(self, path: Path, content: str) -> None:
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ConnectorError(f"Failed to write {path.name}: {e}", target=str(path)) from e
