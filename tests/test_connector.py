"""Tests for wiring cost controls into a project."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from src.costguard.config import ConnectSettings
from src.costguard.connector import (
    GITIGNORE_ENTRIES,
    ProjectConnector,
    cost_control_scripts,
    detect_deploy_command,
)
from src.costguard.exceptions import ConnectorError, ProjectDetectionError


@pytest.fixture
def cdk_app(node_project, write_file):
    root = node_project(
        name="orders-api",
        scripts={"deploy": "cdk deploy", "build": "tsc"},
        dependencies={"aws-cdk-lib": "^2.0.0"},
    )
    write_file("cdk.json", "{}")
    write_file("lib/stack.ts", "export class S extends Stack { x = new s3.Bucket(this, 'B') }")
    return root


class TestDeployCommand:
    """Test cases for deploy command detection."""

    def test_deploy_script(self, tmp_path):
        assert detect_deploy_command(tmp_path, {"scripts": {"deploy": "x"}}) == "npm run deploy"

    def test_cdk_deploy_script(self, tmp_path):
        assert detect_deploy_command(tmp_path, {"scripts": {"cdk:deploy": "x"}}) == "npm run cdk:deploy"

    def test_cdk_json(self, tmp_path, write_file):
        write_file("cdk.json", "{}")
        assert detect_deploy_command(tmp_path, {}) == "cdk deploy --all"

    def test_serverless(self, tmp_path, write_file):
        write_file("serverless.yml", "service: x")
        assert detect_deploy_command(tmp_path, None) == "serverless deploy"

    def test_nothing_detected(self, tmp_path):
        assert detect_deploy_command(tmp_path, None) is None

    def test_scripts_chain_the_guardrail(self):
        scripts = cost_control_scripts("npm run deploy")
        assert scripts["deploy-with-cost-controls"] == "costguard estimate --block-exit && npm run deploy"
        assert cost_control_scripts(None)["deploy-with-cost-controls"] == "costguard estimate --block-exit"


class TestProjectConnector:
    """Test cases for the connect run."""

    def test_connect_writes_files(self, cdk_app, no_git):
        result = ProjectConnector(cdk_app, ConnectSettings(owner="web-team"), git_config=no_git).connect()

        assert result.written == ["cost-controls-config.json", ".gitignore", "package.json"]
        assert result.deploy_command == "npm run deploy"

        config = json.loads((cdk_app / "cost-controls-config.json").read_text())
        assert config["projectName"] == "orders-api"
        assert config["owner"] == "web-team"
        assert config["infrastructure"] == "aws-cdk"
        assert config["budget"] == result.profile.budget_estimate_usd

        gitignore = (cdk_app / ".gitignore").read_text().splitlines()
        assert gitignore == GITIGNORE_ENTRIES

        scripts = json.loads((cdk_app / "package.json").read_text())["scripts"]
        assert scripts["deploy"] == "cdk deploy"
        assert scripts["deploy-original"] == "cdk deploy"
        assert scripts["build"] == "tsc"
        assert scripts["deploy-with-cost-controls"].endswith("&& npm run deploy")
        assert scripts["cost-estimate"] == "costguard estimate"

    def test_reconnect_is_stable(self, cdk_app, no_git):
        connector = ProjectConnector(cdk_app, git_config=no_git)
        connector.connect()
        (cdk_app / "package.json").write_text(
            json.dumps({"name": "orders-api", "scripts": {"deploy": "changed", "deploy-original": "cdk deploy"}})
        )

        result = connector.connect()

        assert ".gitignore" not in result.written
        scripts = json.loads((cdk_app / "package.json").read_text())["scripts"]
        assert scripts["deploy-original"] == "cdk deploy"

    def test_gitignore_appends_missing_entries(self, cdk_app, no_git):
        (cdk_app / ".gitignore").write_text("node_modules\ncost-control-stack.json\n")

        ProjectConnector(cdk_app, git_config=no_git).connect()

        content = (cdk_app / ".gitignore").read_text()
        assert content.startswith("node_modules\n")
        assert content.count("cost-control-stack.json") == 1
        assert "deployment-report-*.json" in content

    def test_dry_run_writes_nothing(self, cdk_app, no_git):
        before = (cdk_app / "package.json").read_text()

        result = ProjectConnector(cdk_app, git_config=no_git).connect(dry_run=True)

        assert result.dry_run
        assert result.written == []
        assert not (cdk_app / "cost-controls-config.json").exists()
        assert not (cdk_app / ".gitignore").exists()
        assert (cdk_app / "package.json").read_text() == before

    def test_non_ascii_text_is_preserved(self, tmp_path, write_file, no_git):
        manifest = {"name": "café-api", "author": "José <jose@x.io>", "description": "Überwachung"}
        write_file("package.json", json.dumps(manifest, ensure_ascii=False))
        root = tmp_path

        ProjectConnector(root, git_config=no_git).connect()

        manifest_text = (root / "package.json").read_text(encoding="utf-8")
        assert "José <jose@x.io>" in manifest_text
        assert "Überwachung" in manifest_text
        assert "\\u00" not in manifest_text
        config_text = (root / "cost-controls-config.json").read_text(encoding="utf-8")
        assert '"projectName": "café-api"' in config_text

    def test_python_project_has_no_scripts(self, tmp_path, write_file, no_git):
        write_file("requirements.txt", "boto3\n")

        result = ProjectConnector(tmp_path, ConnectSettings(environment="prod"), git_config=no_git).connect()

        assert result.written == ["cost-controls-config.json", ".gitignore"]
        assert not (tmp_path / "package.json").exists()
        assert result.config.auto_shutdown is False

    def test_not_a_project(self, tmp_path, no_git):
        with pytest.raises(ProjectDetectionError):
            ProjectConnector(tmp_path, git_config=no_git).connect()
        assert list(tmp_path.iterdir()) == []

    def test_write_failure_raises_connector_error(self, cdk_app, no_git):
        connector = ProjectConnector(cdk_app, git_config=no_git)
        with patch("pathlib.Path.write_text", side_effect=PermissionError("read-only")):
            with pytest.raises(ConnectorError) as exc_info:
                connector.connect()
        assert exc_info.value.details["target"].endswith("cost-controls-config.json")
