"""Tests for the costguard command line."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from src.costguard.cli import EXIT_OVER_BUDGET, app

runner = CliRunner()

TEMPLATE = {
    "Resources": {
        "Web": {"Type": "AWS::EC2::Instance", "Properties": {"InstanceType": "t3.micro"}},
        "Assets": {"Type": "AWS::S3::Bucket"},
    }
}


@pytest.fixture(autouse=True)
def offline_git(monkeypatch, fake_git):
    """Never shell out to the real git from CLI tests."""
    reader = fake_git({"user.email": "dev@acme.io"})
    monkeypatch.setattr("src.costguard.inspection.inspector.make_git_config_reader", lambda root: reader)


@pytest.fixture
def connected(tmp_path, node_project, monkeypatch):
    """A connected project with the working directory set to it."""
    node_project(name="shop", scripts={"deploy": "cdk deploy"})
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["connect", str(tmp_path), "--budget", "50"])
    assert result.exit_code == 0, result.output
    return tmp_path


def test_inspect_json(tmp_path, node_project):
    node_project(name="shop", dependencies={"aws-sdk": "^2.0.0"})

    result = runner.invoke(app, ["inspect", str(tmp_path), "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["projectType"] == "nodejs-aws"
    assert data["projectName"] == "shop"
    assert data["alertEmail"] == "dev@acme.io"
    assert data["budgetEstimate"] == 100


def test_inspect_not_a_project(tmp_path):
    result = runner.invoke(app, ["inspect", str(tmp_path)])

    assert result.exit_code == 1
    assert "Inspection failed" in result.stdout


def test_connect_dry_run(tmp_path, node_project):
    node_project(name="shop")

    result = runner.invoke(app, ["connect", str(tmp_path), "--dry-run", "--env", "staging"])

    assert result.exit_code == 0, result.output
    assert "Dry run" in result.stdout
    assert not (tmp_path / "cost-controls-config.json").exists()


def test_connect_invalid_environment(tmp_path, node_project):
    node_project(name="shop")

    result = runner.invoke(app, ["connect", str(tmp_path), "--env", "moon"])

    assert result.exit_code == 1
    assert "Connection failed" in result.stdout


def test_connect_writes_config(connected):
    config = json.loads((connected / "cost-controls-config.json").read_text())

    assert config["budget"] == 50
    assert config["alertEmail"] == "dev@acme.io"
    scripts = json.loads((connected / "package.json").read_text())["scripts"]
    assert scripts["deploy-original"] == "cdk deploy"


def test_estimate_within_budget_json(connected):
    (connected / "template.json").write_text(json.dumps(TEMPLATE))

    result = runner.invoke(app, ["estimate", "--format", "json", "--block-exit"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["is_valid"] is True
    assert data["environment"] == "dev"
    assert data["template"].endswith("template.json")


def test_estimate_over_budget_blocks(connected):
    (connected / "template.json").write_text(json.dumps(TEMPLATE))

    assert runner.invoke(app, ["estimate", "--budget", "5"]).exit_code == 0

    result = runner.invoke(app, ["estimate", "--budget", "5", "--block-exit"])
    assert result.exit_code == EXIT_OVER_BUDGET
    assert "BUDGET_EXCEEDED" in result.stdout


def test_estimate_without_template_uses_basic_estimate(connected):
    (connected / "cdk.json").write_text("{}")

    result = runner.invoke(app, ["estimate", "--block-exit"])

    assert result.exit_code == 0, result.output
    assert "cdk synth" in result.stdout
    assert "$10.00" in result.stdout


def test_estimate_without_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["estimate"])

    assert result.exit_code == 1
    assert "Estimation failed" in result.stdout


def test_estimate_rejects_unknown_format(connected):
    assert runner.invoke(app, ["estimate", "--format", "xml"]).exit_code == 1


def test_tag_writes_copy(connected):
    template = connected / "template.json"
    template.write_text(json.dumps(TEMPLATE))

    result = runner.invoke(app, ["tag", str(template)])

    assert result.exit_code == 0, result.output
    tagged = json.loads((connected / "template.tagged.json").read_text())
    keys = {t["Key"] for t in tagged["Resources"]["Web"]["Properties"]["Tags"]}
    assert {"Project", "Environment", "CostCenter", "Owner", "ManagedBy", "CreationDate"} <= keys
    assert json.loads(template.read_text()) == TEMPLATE


def test_tag_template_with_empty_resources(connected):
    template = connected / "template.yaml"
    template.write_text("AWSTemplateFormatVersion: '2010-09-09'\nResources:\n")

    result = runner.invoke(app, ["tag", str(template)])

    assert result.exit_code == 0, result.output
    tagged = json.loads((connected / "template.tagged.json").read_text())
    assert tagged["Resources"] == {}
