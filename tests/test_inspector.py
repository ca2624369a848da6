"""Integration tests for the project inspector."""

from __future__ import annotations

import json

import pytest

from src.costguard.exceptions import ProjectDetectionError
from src.costguard.inspection import ProjectInspector, ProjectType, inspect_project
from src.costguard.inspection.profile import InfrastructurePattern

CDK_STACK = """
import * as cdk from 'aws-cdk-lib';
export class ApiStack extends cdk.Stack {
  constructor(scope, id) {
    super(scope, id);
    new rds.DatabaseInstance(this, 'Db', {});
    new elbv2.ApplicationLoadBalancer(this, 'Alb', {});
  }
}
"""


@pytest.fixture
def cdk_project(tmp_path, write_file):
    write_file(
        "package.json",
        json.dumps(
            {
                "name": "orders-api",
                "author": "Ops Team <ops@acme.io>",
                "dependencies": {"aws-cdk-lib": "^2.150.0", "constructs": "^10.0.0"},
            }
        ),
    )
    write_file("cdk.json", '{"app": "npx ts-node bin/app.ts"}')
    write_file("lib/api-stack.ts", CDK_STACK)
    return tmp_path


def test_inspect_cdk_project(cdk_project, no_git):
    profile = ProjectInspector(str(cdk_project), git_config=no_git).inspect()

    assert profile.project_type == ProjectType.CDK_TYPESCRIPT
    assert profile.infrastructure_patterns == [InfrastructurePattern.AWS_CDK]
    assert profile.infrastructure == "aws-cdk"
    # lib/ is scanned on its own and again through "."
    assert len(profile.resource_mentions) == 4
    assert profile.budget_estimate_usd == 100 + 50 + 30
    assert profile.project_name == "orders-api"
    assert profile.alert_email == "ops@acme.io"


def test_inspect_python_project_uses_git_identity(tmp_path, write_file, fake_git):
    write_file("requirements.txt", "boto3\n")
    git = fake_git(
        {
            "remote.origin.url": "git@github.com:acme/data-pipeline.git",
            "user.email": "dev@acme.io",
        }
    )

    profile = inspect_project(str(tmp_path), git_config=git)

    assert profile.project_type == ProjectType.PYTHON
    assert profile.infrastructure == "none-detected"
    assert profile.resource_mentions == []
    assert profile.budget_estimate_usd == 100
    assert profile.project_name == "data-pipeline"
    assert profile.alert_email == "dev@acme.io"


def test_large_project_budget(tmp_path, write_file, no_git):
    write_file("package.json", "{}")
    for i in range(11):
        write_file(f"stacks/bucket{i}.ts", "new s3.Bucket(this, 'B')")

    profile = inspect_project(str(tmp_path), git_config=no_git)

    assert len(profile.resource_mentions) == 22
    assert profile.budget_estimate_usd == 200


def test_missing_manifest_fails_without_writing(tmp_path, write_file, no_git):
    write_file("go.mod", "module example.com/x\n")
    before = sorted(p.name for p in tmp_path.iterdir())

    with pytest.raises(ProjectDetectionError):
        inspect_project(str(tmp_path), git_config=no_git)

    assert sorted(p.name for p in tmp_path.iterdir()) == before


def test_profile_to_dict(cdk_project, no_git):
    data = inspect_project(str(cdk_project), git_config=no_git).to_dict()

    assert data["projectType"] == "cdk-typescript"
    assert data["infrastructure"] == "aws-cdk"
    assert data["budgetEstimate"] == 180
    assert {"type": "RDS Databases", "file": "lib/api-stack.ts"} in data["resourceMentions"]
