"""
Tests for the lightsail-deploy command line interface.
"""

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from lightsail_deploy.__version__ import __version__
from lightsail_deploy.cli.commands.generate import collect_params
from lightsail_deploy.cli.decorators.dual_mode import dual_mode_command
from lightsail_deploy.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, args, **kwargs):
    return runner.invoke(cli, args, catch_exceptions=False, **kwargs)


class TestTypes:

    def test_lists_every_type(self, runner):
        result = invoke(runner, ["types"])

        assert result.exit_code == 0
        for app_type in ["lamp", "nginx", "nodejs", "python", "react", "docker"]:
            assert app_type in result.output

    def test_version(self, runner):
        result = invoke(runner, ["--version"])
        assert __version__ in result.output


class TestGenerateAutomated:

    def test_generate_with_options(self, runner):
        with runner.isolated_filesystem():
            result = invoke(runner, [
                "generate", "--auto",
                "-t", "nodejs", "-n", "My App", "-i", "my-app",
                "--database", "postgresql", "--db-external", "--rds-name", "pg-prod",
            ])

            assert result.exit_code == 0, result.output
            config = yaml.safe_load(Path("deployment-nodejs.config.yml").read_text())
            assert config["dependencies"]["postgresql"]["external"] is True
            assert config["lightsail"]["instance_name"] == "my-app"
            assert Path(".github/workflows/deploy-nodejs.yml").is_file()

    def test_generate_from_environment(self, runner):
        """Test that the three trigger variables switch to automated mode."""
        env = {"APP_TYPE": "nginx", "APP_NAME": "Docs", "INSTANCE_NAME": "docs"}

        with runner.isolated_filesystem():
            result = invoke(runner, ["generate", "--no-workflow"], env=env)

            assert result.exit_code == 0, result.output
            assert "automated mode" in result.output
            assert Path("deployment-nginx.config.yml").is_file()
            assert not Path(".github").exists()

    def test_options_override_environment(self, runner):
        env = {"APP_TYPE": "nginx", "APP_NAME": "Docs", "INSTANCE_NAME": "docs"}

        with runner.isolated_filesystem():
            result = invoke(runner, ["generate", "--region", "eu-west-1"], env=env)

            assert result.exit_code == 0, result.output
            config = yaml.safe_load(Path("deployment-nginx.config.yml").read_text())
            assert config["aws"]["region"] == "eu-west-1"

    def test_output_dir(self, runner, tmp_path):
        result = invoke(runner, [
            "generate", "--auto", "-t", "react", "-n", "Dash", "-i", "dash",
            "-o", str(tmp_path),
        ])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "deployment-react.config.yml").is_file()

    def test_docker_bundle_too_small(self, runner):
        with runner.isolated_filesystem():
            result = invoke(runner, [
                "generate", "--auto", "-t", "docker", "-n", "Stack", "-i", "stack",
                "--bundle", "micro_3_0",
            ])

            assert result.exit_code == 1
            assert "bundle_id" in result.output
            assert not Path("deployment-docker.config.yml").exists()

    def test_missing_instance(self, runner):
        with runner.isolated_filesystem():
            result = invoke(runner, ["generate", "--auto", "-t", "lamp", "-n", "Shop"])

            assert result.exit_code == 1
            assert "instance_name" in result.output

    def test_keep_existing(self, runner):
        with runner.isolated_filesystem():
            Path("deployment-lamp.config.yml").write_text("mine: true\n")

            result = invoke(runner, [
                "generate", "--auto", "-t", "lamp", "-n", "Shop", "-i", "shop",
                "--keep-existing",
            ])

            assert result.exit_code == 1
            assert Path("deployment-lamp.config.yml").read_text() == "mine: true\n"

    def test_trust_policy_with_account_id(self, runner):
        with runner.isolated_filesystem():
            result = invoke(runner, [
                "generate", "--auto", "-t", "python", "-n", "API", "-i", "api",
                "--repo", "acme/api", "--account-id", "123456789012",
            ])

            assert result.exit_code == 0, result.output
            assert Path("trust-policy-GitHubActions-python-deployment.json").is_file()

    def test_sample_application(self, runner):
        with runner.isolated_filesystem():
            result = invoke(runner, ["generate", "--auto", "-t", "nginx", "-n", "Site", "-i", "site"])

            assert result.exit_code == 0, result.output
            assert "Site" in Path("example-nginx-app/index.html").read_text()
            assert "example-nginx-app" in result.output

    def test_no_app(self, runner):
        with runner.isolated_filesystem():
            result = invoke(runner, [
                "generate", "--auto", "-t", "nginx", "-n", "Site", "-i", "site", "--no-app",
            ])

            assert result.exit_code == 0, result.output
            assert not Path("example-nginx-app").exists()


class TestGenerateInteractive:

    def test_accepting_defaults(self, runner):
        """Test that pressing enter through the wizard produces a Node.js setup."""
        with runner.isolated_filesystem():
            result = invoke(runner, ["generate"], input="\n" * 20)

            assert result.exit_code == 0, result.output
            assert Path("deployment-nodejs.config.yml").is_file()

    def test_cancel(self, runner):
        with runner.isolated_filesystem():
            result = invoke(runner, ["generate"], input="\n" * 13 + "n\n")

            assert result.exit_code == 0
            assert "cancelled" in result.output
            assert not Path("deployment-nodejs.config.yml").exists()

    def test_flags_become_wizard_defaults(self, runner):
        """Test that --db-external and --bucket survive pressing enter at their prompts."""
        with runner.isolated_filesystem():
            result = invoke(runner, [
                "generate", "--database", "mysql", "--db-external", "--rds-name", "db-x",
                "--bucket", "--bucket-name", "files",
            ], input="\n" * 25)

            assert result.exit_code == 0, result.output
            config = yaml.safe_load(Path("deployment-nodejs.config.yml").read_text())
            assert config["dependencies"]["mysql"]["external"] is True
            assert config["dependencies"]["mysql"]["rds"]["database_name"] == "db-x"
            assert config["lightsail"]["bucket"]["name"] == "files"


class TestValidate:

    def test_valid_file(self, runner):
        with runner.isolated_filesystem():
            invoke(runner, ["generate", "--auto", "-t", "nodejs", "-n", "App", "-i", "app"])

            result = invoke(runner, ["validate", "deployment-nodejs.config.yml"])

            assert result.exit_code == 0
            assert "is valid" in result.output

    def test_invalid_file(self, runner):
        with runner.isolated_filesystem():
            invoke(runner, ["generate", "--auto", "-t", "nodejs", "-n", "App", "-i", "app"])
            path = Path("deployment-nodejs.config.yml")
            document = yaml.safe_load(path.read_text())
            document["dependencies"]["firewall"]["config"]["deny_all_other"] = False
            path.write_text(yaml.safe_dump(document))

            result = invoke(runner, ["validate", str(path)])

            assert result.exit_code == 1
            assert "1 problem" in result.output

    def test_missing_file(self, runner):
        with runner.isolated_filesystem():
            result = invoke(runner, ["validate", "nope.yml"])

            assert result.exit_code == 1
            assert "not found" in result.output


def test_collect_params_converts_flags():
    params = collect_params(environ={}, app_type="lamp", db_external=False, bucket=True,
                            region=None)

    assert params == {"APP_TYPE": "lamp", "DB_EXTERNAL": "false", "ENABLE_BUCKET": "true"}


def test_dual_mode_direct_call():
    """Test that a dual-mode command called from code gets a default context."""
    @dual_mode_command
    def command(ctx, value):
        return ctx.obj.verbose, value

    assert command(value=3) == (False, 3)
