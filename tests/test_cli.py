"""
Tests for the command-line interface.
"""

from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from cloudflare_pagerules.cli import cli
from cloudflare_pagerules.errors import DecodeError, TransportError
from cloudflare_pagerules.models import (
    PageRule,
    PageRuleDetailResponse,
    PageRulesResponse,
    PageRuleStatus,
    PageRuleTarget,
    StringAction,
    make_action,
)

NO_CREDENTIALS = {
    "CLOUDFLARE_API_TOKEN": None,
    "CLOUDFLARE_EMAIL": None,
    "CLOUDFLARE_API_KEY": None,
    "CLOUDFLARE_PAGERULES_API__API_TOKEN": None,
    "CLOUDFLARE_PAGERULES_API__API_EMAIL": None,
    "CLOUDFLARE_PAGERULES_API__API_KEY": None,
}


@pytest.fixture
def cli_runner():
    """Fixture providing a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def sample_rule():
    """Fixture providing a stored rule."""
    return PageRule(
        id="r1",
        targets=[PageRuleTarget.url_matches("*ex.com/*")],
        actions=[make_action("ssl", "full")],
        priority=1,
        status="active",
    )


@pytest.fixture
def mock_api():
    """Fixture patching the operations class used by the CLI."""
    with patch("cloudflare_pagerules.cli.PageRulesAPI") as mock_api_class:
        api = Mock()
        mock_api_class.return_value = api
        yield api


def test_cli_version(cli_runner):
    """Test CLI version command."""
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output.lower()


def test_actions_command(cli_runner):
    """Test listing the known action ids."""
    result = cli_runner.invoke(cli, ["actions"])

    assert result.exit_code == 0
    assert "forwarding_url" in result.output
    assert "Browser Cache TTL" in result.output


def test_command_requires_credentials(cli_runner):
    """Test that API commands require a token or an email and key."""
    result = cli_runner.invoke(cli, ["list", "zone1"], env=NO_CREDENTIALS)

    assert result.exit_code != 0
    assert "api-token" in result.output.lower()


@patch("cloudflare_pagerules.cli.configure_logging")
@patch("cloudflare_pagerules.cli.CloudflareClient")
def test_command_falls_back_to_settings(mock_client_class, mock_configure_logging, cli_runner, mock_api):
    """Test that CLOUDFLARE_PAGERULES_* variables configure the CLI when no option is given."""
    mock_api.list_page_rules_response.return_value = PageRulesResponse(success=True, result=[])
    env = dict(
        NO_CREDENTIALS,
        CLOUDFLARE_PAGERULES_API__API_TOKEN="settings-token",
        CLOUDFLARE_PAGERULES_API__TIMEOUT="5",
        CLOUDFLARE_PAGERULES_DEBUG="true",
    )

    result = cli_runner.invoke(cli, ["list", "zone1"], env=env)

    assert result.exit_code == 0
    config = mock_client_class.call_args.args[0]
    assert config.api_token == "settings-token"
    assert config.timeout == 5.0
    mock_configure_logging.assert_called_once_with(True)


@patch("cloudflare_pagerules.cli.CloudflareClient")
def test_options_take_precedence_over_settings(mock_client_class, cli_runner, mock_api):
    """Test that credential options ignore the settings variables."""
    mock_api.list_page_rules_response.return_value = PageRulesResponse(success=True, result=[])
    env = dict(NO_CREDENTIALS, CLOUDFLARE_PAGERULES_API__API_TOKEN="settings-token")

    result = cli_runner.invoke(cli, ["list", "zone1", "--api-token", "option-token"], env=env)

    assert result.exit_code == 0
    assert mock_client_class.call_args.args[0].api_token == "option-token"


def test_list_command(cli_runner, mock_api, sample_rule):
    """Test listing rules as a table."""
    mock_api.list_page_rules_response.return_value = PageRulesResponse(success=True, result=[sample_rule])

    result = cli_runner.invoke(cli, ["list", "zone1", "--api-token", "test-token"])

    assert result.exit_code == 0
    mock_api.list_page_rules_response.assert_called_once_with("zone1")
    assert "r1" in result.output
    assert "SSL" in result.output


def test_list_command_empty(cli_runner, mock_api):
    """Test listing a zone without rules."""
    mock_api.list_page_rules_response.return_value = PageRulesResponse(success=True, result=[])

    result = cli_runner.invoke(cli, ["list", "zone1", "--api-token", "test-token"])

    assert result.exit_code == 0
    assert "No page rules found" in result.output


def test_get_command(cli_runner, mock_api, sample_rule):
    """Test showing one rule as JSON."""
    mock_api.get_page_rule_response.return_value = PageRuleDetailResponse(success=True, result=sample_rule)

    result = cli_runner.invoke(cli, ["get", "zone1", "r1", "--api-token", "test-token"])

    assert result.exit_code == 0
    mock_api.get_page_rule_response.assert_called_once_with("zone1", "r1")
    assert '"*ex.com/*"' in result.output


def test_get_command_handles_decode_error(cli_runner, mock_api):
    """Test error handling in the get command."""
    mock_api.get_page_rule_response.side_effect = DecodeError("response decode failed", ValueError("bad json"))

    result = cli_runner.invoke(cli, ["get", "zone1", "r1", "--api-token", "test-token"])

    assert result.exit_code == 1
    assert "error" in result.output.lower()
    assert "response decode failed" in result.output


def test_command_handles_api_failure_envelope(cli_runner, mock_api):
    """Test that success: false is reported with the API's errors."""
    mock_api.get_page_rule_response.return_value = PageRuleDetailResponse(
        success=False, errors=["zone not found"]
    )

    result = cli_runner.invoke(cli, ["get", "zone1", "r1", "--api-token", "test-token"])

    assert result.exit_code == 1
    assert "zone not found" in result.output


def test_create_command(cli_runner, mock_api, sample_rule):
    """Test creating a rule from command line options."""
    mock_api.create_page_rule_response.return_value = PageRuleDetailResponse(
        success=True, result=sample_rule.model_copy(update={"id": "new1"})
    )

    result = cli_runner.invoke(
        cli,
        [
            "create", "zone1",
            "--api-token", "test-token",
            "--url", "*example.com/images/*",
            "--action", "cache_level=bypass",
            "--action", "browser_cache_ttl=3600",
            "--priority", "2",
        ]
    )

    assert result.exit_code == 0
    assert "new1" in result.output
    zone_id, rule = mock_api.create_page_rule_response.call_args.args
    assert zone_id == "zone1"
    assert rule.targets == [PageRuleTarget.url_matches("*example.com/images/*")]
    assert rule.actions[0] == StringAction(id="cache_level", value="bypass")
    assert rule.actions[1].value == 3600
    assert rule.priority == 2
    assert rule.status == PageRuleStatus.ACTIVE


def test_create_command_rejects_bad_action(cli_runner, mock_api):
    """Test that an action value of the wrong type is a usage error."""
    result = cli_runner.invoke(
        cli,
        [
            "create", "zone1",
            "--api-token", "test-token",
            "--url", "*example.com/*",
            "--action", "cache_level=5",
        ]
    )

    assert result.exit_code == 2
    mock_api.create_page_rule_response.assert_not_called()


def test_set_status_command(cli_runner, mock_api, sample_rule):
    """Test pausing a rule with a partial update."""
    mock_api.change_page_rule_response.return_value = PageRuleDetailResponse(
        success=True, result=sample_rule.model_copy(update={"status": PageRuleStatus.PAUSED})
    )

    result = cli_runner.invoke(cli, ["set-status", "zone1", "r1", "paused", "--api-token", "test-token"])

    assert result.exit_code == 0
    zone_id, rule_id, rule = mock_api.change_page_rule_response.call_args.args
    assert (zone_id, rule_id) == ("zone1", "r1")
    assert rule.to_request_body(partial=True) == {"status": "paused"}


def test_delete_command(cli_runner, mock_api):
    """Test deleting a rule."""
    mock_api.delete_page_rule_response.return_value = PageRuleDetailResponse(success=True)

    result = cli_runner.invoke(cli, ["delete", "zone1", "r1", "--api-token", "test-token"])

    assert result.exit_code == 0
    mock_api.delete_page_rule_response.assert_called_once_with("zone1", "r1")
    assert "Deleted page rule r1" in result.output


def test_delete_command_handles_transport_error(cli_runner, mock_api):
    """Test error handling when the API cannot be reached."""
    mock_api.delete_page_rule_response.side_effect = TransportError("request failed", OSError("unreachable"))

    result = cli_runner.invoke(cli, ["delete", "zone1", "r1", "--api-token", "test-token"])

    assert result.exit_code == 1
    assert "request failed" in result.output
