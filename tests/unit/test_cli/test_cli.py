"""
Unit tests for the CLI module.

This module contains tests for the command-line interface,
including option handling, command execution and error reporting.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from sitetargets.cli import cli
from sitetargets.models import COMBINED_SITE_ID


@pytest.fixture
def runner():
    return CliRunner()


class TestCLI:
    """Tests for the CLI framework."""

    def test_cli_shows_help(self, runner):
        """Test that the CLI displays help information."""
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'Choose web server sites to cover with a single certificate' in result.output
        for command in ('list-sites', 'combine', 'split', 'refresh', 'version'):
            assert command in result.output

    def test_version_command(self, runner):
        """Test that the version command displays version information."""
        result = runner.invoke(cli, ['version'])
        assert result.exit_code == 0
        assert 'Site-targets version:' in result.output
        assert 'Python version:' in result.output
        assert 'Click version:' in result.output

    def test_combine_command_help(self, runner):
        """Test that the combine command shows help information."""
        result = runner.invoke(cli, ['combine', '--help'])
        assert result.exit_code == 0
        assert 'Combine the bindings of several sites into one target' in result.output
        assert '--siteid' in result.output
        assert '--exclude' in result.output
        assert '--output' in result.output

    def test_combine_requires_output(self, runner):
        """Test that the combine command requires an output file."""
        result = runner.invoke(cli, ['combine'])
        assert result.exit_code != 0
        assert 'Missing option' in result.output


class TestListSites:
    """Tests for the list-sites command."""

    def test_lists_visible_sites(self, runner, inventory_file):
        result = runner.invoke(cli, ['list-sites', '--inventory', inventory_file])
        assert result.exit_code == 0
        assert 'Default Web Site' in result.output
        assert 'Shop' in result.output
        assert 'Intranet' not in result.output

    def test_all_includes_hidden_sites(self, runner, inventory_file):
        result = runner.invoke(cli, ['list-sites', '--inventory', inventory_file, '--all'])
        assert result.exit_code == 0
        assert 'Intranet' in result.output

    def test_missing_inventory_option(self, runner, monkeypatch):
        monkeypatch.delenv('SITETARGETS_INVENTORY', raising=False)
        result = runner.invoke(cli, ['list-sites'])
        assert result.exit_code == 1
        assert 'Missing required option: inventory' in result.output

    def test_inventory_from_environment(self, runner, inventory_file, monkeypatch):
        monkeypatch.setenv('SITETARGETS_INVENTORY', inventory_file)
        result = runner.invoke(cli, ['list-sites'])
        assert result.exit_code == 0
        assert 'Blog' in result.output

    def test_missing_inventory_file(self, runner, tmp_path):
        result = runner.invoke(cli, ['list-sites', '--inventory', str(tmp_path / 'none.json')])
        assert result.exit_code == 1
        assert 'File access problem' in result.output


class TestCombine:
    """Tests for the combine command."""

    def test_combine_with_site_ids(self, runner, inventory_file, tmp_path):
        output = tmp_path / 'target.json'
        result = runner.invoke(cli, [
            'combine', '--inventory', inventory_file,
            '--siteid', '2,5', '--exclude', 'www.example.com',
            '--output', str(output),
        ])

        assert result.exit_code == 0
        assert 'Combined target for sites: 2,5' in result.output
        assert f'Target saved to {output}' in result.output

        data = json.loads(output.read_text())
        assert data['site_id'] == COMBINED_SITE_ID
        assert data['host'] == '2,5'
        assert data['settings']['exclude_bindings'] == 'www.example.com'

    def test_combine_nothing_selected(self, runner, inventory_file, tmp_path):
        output = tmp_path / 'target.json'
        result = runner.invoke(cli, [
            'combine', '--inventory', inventory_file, '--siteid', '7', '--output', str(output),
        ])

        assert result.exit_code == 1
        assert 'No valid target could be created' in result.output
        assert not output.exists()

    def test_combine_interactive(self, runner, inventory_file, tmp_path):
        output = tmp_path / 'target.json'
        result = runner.invoke(
            cli,
            ['combine', '--inventory', inventory_file, '--output', str(output)],
            input='9,2\nwww.example.com\n',
        )

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data['host'] == '9,2'
        assert data['settings']['exclude_bindings'] == 'www.example.com'

    def test_combine_unwritable_output(self, runner, inventory_file, tmp_path):
        output = tmp_path / 'missing' / 'target.json'
        result = runner.invoke(cli, [
            'combine', '--inventory', inventory_file, '--siteid', 's', '--output', str(output),
        ])
        assert result.exit_code == 1
        assert 'Cannot write to output file path' in result.output


class TestSplitAndRefresh:
    """Tests for the split and refresh commands."""

    @pytest.fixture
    def target_file(self, runner, inventory_file, tmp_path):
        output = tmp_path / 'target.json'
        result = runner.invoke(cli, [
            'combine', '--inventory', inventory_file, '--siteid', '5,2', '--output', str(output),
        ])
        assert result.exit_code == 0
        return str(output)

    def test_split_to_file(self, runner, inventory_file, target_file, tmp_path):
        output = tmp_path / 'split.json'
        result = runner.invoke(cli, [
            'split', '--target', target_file, '--inventory', inventory_file, '--output', str(output),
        ])

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data['total_targets'] == 2
        assert [t['site_id'] for t in data['targets']] == [2, 5]

    def test_split_text_format(self, runner, inventory_file, target_file):
        result = runner.invoke(cli, [
            'split', '--target', target_file, '--inventory', inventory_file, '--format', 'text',
        ])

        assert result.exit_code == 0
        assert '2 Default Web Site: example.com, www.example.com' in result.output
        assert '5 Shop: shop.example.com' in result.output

    def test_split_invalid_target_file(self, runner, inventory_file, tmp_path):
        target = tmp_path / 'target.json'
        target.write_text('{not json')
        result = runner.invoke(cli, ['split', '--target', str(target), '--inventory', inventory_file])

        assert result.exit_code == 1
        assert 'Invalid JSON' in result.output

    def test_refresh_drops_removed_sites(self, runner, inventory_data, target_file, tmp_path):
        inventory_data['sites'] = [s for s in inventory_data['sites'] if s['id'] != 5]
        current = tmp_path / 'current.json'
        current.write_text(json.dumps(inventory_data))
        output = tmp_path / 'refreshed.json'

        result = runner.invoke(cli, [
            'refresh', '--target', target_file, '--inventory', str(current), '--output', str(output),
        ])

        assert result.exit_code == 0
        assert json.loads(output.read_text())['member_site_ids'] == [2]

    def test_refresh_without_sites_fails(self, runner, target_file, tmp_path):
        empty = tmp_path / 'empty.json'
        empty.write_text(json.dumps({'sites': []}))
        before = Path(target_file).read_text()

        result = runner.invoke(cli, ['refresh', '--target', target_file, '--inventory', str(empty)])

        assert result.exit_code == 1
        assert 'exist anymore' in result.output
        assert Path(target_file).read_text() == before
