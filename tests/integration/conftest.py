"""
Fixtures for integration tests.

This module provides fixtures for running the full combine, store and
split workflow through the CLI and through the library entry points.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from sitetargets.inventory import SiteInventory


@pytest.fixture
def cli_runner():
    """Provide a Click CLI runner for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def large_inventory_data():
    """Inventory with overlapping hostnames across many sites."""
    sites = []
    for site_id in range(1, 11):
        bindings = [
            {"host": f"site{site_id}.example.com", "protocol": "http", "port": 80},
            {"host": "shared.example.com", "protocol": "http", "port": 80},
        ]
        if site_id % 3 == 0:
            bindings.append({"host": f"*.site{site_id}.example.com", "protocol": "https", "port": 443})
        sites.append({
            "id": site_id,
            "name": f"Site {site_id:02d}",
            "physical_path": f"/srv/site{site_id}",
            "bindings": bindings,
        })
    return {"sites": sites}


@pytest.fixture
def large_inventory_file(tmp_path, large_inventory_data) -> Path:
    path = tmp_path / "inventory.json"
    path.write_text(json.dumps(large_inventory_data))
    return path


@pytest.fixture
def large_inventory(large_inventory_file) -> SiteInventory:
    return SiteInventory.from_file(str(large_inventory_file))
