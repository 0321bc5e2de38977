"""
Global pytest configuration and shared fixtures.

This file provides fixtures for all test modules: a small set of site
targets, the inventory document describing the same sites, and a
fixture that restores the logging setup changed by CLI commands.
"""
import json
import logging
from typing import Any, Dict, List

import pytest

from sitetargets.models import SiteTarget


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handler and level changes made by configure_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def sample_sites() -> List[SiteTarget]:
    """Return site targets for sites 2, 5 and 9, in inventory order."""
    return [
        SiteTarget(
            site_id=9,
            hostnames=["blog.example.com", "www.example.com"],
            display_host="Blog",
            web_root_path="/srv/blog",
        ),
        SiteTarget(
            site_id=2,
            hostnames=["example.com", "www.example.com"],
            display_host="Default Web Site",
            web_root_path="/srv/default",
        ),
        SiteTarget(
            site_id=5,
            hostnames=["shop.example.com", "example.com"],
            display_host="Shop",
            web_root_path="/srv/shop",
        ),
    ]


@pytest.fixture
def inventory_data() -> Dict[str, Any]:
    """Return an inventory document with three visible sites and one empty site."""
    return {
        "sites": [
            {
                "id": 2,
                "name": "Default Web Site",
                "physical_path": "/srv/default",
                "bindings": [
                    {"host": "example.com", "protocol": "http", "port": 80},
                    {"host": "www.example.com", "protocol": "http", "port": 80},
                ],
            },
            {
                "id": 5,
                "name": "Shop",
                "physical_path": "/srv/shop",
                "bindings": [
                    {"host": "shop.example.com", "protocol": "http", "port": 80},
                    {"host": "shop.example.com", "protocol": "https", "port": 443},
                ],
            },
            {
                "id": 9,
                "name": "Blog",
                "physical_path": "/srv/blog",
                "bindings": [
                    {"host": "blog.example.com", "protocol": "http", "port": 80},
                ],
            },
            {
                "id": 12,
                "name": "Intranet",
                "physical_path": "/srv/intranet",
                "bindings": [
                    {"host": "", "protocol": "http", "port": 8080},
                ],
            },
        ]
    }


@pytest.fixture
def inventory_file(tmp_path, inventory_data) -> str:
    """Write the inventory document to a temporary file and return its path."""
    path = tmp_path / "sites.json"
    path.write_text(json.dumps(inventory_data))
    return str(path)
