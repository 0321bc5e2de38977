"""
File backed site inventory.

The inventory describes the sites configured on the web server and
their bindings. It is read from a JSON document of the form:

    {
        "sites": [
            {
                "id": 1,
                "name": "Default Web Site",
                "physical_path": "C:\\inetpub\\wwwroot",
                "bindings": [
                    {"host": "www.example.com", "protocol": "http", "port": 80}
                ]
            }
        ]
    }

Every query produces fresh SiteTarget objects, so callers are free to
modify what they receive without affecting later snapshots.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from sitetargets.models import SiteTarget, unique_hostnames
from sitetargets.utils import is_valid_hostname, read_json_file

# Set up module logger
logger = logging.getLogger(__name__)


class BindingRecord(BaseModel):
    host: str = ""
    protocol: str = "http"
    port: Optional[int] = None


class SiteRecord(BaseModel):
    id: int = Field(ge=0)
    name: str
    physical_path: Optional[str] = None
    bindings: List[BindingRecord] = Field(default_factory=list)


class InventoryDocument(BaseModel):
    sites: List[SiteRecord] = Field(default_factory=list)


class SiteInventory:
    """
    Provides site targets for the sites configured on the web server.

    Args:
        sites: Site records making up the inventory
    """

    def __init__(self, sites: List[SiteRecord]) -> None:
        self._sites = list(sites)

    @classmethod
    def from_file(cls, file_path: str) -> "SiteInventory":
        """
        Load an inventory from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            json.JSONDecodeError: If the file contains invalid JSON
            pydantic.ValidationError: If the document does not describe sites
        """
        document = InventoryDocument.model_validate(read_json_file(file_path))
        logger.debug(f"Loaded {len(document.sites)} sites from {file_path}")
        return cls(document.sites)

    def get_sites(self, hide_https: bool = False, log_invalid: bool = True) -> List[SiteTarget]:
        """
        Return one site target per site, ordered by site name.

        Sites without any usable hostname are marked hidden. With
        hide_https, sites whose hostnames all have an https binding
        already are marked hidden as well.

        Args:
            hide_https: Hide sites that are already fully secured
            log_invalid: Log a warning for each malformed binding host

        Returns:
            List of SiteTarget objects
        """
        targets = []
        for site in sorted(self._sites, key=lambda s: (s.name.lower(), s.id)):
            hostnames = []
            secured = set()
            for binding in site.bindings:
                host = binding.host.strip()
                if not host:
                    continue
                if not is_valid_hostname(host):
                    if log_invalid:
                        logger.warning(f"Site {site.id} ({site.name}) has invalid binding host '{host}'")
                    continue
                hostnames.append(host)
                if binding.protocol.lower() == "https":
                    secured.update(unique_hostnames([host]))

            hostnames = unique_hostnames(hostnames)
            hidden = not hostnames
            if hide_https and hostnames and all(h in secured for h in hostnames):
                hidden = True

            targets.append(SiteTarget(
                site_id=site.id,
                hostnames=hostnames,
                display_host=site.name,
                web_root_path=site.physical_path,
                hidden=hidden,
                host_is_dns=False,
                iis=True,
            ))
        return targets

    def visible_sites(self, hide_https: bool = False) -> List[SiteTarget]:
        """Return the site targets that are not hidden."""
        return [site for site in self.get_sites(hide_https, True) if not site.hidden]
