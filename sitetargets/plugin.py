"""
Target plugin for certificates that cover several sites.

The plugin ties the combiner and the splitter to an inventory and to
an input service. It offers the four entry points a renewal workflow
needs: building a target from options (unattended), building one
interactively, refreshing a scheduled target and splitting it into
per-site targets.
"""

import logging
from enum import IntEnum
from typing import List, Optional, Protocol, Sequence, Tuple

from sitetargets.config import Options, try_get_required_option
from sitetargets.inventory import SiteInventory
from sitetargets.models import SiteTarget
from sitetargets.selection import combine_targets
from sitetargets.splitter import refresh_target, split_target

logger = logging.getLogger(__name__)

SELECTION_PROMPT = "Enter a comma separated list of site IDs, or 'S' to run for all sites"
EXCLUSION_PROMPT = "Press enter to include all listed hosts, or type a comma-separated lists of exclusions"
COMMON_NAME_PROMPT = "Select the primary hostname (common name)"

# (value, label, command) entries shown in a paged list
Choice = Tuple[str, str, Optional[str]]


class RunLevel(IntEnum):
    SIMPLE = 1
    ADVANCED = 2


class InputService(Protocol):
    """
    Interface used to talk to the operator.

    Implementations decide how lists are paged and how answers are read.
    """

    def write_paged_list(self, choices: Sequence[Choice]) -> None:
        ...

    def request_string(self, prompt: str) -> str:
        ...

    def choose_from(self, prompt: str, options: Sequence[str]) -> str:
        ...


def site_choices(targets: Sequence[SiteTarget]) -> List[Choice]:
    """Describe site targets as choices for a paged list."""
    return [
        (str(t.site_id), f"{t.display_host} ({len(t.hostnames)} bindings) [@{t.web_root_path}]", str(t.site_id))
        for t in targets
    ]


class SiteTargetPlugin:
    """
    SAN certificate for all bindings of multiple sites.

    Args:
        inventory: Provider of the current site targets
    """

    name = "IISSites"
    description = "SAN certificate for all bindings of multiple IIS sites"

    def __init__(self, inventory: SiteInventory) -> None:
        self.inventory = inventory

    def default(self, options: Options) -> Optional[SiteTarget]:
        """
        Build a combined target from options without asking anything.

        Raises:
            MissingOptionError: If no site id selection was given
        """
        raw_site_id = try_get_required_option("site_id", options.site_id)
        result = combine_targets(self.inventory.get_sites(False, False), raw_site_id)
        if result.target is None:
            return None

        target = result.target
        target.settings = options.shared_settings()
        target.common_name = options.common_name
        if not target.is_common_name_valid():
            return None
        return target

    def acquire(
        self,
        options: Options,
        input_service: InputService,
        run_level: RunLevel = RunLevel.SIMPLE,
    ) -> Optional[SiteTarget]:
        """
        Build a combined target by asking the operator.

        The visible sites are listed and the operator enters a selection.
        The resulting hostnames are then listed so that some of them can
        be excluded. In advanced mode the operator also picks the common
        name.
        """
        targets = self.inventory.visible_sites(options.hide_https)
        input_service.write_paged_list(site_choices(targets))
        selection = input_service.request_string(SELECTION_PROMPT).lower().strip()

        result = combine_targets(targets, selection)
        if result.target is None:
            return None

        target = result.target
        target.settings = options.shared_settings()
        input_service.write_paged_list([(host, "", None) for host in target.hostnames])
        exclusions = input_service.request_string(EXCLUSION_PROMPT).strip()
        target.settings.exclude_bindings = exclusions or None

        if run_level >= RunLevel.ADVANCED:
            self.ask_for_common_name(target, input_service)
        return target

    def ask_for_common_name(self, target: SiteTarget, input_service: InputService) -> None:
        hosts = target.get_hosts(unicode=True, allow_wildcard=True)
        if len(hosts) > 1:
            target.common_name = input_service.choose_from(COMMON_NAME_PROMPT, hosts)
        elif hosts:
            target.common_name = hosts[0]

    def refresh(self, scheduled: SiteTarget) -> Optional[SiteTarget]:
        """Re-check a scheduled target against the current inventory."""
        return refresh_target(scheduled, self.inventory.get_sites(False, False))

    def split(self, scheduled: SiteTarget) -> List[SiteTarget]:
        """Split a scheduled target into per-site targets."""
        return split_target(scheduled, self.inventory.get_sites(False, False))
