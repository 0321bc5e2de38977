"""
Splitting and refreshing combined targets.

A combined target persisted by an earlier run is matched against a
fresh inventory snapshot to recover the individual site targets it was
built from. Sites that have disappeared since are dropped silently when
splitting; this is normal drift between stored state and the server,
not an error.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Set

from sitetargets.models import CombinedSites, SiteTarget
from sitetargets.selection import build_combined_target

# Set up module logger
logger = logging.getLogger(__name__)


def decode_site_ids(combined: SiteTarget) -> Set[int]:
    """
    Return the member site ids of a combined target.

    Explicit membership is used when present; otherwise the comma joined
    ids stored in display_host are decoded. Tokens that are not ids are
    ignored.

    Examples:
        >>> decode_site_ids(SiteTarget(site_id=-1, display_host="2,5"))
        {2, 5}
    """
    scope = combined.scope
    if isinstance(scope, CombinedSites):
        return set(scope.site_ids)
    return {scope.site_id}


def split_target(combined: SiteTarget, candidates: Sequence[SiteTarget]) -> List[SiteTarget]:
    """
    Split a combined target into its member site targets.

    Candidates whose site id belongs to the combined target are kept in
    their original order. Each one receives its own copy of the
    combined target's shared settings (ports, validation, installation
    and FTP site ids, exclusions, validation plugin and option bundles),
    overwriting whatever it had. Sites left without any eligible
    hostname after exclusions are dropped.

    Args:
        combined: Previously combined target
        candidates: Current site targets from the inventory

    Returns:
        List of member site targets, possibly empty
    """
    site_ids = decode_site_ids(combined)

    result = []
    for candidate in candidates:
        if candidate.site_id not in site_ids:
            continue
        site = replace(candidate, settings=combined.settings.copy())
        if not site.get_hosts(unicode=True, allow_wildcard=True):
            logger.debug(f"Skipping site {site.site_id}: no hostnames left after exclusions")
            continue
        result.append(site)

    return result


def refresh_target(scheduled: SiteTarget, candidates: Sequence[SiteTarget]) -> Optional[SiteTarget]:
    """
    Re-check a scheduled combined target against the current inventory.

    Member sites that no longer exist are logged and removed. The
    hostnames of the remaining members are taken from the inventory so
    that bindings added or removed since the target was created are
    picked up. The shared settings are kept, and so is the common name
    unless it no longer belongs to any remaining site, in which case it
    is cleared.

    Non-combined targets are returned unchanged.

    Args:
        scheduled: Combined target stored by an earlier run
        candidates: Current site targets from the inventory

    Returns:
        The refreshed target, or None when none of its sites exist anymore
    """
    if not scheduled.is_combined:
        return scheduled

    site_ids = decode_site_ids(scheduled)
    remaining = [candidate for candidate in candidates if candidate.site_id in site_ids]

    found = {site.site_id for site in remaining}
    for missing in sorted(site_ids - found):
        logger.warning(f"SiteId '{missing}' no longer exists")

    if not remaining:
        logger.warning(f"None of the sites of {scheduled.display_host} can be found")
        return None

    refreshed = build_combined_target(remaining)
    refreshed.common_name = scheduled.common_name
    refreshed.settings = scheduled.settings.copy()
    if not refreshed.is_common_name_valid():
        logger.warning(f"Clearing common name '{refreshed.common_name}' of {refreshed.display_host}")
        refreshed.common_name = None
    return refreshed
