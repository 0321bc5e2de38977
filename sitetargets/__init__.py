"""Site targets - combine web server sites into one certificate request and split them again."""

__version__ = "0.1.0"

# Public API exports
from sitetargets.models import COMBINED_SITE_ID, CombinedSites, SharedSettings, SingleSite, SiteTarget
from sitetargets.selection import (
    CombineResult,
    NoSelectionError,
    SelectionError,
    TokenNotFoundError,
    TokenParseError,
    combine_targets,
    resolve_selection,
)
from sitetargets.splitter import decode_site_ids, refresh_target, split_target
