"""
Site selection and combination.

This module turns a selection expression typed by an operator, or read
from the configuration, into one combined target covering the hostnames
of every selected site.

The selection grammar is:
- 's' (any case, surrounding whitespace ignored) selects all candidates
- otherwise a comma separated list of site ids, e.g. '2,5,9'

Problems with individual tokens are recoverable: they are logged as
warnings, collected, and the token is skipped. Only a selection that
ends up empty fails, and even then no exception is raised; the result
simply carries no target.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from sitetargets.models import COMBINED_SITE_ID, SharedSettings, SiteTarget, encode_site_ids

# Set up module logger
logger = logging.getLogger(__name__)

# Selection expression that stands for every candidate
ALL_SITES = "s"


class SelectionError(Exception):
    """Base class for problems found while resolving a selection."""


class TokenParseError(SelectionError):
    """A selection token is not a site id."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Invalid SiteId '{token}', should be a number")


class TokenNotFoundError(SelectionError):
    """A selection token is a site id that matches no candidate."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"SiteId '{token}' not found")


class NoSelectionError(SelectionError):
    """No candidate was selected at all."""

    def __init__(self) -> None:
        super().__init__("No valid sites selected")


@dataclass
class SelectionResult:
    """
    Outcome of resolving a selection expression against candidates.

    Attributes:
        selected: Selected site targets, in selection order
        errors: Recoverable and terminal problems, in the order found
    """
    selected: List[SiteTarget] = field(default_factory=list)
    errors: List[SelectionError] = field(default_factory=list)

    @property
    def site_ids(self) -> List[int]:
        return [target.site_id for target in self.selected]


@dataclass
class CombineResult:
    """
    Outcome of combining a selection into one target.

    The target is None exactly when a NoSelectionError was recorded.
    Callers should abort the selection flow in that case rather than
    retry automatically.
    """
    target: Optional[SiteTarget] = None
    errors: List[SelectionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.target is not None


def _record(errors: List[SelectionError], error: SelectionError) -> None:
    logger.warning(str(error))
    errors.append(error)


def is_all_selection(selection: Optional[str]) -> bool:
    """
    Check whether a selection expression selects every candidate.

    Examples:
        >>> is_all_selection(" S ")
        True
        >>> is_all_selection("1,2")
        False
    """
    return selection is not None and selection.strip().lower() == ALL_SITES


def _iter_tokens(selection: Optional[str]) -> Iterator[Tuple[str, Optional[int]]]:
    """Yield each distinct trimmed token with its site id, or None if it is not one."""
    seen_tokens = set()

    expression = (selection or "").strip().strip(',')
    for raw_token in expression.split(','):
        token = raw_token.strip()
        if token in seen_tokens:
            continue
        seen_tokens.add(token)

        if token.isascii() and token.isdigit():
            yield token, int(token)
        else:
            yield token, None


def parse_selection(selection: Optional[str]) -> Tuple[List[int], List[SelectionError]]:
    """
    Parse a comma separated list of site ids.

    Leading and trailing commas are ignored, tokens are trimmed and
    repeated ids collapse into one. Tokens that are not non-negative
    integers are reported as TokenParseError and skipped.

    Args:
        selection: Selection expression such as '2,5,9'

    Returns:
        Tuple of unique site ids in first-seen order and parse errors

    Examples:
        >>> ids, errors = parse_selection("2, 2,5,")
        >>> ids
        [2, 5]
        >>> [str(e) for e in parse_selection("x,3")[1]]
        ["Invalid SiteId 'x', should be a number"]
    """
    site_ids: List[int] = []
    errors: List[SelectionError] = []

    for token, site_id in _iter_tokens(selection):
        if site_id is None:
            _record(errors, TokenParseError(token))
        elif site_id not in site_ids:
            site_ids.append(site_id)

    return site_ids, errors


def resolve_selection(candidates: Sequence[SiteTarget], selection: Optional[str]) -> SelectionResult:
    """
    Resolve a selection expression against candidate site targets.

    Tokens are checked one at a time, so warnings follow the order in
    which the tokens were typed. Unknown ids are reported with the token
    as it was entered.

    Args:
        candidates: Site targets available for selection
        selection: 's' for all candidates or a comma separated id list

    Returns:
        SelectionResult with the selected targets and every problem found.
        A NoSelectionError is appended when nothing was selected.
    """
    result = SelectionResult()

    if is_all_selection(selection):
        result.selected.extend(candidates)
    else:
        # First candidate wins when an id appears more than once
        by_id: Dict[int, SiteTarget] = {}
        for candidate in candidates:
            by_id.setdefault(candidate.site_id, candidate)

        resolved = set()
        for token, site_id in _iter_tokens(selection):
            if site_id is None:
                _record(result.errors, TokenParseError(token))
            elif site_id in resolved:
                continue
            elif site_id not in by_id:
                resolved.add(site_id)
                _record(result.errors, TokenNotFoundError(token))
            else:
                resolved.add(site_id)
                result.selected.append(by_id[site_id])

    if not result.selected:
        _record(result.errors, NoSelectionError())

    return result


def build_combined_target(selected: Sequence[SiteTarget]) -> SiteTarget:
    """
    Build the combined target for a list of selected sites.

    The combined target uses the COMBINED_SITE_ID sentinel, lists its
    members explicitly, encodes them in display_host and covers the
    union of their hostnames in first-seen order. Request-scope
    settings are left empty for the caller to attach.

    Args:
        selected: Site targets to combine

    Returns:
        New combined SiteTarget
    """
    site_ids = [target.site_id for target in selected]
    hostnames = [hostname for target in selected for hostname in target.hostnames]
    return SiteTarget(
        site_id=COMBINED_SITE_ID,
        hostnames=hostnames,
        display_host=encode_site_ids(site_ids),
        host_is_dns=False,
        iis=True,
        member_site_ids=tuple(site_ids),
        settings=SharedSettings(),
    )


def combine_targets(candidates: Sequence[SiteTarget], selection: Optional[str]) -> CombineResult:
    """
    Combine the selected candidates into one target.

    This is the main entry point for the combiner. Invalid and unknown
    site ids are skipped with a warning; when nothing remains selected
    the result carries no target.

    Args:
        candidates: Site targets available for selection
        selection: 's' for all candidates or a comma separated id list

    Returns:
        CombineResult holding the combined target (or None) and the errors

    Examples:
        >>> sites = [SiteTarget(site_id=2, hostnames=["a.com"]),
        ...          SiteTarget(site_id=5, hostnames=["a.com", "b.com"])]
        >>> result = combine_targets(sites, "5,2")
        >>> result.target.display_host
        '5,2'
        >>> result.target.hostnames
        ['a.com', 'b.com']
    """
    resolved = resolve_selection(candidates, selection)
    if not resolved.selected:
        return CombineResult(target=None, errors=resolved.errors)

    target = build_combined_target(resolved.selected)
    logger.debug(f"Combined sites {target.display_host} into {len(target.hostnames)} hostnames")
    return CombineResult(target=target, errors=resolved.errors)
