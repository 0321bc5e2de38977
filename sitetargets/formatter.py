"""
Output formatting module for the site targets toolkit.

This module renders lists of site targets, typically the result of
splitting a combined target, as JSON or plain text. It provides a
common formatter interface and a factory function to pick a formatter
based on the requested format type.
"""

import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from sitetargets.models import SiteTarget


class OutputFormat(str, Enum):
    """
    Output format types supported by the formatter.

    Attributes:
        JSON: JSON format for machine readability
        TEXT: Plain text format with one site per line
    """
    JSON = "json"
    TEXT = "text"


# Type definition for output format options
OutputOptions = Dict[str, Any]


class BaseFormatter(ABC):
    """
    Base class for all formatters.

    Specific formatters inherit from this class and implement format.
    """

    @abstractmethod
    def format(self, targets: Sequence[SiteTarget], **kwargs) -> str:
        """
        Format the targets into a string representation.

        Args:
            targets: Site targets to format
            **kwargs: Additional format-specific options

        Returns:
            String representation in the formatter's output format
        """
        pass


class JSONFormatter(BaseFormatter):
    """
    Formatter for JSON output.

    The document wraps the serialized targets with a count so that
    consumers can tell an empty split apart from a missing file.
    """

    def format(self, targets: Sequence[SiteTarget], **kwargs) -> str:
        indent = kwargs.get('indent', 2)
        result = {
            "total_targets": len(targets),
            "targets": [target.to_dict() for target in targets],
        }
        return json.dumps(result, indent=indent, ensure_ascii=False)


class TextFormatter(BaseFormatter):
    """
    Formatter for plain text output.

    Each target is written on one line as its site id, its label and
    its effective hostnames.
    """

    def format(self, targets: Sequence[SiteTarget], **kwargs) -> str:
        include_header = kwargs.get('include_header', False)

        lines = []
        if include_header:
            lines.append(f"# Total targets: {len(targets)}")
            lines.append("# Format: site_id display_host: hostnames")

        for target in targets:
            hosts = ", ".join(target.get_hosts(unicode=True))
            lines.append(f"{target.site_id} {target.display_host}: {hosts}")

        return "\n".join(lines)


def normalize_format_type(format_type: Union[str, OutputFormat]) -> OutputFormat:
    """
    Normalize format type to an OutputFormat enum value.

    Raises:
        ValueError: If format_type is not a supported format

    Examples:
        >>> normalize_format_type("JSON")
        <OutputFormat.JSON: 'json'>
    """
    if isinstance(format_type, OutputFormat):
        return format_type

    if isinstance(format_type, str):
        format_str = format_type.lower()
        for fmt in OutputFormat:
            if fmt.value == format_str:
                return fmt

    valid_formats = ", ".join([f.value for f in OutputFormat])
    raise ValueError(
        f"Unsupported format type: {format_type}. "
        f"Valid formats are: {valid_formats}"
    )


def get_formatter(format_type: Union[str, OutputFormat]) -> BaseFormatter:
    """
    Return the appropriate formatter for the given format type.

    Raises:
        ValueError: If format_type is not a supported format
    """
    formatters = {
        OutputFormat.JSON: JSONFormatter(),
        OutputFormat.TEXT: TextFormatter(),
    }
    return formatters[normalize_format_type(format_type)]


def format_results(
    targets: Sequence[SiteTarget],
    format_type: Union[str, OutputFormat] = OutputFormat.JSON,
    options: Optional[OutputOptions] = None
) -> str:
    """
    Format site targets using the appropriate formatter.

    Args:
        targets: Site targets to format
        format_type: Output format type (json, text), can be string or enum
        options: Additional format-specific options

    Returns:
        Formatted string in the requested format
    """
    options = options or {}
    formatter = get_formatter(format_type)
    return formatter.format(targets, **options)


def format_target_summary(target: SiteTarget, max_display: int = 10) -> str:
    """
    Format a short human readable summary of one target.

    Args:
        target: Target to summarize
        max_display: Maximum number of hostnames to list

    Returns:
        Multi-line summary for console output
    """
    hosts = target.get_hosts(unicode=True)

    lines = []
    if target.is_combined:
        lines.append(f"Combined target for sites: {target.display_host}")
    else:
        lines.append(f"Target for site {target.site_id}: {target.display_host}")
    lines.append(f"  Hostnames: {len(hosts)}")
    if target.common_name:
        lines.append(f"  Common name: {target.common_name}")
    if target.settings.exclude_bindings:
        lines.append(f"  Excluded: {target.settings.exclude_bindings}")

    for i, host in enumerate(hosts[:max_display], 1):
        lines.append(f"  {i}. {host}")
    if len(hosts) > max_display:
        lines.append(f"  ... and {len(hosts) - max_display} more hostnames")

    return "\n".join(lines)
