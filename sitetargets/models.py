"""
Data models for site targets.

This module provides the data models shared by the combiner and the
splitter: the per-site target, the request-scope settings that travel
with a certificate request, the plugin option bundles, and the tagged
scope variant that tells a single site apart from a combined selection.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Site id used by targets that span multiple sites
COMBINED_SITE_ID = -1


def normalize_hostname(hostname: str) -> str:
    """
    Normalize a hostname by trimming, lowercasing and removing trailing dots.

    Examples:
        >>> normalize_hostname(" WWW.Example.com. ")
        'www.example.com'
    """
    return hostname.strip().lower().rstrip('.')


def unique_hostnames(hostnames: Iterable[str]) -> List[str]:
    """
    Normalize hostnames and remove blanks and duplicates.

    The order of first appearance is preserved so that display output
    stays deterministic.

    Args:
        hostnames: Hostnames in any case, possibly repeated

    Returns:
        New list of normalized, unique hostnames

    Examples:
        >>> unique_hostnames(["a.com", "B.com", "A.COM.", ""])
        ['a.com', 'b.com']
    """
    seen = set()
    result = []
    for hostname in hostnames:
        if hostname is None:
            continue
        name = normalize_hostname(hostname)
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


def parse_exclusions(exclude_bindings: Optional[str]) -> List[str]:
    """
    Split a comma separated exclusion list into normalized hostnames.

    Examples:
        >>> parse_exclusions(" a.com, B.com ,,")
        ['a.com', 'b.com']
        >>> parse_exclusions(None)
        []
    """
    if not exclude_bindings:
        return []
    return unique_hostnames(exclude_bindings.split(','))


def _convert_host(host: str, unicode: bool) -> str:
    # IDNA conversion is best effort; hosts the codec rejects are kept as-is
    try:
        if unicode:
            if 'xn--' not in host:
                return host
            return host.encode('ascii').decode('idna')
        if host.isascii():
            return host
        return host.encode('idna').decode('ascii')
    except UnicodeError:
        logger.debug(f"Unable to convert host '{host}', keeping original form")
        return host


@dataclass
class DnsAzureOptions:
    """Credentials for validating through an Azure DNS zone."""
    tenant_id: Optional[str] = None
    client_id: Optional[str] = None
    secret: Optional[str] = None
    subscription_id: Optional[str] = None
    resource_group_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tenant_id': self.tenant_id,
            'client_id': self.client_id,
            'secret': self.secret,
            'subscription_id': self.subscription_id,
            'resource_group_name': self.resource_group_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DnsAzureOptions':
        return cls(
            tenant_id=data.get('tenant_id'),
            client_id=data.get('client_id'),
            secret=data.get('secret'),
            subscription_id=data.get('subscription_id'),
            resource_group_name=data.get('resource_group_name'),
        )


@dataclass
class DnsScriptOptions:
    """Scripts that create and remove the DNS validation record."""
    create_script: Optional[str] = None
    delete_script: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'create_script': self.create_script,
            'delete_script': self.delete_script,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DnsScriptOptions':
        return cls(
            create_script=data.get('create_script'),
            delete_script=data.get('delete_script'),
        )


@dataclass
class HttpFtpOptions:
    """Upload location for HTTP validation files served from an FTP share."""
    path: Optional[str] = None
    user_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'path': self.path, 'user_name': self.user_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HttpFtpOptions':
        return cls(path=data.get('path'), user_name=data.get('user_name'))


@dataclass
class HttpWebDavOptions:
    """Upload location for HTTP validation files served from WebDAV."""
    path: Optional[str] = None
    user_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'path': self.path, 'user_name': self.user_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HttpWebDavOptions':
        return cls(path=data.get('path'), user_name=data.get('user_name'))


def _bundle_to_dict(bundle: Any) -> Optional[Dict[str, Any]]:
    return bundle.to_dict() if bundle is not None else None


@dataclass
class SharedSettings:
    """
    Request-scope settings attached to a certificate request.

    These settings are not implied by any individual site. They are
    attached to a combined target by the caller and copied by value onto
    every site target produced when that combined target is split.

    Attributes:
        ssl_port: Port of the https binding to create or update
        validation_port: Port used while answering HTTP validation
        validation_site_id: Site that serves validation files
        installation_site_id: Site that receives the new binding
        ftp_site_id: FTP site that receives the certificate
        exclude_bindings: Comma separated hostnames left out of the request
        validation_plugin_name: Name of the selected validation plugin
        dns_azure_options: Options for Azure DNS validation
        dns_script_options: Options for scripted DNS validation
        http_ftp_options: Options for FTP file upload validation
        http_webdav_options: Options for WebDAV file upload validation
    """
    ssl_port: Optional[int] = None
    validation_port: Optional[int] = None
    validation_site_id: Optional[int] = None
    installation_site_id: Optional[int] = None
    ftp_site_id: Optional[int] = None
    exclude_bindings: Optional[str] = None
    validation_plugin_name: Optional[str] = None
    dns_azure_options: Optional[DnsAzureOptions] = None
    dns_script_options: Optional[DnsScriptOptions] = None
    http_ftp_options: Optional[HttpFtpOptions] = None
    http_webdav_options: Optional[HttpWebDavOptions] = None

    def copy(self) -> 'SharedSettings':
        """Return an independent deep copy of these settings."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ssl_port': self.ssl_port,
            'validation_port': self.validation_port,
            'validation_site_id': self.validation_site_id,
            'installation_site_id': self.installation_site_id,
            'ftp_site_id': self.ftp_site_id,
            'exclude_bindings': self.exclude_bindings,
            'validation_plugin_name': self.validation_plugin_name,
            'dns_azure_options': _bundle_to_dict(self.dns_azure_options),
            'dns_script_options': _bundle_to_dict(self.dns_script_options),
            'http_ftp_options': _bundle_to_dict(self.http_ftp_options),
            'http_webdav_options': _bundle_to_dict(self.http_webdav_options),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'SharedSettings':
        """
        Create settings from a dictionary produced by to_dict.

        Missing keys and missing option bundles fall back to None.
        """
        data = data or {}

        def bundle(key: str, bundle_cls: Any) -> Any:
            value = data.get(key)
            return bundle_cls.from_dict(value) if value else None

        return cls(
            ssl_port=data.get('ssl_port'),
            validation_port=data.get('validation_port'),
            validation_site_id=data.get('validation_site_id'),
            installation_site_id=data.get('installation_site_id'),
            ftp_site_id=data.get('ftp_site_id'),
            exclude_bindings=data.get('exclude_bindings'),
            validation_plugin_name=data.get('validation_plugin_name'),
            dns_azure_options=bundle('dns_azure_options', DnsAzureOptions),
            dns_script_options=bundle('dns_script_options', DnsScriptOptions),
            http_ftp_options=bundle('http_ftp_options', HttpFtpOptions),
            http_webdav_options=bundle('http_webdav_options', HttpWebDavOptions),
        )


@dataclass(frozen=True)
class SingleSite:
    """Scope of a target that covers exactly one site."""
    site_id: int


@dataclass(frozen=True)
class CombinedSites:
    """Scope of a target that spans several sites."""
    site_ids: FrozenSet[int]


TargetScope = Union[SingleSite, CombinedSites]


def encode_site_ids(site_ids: Iterable[int]) -> str:
    """
    Encode site ids as the comma joined string stored in display_host.

    Examples:
        >>> encode_site_ids([2, 5])
        '2,5'
    """
    return ",".join(str(site_id) for site_id in site_ids)


@dataclass
class SiteTarget:
    """
    Represents what a certificate request covers.

    A SiteTarget is either one physical site on the web server or a
    combined selection of several sites. Combined targets use the
    COMBINED_SITE_ID sentinel as their site id, list their members in
    member_site_ids and carry the comma joined member ids in display_host.

    Hostnames are normalized and deduplicated on construction, keeping
    the order in which they were first seen.

    Attributes:
        site_id: Identifier of the site, or COMBINED_SITE_ID
        hostnames: Hostnames to be covered by the certificate
        display_host: Human readable label for the target
        web_root_path: Physical path of the site content
        hidden: Whether the site is left out of interactive listings
        host_is_dns: Whether display_host is itself a hostname to cover
        iis: Whether the target refers to web server sites
        common_name: Hostname to use as the certificate common name
        member_site_ids: Member site ids of a combined target
        settings: Request-scope settings for the target

    Examples:
        >>> target = SiteTarget(site_id=2, hostnames=["A.example.com", "a.example.com"])
        >>> target.hostnames
        ['a.example.com']
        >>> target.scope
        SingleSite(site_id=2)
    """
    site_id: int
    hostnames: List[str] = field(default_factory=list)
    display_host: str = ""
    web_root_path: Optional[str] = None
    hidden: bool = False
    host_is_dns: bool = False
    iis: bool = True
    common_name: Optional[str] = None
    member_site_ids: Tuple[int, ...] = ()
    settings: SharedSettings = field(default_factory=SharedSettings)

    def __post_init__(self) -> None:
        self.hostnames = unique_hostnames(self.hostnames)
        self.member_site_ids = tuple(self.member_site_ids)

    @property
    def is_combined(self) -> bool:
        """Whether this target spans multiple sites."""
        return self.site_id == COMBINED_SITE_ID

    @property
    def scope(self) -> TargetScope:
        """
        Return the tagged scope of this target.

        Combined targets persisted before membership was stored explicitly
        fall back to decoding display_host.
        """
        if not self.is_combined:
            return SingleSite(self.site_id)
        if self.member_site_ids:
            return CombinedSites(frozenset(self.member_site_ids))
        site_ids = set()
        for token in self.display_host.split(','):
            token = token.strip()
            if token.isascii() and token.isdigit():
                site_ids.add(int(token))
        return CombinedSites(frozenset(site_ids))

    @property
    def ssl_port(self) -> Optional[int]:
        return self.settings.ssl_port

    @property
    def validation_port(self) -> Optional[int]:
        return self.settings.validation_port

    @property
    def exclude_bindings(self) -> Optional[str]:
        return self.settings.exclude_bindings

    def get_hosts(self, unicode: bool = True, allow_wildcard: bool = True) -> List[str]:
        """
        Return the effective hostnames of this target.

        The list starts with display_host when it is a DNS name, followed
        by the hostnames. Blank entries, duplicates and excluded bindings
        are removed. Hostnames are converted to their Unicode or IDNA form
        and wildcards can be filtered out.

        Args:
            unicode: Convert IDNA labels to Unicode (True) or the reverse
            allow_wildcard: Keep wildcard hostnames such as *.example.com

        Returns:
            List of hostnames eligible for a certificate request

        Examples:
            >>> target = SiteTarget(site_id=1, hostnames=["a.com", "*.b.com"])
            >>> target.settings.exclude_bindings = "a.com"
            >>> target.get_hosts()
            ['*.b.com']
            >>> target.get_hosts(allow_wildcard=False)
            []
        """
        candidates = []
        if self.host_is_dns:
            candidates.append(self.display_host)
        candidates.extend(self.hostnames)

        excluded = {_convert_host(host, unicode) for host in parse_exclusions(self.settings.exclude_bindings)}

        hosts = []
        for host in unique_hostnames(candidates):
            host = _convert_host(host, unicode)
            if host in excluded or host in hosts:
                continue
            if not allow_wildcard and host.startswith('*.'):
                continue
            hosts.append(host)
        return hosts

    def is_common_name_valid(self) -> bool:
        """
        Check that the common name, if set, is one of the effective hosts.

        Returns:
            True if no common name is set or it is among get_hosts()
        """
        if not self.common_name:
            return True
        if _convert_host(normalize_hostname(self.common_name), True) in self.get_hosts(unicode=True):
            return True
        logger.error(f"Common name '{self.common_name}' not found among hosts of {self.display_host}")
        return False

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the target to a JSON compatible dictionary.

        The display_host field is written verbatim since combined targets
        persisted without member_site_ids rely on it for membership.
        """
        return {
            'site_id': self.site_id,
            'host': self.display_host,
            'hostnames': list(self.hostnames),
            'web_root_path': self.web_root_path,
            'hidden': self.hidden,
            'host_is_dns': self.host_is_dns,
            'iis': self.iis,
            'common_name': self.common_name,
            'member_site_ids': list(self.member_site_ids),
            'settings': self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SiteTarget':
        """
        Create a SiteTarget from a dictionary produced by to_dict.

        When member_site_ids is present it defines the membership of a
        combined target and the host field is not consulted for it; the
        host field is only decoded for data stored without member_site_ids.

        Raises:
            ValueError: If the dictionary has no site_id or it is not an integer
        """
        if 'site_id' not in data:
            raise ValueError("Target data must contain a site_id")
        try:
            site_id = int(data['site_id'])
        except (TypeError, ValueError):
            raise ValueError(f"Invalid site_id: {data['site_id']!r}")

        return cls(
            site_id=site_id,
            hostnames=data.get('hostnames') or [],
            display_host=data.get('host') or "",
            web_root_path=data.get('web_root_path'),
            hidden=bool(data.get('hidden', False)),
            host_is_dns=bool(data.get('host_is_dns', False)),
            iis=bool(data.get('iis', True)),
            common_name=data.get('common_name'),
            member_site_ids=tuple(int(i) for i in data.get('member_site_ids') or []),
            settings=SharedSettings.from_dict(data.get('settings')),
        )

    def __str__(self) -> str:
        return f"{self.display_host} ({len(self.hostnames)} bindings)"
