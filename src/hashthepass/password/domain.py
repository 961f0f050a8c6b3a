"""
Reduces a URL or host name to the key used to salt site passwords.

``accounts.google.com``, ``google.com`` and ``www.google.com.au`` all reduce
to ``google`` so that one site keeps one password across its hosts.
"""

import ipaddress
from typing import Optional
from urllib.parse import urlsplit

GENERIC_TLDS = frozenset(
    {
        "com", "net", "org", "info", "biz", "edu", "gov", "mil", "int", "name",
        "pro", "mobi", "aero", "coop", "museum", "travel", "jobs", "asia", "tel",
        "cat", "post", "arpa", "app", "dev", "xyz", "online", "site", "tech",
        "store", "blog", "cloud", "page", "shop",
    }
)

# Registry labels found below a country code, e.g. the "co" in "bbc.co.uk"
SECOND_LEVEL_LABELS = frozenset(
    {
        "co", "com", "net", "org", "ac", "edu", "gov", "gob", "gouv", "mil",
        "ne", "or", "go", "nom", "sch", "ltd", "plc", "gen", "biz", "info",
    }
)


def _is_country_code(label: str) -> bool:
    return len(label) == 2 and label.isalpha()


def _host(site: str) -> Optional[str]:
    site = site.strip().lower()
    if "://" not in site:
        site = "http://" + site
    try:
        return urlsplit(site).hostname
    except ValueError:
        return None


def get_domain(site: Optional[str]) -> Optional[str]:
    """
    Return the registrable domain of ``site`` without its public suffix.

    Args:
        site: A URL or a bare host name

    Returns:
        The normalized key, or None when nothing usable remains
    """
    if not site:
        return None

    host = _host(site)
    if not host:
        return None

    try:
        ipaddress.ip_address(host)
        return host
    except ValueError:
        pass

    labels = [label for label in host.split(".") if label]
    if not labels:
        return None

    if len(labels) > 1 and (labels[-1] in GENERIC_TLDS or _is_country_code(labels[-1])):
        tld = labels.pop()
        if len(labels) > 1 and _is_country_code(tld) and labels[-1] in SECOND_LEVEL_LABELS:
            labels.pop()

    return labels[-1]
