"""User agent classification for visit analytics.

Keyword matching only; anything unrecognised falls back to
``"Unknown"`` for the OS and ``"Desktop"`` for the device.
"""

from typing import Optional, Tuple

from snaplink.models.visit import UNKNOWN_OS, DEFAULT_DEVICE

# Checked in order, first match wins. iOS before macOS since iPhone
# agents contain "like Mac OS X"; Android before Linux.
_OS_KEYWORDS = (
    ("Windows", ("windows",)),
    ("Android", ("android",)),
    ("iOS", ("iphone", "ipad", "ipod")),
    ("macOS", ("mac os x", "macintosh")),
    ("Chrome OS", ("cros",)),
    ("Linux", ("linux", "x11")),
)

_BOT_KEYWORDS = ("bot", "crawl", "spider", "slurp")
_MOBILE_KEYWORDS = ("mobile", "iphone", "ipod", "windows phone")


def parse_os(user_agent: Optional[str]) -> str:
    if not user_agent:
        return UNKNOWN_OS
    ua = user_agent.lower()
    for name, keywords in _OS_KEYWORDS:
        if any(keyword in ua for keyword in keywords):
            return name
    return UNKNOWN_OS


def parse_device(user_agent: Optional[str]) -> str:
    if not user_agent:
        return DEFAULT_DEVICE
    ua = user_agent.lower()
    if any(keyword in ua for keyword in _BOT_KEYWORDS):
        return "Bot"
    if "ipad" in ua or "tablet" in ua or ("android" in ua and "mobile" not in ua):
        return "Tablet"
    if any(keyword in ua for keyword in _MOBILE_KEYWORDS):
        return "Mobile"
    return DEFAULT_DEVICE


def parse_user_agent(user_agent: Optional[str]) -> Tuple[str, str]:
    """Return ``(os_type, device_type)`` for a raw user agent string."""
    return parse_os(user_agent), parse_device(user_agent)
