"""User-agent classification.

Derives coarse browser, operating system and device labels from a raw
``User-Agent`` header using ordered substring checks. The first matching rule
wins, so the order of the checks below matters: Edge user agents also contain
"Chrome" and "Safari", and Chrome user agents also contain "Safari".
"""
import re
from typing import NamedTuple, Optional

UNKNOWN = 'Unknown'
DESKTOP = 'Desktop'

_WINDOWS_TOUCH = re.compile(r'Windows NT.*Touch')


class UserAgentInfo(NamedTuple):
    browser: str
    os: str
    device: str


def detect_browser(user_agent: str) -> str:
    if 'Firefox' in user_agent:
        return 'Firefox'
    if 'Chrome' in user_agent and 'Edg' not in user_agent:
        return 'Chrome'
    if 'Safari' in user_agent and 'Chrome' not in user_agent:
        return 'Safari'
    if 'Edg' in user_agent:
        return 'Edge'
    if 'MSIE' in user_agent or 'Trident/' in user_agent:
        return 'Internet Explorer'
    return UNKNOWN


def detect_os(user_agent: str) -> str:
    if 'Windows' in user_agent:
        return 'Windows'
    if 'Mac OS X' in user_agent:
        return 'macOS'
    if 'Linux' in user_agent:
        return 'Linux'
    if 'Android' in user_agent:
        return 'Android'
    if 'iOS' in user_agent or 'iPhone' in user_agent or 'iPad' in user_agent:
        return 'iOS'
    return UNKNOWN


def detect_device(user_agent: str) -> str:
    if 'iPhone' in user_agent:
        return 'iPhone'
    if 'iPad' in user_agent:
        return 'iPad'
    if 'Android' in user_agent and 'Mobile' in user_agent:
        return 'Android Phone'
    if 'Android' in user_agent:
        return 'Android Tablet'
    if _WINDOWS_TOUCH.search(user_agent):
        return 'Windows Tablet'
    if 'Mobile' in user_agent or 'Mobi' in user_agent:
        return 'Mobile'
    return DESKTOP


def classify_user_agent(user_agent: Optional[str]) -> UserAgentInfo:
    """Classify a user-agent string. Never raises; missing input is treated as empty."""
    user_agent = user_agent or ''
    return UserAgentInfo(
        browser=detect_browser(user_agent),
        os=detect_os(user_agent),
        device=detect_device(user_agent),
    )
