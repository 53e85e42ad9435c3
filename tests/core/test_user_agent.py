"""Tests for user agent classification."""

import pytest

from snaplink.core.user_agent import parse_device, parse_os, parse_user_agent
from tests.utils import CHROME_WINDOWS_UA, SAFARI_IPHONE_UA

IPAD_UA = "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Mobile/15E148"
ANDROID_PHONE_UA = "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 Chrome/120.0 Mobile Safari/537.36"
ANDROID_TABLET_UA = "Mozilla/5.0 (Linux; Android 13; SM-X700) AppleWebKit/537.36 Chrome/120.0 Safari/537.36"
MAC_UA = "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_1) AppleWebKit/605.1.15 Version/17.1 Safari/605.1.15"
LINUX_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
CHROMEOS_UA = "Mozilla/5.0 (X11; CrOS x86_64 15633.69.0) AppleWebKit/537.36 Chrome/119.0 Safari/537.36"
GOOGLEBOT_UA = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


@pytest.mark.parametrize("user_agent,expected", [
    (CHROME_WINDOWS_UA, "Windows"),
    (SAFARI_IPHONE_UA, "iOS"),
    (IPAD_UA, "iOS"),
    (ANDROID_PHONE_UA, "Android"),
    (MAC_UA, "macOS"),
    (CHROMEOS_UA, "Chrome OS"),
    (LINUX_UA, "Linux"),
    ("curl/8.4.0", "Unknown"),
    ("", "Unknown"),
    (None, "Unknown"),
])
def test_parse_os(user_agent, expected):
    assert parse_os(user_agent) == expected


@pytest.mark.parametrize("user_agent,expected", [
    (CHROME_WINDOWS_UA, "Desktop"),
    (SAFARI_IPHONE_UA, "Mobile"),
    (ANDROID_PHONE_UA, "Mobile"),
    (IPAD_UA, "Tablet"),
    (ANDROID_TABLET_UA, "Tablet"),
    (GOOGLEBOT_UA, "Bot"),
    (MAC_UA, "Desktop"),
    (None, "Desktop"),
])
def test_parse_device(user_agent, expected):
    assert parse_device(user_agent) == expected


def test_parse_user_agent_pairs_os_and_device():
    assert parse_user_agent(SAFARI_IPHONE_UA) == ("iOS", "Mobile")
    assert parse_user_agent("") == ("Unknown", "Desktop")
