"""Test utilities for SnapLink tests."""

import random
import string
from datetime import datetime, timezone
from typing import Dict, Optional

from snaplink.core.security import create_session_token
from snaplink.core.user_agent import parse_user_agent
from snaplink.models.link import ShortLink
from snaplink.models.user import User
from snaplink.models.visit import Visit

CHROME_WINDOWS_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SAFARI_IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8).lower()}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


async def create_test_user(
    db,
    google_id: Optional[str] = None,
    email: Optional[str] = None,
    name: str = "Test User",
) -> User:
    """Create and persist a test User in the database."""
    suffix = random_string(8).lower()
    user = User(
        google_id=google_id or f"google-{suffix}",
        email=email or f"{suffix}@example.com",
        name=name,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def create_test_link(
    db,
    short_code: Optional[str] = None,
    long_url: Optional[str] = None,
    topic: str = "general",
    user: Optional[User] = None,
) -> ShortLink:
    """Create and persist a test ShortLink in the database."""
    short_code = short_code or random_string(6)
    link = ShortLink(
        long_url=long_url or random_url(),
        short_code=short_code,
        short_url=f"http://sn.ap/{short_code}",
        topic=topic,
        created_by=user.id if user else None,
    )
    db.add(link)
    await db.flush()
    await db.refresh(link)
    return link


async def create_test_visit(
    db,
    link: ShortLink,
    ip_address: str = "1.1.1.1",
    user_agent: str = CHROME_WINDOWS_UA,
    timestamp: Optional[datetime] = None,
) -> Visit:
    """Create and persist a test Visit in the database."""
    os_type, device_type = parse_user_agent(user_agent)
    visit = Visit(
        link_id=link.id,
        ip_address=ip_address,
        user_agent=user_agent,
        os_type=os_type,
        device_type=device_type,
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    db.add(visit)
    await db.flush()
    await db.refresh(visit)
    return visit


def auth_headers(user: User) -> Dict[str, str]:
    """Authorization header carrying a session token for ``user``."""
    return {"Authorization": f"Bearer {create_session_token(user.id, user.email)}"}
