"""Tests for the Google identity verifier."""

import pytest
from unittest.mock import patch

from google.auth.exceptions import GoogleAuthError

from snaplink.core.identity import GoogleIdentityVerifier
from snaplink.services.exceptions import InvalidTokenError


@pytest.fixture
def verifier():
    return GoogleIdentityVerifier(client_id="test-client-id")


@pytest.mark.asyncio
async def test_verified_claims(verifier):
    payload = {
        "sub": "1234567890",
        "email": "alice@example.com",
        "name": "Alice",
        "picture": "https://example.com/alice.png",
    }
    with patch("snaplink.core.identity.id_token.verify_oauth2_token", return_value=payload) as verify:
        claims = await verifier.verify("id-token")

    assert claims.subject == "1234567890"
    assert claims.email == "alice@example.com"
    assert claims.name == "Alice"
    assert claims.picture == "https://example.com/alice.png"
    assert verify.call_args.kwargs["audience"] == "test-client-id"


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [ValueError("Token expired"), GoogleAuthError("certs unavailable")])
async def test_provider_rejection(verifier, error):
    with patch("snaplink.core.identity.id_token.verify_oauth2_token", side_effect=error):
        with pytest.raises(InvalidTokenError):
            await verifier.verify("id-token")


@pytest.mark.asyncio
async def test_missing_email(verifier):
    with patch("snaplink.core.identity.id_token.verify_oauth2_token", return_value={"sub": "1"}):
        with pytest.raises(InvalidTokenError):
            await verifier.verify("id-token")


@pytest.mark.asyncio
async def test_empty_token(verifier):
    with pytest.raises(InvalidTokenError):
        await verifier.verify("")
