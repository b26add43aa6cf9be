"""Tests for bearer-token role authorization."""

from types import SimpleNamespace

import jwt
import pytest
from conftest import auth_headers, make_token
from cryptography.hazmat.primitives.asymmetric import rsa

from app.core import security
from app.core.config import settings
from app.core.exceptions import MalformedCredentialError, UnauthenticatedError
from app.core.security import ROLE_CLAIM, decode_claims

# =============================================================================
# Unit Tests: Claim Decoding
# =============================================================================


class TestDecodeClaims:
    """Tests for decode_claims without a key set."""

    def test_decodes_without_verifying_signature(self):
        """Test that any well-formed token is accepted when no key set is configured."""
        token = jwt.encode(
            {"sub": "abc", ROLE_CLAIM: "manager"},
            "some-other-secret-nobody-configured",
            algorithm="HS256",
        )
        claims = decode_claims(token)
        assert claims["sub"] == "abc"
        assert claims[ROLE_CLAIM] == "manager"

    def test_garbage_token_is_malformed(self):
        """Test that an undecodable token raises MalformedCredentialError."""
        with pytest.raises(MalformedCredentialError) as exc_info:
            decode_claims("not-a-token")
        assert exc_info.value.status_code == 400


class TestDecodeClaimsWithKeySet:
    """Tests for decode_claims when signature verification is switched on."""

    @pytest.fixture
    def signing_key(self, monkeypatch):
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        fake_client = SimpleNamespace(
            get_signing_key_from_jwt=lambda token: SimpleNamespace(key=private_key.public_key())
        )
        monkeypatch.setattr(settings, "JWT_JWKS_URL", "https://idp.example.com/jwks.json")
        monkeypatch.setattr(security, "_jwks_client", lambda url: fake_client)
        return private_key

    def test_valid_signature_is_accepted(self, signing_key):
        """Test that a token signed by the published key is decoded."""
        token = jwt.encode({"sub": "abc", ROLE_CLAIM: "tenant"}, signing_key, algorithm="RS256")
        assert decode_claims(token)[ROLE_CLAIM] == "tenant"

    def test_foreign_signature_is_rejected(self, signing_key):
        """Test that a token signed by another key is unauthenticated."""
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        token = jwt.encode({"sub": "abc", ROLE_CLAIM: "manager"}, other_key, algorithm="RS256")
        with pytest.raises(UnauthenticatedError) as exc_info:
            decode_claims(token)
        assert exc_info.value.status_code == 401

    def test_expired_token_is_rejected(self, signing_key):
        """Test that a correctly signed but expired token is unauthenticated."""
        token = jwt.encode(
            {"sub": "abc", ROLE_CLAIM: "manager", "exp": 1_000_000_000},
            signing_key,
            algorithm="RS256",
        )
        with pytest.raises(UnauthenticatedError):
            decode_claims(token)

    def test_forged_token_on_route_is_401(self, signing_key, client, listed_property):
        """Test that a route answers a foreign signature with 401, not 400."""
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        token = jwt.encode({"sub": "manager-1", ROLE_CLAIM: "manager"}, other_key, algorithm="RS256")
        response = client.get(
            f"/api/properties/{listed_property.id}/leases",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"


# =============================================================================
# Integration Tests: Role Gate on Routes
# =============================================================================


class TestRoleGate:
    """Tests for require_roles on a manager-only route."""

    def test_missing_token_is_unauthenticated(self, client, listed_property):
        """Test that a request without a token is rejected with 401."""
        response = client.get(f"/api/properties/{listed_property.id}/leases")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_malformed_token_is_bad_request(self, client, listed_property):
        """Test that an undecodable token is rejected with 400."""
        response = client.get(
            f"/api/properties/{listed_property.id}/leases",
            headers={"Authorization": "Bearer definitely.not.jwt"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "malformed_credential"

    def test_tenant_role_is_forbidden(self, client, listed_property):
        """Test that a tenant token cannot reach a manager-only route."""
        response = client.get(
            f"/api/properties/{listed_property.id}/leases",
            headers=auth_headers("tenant-1", "tenant"),
        )
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_manager_role_is_admitted(self, client, listed_property):
        """Test that a manager token reaches the route."""
        response = client.get(
            f"/api/properties/{listed_property.id}/leases",
            headers=auth_headers("manager-1", "manager"),
        )
        assert response.status_code == 200
        assert response.json() == []

    def test_role_comparison_ignores_case(self, client, listed_property):
        """Test that the role claim is matched case-insensitively."""
        response = client.get(
            f"/api/properties/{listed_property.id}/leases",
            headers=auth_headers("manager-1", "Manager"),
        )
        assert response.status_code == 200

    def test_missing_role_claim_is_forbidden(self, client, listed_property):
        """Test that a token without a role claim is treated as an empty role."""
        token = jwt.encode({"sub": "someone"}, "irrelevant-secret-value-for-tests", algorithm="HS256")
        response = client.get(
            f"/api/properties/{listed_property.id}/leases",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 403

    def test_multi_role_route_admits_both(self, client):
        """Test that a route allowing manager and tenant admits either."""
        for role in ("manager", "tenant"):
            response = client.get(
                "/api/leases",
                headers={"Authorization": f"Bearer {make_token('user-1', role)}"},
            )
            assert response.status_code == 200
