"""
Tests for authentication dependencies in src/domains/auth/dependencies.py

Tests the core JWT validation and principal resolution functionality.
"""

from unittest.mock import patch

import jwt
import pytest
from fastapi import HTTPException

from src.domains.auth.dependencies import (
    decode_supabase_jwt,
    get_auth_id,
    get_bearer_token,
    get_current_principal,
)
from src.shared.exceptions import UnlinkedProfileError
from src.shared.permissions.models import UserRole


class TestDecodeSupabaseJWT:
    """Test JWT token validation with both development and production modes."""

    def test_valid_development_jwt_token(
        self, test_jwt_secret: str, valid_jwt_payload: dict
    ):
        token = jwt.encode(valid_jwt_payload, test_jwt_secret, algorithm="HS256")

        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            result = decode_supabase_jwt(token)

        assert result.sub == "test-user-id-123"
        assert result.email == "test@example.com"
        assert result.aud == "authenticated"

    def test_invalid_token_signature_raises_401(self, test_jwt_secret: str):
        invalid_token = jwt.encode({"sub": "test"}, "wrong-secret", algorithm="HS256")

        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            with pytest.raises(HTTPException) as exc_info:
                decode_supabase_jwt(invalid_token)

        assert exc_info.value.status_code == 401
        assert "Invalid or expired token" in exc_info.value.detail

    def test_malformed_jwt_raises_401(self, test_jwt_secret: str):
        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            with pytest.raises(HTTPException) as exc_info:
                decode_supabase_jwt("not.a.valid.jwt.token")

        assert exc_info.value.status_code == 401

    def test_unconfigured_verification_raises_500(self):
        with (
            patch("src.domains.auth.dependencies.settings.JWT_SECRET", None),
            patch("src.domains.auth.dependencies._jwks_client", None),
        ):
            with pytest.raises(HTTPException) as exc_info:
                decode_supabase_jwt("test.jwt.token")

        assert exc_info.value.status_code == 500
        assert "Supabase not configured" in exc_info.value.detail


class TestBearerToken:
    def test_extracts_token(self):
        assert get_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "Token abc", "bearer abc"])
    def test_missing_or_malformed_header_raises_401(self, header):
        with pytest.raises(HTTPException) as exc_info:
            get_bearer_token(header)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Missing token"


class TestGetAuthId:
    def test_returns_subject(self, valid_jwt_token: str, test_jwt_secret: str):
        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            assert get_auth_id(valid_jwt_token) == "test-user-id-123"

    def test_token_without_subject_raises_401(self, test_jwt_secret: str):
        token = jwt.encode({"email": "x@example.com"}, test_jwt_secret, algorithm="HS256")

        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            with pytest.raises(HTTPException) as exc_info:
                get_auth_id(token)

        assert exc_info.value.status_code == 401


class TestGetCurrentPrincipal:
    @pytest.mark.asyncio
    async def test_resolves_principal(self, memory_db, test_auth_id: str):
        memory_db.seed(
            "profiles",
            {"user_id": test_auth_id, "name": "Ana", "email": "ana@example.com"},
        )
        memory_db.seed("user_roles", {"user_id": test_auth_id, "role": "design"})

        principal = await get_current_principal(auth_id=test_auth_id, db=memory_db)

        assert principal.id == test_auth_id
        assert principal.role == UserRole.DESIGN
        assert principal.name == "Ana"

    @pytest.mark.asyncio
    async def test_missing_role_raises_unlinked(self, memory_db, test_auth_id: str):
        memory_db.seed("profiles", {"user_id": test_auth_id, "name": "Ana"})

        with pytest.raises(UnlinkedProfileError):
            await get_current_principal(auth_id=test_auth_id, db=memory_db)
