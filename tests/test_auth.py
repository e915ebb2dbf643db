"""Tests for request models and service user token minting."""

import pytest
from datetime import timedelta
from jose import jwt

from frontier_smoke import config
from frontier_smoke.auth import (
    AuthRequest,
    AuthTokenResponse,
    KeyCredential,
    get_service_user_token_generator,
    get_svc_account_access_token,
)
from frontier_smoke.exceptions import AuthFlowError


def test_auth_request_defaults_to_mailotp():
    payload = AuthRequest(email="admin@example.com").model_dump()

    assert payload == {
        "strategy_name": "mailotp",
        "redirect_onstart": False,
        "return_to": "<string>",
        "email": "admin@example.com",
        "callback_url": config.FRONTIER_CALLBACK_URL,
    }


def test_auth_token_response_reads_camel_case_field():
    token = AuthTokenResponse.model_validate_json('{"accessToken": "abc.def.ghi"}')
    assert token.access_token == "abc.def.ghi"


def test_service_user_token_header_and_claims(rsa_key_pair):
    """Token carries the key id in its header and the principal as subject."""
    private_pem, public_pem = rsa_key_pair
    credential = KeyCredential(private_key=private_pem, kid="kid-1", principal_id="svc-123")

    generate = get_service_user_token_generator(credential, issuer="smoke-test", validity=timedelta(hours=12))
    token = generate()

    header = jwt.get_unverified_header(token)
    assert header["alg"] == "RS256"
    assert header["kid"] == "kid-1"

    claims = jwt.decode(token, public_pem, algorithms=["RS256"], issuer="smoke-test")
    assert claims["sub"] == "svc-123"
    assert claims["iat"] == claims["nbf"]
    assert claims["exp"] - claims["iat"] == 12 * 60 * 60
    assert claims["jti"]


def test_each_generated_token_is_unique(rsa_key_pair):
    private_pem, _ = rsa_key_pair
    credential = KeyCredential(private_key=private_pem, kid="kid-1", principal_id="svc-123")
    generate = get_service_user_token_generator(credential)

    first, second = generate(), generate()

    assert jwt.get_unverified_claims(first)["jti"] != jwt.get_unverified_claims(second)["jti"]
    assert jwt.get_unverified_claims(first)["iss"] == config.FRONTIER_TOKEN_ISSUER


def test_invalid_private_key_fails_before_signing():
    credential = KeyCredential(private_key="not a pem key", kid="kid-1", principal_id="svc-123")

    with pytest.raises(AuthFlowError, match="invalid private key for kid kid-1"):
        get_service_user_token_generator(credential)


def test_key_credential_from_env(credential_env, rsa_key_pair):
    credential = KeyCredential.from_env()

    assert credential.private_key == rsa_key_pair[0]
    assert credential.type == "sv_rsa"
    assert credential.kid == "kid-1234"
    assert credential.principal_id == "svc-user-1"


def test_key_credential_unescapes_single_line_pem(credential_env, rsa_key_pair):
    private_pem, _ = rsa_key_pair
    credential_env.setenv("FRONTIER_PRIVATE_KEY", private_pem.replace("\n", "\\n"))

    assert KeyCredential.from_env().private_key == private_pem


def test_key_credential_reports_missing_variables(no_credential_env):
    no_credential_env.setenv("FRONTIER_KEY_ID", "kid-1")

    with pytest.raises(AuthFlowError) as exc_info:
        KeyCredential.from_env()

    message = str(exc_info.value)
    assert "FRONTIER_PRIVATE_KEY" in message
    assert "FRONTIER_PRINCIPAL_ID" in message
    assert "FRONTIER_KEY_ID" not in message


def test_svc_account_access_token_from_env(credential_env, rsa_key_pair):
    _, public_pem = rsa_key_pair

    token = get_svc_account_access_token()

    claims = jwt.decode(token, public_pem, algorithms=["RS256"])
    assert claims["sub"] == "svc-user-1"
    assert jwt.get_unverified_header(token)["kid"] == "kid-1234"


def test_zero_validity_is_respected(rsa_key_pair):
    private_pem, _ = rsa_key_pair
    credential = KeyCredential(private_key=private_pem, kid="kid-1", principal_id="svc-123")

    token = get_service_user_token_generator(credential, validity=timedelta(0))()

    claims = jwt.get_unverified_claims(token)
    assert claims["exp"] == claims["iat"]
