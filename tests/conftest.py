"""Pytest configuration for the Frontier smoke test suite."""

import pytest
import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

CREDENTIAL_ENV = ("FRONTIER_PRIVATE_KEY", "FRONTIER_KEY_TYPE", "FRONTIER_KEY_ID", "FRONTIER_PRINCIPAL_ID")


def build_response(status_code=200, body="", cookies=None, headers=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response._content_consumed = True
    response.encoding = "utf-8"
    response.headers.update(headers or {"Content-Type": "application/json"})
    if cookies:
        response.cookies = requests.cookies.cookiejar_from_dict(cookies)
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture(scope="session")
def rsa_key_pair():
    """PEM encoded (private, public) RSA key pair like the ones Frontier issues for service users."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


@pytest.fixture
def credential_env(monkeypatch, rsa_key_pair):
    """Service user credential in the environment, the way a .env file provides it."""
    private_pem, _ = rsa_key_pair
    monkeypatch.setenv("FRONTIER_PRIVATE_KEY", private_pem)
    monkeypatch.setenv("FRONTIER_KEY_TYPE", "sv_rsa")
    monkeypatch.setenv("FRONTIER_KEY_ID", "kid-1234")
    monkeypatch.setenv("FRONTIER_PRINCIPAL_ID", "svc-user-1")
    return monkeypatch


@pytest.fixture
def no_credential_env(monkeypatch):
    for name in CREDENTIAL_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
