"""Shared fixtures for the transit wallet tests."""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from transit_wallet.api.auth import MockWalletAuth, ServiceAccountKey
from transit_wallet.api.classes import MockTransitClassAPI
from transit_wallet.api.objects import MockTransitObjectAPI

ISSUER_ID = "3388000000022125581"


@pytest.fixture(scope="session")
def rsa_key_pair() -> tuple:
    """PEM private key (str) and PEM public key (bytes)."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


@pytest.fixture(scope="session")
def service_account_key(rsa_key_pair) -> ServiceAccountKey:
    private_pem, _ = rsa_key_pair
    return ServiceAccountKey(
        client_email="issuer@test-project.iam.gserviceaccount.com",
        private_key=private_pem,
        private_key_id="test-key-id",
    )


@pytest.fixture(scope="session")
def mock_auth() -> MockWalletAuth:
    return MockWalletAuth()


@pytest.fixture
def classes_api(mock_auth) -> MockTransitClassAPI:
    return MockTransitClassAPI(mock_auth)


@pytest.fixture
def objects_api(mock_auth) -> MockTransitObjectAPI:
    return MockTransitObjectAPI(mock_auth)
