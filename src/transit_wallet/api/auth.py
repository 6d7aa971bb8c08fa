"""
Service Account Authentication
==============================
Google Wallet API access with a service account key file

This module loads the service account key (issuer email + private key)
and builds the authorized HTTP session used by every REST call.

Key Concepts:
- The key file is downloaded from Google Cloud Console
- Its path comes from GOOGLE_APPLICATION_CREDENTIALS
- REST calls carry a Bearer token for the wallet_object.issuer scope
- The same private key signs "save to wallet" links (see links.py)
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from google.auth import crypt
from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2 import service_account

from ..utils.config import config, WALLET_SCOPE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceAccountKey:
    """
    Service account identity used for REST auth and token signing

    Required fields (from the JSON key file):
    - client_email: the issuer of signed tokens
    - private_key: PEM encoded RSA key
    """
    client_email: str
    private_key: str
    private_key_id: Optional[str] = None

    @classmethod
    def from_info(cls, info: Dict[str, Any]) -> "ServiceAccountKey":
        missing = [name for name in ("client_email", "private_key") if not info.get(name)]
        if missing:
            raise ValueError(f"Service account key is missing: {', '.join(missing)}")
        return cls(
            client_email=info["client_email"],
            private_key=info["private_key"],
            private_key_id=info.get("private_key_id"),
        )

    @classmethod
    def from_file(cls, path: str) -> "ServiceAccountKey":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_info(json.load(f))

    def signer(self) -> crypt.RSASigner:
        """RS256 signer for this key. Raises ValueError on a malformed key."""
        return crypt.RSASigner.from_string(self.private_key, key_id=self.private_key_id)


class WalletAuth:
    """
    Google Wallet Authentication Client

    Usage:
        auth = WalletAuth()
        auth.authenticate()
        response = auth.session.get(url)
    """

    def __init__(self, key_file_path: str = None, scopes: list = None):
        self.key_file_path = key_file_path or config.key_file_path
        self.scopes = scopes or [WALLET_SCOPE]
        self._key: Optional[ServiceAccountKey] = None
        self._credentials = None
        self._session: Optional[AuthorizedSession] = None

    @property
    def key(self) -> ServiceAccountKey:
        """Service account key, read once from the key file"""
        if self._key is None:
            self._key = ServiceAccountKey.from_file(self.key_file_path)
        return self._key

    @property
    def credentials(self) -> service_account.Credentials:
        if self._credentials is None:
            self._credentials = service_account.Credentials.from_service_account_file(
                self.key_file_path, scopes=self.scopes
            )
        return self._credentials

    @property
    def session(self) -> AuthorizedSession:
        """requests session that attaches and refreshes the Bearer token"""
        if self._session is None:
            self._session = AuthorizedSession(self.credentials)
        return self._session

    def authenticate(self) -> str:
        """
        Exchange the service account key for an access token

        The token is refreshed automatically by the session afterwards;
        this call only makes the first exchange explicit.
        """
        print(f"\n{'='*60}")
        print("STEP 1: Service Account Authentication")
        print(f"{'='*60}")
        print(f"Key file: {self.key_file_path}")
        print(f"Scopes: {', '.join(self.scopes)}")

        self.credentials.refresh(Request())
        logger.debug("Obtained access token for %s", self.key.client_email)

        print(f"\n✓ Authentication Successful!")
        print(f"  Service account: {self.key.client_email}")
        print(f"  Access Token: {self.credentials.token[:20]}...")
        return self.credentials.token


# =============================================================================
# DEMO: Simulated Authentication for Testing
# =============================================================================

class MockWalletAuth(WalletAuth):
    """
    Mock authentication for running without a real service account

    A throwaway RSA key is generated so save links can still be signed.
    """

    def __init__(self, client_email: str = "wallet-demo@demo-project.iam.gserviceaccount.com"):
        super().__init__(key_file_path="<generated>")
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        self.public_key_pem = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        self._key = ServiceAccountKey(
            client_email=client_email,
            private_key=private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            ).decode("utf-8"),
            private_key_id="mock-key-id",
        )

    @property
    def session(self) -> AuthorizedSession:
        raise RuntimeError("MockWalletAuth has no HTTP session; use the Mock*API clients")

    def authenticate(self) -> str:
        """Simulate successful authentication"""
        print(f"\n{'='*60}")
        print("STEP 1: Service Account Authentication (SIMULATED)")
        print(f"{'='*60}")
        print(f"Key file: (generated in memory)")
        print(f"Scopes: {', '.join(self.scopes)}")

        token = "mock_access_token_" + "x" * 40

        print(f"\n✓ Authentication Successful! (SIMULATED)")
        print(f"  Service account: {self.key.client_email}")
        print(f"  Access Token: {token[:30]}...")
        return token
