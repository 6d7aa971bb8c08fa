"""
Configuration management for the Google Wallet transit demo
"""
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

load_dotenv()

WALLET_SCOPE = "https://www.googleapis.com/auth/wallet_object.issuer"
SAVE_URL_BASE = "https://pay.google.com/gp/v/save"


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class WalletConfig:
    """Google Wallet API configuration"""
    key_file_path: str = field(
        default_factory=lambda: os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "/path/to/key.json")
    )
    issuer_id: str = field(default_factory=lambda: os.getenv("WALLET_ISSUER_ID", "3388000000022125581"))
    base_url: str = field(
        default_factory=lambda: os.getenv(
            "WALLET_BASE_URL", "https://walletobjects.googleapis.com/walletobjects/v1"
        )
    )

    # Domains allowed to show the save button
    origins: List[str] = field(default_factory=lambda: _env_list("WALLET_ORIGINS", "www.example.com"))

    timeout: int = field(default_factory=lambda: int(os.getenv("WALLET_HTTP_TIMEOUT", "30")))
    use_mock: bool = field(default_factory=lambda: _env_flag("WALLET_USE_MOCK", "true"))
    log_level: str = field(default_factory=lambda: os.getenv("WALLET_LOG_LEVEL", "WARNING"))

    @property
    def class_endpoint(self) -> str:
        """Transit class collection endpoint"""
        return f"{self.base_url.rstrip('/')}/transitClass"

    @property
    def object_endpoint(self) -> str:
        """Transit object collection endpoint"""
        return f"{self.base_url.rstrip('/')}/transitObject"


# Global config instance
config = WalletConfig()
