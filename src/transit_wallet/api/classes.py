"""
Transit Class API
=================
Google Wallet pass classes for transit tickets

A class is the template shared by every pass object issued from it:
issuer branding, logo and transit type.

Key Concepts:
- Class ID: "{issuerId}.{classSuffix}"
- A missing class is reported with reason "classNotFound"
- reviewStatus must be UNDER_REVIEW or DRAFT when updating
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .auth import MockWalletAuth
from .fields import image, link
from .resources import (
    ApiResult,
    InMemoryCollectionMixin,
    PassResourceAPI,
    ResultStatus,
    format_id,
)

HOMEPAGE_URI = "https://developers.google.com/wallet"


@dataclass
class TransitClass:
    """
    Transit class model

    Required fields:
    - id: "{issuerId}.{classSuffix}"
    - issuerName: shown on the pass
    - reviewStatus: UNDER_REVIEW for new classes
    - transitType: BUS, RAIL, TRAM, FERRY or OTHER
    """
    id: str
    issuer_name: str = "Issuer name"
    review_status: str = "UNDER_REVIEW"
    transit_type: str = "BUS"
    logo_uri: str = "https://live.staticflickr.com/65535/48690277162_cd05f03f4d_o.png"
    logo_description: str = "Logo description"
    homepage_uri: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the REST/JWT resource format"""
        data = {
            "id": self.id,
            "issuerName": self.issuer_name,
            "reviewStatus": self.review_status,
            "logo": image(self.logo_uri, self.logo_description),
            "transitType": self.transit_type,
        }
        if self.homepage_uri:
            data["homepageUri"] = self.homepage_uri
        return data

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "TransitClass":
        logo = data.get("logo", {})
        return cls(
            id=data.get("id", ""),
            issuer_name=data.get("issuerName", ""),
            review_status=data.get("reviewStatus", ""),
            transit_type=data.get("transitType", ""),
            logo_uri=logo.get("sourceUri", {}).get("uri", ""),
            logo_description=logo.get("contentDescription", {})
                                 .get("defaultValue", {}).get("value", ""),
            homepage_uri=data.get("homepageUri"),
        )


def homepage_link() -> Dict[str, Any]:
    return link(HOMEPAGE_URI, "Homepage description")


class TransitClassAPI(PassResourceAPI):
    """
    Transit class client

    Usage:
        auth = WalletAuth()
        classes = TransitClassAPI(auth)
        result = classes.create_class(issuer_id, "my-class")
    """

    collection = "transitClass"
    not_found_reason = "classNotFound"
    label = "Class"

    def create_class(self, issuer_id: str, class_suffix: str,
                     transit_class: TransitClass = None) -> ApiResult:
        """
        Create a class unless it already exists

        GET /transitClass/{id}, then POST /transitClass when the GET
        fails with classNotFound.
        """
        class_id = format_id(issuer_id, class_suffix)
        print(f"\n{'='*60}")
        print("Create Class")
        print(f"{'='*60}")
        print(f"Endpoint: POST {self.endpoint}")

        body = (transit_class or TransitClass(id=class_id)).to_dict()
        body["id"] = class_id
        return self.get_or_create(class_id, body)

    def update_class(self, issuer_id: str, class_suffix: str) -> ApiResult:
        """
        Replace a class with a homepage link added

        PUT /transitClass/{id} with the full fetched class.
        """
        class_id = format_id(issuer_id, class_suffix)
        print(f"\n{'='*60}")
        print("Update Class")
        print(f"{'='*60}")
        print(f"Endpoint: PUT {self.endpoint}/{class_id}")

        existing = self.require_existing(class_id)
        if existing.status != ResultStatus.SUCCESS:
            return existing

        updated = dict(existing.resource)
        updated["homepageUri"] = homepage_link()
        # Updates are rejected unless the class goes back to review
        updated["reviewStatus"] = "UNDER_REVIEW"

        return self._submit("update", class_id, lambda: self.update(class_id, updated))

    def patch_class(self, issuer_id: str, class_suffix: str) -> ApiResult:
        """
        Add a homepage link with a partial update

        PATCH /transitClass/{id} with only the changed fields.
        """
        class_id = format_id(issuer_id, class_suffix)
        print(f"\n{'='*60}")
        print("Patch Class")
        print(f"{'='*60}")
        print(f"Endpoint: PATCH {self.endpoint}/{class_id}")

        existing = self.require_existing(class_id)
        if existing.status != ResultStatus.SUCCESS:
            return existing

        patch_body = {
            "homepageUri": homepage_link(),
            "reviewStatus": "UNDER_REVIEW",
        }
        return self._submit("patch", class_id, lambda: self.patch(class_id, patch_body))

    def add_class_message(self, issuer_id: str, class_suffix: str,
                          header: str, body: str) -> ApiResult:
        """
        Add a message shown on every pass of the class

        POST /transitClass/{id}/addMessage
        """
        class_id = format_id(issuer_id, class_suffix)
        print(f"\n{'='*60}")
        print("Add Class Message")
        print(f"{'='*60}")
        print(f"Endpoint: POST {self.endpoint}/{class_id}/addMessage")

        existing = self.require_existing(class_id)
        if existing.status != ResultStatus.SUCCESS:
            return existing

        return self._submit(
            "addMessage", class_id, lambda: self.add_message(class_id, header, body)
        )


# =============================================================================
# MOCK: Simulated API for Testing
# =============================================================================

class MockTransitClassAPI(InMemoryCollectionMixin, TransitClassAPI):
    """Mock transit class API backed by an in-memory store"""

    required_fields = ("id", "issuerName", "reviewStatus")

    def __init__(self, auth: MockWalletAuth = None):
        self.auth = auth or MockWalletAuth()
        self.base_url = "https://walletobjects.googleapis.com/walletobjects/v1"
        self.timeout = 30
        self._init_store()
