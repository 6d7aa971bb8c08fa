"""
Transit Object API
==================
Google Wallet pass objects for transit tickets

An object is one issued ticket: it points at its class and carries the
passenger, trip and barcode details shown in the wallet.

Key Concepts:
- Object ID: "{issuerId}.{objectSuffix}", classId: "{issuerId}.{classSuffix}"
- A missing object is reported with reason "resourceNotFound"
- Lifecycle: ACTIVE -> EXPIRED (or INACTIVE / COMPLETED)
- Links are appended to linksModuleData.uris, never replaced
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .auth import MockWalletAuth
from .fields import image, link, localized_string
from .resources import (
    ApiResult,
    InMemoryCollectionMixin,
    PassResourceAPI,
    ResultStatus,
    format_id,
)

NEW_LINK_URI = "https://developers.google.com/wallet"


def _default_links() -> Dict[str, Any]:
    return {
        "uris": [
            link("http://maps.google.com/", "Link module URI description", "LINK_MODULE_URI_ID"),
            link("tel:6505555555", "Link module tel description", "LINK_MODULE_TEL_ID"),
        ]
    }


def _default_ticket_leg() -> Dict[str, Any]:
    return {
        "originStationCode": "LA",
        "originName": localized_string("Origin name"),
        "destinationStationCode": "SFO",
        "destinationName": localized_string("Destination name"),
        "departureDateTime": "2020-04-12T16:20:50.52Z",
        "arrivalDateTime": "2020-04-12T20:20:50.52Z",
        "fareName": localized_string("Fare name"),
    }


@dataclass
class TransitObject:
    """
    Transit object model

    Required fields:
    - id / classId: composite IDs under the same issuer
    - state: ACTIVE for a new pass

    Everything else is optional; the defaults reproduce the sample ticket
    from the transit pass REST reference.
    """
    id: str
    class_id: str
    state: str = "ACTIVE"
    hero_image: Optional[Dict[str, Any]] = field(default_factory=lambda: image(
        "https://farm4.staticflickr.com/3723/11177041115_6e6a3b6f49_o.jpg",
        "Hero image description",
    ))
    text_modules_data: List[Dict[str, Any]] = field(default_factory=lambda: [
        {"header": "Text module header", "body": "Text module body", "id": "TEXT_MODULE_ID"}
    ])
    links_module_data: Optional[Dict[str, Any]] = field(default_factory=_default_links)
    image_modules_data: List[Dict[str, Any]] = field(default_factory=lambda: [
        {
            "mainImage": image(
                "http://farm4.staticflickr.com/3738/12440799783_3dc3c20606_b.jpg",
                "Image module description",
            ),
            "id": "IMAGE_MODULE_ID",
        }
    ])
    barcode: Optional[Dict[str, Any]] = field(
        default_factory=lambda: {"type": "QR_CODE", "value": "QR code value"}
    )
    locations: List[Dict[str, float]] = field(default_factory=lambda: [
        {"latitude": 37.424015499999996, "longitude": -122.09259560000001}
    ])
    passenger_type: str = "SINGLE_PASSENGER"
    passenger_names: str = "Passenger names"
    trip_type: str = "ONE_WAY"
    ticket_leg: Optional[Dict[str, Any]] = field(default_factory=_default_ticket_leg)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the REST/JWT resource format, dropping unset fields"""
        data = {
            "id": self.id,
            "classId": self.class_id,
            "state": self.state,
            "heroImage": self.hero_image,
            "textModulesData": self.text_modules_data,
            "linksModuleData": self.links_module_data,
            "imageModulesData": self.image_modules_data,
            "barcode": self.barcode,
            "locations": self.locations,
            "passengerType": self.passenger_type,
            "passengerNames": self.passenger_names,
            "tripType": self.trip_type,
            "ticketLeg": self.ticket_leg,
        }
        return {key: value for key, value in data.items() if value not in (None, [], "")}

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "TransitObject":
        return cls(
            id=data.get("id", ""),
            class_id=data.get("classId", ""),
            state=data.get("state", ""),
            hero_image=data.get("heroImage"),
            text_modules_data=data.get("textModulesData", []),
            links_module_data=data.get("linksModuleData"),
            image_modules_data=data.get("imageModulesData", []),
            barcode=data.get("barcode"),
            locations=data.get("locations", []),
            passenger_type=data.get("passengerType", ""),
            passenger_names=data.get("passengerNames", ""),
            trip_type=data.get("tripType", ""),
            ticket_leg=data.get("ticketLeg"),
        )


def new_link() -> Dict[str, Any]:
    return link(NEW_LINK_URI, "New link description")


def append_link(links_module_data: Optional[Dict[str, Any]],
                uri: Dict[str, Any]) -> Dict[str, Any]:
    """Return linksModuleData with `uri` appended; an absent module starts empty"""
    merged = dict(links_module_data) if links_module_data else {"uris": []}
    merged["uris"] = list(merged.get("uris") or []) + [uri]
    return merged


class TransitObjectAPI(PassResourceAPI):
    """
    Transit object client

    Usage:
        auth = WalletAuth()
        objects = TransitObjectAPI(auth)
        objects.create_object(issuer_id, "my-class", "ticket-001")
        objects.expire_object(issuer_id, "ticket-001")
    """

    collection = "transitObject"
    not_found_reason = "resourceNotFound"
    label = "Object"

    def create_object(self, issuer_id: str, class_suffix: str, object_suffix: str,
                      transit_object: TransitObject = None) -> ApiResult:
        """
        Create an object unless it already exists

        GET /transitObject/{id}, then POST /transitObject when the GET
        fails with resourceNotFound.
        """
        object_id = format_id(issuer_id, object_suffix)
        print(f"\n{'='*60}")
        print("Create Object")
        print(f"{'='*60}")
        print(f"Endpoint: POST {self.endpoint}")

        transit_object = transit_object or TransitObject(
            id=object_id, class_id=format_id(issuer_id, class_suffix)
        )
        body = transit_object.to_dict()
        body["id"] = object_id
        return self.get_or_create(object_id, body)

    def update_object(self, issuer_id: str, object_suffix: str,
                      uri: Dict[str, Any] = None) -> ApiResult:
        """
        Replace an object with one more link in its links module

        PUT /transitObject/{id} with the full fetched object.
        """
        object_id = format_id(issuer_id, object_suffix)
        print(f"\n{'='*60}")
        print("Update Object")
        print(f"{'='*60}")
        print(f"Endpoint: PUT {self.endpoint}/{object_id}")

        existing = self.require_existing(object_id)
        if existing.status != ResultStatus.SUCCESS:
            return existing

        updated = dict(existing.resource)
        updated["linksModuleData"] = append_link(
            existing.resource.get("linksModuleData"), uri or new_link()
        )
        return self._submit("update", object_id, lambda: self.update(object_id, updated))

    def patch_object(self, issuer_id: str, object_suffix: str,
                     uri: Dict[str, Any] = None) -> ApiResult:
        """
        Add a link with a partial update

        PATCH /transitObject/{id} with only linksModuleData. The uris list
        is sent whole, so it is built from the fetched object.
        """
        object_id = format_id(issuer_id, object_suffix)
        print(f"\n{'='*60}")
        print("Patch Object")
        print(f"{'='*60}")
        print(f"Endpoint: PATCH {self.endpoint}/{object_id}")

        existing = self.require_existing(object_id)
        if existing.status != ResultStatus.SUCCESS:
            return existing

        patch_body = {
            "linksModuleData": append_link(
                existing.resource.get("linksModuleData"), uri or new_link()
            )
        }
        return self._submit("patch", object_id, lambda: self.patch(object_id, patch_body))

    def expire_object(self, issuer_id: str, object_suffix: str) -> ApiResult:
        """
        Mark a pass as expired

        PATCH /transitObject/{id}
        Body: {"state": "EXPIRED"}
        """
        object_id = format_id(issuer_id, object_suffix)
        print(f"\n{'='*60}")
        print("LIFECYCLE: Expire Object")
        print(f"{'='*60}")
        print(f"Endpoint: PATCH {self.endpoint}/{object_id}")

        existing = self.require_existing(object_id)
        if existing.status != ResultStatus.SUCCESS:
            return existing

        return self._submit(
            "expiration", object_id, lambda: self.patch(object_id, {"state": "EXPIRED"})
        )

    def add_object_message(self, issuer_id: str, object_suffix: str,
                           header: str, body: str) -> ApiResult:
        """
        Add a message to a single pass

        POST /transitObject/{id}/addMessage
        """
        object_id = format_id(issuer_id, object_suffix)
        print(f"\n{'='*60}")
        print("Add Object Message")
        print(f"{'='*60}")
        print(f"Endpoint: POST {self.endpoint}/{object_id}/addMessage")

        existing = self.require_existing(object_id)
        if existing.status != ResultStatus.SUCCESS:
            return existing

        return self._submit(
            "addMessage", object_id, lambda: self.add_message(object_id, header, body)
        )


# =============================================================================
# MOCK: Simulated API for Testing
# =============================================================================

class MockTransitObjectAPI(InMemoryCollectionMixin, TransitObjectAPI):
    """Mock transit object API backed by an in-memory store"""

    required_fields = ("id", "classId", "state")

    def __init__(self, auth: MockWalletAuth = None):
        self.auth = auth or MockWalletAuth()
        self.base_url = "https://walletobjects.googleapis.com/walletobjects/v1"
        self.timeout = 30
        self._init_store()
