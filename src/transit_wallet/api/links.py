"""
Save to Google Wallet Links
===========================
Signed JWT links that add passes to a user's wallet

The link embeds a JWT signed with the service account's private key.
Signing happens locally - no API call is made - so a link can carry
brand new classes/objects (created when the user saves) or references
to ones already inserted through the REST API.

Key Concepts:
- Claims: iss (service account email), aud "google", typ "savetowallet"
- origins: domains allowed to render the save button
- payload: {"transitClasses": [...], "transitObjects": [...], ...}
- Link: https://pay.google.com/gp/v/save/{jwt}
"""
import logging
from typing import Any, Dict, List, Optional

from google.auth import jwt as google_jwt

from ..utils.config import config, SAVE_URL_BASE
from .auth import ServiceAccountKey, WalletAuth
from .classes import TransitClass
from .objects import TransitObject
from .resources import format_id

logger = logging.getLogger(__name__)

AUDIENCE = "google"
TOKEN_TYPE = "savetowallet"


def object_reference(object_id: str, class_id: str = None) -> Dict[str, str]:
    """Reference to an object that already exists in the Wallet API"""
    reference = {"id": object_id}
    if class_id:
        reference["classId"] = class_id
    return reference


def default_existing_references(issuer_id: str) -> Dict[str, List[Dict[str, str]]]:
    """
    One placeholder reference per pass type

    Multiple pass types can be saved with one link; at least one must be
    present. Replace the suffixes with objects you have created.
    """
    return {
        "eventTicketObjects": [object_reference(format_id(issuer_id, "EVENT_OBJECT_SUFFIX"))],
        "flightObjects": [object_reference(format_id(issuer_id, "FLIGHT_OBJECT_SUFFIX"))],
        "genericObjects": [object_reference(format_id(issuer_id, "GENERIC_OBJECT_SUFFIX"))],
        "giftCardObjects": [object_reference(format_id(issuer_id, "GIFT_CARD_OBJECT_SUFFIX"))],
        "loyaltyObjects": [object_reference(format_id(issuer_id, "LOYALTY_OBJECT_SUFFIX"))],
        "offerObjects": [object_reference(format_id(issuer_id, "OFFER_OBJECT_SUFFIX"))],
        "transitObjects": [object_reference(format_id(issuer_id, "TRANSIT_OBJECT_SUFFIX"))],
    }


class SaveLinkIssuer:
    """
    Builds "Add to Google Wallet" links

    Usage:
        issuer = SaveLinkIssuer.from_auth(WalletAuth())
        url = issuer.create_jwt_new_objects(issuer_id, "my-class", "ticket-001")
    """

    def __init__(self, key: ServiceAccountKey, origins: Optional[List[str]] = None):
        self.key = key
        self.origins = list(origins if origins is not None else config.origins)

    @classmethod
    def from_auth(cls, auth: WalletAuth, origins: Optional[List[str]] = None) -> "SaveLinkIssuer":
        return cls(auth.key, origins=origins)

    def build_claims(self, payload: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
        return {
            "iss": self.key.client_email,
            "aud": AUDIENCE,
            "origins": list(self.origins),
            "typ": TOKEN_TYPE,
            "payload": payload,
        }

    def sign(self, claims: Dict[str, Any]) -> str:
        """RS256-sign the claims with the service account key"""
        token = google_jwt.encode(self.key.signer(), claims)
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        return token

    @staticmethod
    def save_url(token: str) -> str:
        return f"{SAVE_URL_BASE}/{token}"

    def create_link(self, payload: Dict[str, List[Dict[str, Any]]]) -> str:
        claims = self.build_claims(payload)
        logger.debug("Signing savetowallet token with %s",
                     ", ".join(f"{len(items)} {kind}" for kind, items in payload.items()))
        url = self.save_url(self.sign(claims))

        print(f"\nAdd to Google Wallet link")
        print(f"  {url[:80]}...")
        return url

    def create_jwt_new_objects(self, issuer_id: str, class_suffix: str, object_suffix: str,
                               transit_class: TransitClass = None,
                               transit_object: TransitObject = None) -> str:
        """
        Link that creates a new class and object when the user saves it

        The resources travel inside the token; nothing is inserted through
        the REST API first.
        """
        print(f"\n{'='*60}")
        print("Save Link: New Class + Object")
        print(f"{'='*60}")

        class_id = format_id(issuer_id, class_suffix)
        transit_class = transit_class or TransitClass(id=class_id)
        transit_object = transit_object or TransitObject(
            id=format_id(issuer_id, object_suffix), class_id=class_id
        )
        return self.create_link({
            "transitClasses": [transit_class.to_dict()],
            "transitObjects": [transit_object.to_dict()],
        })

    def create_jwt_existing_objects(
        self,
        issuer_id: str,
        references: Optional[Dict[str, List[Dict[str, str]]]] = None,
    ) -> str:
        """
        Link that adds already-created objects to the wallet

        references maps the plural resource type ("transitObjects",
        "loyaltyObjects", ...) to [{"id": ..., "classId": ...}] entries.
        """
        print(f"\n{'='*60}")
        print("Save Link: Existing Objects")
        print(f"{'='*60}")

        payload = references if references is not None else default_existing_references(issuer_id)
        if not any(payload.values()):
            raise ValueError("At least one object reference is required")
        return self.create_link(payload)
