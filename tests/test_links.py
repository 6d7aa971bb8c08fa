"""Tests for save-to-wallet link signing."""

import base64

import pytest
from google.auth import crypt
from google.auth import jwt as google_jwt

from transit_wallet.api.auth import ServiceAccountKey
from transit_wallet.api.links import SaveLinkIssuer, object_reference

from .conftest import ISSUER_ID

SAVE_PREFIX = "https://pay.google.com/gp/v/save/"


def b64decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def token_from(url: str) -> str:
    assert url.startswith(SAVE_PREFIX)
    return url[len(SAVE_PREFIX):]


@pytest.fixture
def issuer(service_account_key) -> SaveLinkIssuer:
    return SaveLinkIssuer(service_account_key, origins=["www.example.com"])


class TestClaims:
    def test_claims_have_fixed_audience_and_type(self, issuer, service_account_key) -> None:
        payload = {"transitObjects": [object_reference(f"{ISSUER_ID}.ticket")]}

        claims = issuer.build_claims(payload)

        assert claims == {
            "iss": service_account_key.client_email,
            "aud": "google",
            "origins": ["www.example.com"],
            "typ": "savetowallet",
            "payload": payload,
        }

    def test_object_reference_includes_class_only_when_given(self) -> None:
        assert object_reference("1.o") == {"id": "1.o"}
        assert object_reference("1.o", "1.c") == {"id": "1.o", "classId": "1.c"}


class TestSigning:
    def test_token_verifies_and_decodes_to_claims(self, issuer, rsa_key_pair) -> None:
        _, public_pem = rsa_key_pair
        claims = issuer.build_claims(
            {"transitObjects": [object_reference(f"{ISSUER_ID}.ticket", f"{ISSUER_ID}.bus")]}
        )

        token = issuer.sign(claims)

        header, body, signature = token.split(".")
        verifier = crypt.RSAVerifier.from_string(public_pem)
        assert verifier.verify(f"{header}.{body}".encode("utf-8"), b64decode(signature))
        assert google_jwt.decode(token, verify=False) == claims

    def test_header_declares_rs256_and_key_id(self, issuer) -> None:
        token = issuer.sign(issuer.build_claims({"transitObjects": [{"id": "1.a"}]}))

        header = google_jwt.decode_header(token)

        assert header["alg"] == "RS256"
        assert header["kid"] == "test-key-id"

    def test_same_claims_give_same_token(self, issuer) -> None:
        claims = issuer.build_claims({"transitObjects": [{"id": "1.a"}]})

        assert issuer.sign(claims) == issuer.sign(claims)

    def test_tampered_token_fails_verification(self, issuer, rsa_key_pair) -> None:
        _, public_pem = rsa_key_pair
        token = issuer.sign(issuer.build_claims({"transitObjects": [{"id": "1.a"}]}))
        header, _, signature = token.split(".")
        forged = base64.urlsafe_b64encode(b'{"iss": "someone-else"}').rstrip(b"=").decode()

        verifier = crypt.RSAVerifier.from_string(public_pem)
        assert not verifier.verify(f"{header}.{forged}".encode("utf-8"), b64decode(signature))

    def test_malformed_private_key_fails(self) -> None:
        broken = SaveLinkIssuer(ServiceAccountKey("issuer@example.com", "not a pem key"))

        with pytest.raises(ValueError):
            broken.sign(broken.build_claims({"transitObjects": [{"id": "1.a"}]}))


class TestLinks:
    def test_new_objects_link_embeds_class_and_object(self, issuer) -> None:
        url = issuer.create_jwt_new_objects(ISSUER_ID, "bus-pass", "ticket-001")

        claims = google_jwt.decode(token_from(url), verify=False)
        payload = claims["payload"]
        assert [c["id"] for c in payload["transitClasses"]] == [f"{ISSUER_ID}.bus-pass"]
        assert [o["id"] for o in payload["transitObjects"]] == [f"{ISSUER_ID}.ticket-001"]
        assert payload["transitObjects"][0]["classId"] == f"{ISSUER_ID}.bus-pass"

    def test_existing_objects_link_defaults_to_every_pass_type(self, issuer) -> None:
        url = issuer.create_jwt_existing_objects(ISSUER_ID)

        payload = google_jwt.decode(token_from(url), verify=False)["payload"]
        assert set(payload) == {
            "eventTicketObjects",
            "flightObjects",
            "genericObjects",
            "giftCardObjects",
            "loyaltyObjects",
            "offerObjects",
            "transitObjects",
        }
        assert payload["transitObjects"] == [{"id": f"{ISSUER_ID}.TRANSIT_OBJECT_SUFFIX"}]

    def test_existing_objects_link_uses_given_references(self, issuer) -> None:
        references = {"transitObjects": [object_reference("1.a", "1.c")]}

        url = issuer.create_jwt_existing_objects(ISSUER_ID, references)

        assert google_jwt.decode(token_from(url), verify=False)["payload"] == references

    def test_existing_objects_link_requires_a_reference(self, issuer) -> None:
        with pytest.raises(ValueError):
            issuer.create_jwt_existing_objects(ISSUER_ID, {"transitObjects": []})

    def test_origins_default_to_configuration(self, service_account_key, monkeypatch) -> None:
        from transit_wallet.api import links

        monkeypatch.setattr(links.config, "origins", ["tickets.example.org"])

        claims = SaveLinkIssuer(service_account_key).build_claims({"transitObjects": []})

        assert claims["origins"] == ["tickets.example.org"]
