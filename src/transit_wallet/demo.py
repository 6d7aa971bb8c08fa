#!/usr/bin/env python3
"""
Google Wallet Transit Passes - Complete Demo
============================================

Walks through the transit pass lifecycle:

1. Authenticate with the service account
2. Create, update, patch and message a transit class
3. Create, update, patch, message and expire a transit object
4. Mint "Add to Google Wallet" links (new and existing objects)
5. Batch-create objects

Runs against in-memory mocks unless WALLET_USE_MOCK=false.

Run: python -m transit_wallet.demo
"""
import logging
import uuid

from .utils.config import config
from .api.auth import MockWalletAuth, WalletAuth
from .api.classes import MockTransitClassAPI, TransitClassAPI
from .api.objects import MockTransitObjectAPI, TransitObjectAPI
from .api.links import SaveLinkIssuer
from .api.batch import BatchObjectAPI, MockBatchObjectAPI


def print_banner(text: str):
    """Print a section banner"""
    width = 70
    print("\n" + "=" * width)
    print(f" {text}")
    print("=" * width)


def build_clients(use_mock: bool):
    if use_mock:
        auth = MockWalletAuth()
        objects_api = MockTransitObjectAPI(auth)
        return (auth, MockTransitClassAPI(auth), objects_api,
                MockBatchObjectAPI(objects_api))

    auth = WalletAuth()
    return auth, TransitClassAPI(auth), TransitObjectAPI(auth), BatchObjectAPI(auth)


def main(use_mock: bool = None):
    use_mock = config.use_mock if use_mock is None else use_mock
    logging.basicConfig(level=config.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s %(message)s")

    print_banner("GOOGLE WALLET TRANSIT PASSES - COMPLETE DEMO")
    if use_mock:
        print("\n    NOTE: Using MOCK APIs. Set WALLET_USE_MOCK=false and "
              "GOOGLE_APPLICATION_CREDENTIALS to call the real API.")

    issuer_id = config.issuer_id
    class_suffix = f"transit-{uuid.uuid4().hex[:8]}"
    object_suffix = f"ticket-{uuid.uuid4().hex[:8]}"

    auth, classes_api, objects_api, batch_api = build_clients(use_mock)
    auth.authenticate()

    # =========================================================================
    # Classes
    # =========================================================================
    print_banner("TRANSIT CLASS")

    classes_api.create_class(issuer_id, class_suffix)
    # Second create is a no-op: the class already exists
    classes_api.create_class(issuer_id, class_suffix)
    classes_api.update_class(issuer_id, class_suffix)
    classes_api.patch_class(issuer_id, class_suffix)
    classes_api.add_class_message(issuer_id, class_suffix,
                                  "Service update", "Line 12 runs every 10 minutes today.")

    # =========================================================================
    # Objects
    # =========================================================================
    print_banner("TRANSIT OBJECT")

    objects_api.create_object(issuer_id, class_suffix, object_suffix)
    objects_api.update_object(issuer_id, object_suffix)
    objects_api.patch_object(issuer_id, object_suffix)
    objects_api.add_object_message(issuer_id, object_suffix,
                                   "Boarding", "Show this pass to the driver.")
    objects_api.expire_object(issuer_id, object_suffix)
    objects_api.expire_object(issuer_id, "does-not-exist")

    # =========================================================================
    # Save links
    # =========================================================================
    print_banner("ADD TO GOOGLE WALLET LINKS")

    issuer = SaveLinkIssuer.from_auth(auth)
    issuer.create_jwt_new_objects(issuer_id, class_suffix, f"{object_suffix}-jwt")
    issuer.create_jwt_existing_objects(issuer_id)

    # =========================================================================
    # Batch
    # =========================================================================
    print_banner("BATCH INSERT")

    batch_api.batch_create_objects(issuer_id, class_suffix)

    print_banner("DEMO COMPLETE")


if __name__ == "__main__":
    main()
