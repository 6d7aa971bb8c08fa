from .auth import WalletAuth, ServiceAccountKey
from .resources import ApiResult, ResultStatus, WalletApiError, format_id
from .classes import TransitClassAPI, TransitClass
from .objects import TransitObjectAPI, TransitObject
from .links import SaveLinkIssuer
from .batch import BatchObjectAPI

__all__ = [
    "WalletAuth",
    "ServiceAccountKey",
    "ApiResult",
    "ResultStatus",
    "WalletApiError",
    "format_id",
    "TransitClassAPI",
    "TransitClass",
    "TransitObjectAPI",
    "TransitObject",
    "SaveLinkIssuer",
    "BatchObjectAPI",
]
