"""Builders for the nested value types shared by transit classes and objects."""
from typing import Any, Dict, Optional


def localized_string(value: str, language: str = "en-US") -> Dict[str, Any]:
    return {"defaultValue": {"language": language, "value": value}}


def image(uri: str, description: str) -> Dict[str, Any]:
    return {
        "sourceUri": {"uri": uri},
        "contentDescription": localized_string(description),
    }


def link(uri: str, description: str, link_id: Optional[str] = None) -> Dict[str, Any]:
    data = {"uri": uri, "description": description}
    if link_id:
        data["id"] = link_id
    return data
