"""
Resource transforms: stored Mongo documents -> client JSON.

Null or missing JSON fields are replaced with their shaped defaults here, on
the read path only. Nothing in this module writes back to the database and
the input document is never modified.
"""

import copy
import json
from typing import Any, Callable, Dict, Optional

HERO_STATS_DEFAULT = {"yearsExp": 0, "projects": 0, "uptime": "0%"}
HERO_CTA_DEFAULT = {"viewProjects": "View Projects", "contactMe": "Contact Me"}
SOCIAL_LINKS_DEFAULT = {"github": "", "linkedin": "", "twitter": "", "email": ""}
CONTACT_FORM_DEFAULT = {"enabled": False, "fields": []}
THEME_COLORS_DEFAULT = {
    "primary": "#6366f1",
    "secondary": "#8b5cf6",
    "background": "#0a0a0a",
    "text": "#f5f5f5",
}


def _isoformat(value):
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _blob(doc: Dict[str, Any], key: str, default: Any) -> Any:
    """Decoded JSON value of ``doc[key]``, or a fresh copy of ``default``.

    Older rows may hold the blob as serialized text; those are decoded.
    """
    value = doc.get(key)
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            value = None
    if value is None:
        return copy.deepcopy(default)
    return copy.deepcopy(value)


def _base(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": str(doc["_id"])}


def _timestamps(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "created_at": _isoformat(doc.get("created_at")),
        "updated_at": _isoformat(doc.get("updated_at")),
    }


def hero_resource(doc):
    return {
        **_base(doc),
        "name": doc.get("name"),
        "title": doc.get("title"),
        "subtitle": doc.get("subtitle"),
        "description": doc.get("description"),
        "hero_image": doc.get("hero_image"),
        "background_images": _blob(doc, "background_images", None),
        "stats": _blob(doc, "stats", HERO_STATS_DEFAULT),
        "cta_buttons": _blob(doc, "cta_buttons", HERO_CTA_DEFAULT),
        **_timestamps(doc),
    }


def about_resource(doc):
    return {
        **_base(doc),
        "title": doc.get("title"),
        "description": doc.get("description"),
        "image": doc.get("image"),
        "stats": _blob(doc, "stats", []),
        **_timestamps(doc),
    }


def contact_resource(doc):
    return {
        **_base(doc),
        "email": doc.get("email"),
        "phone": doc.get("phone"),
        "location": doc.get("location"),
        "availability": doc.get("availability"),
        "social_links": _blob(doc, "social_links", SOCIAL_LINKS_DEFAULT),
        "contact_form_config": _blob(doc, "contact_form_config", CONTACT_FORM_DEFAULT),
        **_timestamps(doc),
    }


def site_config_resource(doc):
    return {
        **_base(doc),
        "site_title": doc.get("site_title"),
        "meta_description": doc.get("meta_description"),
        "theme_colors": _blob(doc, "theme_colors", THEME_COLORS_DEFAULT),
        "footer_content": doc.get("footer_content"),
        "navbar_items": _blob(doc, "navbar_items", []),
        **_timestamps(doc),
    }


def skill_resource(doc):
    return {
        **_base(doc),
        "name": doc.get("name"),
        "category": doc.get("category"),
        "level": doc.get("level"),
        "icon": doc.get("icon"),
        **_timestamps(doc),
    }


def project_resource(doc):
    return {
        **_base(doc),
        "title": doc.get("title"),
        "description": doc.get("description"),
        "long_description": doc.get("long_description"),
        "tech_stack": _blob(doc, "tech_stack", []),
        "features": _blob(doc, "features", []),
        "architecture": doc.get("architecture"),
        "github_url": doc.get("github_url"),
        "live_url": doc.get("live_url"),
        "image": doc.get("image"),
        "is_featured": bool(doc.get("is_featured") or False),
        **_timestamps(doc),
    }


def experience_resource(doc):
    return {
        **_base(doc),
        "role": doc.get("role"),
        "company": doc.get("company"),
        "period": doc.get("period"),
        "description": _blob(doc, "description", []),
        **_timestamps(doc),
    }


def contact_message_resource(doc):
    return {
        **_base(doc),
        "name": doc.get("name"),
        "email": doc.get("email"),
        "message": doc.get("message"),
        "is_read": bool(doc.get("is_read", False)),
        **_timestamps(doc),
    }


TRANSFORMS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "hero": hero_resource,
    "about": about_resource,
    "contact": contact_resource,
    "siteconfig": site_config_resource,
    "skill": skill_resource,
    "project": project_resource,
    "experience": experience_resource,
    "contactmessage": contact_message_resource,
}


def to_resource(collection_name: str, doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return None
    return TRANSFORMS[collection_name](doc)
