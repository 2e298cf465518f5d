import copy
import json

from bson import ObjectId

import resources


def stored(**fields):
    return {"_id": ObjectId(), **fields}


def test_hero_defaults_without_mutating_input():
    doc = stored(name="N", title="T", subtitle="S", description="D", stats=None, cta_buttons=None)
    original = copy.deepcopy(doc)

    out = resources.hero_resource(doc)

    assert out["stats"] == {"yearsExp": 0, "projects": 0, "uptime": "0%"}
    assert out["cta_buttons"] == {"viewProjects": "View Projects", "contactMe": "Contact Me"}
    assert out["background_images"] is None
    assert out["hero_image"] is None
    assert out["id"] == str(doc["_id"])
    assert doc == original


def test_default_objects_are_fresh_copies():
    out = resources.hero_resource(stored(stats=None))
    out["stats"]["yearsExp"] = 99
    assert resources.HERO_STATS_DEFAULT["yearsExp"] == 0

    again = resources.hero_resource(stored(stats=None))
    assert again["stats"]["yearsExp"] == 0


def test_returned_blob_is_not_the_stored_object():
    doc = stored(navbar_items=[{"label": "Home", "href": "#home", "order": 1}])
    out = resources.site_config_resource(doc)
    out["navbar_items"].append({"label": "x"})
    assert len(doc["navbar_items"]) == 1


def test_serialized_blobs_are_decoded():
    doc = stored(stats=json.dumps({"yearsExp": 3, "projects": 12, "uptime": "99.9%"}))
    assert resources.hero_resource(doc)["stats"] == {"yearsExp": 3, "projects": 12, "uptime": "99.9%"}

    doc = stored(tech_stack='["Python", "Mongo"]')
    assert resources.project_resource(doc)["tech_stack"] == ["Python", "Mongo"]


def test_unparseable_blob_falls_back_to_default():
    assert resources.about_resource(stored(stats="{not json"))["stats"] == []


def test_about_stats_default_is_a_list():
    assert resources.about_resource(stored(description="d"))["stats"] == []


def test_contact_defaults():
    out = resources.contact_resource(stored(email="a@b.dev", location="Here"))
    assert out["social_links"] == {"github": "", "linkedin": "", "twitter": "", "email": ""}
    assert out["contact_form_config"] == {"enabled": False, "fields": []}
    assert out["phone"] is None


def test_site_config_defaults():
    out = resources.site_config_resource(stored(site_title="S", footer_content="F"))
    assert out["theme_colors"] == {
        "primary": "#6366f1",
        "secondary": "#8b5cf6",
        "background": "#0a0a0a",
        "text": "#f5f5f5",
    }
    assert out["navbar_items"] == []


def test_collection_defaults():
    project = resources.project_resource(stored(title="P", features=None, is_featured=None))
    assert project["features"] == []
    assert project["tech_stack"] == []
    assert project["is_featured"] is False

    assert resources.experience_resource(stored(role="R"))["description"] == []
    assert resources.contact_message_resource(stored(name="N"))["is_read"] is False


def test_to_resource_dispatch():
    assert resources.to_resource("skill", None) is None
    out = resources.to_resource("skill", stored(name="Go", category="Language"))
    assert out["name"] == "Go"
    assert out["level"] is None


def test_hero_read_path_does_not_persist_defaults(client, db):
    db["hero"].insert_one({
        "key": "hero",
        "name": "N",
        "title": "T",
        "subtitle": "S",
        "description": "D",
        "stats": None,
        "cta_buttons": None,
    })

    data = client.get("/api/hero").json()["data"]
    assert data["stats"] == {"yearsExp": 0, "projects": 0, "uptime": "0%"}

    raw = db["hero"].find_one({"key": "hero"})
    assert raw["stats"] is None
    assert raw["cta_buttons"] is None
    assert db["hero"].count_documents({}) == 1
