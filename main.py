import logging
import os
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from jose import JWTError, jwt
from passlib.context import CryptContext
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

import database
import images
from database import (
    DatabaseUnavailable,
    create_document,
    delete_document,
    get_db,
    get_document,
    get_documents,
    now,
    update_document,
)
from resources import to_resource
from schemas import (
    AboutUpdate,
    AdminUser,
    ContactMessage,
    ContactMessageIn,
    ContactUpdate,
    Experience,
    ExperienceUpdate,
    HeroUpdate,
    ImageDelete,
    LoginRequest,
    Project,
    ProjectUpdate,
    SiteConfigUpdate,
    Skill,
    SkillUpdate,
    Token,
    dump_changes,
)
from seed import seed_singleton

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# =====================
# Auth / Security Setup
# =====================
SECRET_KEY = os.getenv("JWT_SECRET", "super-secret-key-change")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 12))

# Use pbkdf2_sha256 to avoid external bcrypt dependency issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@portfolio.dev")
# Support providing a precomputed hash; otherwise hash the provided password (short default)
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH") or pwd_context.hash(os.getenv("ADMIN_PASSWORD", "admin123"))

NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


# ==================
# FastAPI app config
# ==================
@asynccontextmanager
async def lifespan(app: FastAPI):
    if database.db is not None:
        database.ensure_indexes(database.db)
    else:
        logger.warning("DATABASE_URL / DATABASE_NAME not set, data routes will fail")
    yield


app = FastAPI(title="Portfolio API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

images.ensure_storage()
app.mount(images.PUBLIC_PREFIX, StaticFiles(directory=images.STORAGE_ROOT), name="storage")


# ==============
# Error handling
# ==============
def field_errors(errors) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        out.setdefault(".".join(loc) or "body", []).append(err.get("msg", "Invalid value"))
    return out


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request, exc):
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(content, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request, exc):
    return JSONResponse(
        {"message": "The given data was invalid.", "errors": field_errors(exc.errors())},
        status_code=422,
    )


@app.exception_handler(DatabaseUnavailable)
async def database_unavailable_handler(request, exc):
    return JSONResponse({"message": "Database not available"}, status_code=500)


@app.exception_handler(PyMongoError)
async def storage_error_handler(request, exc):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Storage error", "error": str(exc)}, status_code=500)


def invalid(field: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": "The given data was invalid.", "errors": {field: [message]}},
    )


# =========
# Utilities
# =========

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_current_admin(authorization: Optional[str] = Header(None)):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    email: str = payload.get("sub")
    role: str = payload.get("role")
    if email != ADMIN_EMAIL or role != "admin":
        raise HTTPException(status_code=403, detail="Forbidden")
    jti = payload.get("jti")
    if jti and get_db()["revokedtoken"].find_one({"jti": jti}):
        raise HTTPException(status_code=401, detail="Token has been revoked")
    return {"email": email, "role": role, "jti": jti, "exp": payload.get("exp")}


# Singletons: one row per collection, located by its "key"
def read_singleton(kind: str, missing_message: str, seed_if_missing: bool = False):
    doc = get_db()[kind].find_one({"key": kind})
    if doc is None:
        if not seed_if_missing:
            raise HTTPException(status_code=404, detail=missing_message)
        doc = seed_singleton(kind)
        logger.info("Created %s singleton from seed defaults", kind)
    return {"data": to_resource(kind, doc)}


def update_singleton(kind: str, payload, missing_message: str):
    changes = dump_changes(payload)
    doc = get_db()[kind].find_one_and_update(
        {"key": kind},
        {"$set": {**changes, "updated_at": now()}},
        return_document=True,
    )
    if doc is None:
        raise HTTPException(status_code=404, detail=missing_message)
    logger.info("Updated %s: %s", kind, sorted(changes))
    return {"data": to_resource(kind, doc)}


# Collections
def list_collection(name: str, sort):
    return {"data": [to_resource(name, d) for d in get_documents(name, sort=sort)]}


def show_item(name: str, item_id: str, missing_message: str):
    doc = get_document(name, item_id)
    if doc is None:
        raise HTTPException(status_code=404, detail=missing_message)
    return {"data": to_resource(name, doc)}


def create_item(name: str, payload):
    doc = create_document(name, payload)
    logger.info("Created %s %s", name, doc["_id"])
    return {"data": to_resource(name, doc)}


def update_item(name: str, item_id: str, payload, missing_message: str):
    doc = update_document(name, item_id, dump_changes(payload))
    if doc is None:
        raise HTTPException(status_code=404, detail=missing_message)
    logger.info("Updated %s %s", name, item_id)
    return {"data": to_resource(name, doc)}


def destroy_item(name: str, item_id: str, missing_message: str):
    if not delete_document(name, item_id):
        raise HTTPException(status_code=404, detail=missing_message)
    logger.info("Deleted %s %s", name, item_id)
    return Response(status_code=204)


# ======
# Routes
# ======
@app.get("/")
def root():
    return {"status": "ok", "service": "portfolio-api"}


@app.get("/test")
def test_database():
    ok = database.db is not None
    collections = []
    if ok:
        try:
            collections = database.db.list_collection_names()
        except PyMongoError as e:
            logger.warning("Database check failed: %s", e)
            ok = False
    return {"backend": "running", "database": "connected" if ok else "not-available", "collections": collections[:10]}


# Auth
@app.post("/api/login", response_model=Token)
def login(data: LoginRequest):
    if data.email.lower() != ADMIN_EMAIL.lower() or not verify_password(data.password, ADMIN_PASSWORD_HASH):
        logger.warning("Failed login attempt for %s", data.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = create_access_token({"sub": ADMIN_EMAIL, "role": "admin"})
    return Token(token=token, user=AdminUser(email=ADMIN_EMAIL))


@app.post("/api/logout")
def logout(admin: dict = Depends(get_current_admin)):
    # the TTL index on exp needs a datetime
    expires = datetime.fromtimestamp(admin["exp"], tz=timezone.utc)
    get_db()["revokedtoken"].update_one(
        {"jti": admin["jti"]},
        {"$setOnInsert": {"email": admin["email"], "exp": expires, "created_at": now()}},
        upsert=True,
    )
    return {"message": "Logged out successfully"}


@app.get("/api/user", response_model=AdminUser)
def current_user(admin: dict = Depends(get_current_admin)):
    return AdminUser(email=admin["email"], role=admin["role"])


# Hero
@app.get("/api/hero")
def get_hero():
    return read_singleton("hero", "Hero section not found", seed_if_missing=True)


@app.api_route("/api/hero", methods=["PUT", "PATCH"])
def update_hero(payload: HeroUpdate, _: dict = Depends(get_current_admin)):
    return update_singleton("hero", payload, "Hero section not found")


# About
@app.get("/api/about")
def get_about():
    return read_singleton("about", "About section not found", seed_if_missing=True)


@app.api_route("/api/about", methods=["PUT", "PATCH"])
def update_about(payload: AboutUpdate, _: dict = Depends(get_current_admin)):
    return update_singleton("about", payload, "About section not found")


# Contact info
@app.get("/api/contact")
def get_contact():
    return read_singleton("contact", "Contact info not found")


@app.api_route("/api/contact", methods=["PUT", "PATCH"])
def update_contact(payload: ContactUpdate, _: dict = Depends(get_current_admin)):
    return update_singleton("contact", payload, "Contact info not found")


# Site config
@app.get("/api/site-config")
def get_site_config():
    return read_singleton("siteconfig", "Site config not found")


@app.api_route("/api/site-config", methods=["PUT", "PATCH"])
def update_site_config(payload: SiteConfigUpdate, _: dict = Depends(get_current_admin)):
    return update_singleton("siteconfig", payload, "Site config not found")


# Skills
@app.get("/api/skills")
def list_skills():
    return list_collection("skill", [("category", 1), ("name", 1)])


@app.get("/api/skills/{skill_id}")
def get_skill(skill_id: str):
    return show_item("skill", skill_id, "Skill not found")


@app.post("/api/skills", status_code=201)
def create_skill(skill: Skill, _: dict = Depends(get_current_admin)):
    return create_item("skill", skill)


@app.put("/api/skills/{skill_id}")
def update_skill(skill_id: str, payload: SkillUpdate, _: dict = Depends(get_current_admin)):
    return update_item("skill", skill_id, payload, "Skill not found")


@app.delete("/api/skills/{skill_id}", status_code=204)
def delete_skill(skill_id: str, _: dict = Depends(get_current_admin)):
    return destroy_item("skill", skill_id, "Skill not found")


# Projects
@app.get("/api/projects")
def list_projects():
    return list_collection("project", NEWEST_FIRST)


@app.get("/api/projects/{project_id}")
def get_project(project_id: str):
    return show_item("project", project_id, "Project not found")


@app.post("/api/projects", status_code=201)
def create_project(project: Project, _: dict = Depends(get_current_admin)):
    return create_item("project", project)


@app.put("/api/projects/{project_id}")
def update_project(project_id: str, payload: ProjectUpdate, _: dict = Depends(get_current_admin)):
    return update_item("project", project_id, payload, "Project not found")


@app.delete("/api/projects/{project_id}", status_code=204)
def delete_project(project_id: str, _: dict = Depends(get_current_admin)):
    return destroy_item("project", project_id, "Project not found")


# Experience
@app.get("/api/experiences")
def list_experiences():
    return list_collection("experience", NEWEST_FIRST)


@app.get("/api/experiences/{experience_id}")
def get_experience(experience_id: str):
    return show_item("experience", experience_id, "Experience not found")


@app.post("/api/experiences", status_code=201)
def create_experience(experience: Experience, _: dict = Depends(get_current_admin)):
    return create_item("experience", experience)


@app.put("/api/experiences/{experience_id}")
def update_experience(experience_id: str, payload: ExperienceUpdate, _: dict = Depends(get_current_admin)):
    return update_item("experience", experience_id, payload, "Experience not found")


@app.delete("/api/experiences/{experience_id}", status_code=204)
def delete_experience(experience_id: str, _: dict = Depends(get_current_admin)):
    return destroy_item("experience", experience_id, "Experience not found")


# Contact form (public intake, admin inbox)
@app.post("/api/contact-message", status_code=201)
def submit_contact_message(payload: ContactMessageIn):
    msg = ContactMessage(**payload.model_dump())
    doc = create_document("contactmessage", msg)
    logger.info("Contact message %s received", doc["_id"])
    return {"message": "Message sent successfully", "data": to_resource("contactmessage", doc)}


@app.get("/api/contact-messages")
def list_contact_messages(_: dict = Depends(get_current_admin)):
    return list_collection("contactmessage", NEWEST_FIRST)


@app.patch("/api/contact-messages/{message_id}/read")
def mark_contact_message_read(message_id: str, _: dict = Depends(get_current_admin)):
    doc = update_document("contactmessage", message_id, {"is_read": True})
    if doc is None:
        raise HTTPException(status_code=404, detail="Message not found")
    return {"message": "Message marked as read", "data": to_resource("contactmessage", doc)}


@app.delete("/api/contact-messages/{message_id}", status_code=204)
def delete_contact_message(message_id: str, _: dict = Depends(get_current_admin)):
    return destroy_item("contactmessage", message_id, "Message not found")


# Images
@app.post("/api/upload-image")
def upload_image(
    image: Optional[UploadFile] = File(None),
    image_type: Optional[str] = Form(None, alias="type"),
    _: dict = Depends(get_current_admin),
):
    content = image.file.read() if image is not None else b""
    filename = image.filename if image is not None else None
    content_type = image.content_type if image is not None else None
    logger.info("Image upload request: type=%s file=%s mime=%s size=%d",
                image_type, filename, content_type, len(content))

    errors = images.validate_upload(image_type, filename, content_type, content)
    if errors:
        logger.warning("Image upload validation failed: %s", errors)
        raise HTTPException(status_code=422, detail={"message": "Validation failed", "errors": errors})

    try:
        stored = images.save_image(image_type, filename, content)
    except OSError as e:
        logger.exception("Failed to store uploaded image")
        raise HTTPException(status_code=500, detail={"message": "Failed to upload image", "error": str(e)})
    return {"message": "Image uploaded successfully", "data": stored}


@app.delete("/api/delete-image")
def delete_image(payload: ImageDelete, _: dict = Depends(get_current_admin)):
    if not images.is_bare_filename(payload.filename):
        raise invalid("filename", "The filename must not contain a path.")
    try:
        deleted = images.delete_image(payload.filename)
    except OSError as e:
        logger.exception("Failed to delete image %s", payload.filename)
        raise HTTPException(status_code=500, detail={"message": "Failed to delete image", "error": str(e)})
    if not deleted:
        raise HTTPException(status_code=404, detail="Image not found")
    return {"message": "Image deleted successfully"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
