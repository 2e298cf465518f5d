"""
Database Schemas for Portfolio CMS

Each Pydantic model = one MongoDB collection (lowercased class name).
Write payloads come in two flavours: a create model with the required
fields, and an update model where every field is optional and only the
fields actually sent are applied.
"""

from typing import Annotated, ClassVar, Dict, FrozenSet, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)

_url_adapter = TypeAdapter(HttpUrl)

# Required text: surrounding whitespace is trimmed and blank values are rejected
Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

SkillCategory = Literal["Language", "Framework", "Database", "Tools", "Concept"]


def normalize_url(value):
    """Empty strings become None; anything else must parse as a URL."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError("Input should be a valid string")
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Input should be a valid URL")
    return value


class Blob(BaseModel):
    """Shape of a nested JSON field. Keys keep the camelCase the site reads."""
    model_config = ConfigDict(populate_by_name=True)


class PartialUpdate(BaseModel):
    """Every field may be omitted; fields listed in ``non_nullable`` may not be sent as null."""
    non_nullable: ClassVar[FrozenSet[str]] = frozenset()

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        if value is None and info.field_name in cls.non_nullable:
            raise ValueError("This field may not be null")
        return value


# ==========
# JSON blobs
# ==========
class HeroStats(Blob):
    years_exp: int = Field(0, alias="yearsExp")
    projects: int = 0
    uptime: str = "0%"


class CtaButtons(Blob):
    view_projects: str = Field("View Projects", alias="viewProjects")
    contact_me: str = Field("Contact Me", alias="contactMe")


# Either named slots ({"main": url, "secondary": url}) or a plain list of urls
BackgroundImages = Union[Dict[str, str], List[str]]


class AboutStat(Blob):
    label: str
    value: str


class SocialLinks(Blob):
    github: str = ""
    linkedin: str = ""
    twitter: str = ""
    email: str = ""


class ContactFormConfig(Blob):
    enabled: bool = False
    fields: List[str] = Field(default_factory=list)


class ThemeColors(Blob):
    primary: str = "#6366f1"
    secondary: str = "#8b5cf6"
    background: str = "#0a0a0a"
    text: str = "#f5f5f5"


class NavbarItem(Blob):
    label: str
    href: str
    order: int = 0


# ==========
# Singletons
# ==========
class Hero(BaseModel):
    name: Text
    title: Text
    subtitle: Text
    description: Text
    hero_image: Optional[str] = None
    background_images: Optional[BackgroundImages] = None
    stats: HeroStats = Field(default_factory=HeroStats)
    cta_buttons: CtaButtons = Field(default_factory=CtaButtons)


class HeroUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"name", "title", "subtitle", "description", "stats", "cta_buttons"})

    name: Optional[Text] = None
    title: Optional[Text] = None
    subtitle: Optional[Text] = None
    description: Optional[Text] = None
    hero_image: Optional[str] = None
    background_images: Optional[BackgroundImages] = None
    stats: Optional[HeroStats] = None
    cta_buttons: Optional[CtaButtons] = None


class About(BaseModel):
    title: Optional[str] = None
    description: Text
    image: Optional[str] = None
    stats: List[AboutStat] = Field(default_factory=list)


class AboutUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"description", "stats"})

    title: Optional[str] = None
    description: Optional[Text] = None
    image: Optional[str] = None
    stats: Optional[List[AboutStat]] = None


class Contact(BaseModel):
    email: EmailStr
    phone: Optional[str] = None
    location: Text
    availability: Optional[str] = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    contact_form_config: ContactFormConfig = Field(default_factory=ContactFormConfig)


class ContactUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"email", "location", "social_links", "contact_form_config"})

    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    location: Optional[Text] = None
    availability: Optional[str] = None
    social_links: Optional[SocialLinks] = None
    contact_form_config: Optional[ContactFormConfig] = None


class SiteConfig(BaseModel):
    site_title: Text
    meta_description: Optional[str] = None
    theme_colors: ThemeColors = Field(default_factory=ThemeColors)
    footer_content: Text
    navbar_items: List[NavbarItem] = Field(default_factory=list)


class SiteConfigUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"site_title", "theme_colors", "footer_content", "navbar_items"})

    site_title: Optional[Text] = None
    meta_description: Optional[str] = None
    theme_colors: Optional[ThemeColors] = None
    footer_content: Optional[Text] = None
    navbar_items: Optional[List[NavbarItem]] = None


# ===========
# Collections
# ===========
class Skill(BaseModel):
    name: Text
    category: SkillCategory
    level: Optional[int] = None
    icon: Optional[str] = None  # lucide icon name


class SkillUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"name", "category"})

    name: Optional[Text] = None
    category: Optional[SkillCategory] = None
    level: Optional[int] = None
    icon: Optional[str] = None


class Project(BaseModel):
    title: Text
    description: Text
    long_description: Optional[str] = None
    tech_stack: List[str]
    features: Optional[List[str]] = None
    architecture: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    image: Text  # image url
    is_featured: Optional[bool] = None

    @field_validator("github_url", "live_url", mode="before")
    @classmethod
    def check_url(cls, value):
        return normalize_url(value)


class ProjectUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"title", "description", "tech_stack", "image"})

    title: Optional[Text] = None
    description: Optional[Text] = None
    long_description: Optional[str] = None
    tech_stack: Optional[List[str]] = None
    features: Optional[List[str]] = None
    architecture: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    image: Optional[Text] = None
    is_featured: Optional[bool] = None

    @field_validator("github_url", "live_url", mode="before")
    @classmethod
    def check_url(cls, value):
        return normalize_url(value)


class Experience(BaseModel):
    role: Text
    company: Text
    period: Text = Field(..., description="Free text, e.g. '2021 - Present'")
    description: List[str]


class ExperienceUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"role", "company", "period", "description"})

    role: Optional[Text] = None
    company: Optional[Text] = None
    period: Optional[Text] = None
    description: Optional[List[str]] = None


class ContactMessage(BaseModel):
    """Messages submitted from the public contact form"""
    name: Text = Field(..., max_length=255)
    email: EmailStr
    message: Text = Field(..., max_length=5000)
    is_read: bool = False


class ContactMessageIn(BaseModel):
    name: Text = Field(..., max_length=255)
    email: EmailStr
    message: Text = Field(..., max_length=5000)


class ImageDelete(BaseModel):
    filename: str = Field(..., min_length=1)


# Auth
class LoginRequest(BaseModel):
    email: str
    password: str


class AdminUser(BaseModel):
    email: str
    role: str = "admin"


class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    user: AdminUser


def dump_changes(payload: BaseModel) -> dict:
    """Only the fields the client actually sent, blobs keyed the way they are stored.

    Nested blobs are dumped whole (defaults included) so a partial ``stats``
    object is still stored in its full shape.
    """
    data = payload.model_dump(by_alias=True)
    return {name: data[name] for name in payload.model_fields_set}
