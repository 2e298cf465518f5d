"""
Seed demo portfolio content.

    python seed.py            # fill in whatever is missing
    python seed.py --fresh    # drop content collections first

HERO_SEED and ABOUT_SEED are also what GET /api/hero and GET /api/about
create when their singleton does not exist yet.
"""

import argparse
import logging

from pymongo.errors import DuplicateKeyError

import database
from schemas import About, Contact, Experience, Hero, Project, SiteConfig, Skill

logger = logging.getLogger(__name__)

HERO_SEED = Hero(
    name="Alex Rivera",
    title="Backend Engineer",
    subtitle="I Architect Robust Backend Systems.",
    description=(
        "Hi, I'm Alex Rivera. A Backend Engineer specialized in building high-performance, "
        "secure, and scalable APIs using PHP & Laravel."
    ),
    hero_image="https://picsum.photos/seed/alex/800/800",
    background_images={
        "main": "https://picsum.photos/seed/bg1/500/500",
        "secondary": "https://picsum.photos/seed/bg2/400/400",
    },
    stats={"yearsExp": 5, "projects": 40, "uptime": "100%"},
    cta_buttons={"viewProjects": "View Projects", "contactMe": "Contact Me"},
)

ABOUT_SEED = About(
    title="About Me",
    description="I'm a Backend Engineer with a passion for creating robust, scalable systems.",
    image="https://picsum.photos/seed/profile/400/400",
    stats=[
        {"label": "Location", "value": "San Francisco, CA"},
        {"label": "Email", "value": "alex.rivera@example.com"},
        {"label": "Phone", "value": "+1 (555) 123-4567"},
        {"label": "Experience", "value": "5+ Years"},
    ],
)

CONTACT_SEED = Contact(
    email="alex.rivera@example.com",
    phone="+1 (555) 123-4567",
    location="San Francisco, CA",
    availability="Open to new opportunities",
    social_links={
        "github": "https://github.com/alexriv",
        "linkedin": "https://linkedin.com/in/alexriv",
        "twitter": "https://twitter.com/alexriv_dev",
        "email": "mailto:alex.rivera@example.com",
    },
    contact_form_config={"enabled": True, "fields": ["name", "email", "message", "subject"]},
)

SITE_CONFIG_SEED = SiteConfig(
    site_title="Alex Rivera - Backend Engineer Portfolio",
    meta_description=(
        "Portfolio of Alex Rivera, Backend Engineer specializing in PHP, Laravel, "
        "and scalable API development."
    ),
    footer_content="© 2024 Alex Rivera. Built with ❤️ and Laravel.",
    navbar_items=[
        {"label": label, "href": f"#{label.lower()}", "order": i}
        for i, label in enumerate(["Home", "About", "Skills", "Projects", "Experience", "Contact"], start=1)
    ],
)

SINGLETON_SEEDS = {
    "hero": HERO_SEED,
    "about": ABOUT_SEED,
    "contact": CONTACT_SEED,
    "siteconfig": SITE_CONFIG_SEED,
}

SKILLS = [
    Skill(name="PHP 8.x", category="Language"),
    Skill(name="Laravel", category="Framework"),
    Skill(name="Eloquent ORM", category="Framework"),
    Skill(name="MySQL / PostgreSQL", category="Database"),
    Skill(name="Redis", category="Database"),
    Skill(name="RESTful APIs", category="Concept"),
    Skill(name="Docker", category="Tools"),
    Skill(name="Git & GitHub Actions", category="Tools"),
    Skill(name="Clean Architecture", category="Concept"),
    Skill(name="Linux / Nginx", category="Tools"),
    Skill(name="TDD (PHPUnit)", category="Concept"),
    Skill(name="Queue Workers", category="Framework"),
]

PROJECTS = [
    Project(
        title="Enterprise ERP Microservice",
        description="A scalable inventory management backend built with Laravel and PostgreSQL.",
        long_description=(
            "Developed a robust microservice-based ERP system that handles high-concurrency "
            "inventory transactions for a multi-warehouse retail chain."
        ),
        tech_stack=["Laravel", "PostgreSQL", "Redis", "RabbitMQ", "Docker"],
        features=["Real-time inventory sync", "JWT-based Auth", "Automated PDF invoicing"],
        architecture="Microservices architecture with API Gateway and central authentication service.",
        image="https://picsum.photos/seed/erp/800/450",
        is_featured=True,
    ),
    Project(
        title="Financial SaaS API",
        description="RESTful API focusing on secure transaction processing and reconciliation.",
        long_description=(
            "High-security financial API capable of processing 10,000+ transactions daily "
            "with strict audit logging and multi-layer verification."
        ),
        tech_stack=["PHP 8.2", "Laravel", "MySQL", "Stripe API", "Sentry"],
        features=["Webhooks integration", "Encryption at rest", "Role-based Access Control (RBAC)"],
        architecture="Modular Monolith with repository pattern for decoupled data access.",
        image="https://picsum.photos/seed/fin/800/450",
    ),
    Project(
        title="Real-time Analytics Engine",
        description="Backend engine for tracking and visualizing user behavior in real-time.",
        long_description=(
            "A data-intensive application that ingests millions of events daily, processing "
            "them through Laravel queues and storing them for quick retrieval."
        ),
        tech_stack=["Laravel Octane", "Swoole", "ClickHouse", "Redis"],
        features=["High-performance ingestion", "Complex aggregation queries", "Websocket broadcasting"],
        architecture="Event-driven architecture leveraging Laravel Queues and Redis Pub/Sub.",
        image="https://picsum.photos/seed/analytics/800/450",
    ),
]

EXPERIENCES = [
    Experience(
        role="Senior Backend Developer",
        company="TechFlow Solutions",
        period="2021 - Present",
        description=[
            "Leading the transition from monolithic architecture to microservices using Laravel and Docker.",
            "Optimizing database queries reducing API latency by 45%.",
            "Implementing CI/CD pipelines with GitHub Actions for automated testing and deployment.",
        ],
    ),
    Experience(
        role="Backend Engineer",
        company="Nexus Creative Lab",
        period="2019 - 2021",
        description=[
            "Developed custom CMS solutions for high-traffic media websites.",
            "Integrated third-party payment gateways and CRM systems.",
            "Authored technical documentation for API consumers.",
        ],
    ),
]

COLLECTION_SEEDS = {
    "skill": SKILLS,
    "project": PROJECTS,
    "experience": EXPERIENCES,
}


def seed_singleton(kind: str):
    """Insert the seed record for a singleton unless one exists; returns the stored row."""
    db = database.get_db()
    stamp = database.now()
    doc = SINGLETON_SEEDS[kind].model_dump(by_alias=True)
    try:
        return db[kind].find_one_and_update(
            {"key": kind},
            {"$setOnInsert": {**doc, "created_at": stamp, "updated_at": stamp}},
            upsert=True,
            return_document=True,
        )
    except DuplicateKeyError:
        # A concurrent request inserted it first
        return db[kind].find_one({"key": kind})


def run(fresh: bool = False) -> None:
    db = database.get_db()
    if fresh:
        for name in [*SINGLETON_SEEDS, *COLLECTION_SEEDS]:
            db[name].drop()
        logger.info("Dropped content collections")

    database.ensure_indexes(db)

    for kind in SINGLETON_SEEDS:
        seed_singleton(kind)

    for name, items in COLLECTION_SEEDS.items():
        if db[name].count_documents({}) > 0:
            logger.info("Collection %s already has data, skipping", name)
            continue
        for item in items:
            database.create_document(name, item)
        logger.info("Seeded %d %s documents", len(items), name)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Seed demo portfolio content")
    parser.add_argument("--fresh", action="store_true", help="drop content collections first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    run(fresh=args.fresh)
    print("✅ Portfolio content seeded")


if __name__ == "__main__":
    main()
