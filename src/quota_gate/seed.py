"""Demo catalog and users for local development."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quota_gate.common.logging import get_logger
from quota_gate.content.models import ArticleModel, VideoModel
from quota_gate.users.service import UserService

logger = get_logger("seed")

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

ARTICLE_SEEDS = [
    ("Getting Started with TypeScript", "getting-started-typescript", "Sarah Chen"),
    ("Building RESTful APIs with Express.js", "building-restful-apis-express", "Michael Roberts"),
    ("Introduction to React Hooks", "introduction-react-hooks", "Emily Johnson"),
    ("Firebase Authentication Best Practices", "firebase-auth-best-practices", "David Park"),
    ("CSS Grid Layout Mastery", "css-grid-layout-mastery", "Lisa Wang"),
    ("Understanding Async/Await in JavaScript", "understanding-async-await-javascript", "James Wilson"),
    ("Next.js 14 App Router Deep Dive", "nextjs-14-app-router-deep-dive", "Alex Thompson"),
    ("Tailwind CSS Tips and Tricks", "tailwind-css-tips-tricks", "Sophie Martinez"),
    ("Database Design Fundamentals", "database-design-fundamentals", "Robert Kim"),
    ("Web Security Essentials", "web-security-essentials", "Maria Garcia"),
    ("Testing React Applications", "testing-react-applications", "Chris Anderson"),
    ("Git Workflow for Teams", "git-workflow-teams", "Daniel Lee"),
]

VIDEO_SEEDS = [
    ("TypeScript Crash Course", "typescript-crash-course", "Sarah Chen", 1800),
    ("React Hooks in Practice", "react-hooks-in-practice", "Emily Johnson", 2400),
    ("Designing REST APIs", "designing-rest-apis", "Michael Roberts", 2100),
    ("CSS Grid from Scratch", "css-grid-from-scratch", "Lisa Wang", 1500),
    ("Async JavaScript Explained", "async-javascript-explained", "James Wilson", 1320),
    ("Next.js App Router Tour", "nextjs-app-router-tour", "Alex Thompson", 2700),
    ("SQL Indexing Basics", "sql-indexing-basics", "Robert Kim", 1980),
    ("OWASP Top Ten Walkthrough", "owasp-top-ten-walkthrough", "Maria Garcia", 3000),
    ("Testing Library Essentials", "testing-library-essentials", "Chris Anderson", 1620),
    ("Git Branching Strategies", "git-branching-strategies", "Daniel Lee", 1440),
    ("Tailwind Components Workshop", "tailwind-components-workshop", "Sophie Martinez", 2220),
    ("Auth Flows with OAuth 2.0", "auth-flows-oauth2", "David Park", 2520),
]

USER_SEEDS = [
    ("basic@example.com", "Basic Reader", "A"),
    ("standard@example.com", "Standard Reader", "B"),
    ("premium@example.com", "Premium Reader", "C"),
]


async def seed_demo_data(session: AsyncSession) -> dict[str, int]:
    """Insert demo users, articles and videos that do not exist yet.

    Returns the number of rows created per kind.
    """
    created = {"users": 0, "articles": 0, "videos": 0}
    users = UserService()

    for email, name, tier in USER_SEEDS:
        if await users.get_by_email(session, email) is None:
            await users.create_user(session, email, name=name, membership_type=tier)
            created["users"] += 1

    existing = set((await session.execute(select(ArticleModel.slug))).scalars().all())
    for i, (title, slug, author) in enumerate(ARTICLE_SEEDS):
        if slug in existing:
            continue
        session.add(ArticleModel(
            id=f"article-{i + 1}",
            title=title,
            slug=slug,
            preview=f"A short introduction to {title.lower()}.",
            content=f"# {title}\n\nFull article body for {title}, by {author}.",
            cover_image=f"https://picsum.photos/seed/{slug}/800/400",
            author=author,
            published_at=_EPOCH + timedelta(days=7 * i),
        ))
        created["articles"] += 1

    existing = set((await session.execute(select(VideoModel.slug))).scalars().all())
    for i, (title, slug, author, duration) in enumerate(VIDEO_SEEDS):
        if slug in existing:
            continue
        session.add(VideoModel(
            id=f"video-{i + 1}",
            title=title,
            slug=slug,
            description=f"Watch {author} walk through {title.lower()}.",
            thumbnail=f"https://picsum.photos/seed/{slug}/640/360",
            video_url=f"https://videos.example.com/{slug}.mp4",
            duration=duration,
            author=author,
            published_at=_EPOCH + timedelta(days=5 * i),
        ))
        created["videos"] += 1

    await session.flush()
    logger.info("seed.done", extra=created)
    return created
