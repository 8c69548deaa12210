"""Seed a handful of demo student profiles so the swipe feed has something to rank."""
import asyncio
import sys
sys.path.insert(0, ".")

from sqlalchemy import select
from collabia.database import async_session_factory
from collabia.models.user import User


DEMO_USERS = [
    {
        "email": "sarah.python@collabia.ma",
        "name": "Sarah El Amrani",
        "school": "ENSAM Casablanca",
        "location": "Casablanca",
        "bio": "Building AI-powered SaaS products",
        "skills": ["Python", "Machine Learning", "Django"],
        "interests": ["SAAS", "Startups", "AI"],
        "open_to_cofounder": True,
        "open_to_projects": True,
        "school_verified": True,
        "current_book": "The Lean Startup",
    },
    {
        "email": "youssef.java@collabia.ma",
        "name": "Youssef Benali",
        "school": "INPT Rabat",
        "location": "Rabat",
        "bio": "Full-stack developer passionate about startups",
        "skills": ["Java", "Spring Boot", "React"],
        "interests": ["Startups", "Web Development", "Entrepreneurship"],
        "open_to_projects": True,
        "open_to_study_partner": True,
        "school_verified": True,
        "current_game": "Chess",
    },
    {
        "email": "fatima.art@collabia.ma",
        "name": "Fatima Zahra",
        "school": "ESAV Marrakech",
        "location": "Marrakech",
        "bio": "UI/UX designer & digital artist",
        "skills": ["Art", "Figma", "Illustration"],
        "interests": ["UI/UX", "Design", "Startups"],
        "open_to_helping_others": True,
        "open_to_projects": True,
        "school_verified": True,
        "current_skill": "Blender",
    },
    {
        "email": "mehdi.python@collabia.ma",
        "name": "Mehdi Idrissi",
        "school": "ENSAM Casablanca",
        "location": "Casablanca",
        "bio": "Data scientist building SaaS tools",
        "skills": ["Python", "Data Science", "TensorFlow"],
        "interests": ["SAAS", "AI", "Machine Learning"],
        "open_to_cofounder": True,
        "school_verified": True,
        "current_book": "the lean startup",
    },
    {
        "email": "omar.java@collabia.ma",
        "name": "Omar Alaoui",
        "school": "EMSI Casablanca",
        "location": "Casablanca",
        "bio": "Backend engineer, startup enthusiast",
        "skills": ["Java", "Python", "Microservices"],
        "interests": ["Startups", "SAAS", "Tech"],
        "open_to_cofounder": True,
        "open_to_projects": True,
        "school_verified": False,
        "current_game": "chess",
    },
    {
        "email": "yasmine.uiux@collabia.ma",
        "name": "Yasmine Tazi",
        "school": "ENSA Fes",
        "location": "Fes",
        "bio": "UX researcher & product designer",
        "skills": ["Art", "UI/UX", "User Research"],
        "interests": ["UI/UX", "SAAS", "Product Design"],
        "open_to_projects": True,
        "open_to_study_partner": True,
        "school_verified": True,
        "current_skill": "blender",
    },
]


async def seed():
    async with async_session_factory() as session:
        for u in DEMO_USERS:
            existing = await session.execute(
                select(User).where(User.email == u["email"])
            )
            if existing.scalar_one_or_none() is None:
                session.add(User(**u))
                print(f"  Seeded user {u['email']}")
            else:
                print(f"  User {u['email']} already exists, skipping.")
        await session.commit()
    print("Done seeding users.")


if __name__ == "__main__":
    asyncio.run(seed())
