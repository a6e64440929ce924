"""
Database seeding script for initial users.

Creates an ADMIN and a RESIDENT account for local development.
Run this script after database is set up but before first use.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.app.db.session import AsyncSessionLocal, engine, Base
from backend.app.models.user import User
from backend.app.models.unit import Unit
from backend.app.models.resident import Resident
from backend.app.models.maintenance_request import MaintenanceRequest
from backend.app.models.document import Document
from backend.app.models.maintenance_charge import MaintenanceCharge
from backend.app.models.assessment import Assessment, AssessmentCharge
from backend.app.models.announcement import Announcement
from backend.app.models.board_member import BoardMember
from backend.app.models.package import Package
from backend.app.models.waitlist import WaitlistEntry
from backend.app.models.audit_log import AuditLog
from backend.app.models.enums import UserRole
from backend.app.core.security import get_password_hash
from sqlalchemy import select

SEED_USERS = [
    ("admin@parkview-towers.com", "admin123", UserRole.ADMIN),
    ("resident@parkview-towers.com", "resident123", UserRole.RESIDENT),
]


async def seed_users():
    """
    Seed initial users with different roles.

    Creates:
    - 1 ADMIN user (managing agent)
    - 1 RESIDENT user
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting user seeding...")

        for email, password, role in SEED_USERS:
            result = await db.execute(select(User).where(User.email == email))
            if result.scalar_one_or_none():
                print(f"ℹ️  {role.value} user {email} already exists, skipping")
                continue

            db.add(User(email=email, password_hash=get_password_hash(password), role=role.value))
            print(f"✅ Created {role.value.upper()} user ({email} / {password})")

        await db.commit()

    await engine.dispose()
    print("\n🎉 User seeding completed successfully!")
    print("\nNote: further accounts are created by an admin via POST /v1/auth/register")


if __name__ == "__main__":
    asyncio.run(seed_users())
