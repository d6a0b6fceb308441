# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

Database-backed fixtures create the schema with Base.metadata.create_all
on an async engine. The URL comes from TEST_DATABASE_URL and defaults to an
in-process SQLite database, so the suite runs without external services.
"""

import os
from collections.abc import AsyncGenerator, Iterator
from dataclasses import dataclass, field
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")

from school_portal.core.config import clear_settings_cache  # noqa: E402
from school_portal.domains.auth.password import PasswordHasher  # noqa: E402
from school_portal.domains.identity import IdentityContext  # noqa: E402
from school_portal.infrastructure.database.connection import build_engine, build_sessionmaker  # noqa: E402
from school_portal.infrastructure.database.models import (  # noqa: E402
    AdminProfile,
    AdminReview,
    Base,
    ClassSection,
    FacultyProfile,
    FacultySubject,
    ParentProfile,
    School,
    StudentEnrollment,
    StudentProfile,
    Subject,
    TeachingAssignment,
    TermResult,
    User,
    new_id,
)
from school_portal.models.common import Role  # noqa: E402

TEST_PASSWORD = "correct-horse"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test (uses a database)")


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Settings are cached process-wide; make every test start clean."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_db_url() -> str:
    return os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture(scope="function")
async def db_engine(test_db_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine with a freshly created schema."""
    engine = build_engine(test_db_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with build_sessionmaker(db_engine)() as session:
        yield session
        await session.rollback()


# =============================================================================
# Two-school world
# =============================================================================


@dataclass
class World:
    """Ids and identities of the seeded two-school dataset."""

    ids: dict[str, str] = field(default_factory=dict)
    identities: dict[str, IdentityContext] = field(default_factory=dict)
    emails: dict[str, str] = field(default_factory=dict)
    password: str = TEST_PASSWORD

    def __getitem__(self, key: str) -> str:
        return self.ids[key]


def _user(world: World, key: str, role: Role, school_id: str | None, email: str) -> User:
    user = User(
        id=new_id(),
        email=email,
        mobile=None,
        password_hash=world.ids["__hash"],
        role=role.value,
        is_active=True,
        school_id=school_id,
    )
    world.ids[f"user:{key}"] = user.id
    world.emails[key] = email
    world.identities[key] = IdentityContext(user_id=user.id, role=role, school_id=school_id)
    return user


@pytest_asyncio.fixture(scope="function")
async def world(db_session: AsyncSession) -> World:
    """Seed two schools.

    School A:
        sections 9-A, 10-B; subjects Mathematics, Physics
        faculty alice (Math to 9-A), bob (Physics to 10-B), carol (no classes)
        students dan, eve (9-A), frank (10-B); parent of dan
        admins zed (school), amy (academic)
    School B:
        section 9-A; subject Mathematics
        faculty xavier (Math to 9-A); student yara (9-A); admin bea
    Plus a super-admin without a school.
    """
    world = World()
    world.ids["__hash"] = PasswordHasher(rounds=4).hash(TEST_PASSWORD)
    rows: list = []

    school_a = School(id=new_id(), name="Alpha High", address="1 Alpha Road", phone="555-0100")
    school_b = School(id=new_id(), name="Beta Academy", address="2 Beta Street", phone="555-0200")
    rows += [school_a, school_b]
    world.ids.update(school_a=school_a.id, school_b=school_b.id)

    sec_a9 = ClassSection(id=new_id(), school_id=school_a.id, grade=9, section="A")
    sec_a10 = ClassSection(id=new_id(), school_id=school_a.id, grade=10, section="B")
    sec_b9 = ClassSection(id=new_id(), school_id=school_b.id, grade=9, section="A")
    math_a = Subject(id=new_id(), school_id=school_a.id, name="Mathematics", code="MATH")
    phys_a = Subject(id=new_id(), school_id=school_a.id, name="Physics", code="PHY")
    math_b = Subject(id=new_id(), school_id=school_b.id, name="Mathematics", code="MATH")
    rows += [sec_a9, sec_a10, sec_b9, math_a, phys_a, math_b]
    world.ids.update(sec_a9=sec_a9.id, sec_a10=sec_a10.id, sec_b9=sec_b9.id, math_a=math_a.id, phys_a=phys_a.id)

    def faculty(key, school, name, years, subjects, teaches):
        user = _user(world, key, Role.FACULTY, school.id, f"{key}@{school.name.split()[0].lower()}.test")
        profile = FacultyProfile(
            id=new_id(),
            user_id=user.id,
            school_id=school.id,
            name=name,
            designation="Teacher",
            qualifications="B.Ed",
            years_of_experience=years,
        )
        world.ids[key] = profile.id
        links = [FacultySubject(faculty_id=profile.id, subject_id=s.id) for s in subjects]
        assignments = [
            TeachingAssignment(
                id=new_id(),
                school_id=school.id,
                faculty_id=profile.id,
                class_section_id=section.id,
                subject_id=subject.id,
            )
            for section, subject in teaches
        ]
        return [user, profile, *links, *assignments]

    rows += faculty("alice", school_a, "Alice Smith", 5, [math_a], [(sec_a9, math_a)])
    rows += faculty("bob", school_a, "Bob Jones", 10, [phys_a], [(sec_a10, phys_a)])
    rows += faculty("carol", school_a, "Carol White", 2, [math_a], [])
    rows += faculty("xavier", school_b, "Xavier Stone", 7, [math_b], [(sec_b9, math_b)])

    def student(key, school, name, roll, section):
        user = _user(world, key, Role.STUDENT, school.id, f"{key}@{school.name.split()[0].lower()}.test")
        profile = StudentProfile(
            id=new_id(),
            user_id=user.id,
            school_id=school.id,
            name=name,
            roll_number=roll,
            grade=section.grade,
            section=section.section,
            parent_name=f"Parent of {name}",
        )
        world.ids[key] = profile.id
        enrollment = StudentEnrollment(id=new_id(), student_id=profile.id, class_section_id=section.id)
        return [user, profile, enrollment]

    rows += student("dan", school_a, "Dan Brown", "01", sec_a9)
    rows += student("eve", school_a, "Eve Adams", "02", sec_a9)
    rows += student("frank", school_a, "Frank Moore", "01", sec_a10)
    rows += student("yara", school_b, "Yara Lee", "01", sec_b9)

    parent_user = _user(world, "dan_parent", Role.PARENT, school_a.id, "parent@alpha.test")
    parent = ParentProfile(
        id=new_id(),
        user_id=parent_user.id,
        school_id=school_a.id,
        student_id=world["dan"],
        name="Dana Brown",
        contact="555-0111",
    )
    world.ids["dan_parent"] = parent.id
    rows += [parent_user, parent]

    def admin(key, role, school, name, designation):
        school_id = school.id if school is not None else None
        user = _user(world, key, role, school_id, f"{key}@portal.test")
        profile = AdminProfile(
            id=new_id(), user_id=user.id, school_id=school_id, name=name, designation=designation
        )
        world.ids[key] = profile.id
        return [user, profile]

    rows += admin("zed", Role.SCHOOL_ADMIN, school_a, "Zed Admin", "Principal")
    rows += admin("amy", Role.ACADEMIC_ADMIN, school_a, "Amy Academic", "Academic Head")
    rows += admin("bea", Role.SCHOOL_ADMIN, school_b, "Bea Admin", "Principal")
    rows += admin("root", Role.SUPER_ADMIN, None, "Root Admin", "Platform")

    rows.append(
        TermResult(
            id=new_id(),
            school_id=school_a.id,
            student_id=world["dan"],
            subject_id=math_a.id,
            term="Term 1",
            marks=Decimal("88.50"),
            max_marks=Decimal("100"),
        )
    )
    rows.append(AdminReview(id=new_id(), school_id=school_a.id, rating=4, category="facilities", comment="Clean"))

    db_session.add_all(rows)
    await db_session.commit()
    return world
