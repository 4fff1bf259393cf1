"""Shared fixtures: a fresh SQLite database per test, seeded with a small world."""

import os
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

os.environ.setdefault("ECOGANHA_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ECOGANHA_LEDGER_AUDIT_ENABLED", "false")

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from ecoganha.core.database import Base
from ecoganha.models import (
    EcoPoint,
    Material,
    Offer,
    Partner,
    RecycleTransaction,
    Redemption,
    User,
    UserRole,
)


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ecoganha.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _enforce_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def world(session_factory):
    """Accounts, materials, an eco point and offers shared by most tests."""

    async with session_factory() as session:
        admin = User(name="Admin", phone="11900000000", role=UserRole.ADMIN)
        operator = User(name="Olga Operator", phone="11900000001", role=UserRole.OPERATOR)
        other_operator = User(name="Otto Operator", phone="11900000002", role=UserRole.OPERATOR)
        partner_user = User(name="Café Verde", phone="11900000003", role=UserRole.PARTNER)
        other_partner_user = User(name="Livraria Azul", phone="11900000004", role=UserRole.PARTNER)
        ana = User(name="Ana Souza", phone="11999990000", role=UserRole.REGULAR, points=100)
        bruno = User(name="Bruno Lima", phone="11999990001", role=UserRole.REGULAR, points=100)
        carla = User(name="Carla Dias", phone="11999990002", role=UserRole.REGULAR, points=10)
        session.add_all([admin, operator, other_operator, partner_user, other_partner_user, ana, bruno, carla])
        await session.flush()

        partner = Partner(user_id=partner_user.id, business_name="Café Verde Ltda")
        other_partner = Partner(user_id=other_partner_user.id, business_name="Livraria Azul")
        session.add_all([partner, other_partner])

        pet = Material(name="PET", points_per_kg=Decimal("10.00"), points_per_unit=5)
        glass = Material(name="Glass", points_per_kg=Decimal("4.50"), points_per_unit=None)
        cardboard = Material(name="Cardboard", points_per_kg=None, points_per_unit=2)
        metal = Material(name="Metal", points_per_kg=Decimal("20.00"), points_per_unit=8)
        session.add_all([pet, glass, cardboard, metal])
        await session.flush()

        central = EcoPoint(name="Praça Central", operator_id=operator.id, materials=[pet, glass, cardboard])
        harbour = EcoPoint(name="Porto", operator_id=other_operator.id, materials=[metal])
        session.add_all([central, harbour])

        coffee = Offer(partner_id=partner.id, title="Free coffee", description="One espresso", points=40, quantity=10)
        last_unit = Offer(partner_id=partner.id, title="Mug", points=30, quantity=1)
        sold_out = Offer(partner_id=partner.id, title="Tote bag", points=20, quantity=0)
        expired = Offer(
            partner_id=partner.id,
            title="Summer discount",
            points=10,
            quantity=5,
            valid_until=date.today() - timedelta(days=2),
        )
        foreign = Offer(partner_id=other_partner.id, title="Bookmark", points=5, quantity=3)
        session.add_all([coffee, last_unit, sold_out, expired, foreign])
        await session.commit()

        return SimpleNamespace(
            admin_id=admin.id,
            operator_id=operator.id,
            other_operator_id=other_operator.id,
            partner_user_id=partner_user.id,
            other_partner_user_id=other_partner_user.id,
            partner_id=partner.id,
            ana_id=ana.id,
            bruno_id=bruno.id,
            carla_id=carla.id,
            pet_id=pet.id,
            glass_id=glass.id,
            cardboard_id=cardboard.id,
            metal_id=metal.id,
            central_id=central.id,
            harbour_id=harbour.id,
            coffee_id=coffee.id,
            last_unit_id=last_unit.id,
            sold_out_id=sold_out.id,
            expired_id=expired.id,
            foreign_offer_id=foreign.id,
        )


@pytest.fixture
def ledger(session_factory):
    """Read committed state through a separate session."""

    async def _points(user_id):
        async with session_factory() as session:
            return (await session.execute(select(User.points).where(User.id == user_id))).scalar_one()

    async def _stock(offer_id):
        async with session_factory() as session:
            return (await session.execute(select(Offer.quantity).where(Offer.id == offer_id))).scalar_one()

    async def _deposits(user_id):
        async with session_factory() as session:
            stmt = select(func.count(RecycleTransaction.id)).where(RecycleTransaction.user_id == user_id)
            return (await session.execute(stmt)).scalar_one()

    async def _redemptions(offer_id):
        async with session_factory() as session:
            stmt = select(func.count(Redemption.id)).where(Redemption.offer_id == offer_id)
            return (await session.execute(stmt)).scalar_one()

    return SimpleNamespace(points=_points, stock=_stock, deposits=_deposits, redemptions=_redemptions)
