import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import func
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.checkin_repository import CheckinRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.checkins import RecordCheckinUseCase
from src.app.use_cases.rsvp import SubmitPublicRsvpUseCase
from src.domain.entities import Checkin, CheckinMethod, Invite, InviteChannel, Rsvp

RACERS = 5


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def single_use_token(db_session, seeded):
    invite = Invite(
        household_id=seeded.household_id,
        guest_id=seeded.adult_id,
        channel=InviteChannel.email,
        max_uses=1,
        token="placeholder",
    )
    token = invite.assign_token()
    db_session.add(invite)
    await db_session.commit()
    return token


@pytest.mark.asyncio
async def test_simultaneous_checkins_store_one_row(session_factory, db_session, wedding_id, seeded):
    async def record():
        async with session_factory() as session:
            use_case = RecordCheckinUseCase(SqlAlchemyUnitOfWork(session))
            return await use_case.execute(
                wedding_id, seeded.adult_id, event_id=seeded.event_id, method="qr"
            )

    results = await asyncio.gather(*[record() for _ in range(RACERS)])

    assert all(result.is_ok() for result in results)
    assert sum(result.value.created for result in results) == 1
    assert sum(result.value.duplicate for result in results) == RACERS - 1
    assert len({result.value.checkin.id for result in results}) == 1

    stored = await db_session.execute(
        select(func.count(Checkin.id)).where(Checkin.guest_id == seeded.adult_id)
    )
    assert stored.scalar_one() == 1


@pytest.mark.asyncio
async def test_simultaneous_submissions_respect_max_uses(
    session_factory, db_session, seeded, single_use_token
):
    async def submit():
        async with session_factory() as session:
            use_case = SubmitPublicRsvpUseCase(SqlAlchemyUnitOfWork(session))
            return await use_case.execute(
                event_id=seeded.event_id, status="confirmed", token=single_use_token
            )

    results = await asyncio.gather(*[submit() for _ in range(RACERS)])

    accepted = [result for result in results if result.is_ok()]
    rejected = [result for result in results if result.is_err()]
    assert len(accepted) == 1
    assert accepted[0].value.invite_uses_count == 1
    assert {result.error.code for result in rejected} == {"INVITE_EXHAUSTED"}

    invite = (
        await db_session.execute(select(Invite).where(Invite.token == single_use_token))
    ).scalar_one()
    assert invite.uses_count == 1

    rsvps = await db_session.execute(
        select(func.count(Rsvp.id)).where(
            Rsvp.guest_id == seeded.adult_id, Rsvp.event_id == seeded.event_id
        )
    )
    assert rsvps.scalar_one() == 1


@pytest.mark.asyncio
async def test_duplicate_insert_keeps_the_transaction_usable(db_session, seeded):
    repository = CheckinRepository(db_session)

    first = await repository.create(
        Checkin(guest_id=seeded.adult_id, event_id=seeded.event_id, method=CheckinMethod.qr)
    )
    second = await repository.create(
        Checkin(guest_id=seeded.adult_id, event_id=seeded.event_id, method=CheckinMethod.manual)
    )
    without_event = await repository.create(
        Checkin(guest_id=seeded.adult_id, method=CheckinMethod.manual)
    )
    again_without_event = await repository.create(
        Checkin(guest_id=seeded.adult_id, method=CheckinMethod.manual)
    )
    await db_session.commit()

    assert first is not None
    assert second is None
    assert without_event is not None
    assert again_without_event is None

    rows = (
        await db_session.execute(select(Checkin).where(Checkin.guest_id == seeded.adult_id))
    ).scalars().all()
    assert {row.id for row in rows} == {first.id, without_event.id}
