from __future__ import annotations
import asyncio
import uuid

import pytest
from sqlalchemy import func, select

from nickvote.errors import AlreadyVoted, NotFound, ValidationFailed
from nickvote.models.student import Student
from nickvote.models.vote import Vote
from nickvote.schemas.vote import VoteItem
from nickvote.services.voting import clean_ballots, submit_votes
from conftest import make_student


async def _vote_count(db) -> int:
    async with db.session() as session:
        return int(await session.scalar(select(func.count()).select_from(Vote)))


async def _has_voted(db, student_id) -> bool:
    async with db.session() as session:
        return (await session.get(Student, student_id)).has_voted


def test_clean_ballots_trims_and_drops_blanks():
    sid = uuid.uuid4()
    ballots = clean_ballots([
        VoteItem(studentId=sid, nickname="  Ace  "),
        VoteItem(studentId=uuid.uuid4(), nickname="   "),
        VoteItem(studentId=uuid.uuid4(), nickname=None),
    ])
    assert [(b.student_id, b.nickname) for b in ballots] == [(sid, "Ace")]


def test_clean_ballots_rejects_long_nickname():
    with pytest.raises(ValidationFailed):
        clean_ballots([VoteItem(studentId=uuid.uuid4(), nickname="x" * 51)])
    # 50 after trimming is fine
    assert clean_ballots([VoteItem(studentId=uuid.uuid4(), nickname=" " + "x" * 50 + " ")])


@pytest.mark.asyncio
async def test_submit_stores_votes_and_sets_flag(db):
    voter = await make_student(db, "Ana")
    ben = await make_student(db, "Ben")
    cleo = await make_student(db, "Cleo")

    async with db.session() as session:
        n = await submit_votes(session, voter.id, [
            VoteItem(studentId=ben.id, nickname=" Benny "),
            VoteItem(studentId=cleo.id, nickname="Clee"),
            VoteItem(studentId=cleo.id, nickname=""),
        ])
    assert n == 2
    assert await _has_voted(db, voter.id)
    async with db.session() as session:
        rows = (await session.execute(select(Vote).order_by(Vote.nickname))).scalars().all()
    assert [(v.voter_id, v.target_student_id, v.nickname) for v in rows] == [
        (voter.id, ben.id, "Benny"),
        (voter.id, cleo.id, "Clee"),
    ]


@pytest.mark.asyncio
async def test_already_voted_is_rejected_without_new_rows(db):
    voter = await make_student(db, "Ana", has_voted=True)
    ben = await make_student(db, "Ben")
    async with db.session() as session:
        with pytest.raises(AlreadyVoted):
            await submit_votes(session, voter.id, [VoteItem(studentId=ben.id, nickname="Benny")])
    assert await _vote_count(db) == 0


@pytest.mark.asyncio
async def test_second_submission_is_rejected(db):
    voter = await make_student(db, "Ana")
    ben = await make_student(db, "Ben")
    async with db.session() as session:
        await submit_votes(session, voter.id, [VoteItem(studentId=ben.id, nickname="Benny")])
    async with db.session() as session:
        with pytest.raises(AlreadyVoted):
            await submit_votes(session, voter.id, [VoteItem(studentId=ben.id, nickname="Other")])
    assert await _vote_count(db) == 1


@pytest.mark.asyncio
async def test_whitespace_only_submission_is_rejected(db):
    voter = await make_student(db, "Ana")
    ben = await make_student(db, "Ben")
    async with db.session() as session:
        with pytest.raises(ValidationFailed):
            await submit_votes(session, voter.id, [VoteItem(studentId=ben.id, nickname="  \t ")])
        with pytest.raises(ValidationFailed):
            await submit_votes(session, voter.id, [])
    assert await _vote_count(db) == 0
    assert not await _has_voted(db, voter.id)


@pytest.mark.asyncio
async def test_unknown_target_rolls_back_everything(db):
    voter = await make_student(db, "Ana")
    ben = await make_student(db, "Ben")
    async with db.session() as session:
        with pytest.raises(NotFound):
            await submit_votes(session, voter.id, [
                VoteItem(studentId=ben.id, nickname="Benny"),
                VoteItem(studentId=uuid.uuid4(), nickname="Ghost"),
            ])
    assert await _vote_count(db) == 0
    assert not await _has_voted(db, voter.id)


@pytest.mark.asyncio
async def test_unknown_voter_is_not_found(db):
    ben = await make_student(db, "Ben")
    async with db.session() as session:
        with pytest.raises(NotFound):
            await submit_votes(session, uuid.uuid4(), [VoteItem(studentId=ben.id, nickname="Benny")])
    assert await _vote_count(db) == 0


@pytest.mark.asyncio
async def test_concurrent_submissions_only_one_succeeds(db):
    voter = await make_student(db, "Ana")
    ben = await make_student(db, "Ben")

    async def attempt(nickname):
        async with db.session() as session:
            try:
                return await submit_votes(session, voter.id, [VoteItem(studentId=ben.id, nickname=nickname)])
            except AlreadyVoted:
                return "already_voted"

    outcomes = await asyncio.gather(attempt("First"), attempt("Second"))
    assert sorted(outcomes, key=str) == [1, "already_voted"]
    assert await _vote_count(db) == 1


@pytest.mark.asyncio
async def test_already_voted_wins_over_empty_ballot(db):
    voter = await make_student(db, "Ana", has_voted=True)
    async with db.session() as session:
        with pytest.raises(AlreadyVoted):
            await submit_votes(session, voter.id, [])
    assert await _has_voted(db, voter.id)
