from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable
from uuid import UUID
import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nickvote.errors import AlreadyVoted, InternalError, NotFound, ValidationFailed
from nickvote.models.student import Student
from nickvote.models.vote import Vote, NICKNAME_MAX
from nickvote.schemas.vote import VoteItem

log = structlog.get_logger()

@dataclass(frozen=True)
class Ballot:
    student_id: UUID
    nickname: str

def clean_ballots(items: Iterable[VoteItem]) -> list[Ballot]:
    """Trim nicknames and drop blank ones. Raises ValidationFailed if nothing is left."""
    ballots = []
    for item in items:
        nickname = (item.nickname or "").strip()
        if not nickname:
            continue
        if len(nickname) > NICKNAME_MAX:
            raise ValidationFailed(f"Nickname must be at most {NICKNAME_MAX} characters")
        ballots.append(Ballot(item.student_id, nickname))
    if not ballots:
        raise ValidationFailed("No valid votes provided")
    return ballots

async def submit_votes(session: AsyncSession, voter_id: UUID, items: Iterable[VoteItem]) -> int:
    """
    Record one student's nickname suggestions, at most once per student.

    Claiming the has_voted flag, validating the ballots, checking the targets
    and inserting the votes all happen in one transaction, in that order. The
    conditional UPDATE is what serialises concurrent submissions from the same
    voter: the loser blocks on the row (or database) lock and then matches no
    row. Any failure rolls back every vote and leaves the flag untouched.

    Returns the number of votes stored.
    """
    try:
        async with session.begin():
            claimed = await session.execute(
                update(Student)
                .where(Student.id == voter_id, Student.has_voted.is_(False))
                .values(has_voted=True)
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount == 0:
                voter = await session.scalar(select(Student).where(Student.id == voter_id))
                if voter is None:
                    raise NotFound("Student not found")
                log.info("vote_rejected", voter_id=str(voter_id), reason="already_voted")
                raise AlreadyVoted()

            # After the claim: a rejection here rolls the claim back
            ballots = clean_ballots(items)
            target_ids = {b.student_id for b in ballots}
            found = set((await session.execute(
                select(Student.id).where(Student.id.in_(list(target_ids)))
            )).scalars().all())
            missing = target_ids - found
            if missing:
                log.info("vote_rejected", voter_id=str(voter_id), reason="unknown_target", missing=len(missing))
                raise NotFound("Student not found")

            session.add_all([
                Vote(voter_id=voter_id, target_student_id=b.student_id, nickname=b.nickname)
                for b in ballots
            ])
            await session.flush()
    except SQLAlchemyError as e:
        log.exception("vote_transaction_failed", voter_id=str(voter_id))
        raise InternalError() from e

    log.info("votes_submitted", voter_id=str(voter_id), count=len(ballots))
    return len(ballots)
