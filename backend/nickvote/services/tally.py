from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence
from sqlalchemy import select, func, distinct
from sqlalchemy.ext.asyncio import AsyncSession

from nickvote.models.student import Student
from nickvote.models.vote import Vote
from nickvote.schemas.vote import StudentResult, VotingStatistics

NO_NICKNAME = "No nickname suggested"

@dataclass
class NicknameTally:
    nickname: str
    count: int
    first_suggested: datetime

    def rank_key(self):
        # Most votes, then earliest suggestion, then alphabetical
        return (-self.count, self.first_suggested, self.nickname)

def tally_nicknames(votes: Iterable[Vote]) -> dict[str, NicknameTally]:
    """Group votes by exact nickname text, counting and tracking first suggestion."""
    groups: dict[str, NicknameTally] = {}
    for v in votes:
        t = groups.get(v.nickname)
        if t is None:
            groups[v.nickname] = NicknameTally(v.nickname, 1, v.created_at)
            continue
        t.count += 1
        if v.created_at < t.first_suggested:
            t.first_suggested = v.created_at
    return groups

def pick_winner(groups: dict[str, NicknameTally]) -> NicknameTally | None:
    if not groups:
        return None
    return min(groups.values(), key=NicknameTally.rank_key)

def compute_results(students: Sequence[Student], votes: Sequence[Vote]) -> list[StudentResult]:
    """
    Winning nickname per student.

    Pure: no I/O. Students with no votes get the NO_NICKNAME sentinel with a
    zero count. Output is ordered by name (then id, so equal names stay put).
    """
    by_target: dict = {}
    for v in votes:
        by_target.setdefault(v.target_student_id, []).append(v)

    results = []
    for s in sorted(students, key=lambda s: (s.name, str(s.id))):
        winner = pick_winner(tally_nicknames(by_target.get(s.id, [])))
        results.append(StudentResult(
            id=s.id,
            name=s.name,
            username=s.username,
            winning_nickname=winner.nickname if winner else NO_NICKNAME,
            vote_count=winner.count if winner else 0,
            first_suggested=winner.first_suggested if winner else None,
        ))
    return results

async def voting_results(session: AsyncSession) -> list[StudentResult]:
    students = (await session.execute(select(Student).order_by(Student.name.asc()))).scalars().all()
    votes = (await session.execute(select(Vote).order_by(Vote.created_at.asc()))).scalars().all()
    return compute_results(students, votes)

async def voting_statistics(session: AsyncSession) -> VotingStatistics:
    total_voters = await session.scalar(
        select(func.count()).select_from(Student).where(Student.has_voted.is_(True))
    )
    total_votes = await session.scalar(select(func.count()).select_from(Vote))
    students_with_votes = await session.scalar(select(func.count(distinct(Vote.target_student_id))))
    return VotingStatistics(
        total_voters=int(total_voters or 0),
        total_votes=int(total_votes or 0),
        students_with_votes=int(students_with_votes or 0),
    )
