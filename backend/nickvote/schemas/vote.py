from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime

class VoteItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: UUID = Field(alias="studentId")
    nickname: str | None = None

class VoteSubmission(BaseModel):
    votes: list[VoteItem]

class VoteAccepted(BaseModel):
    success: bool = True
    message: str = "Votes submitted successfully"
    votesCount: int

class ClassmatePublic(BaseModel):
    id: UUID
    name: str
    username: str

class ClassmateList(BaseModel):
    students: list[ClassmatePublic]

class StudentResult(BaseModel):
    id: UUID
    name: str
    username: str
    winning_nickname: str
    vote_count: int
    first_suggested: datetime | None = None

class VotingStatistics(BaseModel):
    total_voters: int
    total_votes: int
    students_with_votes: int

class ResultsResponse(BaseModel):
    results: list[StudentResult]
    statistics: VotingStatistics
