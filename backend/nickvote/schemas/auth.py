from __future__ import annotations
from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field
from uuid import UUID

class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class StudentPrincipal(BaseModel):
    role: Literal["student"] = "student"
    id: UUID
    username: str
    name: str
    has_voted: bool = False

class AdminPrincipal(BaseModel):
    role: Literal["admin"] = "admin"
    id: UUID
    username: str

Principal = Annotated[Union[StudentPrincipal, AdminPrincipal], Field(discriminator="role")]

class StudentPublic(BaseModel):
    id: UUID
    username: str
    name: str
    role: Literal["student"] = "student"
    hasVoted: bool

class AdminPublic(BaseModel):
    id: UUID
    username: str
    role: Literal["admin"] = "admin"

class StudentLoginResponse(BaseModel):
    success: bool = True
    user: StudentPublic

class AdminLoginResponse(BaseModel):
    success: bool = True
    admin: AdminPublic
