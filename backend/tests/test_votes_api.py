import uuid
from httpx import AsyncClient
import pytest

from conftest import make_student


async def _login(client: AsyncClient, username: str, password: str = "pass1234"):
    r = await client.post("/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["user"]


@pytest.mark.asyncio
async def test_students_excludes_self_and_sorts_by_name(client: AsyncClient, db):
    await make_student(db, "Cleo")
    await make_student(db, "Ben")
    await make_student(db, "Ana", username="ana@school.test", password="pass1234")
    await _login(client, "ana@school.test")

    r = await client.get("/students")
    assert r.status_code == 200
    assert [s["name"] for s in r.json()["students"]] == ["Ben", "Cleo"]


@pytest.mark.asyncio
async def test_vote_flow(client: AsyncClient, db):
    ben = await make_student(db, "Ben")
    cleo = await make_student(db, "Cleo")
    await make_student(db, "Ana", username="ana@school.test", password="pass1234")
    await _login(client, "ana@school.test")

    r = await client.post("/vote", json={"votes": [
        {"studentId": str(ben.id), "nickname": "Benny"},
        {"studentId": str(cleo.id), "nickname": "  "},
    ]})
    assert r.status_code == 200, r.text
    assert r.json() == {"success": True, "message": "Votes submitted successfully", "votesCount": 1}

    # Cookie was refreshed
    me = await client.get("/me")
    assert me.json()["user"]["hasVoted"] is True

    r = await client.post("/vote", json={"votes": [{"studentId": str(cleo.id), "nickname": "Clee"}]})
    assert r.status_code == 400
    assert r.json()["detail"] == "You have already submitted your votes"

    # A fresh login reads the flag from the database
    await client.post("/logout")
    user = await _login(client, "ana@school.test")
    assert user["hasVoted"] is True


@pytest.mark.asyncio
async def test_vote_rejects_empty_and_malformed(client: AsyncClient, db):
    ben = await make_student(db, "Ben")
    await make_student(db, "Ana", username="ana@school.test", password="pass1234")
    await _login(client, "ana@school.test")

    r = await client.post("/vote", json={"votes": []})
    assert r.status_code == 400
    assert r.json()["detail"] == "No valid votes provided"

    r = await client.post("/vote", json={"votes": [{"studentId": str(ben.id), "nickname": "   "}]})
    assert r.status_code == 400

    r = await client.post("/vote", json={})
    assert r.status_code == 400

    r = await client.post("/vote", json={"votes": [{"studentId": "not-an-id", "nickname": "X"}]})
    assert r.status_code == 400

    r = await client.post("/vote", json={"votes": [{"studentId": str(ben.id), "nickname": "x" * 51}]})
    assert r.status_code == 400

    # None of that used up the vote
    assert (await client.get("/me")).json()["user"]["hasVoted"] is False


@pytest.mark.asyncio
async def test_vote_for_unknown_student_is_404(client: AsyncClient, db):
    await make_student(db, "Ana", username="ana@school.test", password="pass1234")
    await _login(client, "ana@school.test")
    r = await client.post("/vote", json={"votes": [{"studentId": str(uuid.uuid4()), "nickname": "Ghost"}]})
    assert r.status_code == 404
    assert r.json()["detail"] == "Student not found"


@pytest.mark.asyncio
async def test_vote_requires_login(client: AsyncClient, db):
    ben = await make_student(db, "Ben")
    r = await client.post("/vote", json={"votes": [{"studentId": str(ben.id), "nickname": "Benny"}]})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_already_voted_reported_before_ballot_problems(client: AsyncClient, db):
    await make_student(db, "Ana", username="ana@school.test", password="pass1234", has_voted=True)
    await _login(client, "ana@school.test")
    r = await client.post("/vote", json={"votes": []})
    assert r.status_code == 400
    assert r.json()["error"] == "You have already submitted your votes"
