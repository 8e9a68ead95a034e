"""Tests for the /register form."""

from fastapi.testclient import TestClient
from sqlmodel import Session, select

from stager.models import RegisteredDevice


def test_register_form_renders(client: TestClient, db_session: Session) -> None:
    r = client.get("/register")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert 'name="sn"' in r.text


def test_register_new_serial(client: TestClient, db_session: Session) -> None:
    r = client.post("/register", data={"sn": " c38jcatydtwf "})
    assert r.status_code == 200
    assert "<b>C38JCATYDTWF</b>" in r.text
    assert "is now registered locally!" in r.text
    rows = db_session.exec(select(RegisteredDevice)).all()
    assert [row.serial_number for row in rows] == ["C38JCATYDTWF"]


def test_register_existing_serial(client: TestClient, db_session: Session) -> None:
    client.post("/register", data={"sn": "C38JCATYDTWF"})
    r = client.post("/register", data={"sn": "c38jcatydtwf"})
    assert r.status_code == 200
    assert "is already registered." in r.text
    assert len(db_session.exec(select(RegisteredDevice)).all()) == 1


def test_register_requires_serial(client: TestClient, db_session: Session) -> None:
    r = client.post("/register", data={"sn": "   "})
    assert r.status_code == 400
    assert "Serial number is required." in r.text
    assert db_session.exec(select(RegisteredDevice)).all() == []
