from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from googleapiclient.errors import HttpError
from httplib2 import Response

from catalog.services.storage import FOLDER_MIME_TYPE
from main import app

CONFIG_VARS = (
    "GOOGLE_DRIVE_FOLDER_ID",
    "GOOGLE_CREDENTIALS_JSON",
    "ENVIRONMENT",
    "LOCAL_STORAGE_PATH",
    "CATALOG_INCLUDE_VIDEOS",
    "CATALOG_DOCX_METADATA",
    "PANDOC_PATH",
    "PANDOC_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep settings from a developer's .env out of the tests."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


def drive_error(status: int = 500) -> HttpError:
    return HttpError(Response({"status": str(status), "reason": "Backend Error"}), b"")


def make_drive_service(tree, contents=None, failing=()):
    """
    Build a mock Drive v3 service.

    Args:
        tree: {parent_id: [{"id", "name", "mimeType"}, ...]}
        contents: {file_id: bytes} returned by downloads
        failing: parent ids whose listing raises an HttpError
    """
    contents = contents or {}
    service = MagicMock()

    def list_files(q, **kwargs):
        parent_id = q.split("'")[1]
        request = MagicMock()
        if parent_id in failing:
            request.execute.side_effect = drive_error()
            return request

        entries = tree.get(parent_id, [])
        if f"mimeType='{FOLDER_MIME_TYPE}'" in q:
            entries = [
                {"id": e["id"], "name": e["name"]}
                for e in entries
                if e.get("mimeType") == FOLDER_MIME_TYPE
            ]
        request.execute.return_value = {"files": entries}
        return request

    def get_media(fileId):
        request = MagicMock()
        if fileId in contents:
            request.execute.return_value = contents[fileId]
        else:
            request.execute.side_effect = drive_error(404)
        return request

    service.files.return_value.list.side_effect = list_files
    service.files.return_value.get_media.side_effect = get_media
    return service


def folder(folder_id: str, name: str = None) -> dict:
    return {"id": folder_id, "name": name or folder_id, "mimeType": FOLDER_MIME_TYPE}


def file(file_id: str, name: str, mime_type: str) -> dict:
    return {"id": file_id, "name": name, "mimeType": mime_type}


@pytest.fixture
def drive_tree():
    """A root folder with three items, the last one without metadata."""
    return {
        "root": [
            folder("item-1", "Chair"),
            folder("item-2", "Table"),
            folder("item-3", "Lamp"),
            file("stray", "readme.txt", "text/plain"),
        ],
        "item-1": [
            file("meta-1", "metadata.txt", "text/plain"),
            file("img-1a", "front.jpg", "image/jpeg"),
            file("img-1b", "back.png", "image/png"),
            file("vid-1", "spin.mp4", "video/mp4"),
        ],
        "item-2": [
            file("img-2", "top.webp", "image/webp"),
            file("meta-2", "metadata.txt", "text/plain"),
            file("doc-2", "invoice.pdf", "application/pdf"),
        ],
        "item-3": [
            file("img-3", "lamp.gif", "image/gif"),
        ],
    }


@pytest.fixture
def drive_contents():
    return {
        "meta-1": b"Title: Oak Chair\nsubtitle: Handmade\ndescription: Solid oak: oiled\ncode: CH-01\n",
        "meta-2": b"title: Side Table\ncode: TB-07\n",
    }


@pytest.fixture
def local_catalog(tmp_path):
    """Create a local storage tree with a root folder holding two items."""
    root = tmp_path / "catalog"
    first = root / "01-chair"
    first.mkdir(parents=True)
    (first / "metadata.txt").write_text("title: Oak Chair\ncode: CH-01\n")
    (first / "front.jpg").write_bytes(b"\xff\xd8")
    (first / "spin.mp4").write_bytes(b"\x00")
    (first / "notes.pdf").write_bytes(b"%PDF")

    second = root / "02-table"
    second.mkdir()
    (second / "top.png").write_bytes(b"\x89PNG")
    (second / ".hidden.png").write_bytes(b"\x89PNG")

    (root / "loose.jpg").write_bytes(b"\xff\xd8")
    return tmp_path
