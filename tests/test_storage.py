import io
import logging
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from jobboard_api.config import settings
from jobboard_api.errors import InvalidInput
from jobboard_api.services import storage


def _upload(name: str, content: bytes = b"data", content_type: str = "image/png") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=name, headers=Headers({"content-type": content_type}))


def test_save_uploads_returns_public_urls():
    urls = storage.save_uploads([_upload("logo.png")], "http://jobs.example.com/")
    assert len(urls) == 1
    assert urls[0].startswith("http://jobs.example.com/uploads/jobs/")
    assert storage.path_for_url(urls[0]).read_bytes() == b"data"


def test_same_name_uploads_get_their_own_files():
    contents = [f"F{i}".encode() for i in range(5)]
    urls = storage.save_uploads([_upload("a.png", c) for c in contents], "http://x/")
    assert len(set(urls)) == 5
    assert [storage.path_for_url(u).read_bytes() for u in urls] == contents


def test_no_uploads_is_empty():
    assert storage.save_uploads(None, "http://x/") == []
    assert storage.save_uploads([], "http://x/") == []


def test_client_directories_are_stripped():
    urls = storage.save_uploads([_upload("../../etc/passwd.png")], "http://x/")
    assert urls[0].endswith("-passwd.png")
    assert storage.path_for_url(urls[0]).parent == (Path(settings.UPLOAD_DIR) / "jobs").resolve()


def test_extension_and_content_type_must_both_match():
    with pytest.raises(InvalidInput):
        storage.save_uploads([_upload("fake.png", content_type="text/html")], "http://x/")
    with pytest.raises(InvalidInput):
        storage.save_uploads([_upload("page.html", content_type="image/png")], "http://x/")


def test_word_documents_are_allowed():
    urls = storage.save_uploads([_upload("cv.doc", content_type="application/msword")], "http://x/")
    assert urls[0].endswith("-cv.doc")


def test_oversized_upload_leaves_nothing_behind(monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)
    files = [_upload("small.png", b"ok"), _upload("big.png", b"x" * 11)]
    with pytest.raises(InvalidInput):
        storage.save_uploads(files, "http://x/")
    assert list(storage.media_dir().iterdir()) == []


def test_too_many_files(monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_FILES", 1)
    with pytest.raises(InvalidInput):
        storage.save_uploads([_upload("a.png"), _upload("b.png")], "http://x/")


def test_path_for_url_rejects_foreign_urls():
    assert storage.path_for_url("https://cdn.example.com/img/a.png") is None
    assert storage.path_for_url("http://x/uploads/../../secrets.txt") is None


def test_delete_media_is_best_effort(monkeypatch, caplog):
    urls = storage.save_uploads([_upload("a.png"), _upload("b.png")], "http://x/")

    real_remove = storage.os.remove

    def flaky_remove(path):
        if str(path).endswith("-a.png"):
            raise PermissionError("read-only")
        real_remove(path)

    monkeypatch.setattr(storage.os, "remove", flaky_remove)
    with caplog.at_level(logging.WARNING, logger=storage.logger.name):
        removed = storage.delete_media(urls + ["https://cdn.example.com/c.png"])

    assert removed == 1
    assert "Error deleting file" in caplog.text
    assert storage.path_for_url(urls[0]).exists()
    assert not storage.path_for_url(urls[1]).exists()
