import logging
from importlib import resources

from fastapi.testclient import TestClient
from jinja2 import TemplateError

from sakuin.config import Settings
from sakuin.main import create_app
from sakuin.routes import browse

from .conftest import BAD_NAME_BYTES, REPORT_BYTES


def test_root_listing(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    for name in ("a/", "docs/", "report.pdf", ".hidden"):
        assert name in response.text
    assert 'href="/report.pdf"' in response.text
    assert 'href="/docs"' in response.text


def test_directory_breadcrumbs(client):
    response = client.get("/a/b/c")
    assert response.status_code == 200
    assert 'href="/a"' in response.text
    assert 'href="/a/b"' in response.text
    assert '<span class="current">c</span>' in response.text
    assert response.text.index('href="/a"') < response.text.index('href="/a/b"')


def test_directory_trailing_slash(client):
    assert client.get("/docs/").status_code == 200


def test_not_found(client):
    first = client.get("/nope")
    second = client.get("/docs/missing.txt")
    assert first.status_code == 404
    assert second.status_code == 404
    assert "404 page not found" in first.text
    assert first.content == second.content


def test_not_found_is_logged_at_info(client, caplog):
    caplog.set_level(logging.INFO, logger="sakuin")
    client.get("/nope")
    records = [r for r in caplog.records if r.getMessage() == "404 - /nope"]
    assert records and records[0].levelno == logging.INFO


def test_file_download(client):
    response = client.get("/report.pdf")
    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="report.pdf"'
    assert response.content == REPORT_BYTES


def test_file_head(client):
    response = client.head("/report.pdf")
    assert response.status_code == 200
    assert response.headers["content-length"] == str(len(REPORT_BYTES))


def test_nested_file_download(client):
    response = client.get("/docs/notes.txt")
    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="notes.txt"'
    assert response.text == "hello\n"


def test_traversal_is_contained(client):
    response = client.get("/%2e%2e/outside.txt")
    assert response.status_code == 404
    assert "secret" not in response.text


def test_same_request_twice_is_identical(client):
    assert client.get("/").content == client.get("/").content
    assert client.get("/report.pdf").content == client.get("/report.pdf").content


def test_asset(client):
    response = client.get("/assets/css/style.css")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/css")


def test_asset_miss_serves_not_found_document(client):
    expected = resources.files("sakuin.web").joinpath("dist", "404.html").read_bytes()
    response = client.get("/assets/js/missing.js")
    assert response.status_code == 200
    assert response.content == expected


def test_enumeration_failure(client, monkeypatch, caplog):
    def fail(directory, display_path):
        raise PermissionError(13, "Permission denied", directory)

    monkeypatch.setattr(browse, "build_listing", fail)
    response = client.get("/docs")
    assert response.status_code == 500
    assert response.text == "Internal Server Error"
    assert "Permission denied" not in response.text
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_render_failure(client, monkeypatch):
    def fail(*args, **kwargs):
        raise TemplateError("broken template")

    monkeypatch.setattr(client.app.state.templates, "TemplateResponse", fail)
    response = client.get("/")
    assert response.status_code == 500
    assert response.text == "Internal Server Error"


def test_stat_failure(client, monkeypatch):
    def fail(root, request_path):
        raise PermissionError(13, "Permission denied", root)

    monkeypatch.setattr(browse, "resolve", fail)
    response = client.get("/docs")
    assert response.status_code == 500
    assert response.text == "Internal Server Error"


def test_prefix(data_dir):
    client = TestClient(create_app(Settings(data_dir=str(data_dir), prefix="/files/")))

    response = client.get("/files/")
    assert response.status_code == 200
    assert 'href="/files/report.pdf"' in response.text
    assert 'href="/files/"' in response.text

    assert client.get("/files/report.pdf").content == REPORT_BYTES
    assert client.get("/report.pdf").status_code == 404
    assert client.get("/assets/css/style.css").status_code == 200


def test_undecodable_name_lists_and_downloads(client, bad_name_file):
    response = client.get("/")
    assert response.status_code == 200
    assert "bad\ufffdname.txt" in response.text
    assert 'href="/bad%FFname.txt"' in response.text

    download = client.get("/bad%FFname.txt")
    assert download.status_code == 200
    assert download.content == BAD_NAME_BYTES
    assert download.headers["content-disposition"] == "attachment; filename*=utf-8''bad%EF%BF%BDname.txt"


def test_fifo_is_not_streamed(client, fifo, caplog):
    response = client.get("/pipe")
    assert response.status_code == 500
    assert response.text == "Internal Server Error"
    assert any("not a regular file" in r.getMessage() for r in caplog.records)

    assert client.get("/").status_code == 200


def test_unhandled_error_is_logged(settings, monkeypatch, caplog):
    def fail(root, request_path):
        raise RuntimeError("boom")

    monkeypatch.setattr(browse, "resolve", fail)
    caplog.set_level(logging.INFO, logger="sakuin")
    client = TestClient(create_app(settings), raise_server_exceptions=False)

    response = client.get("/docs")
    assert response.status_code == 500
    assert "GET /docs -> 500" in caplog.text
