"""Tests for the Flask web interface."""

import io

import pytest

from mtmerge.web import app


CANVAS = (
    "Student,SIS Login ID,Project01-Automated (999),Project02-Automated (1000)\n"
    '"Smith, Alice",alice@sis,,\n'
    '"Jones, Bob",bob@sis,,\n'
)
SCORES = "GitHub ID,Score\nalice123,95\nbobcodes,80\n"
MAPPING = "GitHub ID,SIS Login ID\nalice123,alice@sis\nbobcodes,\n"


@pytest.fixture
def client(tmp_path):
    app.config["TESTING"] = True
    app.config["UPLOAD_FOLDER"] = str(tmp_path)
    with app.test_client() as client:
        yield client


def upload(client, scores=SCORES, **form):
    data = {
        "dst": (io.BytesIO(CANVAS.encode("utf-8")), "canvas.csv"),
        "src": (io.BytesIO(scores.encode("utf-8")), "project01.csv"),
        "map": (io.BytesIO(MAPPING.encode("utf-8")), "map.csv"),
    }
    data.update(form)
    return client.post("/merge", data=data, content_type="multipart/form-data")


def test_index_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b"Score Merger" in response.data
    assert b'value="Project01-Automated"' in response.data


def test_merge_and_download(client):
    response = upload(client)
    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["updated"] == 1
    assert data["skipped"] == ["bobcodes"]
    assert data["output"] == "canvas-updated.csv"

    download = client.get("/download/canvas-updated.csv")
    assert download.status_code == 200
    lines = download.data.decode("utf-8-sig").splitlines()
    download.close()
    assert lines[1] == '"Smith, Alice",alice@sis,95,'
    assert lines[2] == '"Jones, Bob",bob@sis,,'


def test_merge_into_named_column(client):
    response = upload(client, column="Project02")
    assert response.status_code == 200

    download = client.get("/download/canvas-updated.csv")
    lines = download.data.decode("utf-8-sig").splitlines()
    download.close()
    assert lines[1] == '"Smith, Alice",alice@sis,,95'


def test_missing_upload(client):
    response = client.post(
        "/merge",
        data={"dst": (io.BytesIO(CANVAS.encode("utf-8")), "canvas.csv")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert "src, map" in response.get_json()["error"]


def test_failed_merge(client, tmp_path):
    response = upload(client, scores="GitHub ID,Score\nmystery,50\n")
    assert response.status_code == 422
    data = response.get_json()
    assert data["reason"] == "row"
    assert "mystery" in data["error"]
    assert not (tmp_path / "canvas-updated.csv").exists()


def test_download_unknown_file(client):
    response = client.get("/download/nothing-updated.csv")
    assert response.status_code == 404


def test_download_only_serves_merged_files(client):
    upload(client)
    response = client.get("/download/dst_canvas.csv")
    assert response.status_code == 404


def test_results_are_escaped_before_display(client):
    page = client.get("/").data.decode("utf-8")
    assert "escapeHtml(data.error)" in page
    assert "data.skipped.map(escapeHtml)" in page
    assert "${data.error}" not in page
    assert "${data.skipped.join" not in page
