import pytest
import requests

from dicomlocal.acquire import client as client_mod
from dicomlocal.acquire.client import content_url, listing_url
from dicomlocal.acquire.remote import (
    fetch_remote_blobs,
    list_remote_files,
    relative_path_from_location,
)
from dicomlocal.errors import AcquisitionError

from conftest import API_URL, DICOM_URL, FakeResponse


def test_listing_url_encodes_whole_component():
    assert listing_url(API_URL, "case 1/sub") == API_URL + "case%201%2Fsub"
    assert listing_url(API_URL, "") == API_URL


def test_content_url_joins_segments():
    assert content_url(DICOM_URL, "case1", "a.dcm") == f"{DICOM_URL}/case1/a.dcm"
    assert content_url(DICOM_URL + "/", "/case1/", "a.dcm") == f"{DICOM_URL}/case1/a.dcm"
    assert content_url(DICOM_URL, "", "a.dcm") == f"{DICOM_URL}/a.dcm"


@pytest.mark.parametrize(
    "location, expected",
    [
        ("https://viewer.test/local?relativePath=case1", "case1"),
        ("/local?foo=1&relativePath=a%2Fb", "a/b"),
        ("?relativePath=", ""),
        ("/local", ""),
    ],
)
def test_relative_path_from_location(location, expected):
    assert relative_path_from_location(location) == expected


def test_fetch_two_files(server):
    server.add_listing(API_URL + "case1", ["a.dcm", "b.dcm"])
    server.add_file(f"{DICOM_URL}/case1/a.dcm", b"AAA")
    server.add_file(f"{DICOM_URL}/case1/b.dcm", b"BBB", content_type="application/octet-stream")

    blobs = fetch_remote_blobs("case1", api_url=API_URL, dicom_url=DICOM_URL)

    assert [b.name for b in blobs] == ["a.dcm", "b.dcm"]
    assert [b.data for b in blobs] == [b"AAA", b"BBB"]
    assert [b.content_type for b in blobs] == ["application/dicom", "application/octet-stream"]


def test_listing_failure_fetches_nothing(server):
    server.add_listing(API_URL + "case1", ["a.dcm"], status=500)
    server.add_file(f"{DICOM_URL}/case1/a.dcm", b"AAA")

    with pytest.raises(AcquisitionError, match="HTTP 500"):
        fetch_remote_blobs("case1", api_url=API_URL, dicom_url=DICOM_URL)
    assert server.calls == [API_URL + "case1"]


def test_malformed_listing(server):
    server.routes[API_URL + "x"] = FakeResponse(200, b"<html>", "text/html")
    with pytest.raises(AcquisitionError, match="not JSON"):
        list_remote_files("x", api_url=API_URL)

    server.add_listing(API_URL + "y", {"files": ["a.dcm"]})
    with pytest.raises(AcquisitionError, match="array"):
        list_remote_files("y", api_url=API_URL)


def test_one_failed_fetch_fails_batch(server):
    server.add_listing(API_URL + "case1", ["a.dcm", "b.dcm"])
    server.add_file(f"{DICOM_URL}/case1/a.dcm", b"AAA")
    server.add_file(f"{DICOM_URL}/case1/b.dcm", b"", status=503)

    with pytest.raises(AcquisitionError, match="1 of 2") as excinfo:
        fetch_remote_blobs("case1", api_url=API_URL, dicom_url=DICOM_URL)
    assert "b.dcm" in str(excinfo.value)
    # every download was attempted before failing
    assert sorted(server.calls[1:]) == [f"{DICOM_URL}/case1/a.dcm", f"{DICOM_URL}/case1/b.dcm"]


def test_network_error_is_acquisition_error(monkeypatch):
    def boom(url, headers=None, timeout=None):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(client_mod.requests, "get", boom)
    with pytest.raises(AcquisitionError, match="refused"):
        fetch_remote_blobs("case1", api_url=API_URL, dicom_url=DICOM_URL)


def test_empty_listing_returns_no_blobs(server):
    server.add_listing(API_URL + "empty", [])
    assert fetch_remote_blobs("empty", api_url=API_URL, dicom_url=DICOM_URL) == []


def test_timeout_is_forwarded(monkeypatch):
    seen = []

    def fake_get(url, headers=None, timeout=None):
        seen.append(timeout)
        return FakeResponse(200, b"[]", "application/json")

    monkeypatch.setattr(client_mod.requests, "get", fake_get)
    fetch_remote_blobs("", api_url=API_URL, dicom_url=DICOM_URL, timeout=2.5)
    assert seen == [2.5]


def test_no_caching_between_calls(server):
    server.add_listing(API_URL + "c", ["a.dcm"])
    server.add_file(f"{DICOM_URL}/c/a.dcm", b"A")
    fetch_remote_blobs("c", api_url=API_URL, dicom_url=DICOM_URL)
    fetch_remote_blobs("c", api_url=API_URL, dicom_url=DICOM_URL)
    assert len(server.calls) == 4
