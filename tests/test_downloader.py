"""Tests for the idempotent PDF downloader."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
import respx

from harvester.scraper.downloader import download_pdf
from harvester.scraper.fetcher import build_client

_URL = "https://msdspds.bp.com/msdspds/msdspds.nsf/0/A1/$file/Sheet-1.pdf"
_FILENAME = "sheet_1.pdf"
_PDF_BYTES = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<<>>\nendobj\n%%EOF\n"


@pytest.fixture
def client():
    with build_client(timeout=5.0) as c:
        yield c


def _pdf_response(content: bytes = _PDF_BYTES, content_type: str = "application/pdf") -> httpx.Response:
    return httpx.Response(200, content=content, headers={"Content-Type": content_type})


class TestDownloadPdf:
    def test_writes_new_file(self, tmp_path: Path, client) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=_pdf_response())
            assert download_pdf(_URL, tmp_path, client) is True

        assert (tmp_path / _FILENAME).read_bytes() == _PDF_BYTES

    def test_second_call_skips_without_request(self, tmp_path: Path, client) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(return_value=_pdf_response())
            first = download_pdf(_URL, tmp_path, client)
            second = download_pdf(_URL, tmp_path, client)

        assert first is True
        assert second is False
        assert route.call_count == 1
        assert [p.name for p in tmp_path.iterdir()] == [_FILENAME]

    def test_existing_file_is_not_overwritten(self, tmp_path: Path, client, caplog) -> None:
        caplog.set_level(logging.INFO, logger="harvester.scraper.downloader")
        (tmp_path / _FILENAME).write_bytes(b"old")
        with respx.mock(assert_all_called=False) as router:
            route = router.get(_URL).mock(return_value=_pdf_response())
            assert download_pdf(_URL, tmp_path, client) is False

        assert route.call_count == 0
        assert (tmp_path / _FILENAME).read_bytes() == b"old"
        assert "already exists" in caplog.text

    def test_colliding_urls_download_once(self, tmp_path: Path, client) -> None:
        other = "https://msdspds.bp.com/elsewhere/SHEET_1.PDF"
        with respx.mock(assert_all_called=False) as router:
            first = router.get(_URL).mock(return_value=_pdf_response())
            second = router.get(other).mock(return_value=_pdf_response(b"%PDF-other"))
            assert download_pdf(_URL, tmp_path, client) is True
            assert download_pdf(other, tmp_path, client) is False

        assert first.call_count == 1
        assert second.call_count == 0

    def test_rejects_html_content_type(self, tmp_path: Path, client, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="harvester.scraper.downloader")
        with respx.mock:
            respx.get(_URL).mock(return_value=_pdf_response(b"<html></html>", "text/html"))
            assert download_pdf(_URL, tmp_path, client) is False

        assert not (tmp_path / _FILENAME).exists()
        assert "invalid content type" in caplog.text

    @pytest.mark.parametrize(
        "content_type",
        ["application/pdf; charset=binary", "binary/octet-stream", "x-application/pdf"],
    )
    def test_accepts_pdf_content_types(self, tmp_path: Path, client, content_type: str) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=_pdf_response(content_type=content_type))
            assert download_pdf(_URL, tmp_path, client) is True

    def test_content_type_match_is_case_sensitive(self, tmp_path: Path, client) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=_pdf_response(content_type="Application/PDF"))
            assert download_pdf(_URL, tmp_path, client) is False

    def test_application_octet_stream_rejected(self, tmp_path: Path, client) -> None:
        with respx.mock:
            respx.get(_URL).mock(
                return_value=_pdf_response(content_type="application/octet-stream")
            )
            assert download_pdf(_URL, tmp_path, client) is False

    def test_empty_body_creates_no_file(self, tmp_path: Path, client, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="harvester.scraper.downloader")
        with respx.mock:
            respx.get(_URL).mock(return_value=_pdf_response(b""))
            assert download_pdf(_URL, tmp_path, client) is False

        assert not (tmp_path / _FILENAME).exists()
        assert "0 bytes" in caplog.text

    def test_http_error_creates_no_file(self, tmp_path: Path, client) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(404))
            assert download_pdf(_URL, tmp_path, client) is False
        assert list(tmp_path.iterdir()) == []

    def test_network_error_creates_no_file(self, tmp_path: Path, client) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ConnectTimeout)
            assert download_pdf(_URL, tmp_path, client) is False
        assert list(tmp_path.iterdir()) == []

    def test_missing_output_dir_is_filesystem_error(self, tmp_path: Path, client, caplog) -> None:
        caplog.set_level(logging.ERROR, logger="harvester.scraper.downloader")
        missing = tmp_path / "does-not-exist"
        with respx.mock:
            respx.get(_URL).mock(return_value=_pdf_response())
            assert download_pdf(_URL, missing, client) is False
        assert "Failed to save" in caplog.text

    def test_failed_write_leaves_no_partial_file(self, tmp_path: Path, client) -> None:
        class _FailingHandle:
            def __init__(self, path, mode):
                self._fh = open(path, mode)

            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                self._fh.close()
                return False

            def write(self, data):
                self._fh.write(data[:3])
                raise OSError(28, "No space left on device")

        with respx.mock:
            respx.get(_URL).mock(return_value=_pdf_response())
            with patch("harvester.scraper.downloader.open", _FailingHandle, create=True):
                assert download_pdf(_URL, tmp_path, client) is False

        assert not (tmp_path / _FILENAME).exists()
