"""Tests for MIME detection probes and the detector chain."""
from pathlib import Path
from typing import Optional

import pytest

from app.files.content_type import ContentTypeDetector, ExtensionProbe, SignatureProbe

PNG_HEADER = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
PDF_HEADER = b"%PDF-1.7\n"
ZIP_HEADER = b"PK\x03\x04" + b"\x00" * 26


class TestSignatureProbe:
    @pytest.mark.parametrize(
        "header,expected",
        [
            (PNG_HEADER, "image/png"),
            (b"\xFF\xD8\xFF\xE0\x00\x10JFIF", "image/jpeg"),
            (b"GIF89a\x01\x00", "image/gif"),
            (PDF_HEADER, "application/pdf"),
            (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
            (b"RIFF\x00\x00\x00\x00WAVEfmt ", "audio/wav"),
            (b"ID3\x03\x00", "audio/mpeg"),
            (b"  <svg xmlns='http://www.w3.org/2000/svg'>", "image/svg+xml"),
            (b"BM\x00\x00", "image/bmp"),
        ],
    )
    def test_sniff_known_signatures(self, header, expected):
        assert SignatureProbe().sniff(header) == expected

    def test_sniff_unknown(self):
        assert SignatureProbe().sniff(b"hello world") is None
        assert SignatureProbe().sniff(b"") is None

    def test_zip_container_defers_to_extension(self):
        assert SignatureProbe().sniff(ZIP_HEADER, "letter.docx") is None
        assert SignatureProbe().sniff(ZIP_HEADER, "bundle.zip") == "application/zip"

    def test_xml_with_svg_extension(self):
        assert SignatureProbe().sniff(b"<?xml version='1.0'?>", "logo.svg") == "image/svg+xml"
        assert SignatureProbe().sniff(b"<?xml version='1.0'?>", "feed.xml") == "application/xml"

    def test_probe_reads_file(self, tmp_path):
        path = tmp_path / "no-extension"
        path.write_bytes(PNG_HEADER)
        assert SignatureProbe().probe(path) == "image/png"

    def test_probe_missing_file(self, tmp_path):
        assert SignatureProbe().probe(tmp_path / "missing.png") is None


class TestExtensionProbe:
    def test_guess_from_name(self, tmp_path):
        assert ExtensionProbe().probe(tmp_path / "report.pdf") == "application/pdf"
        assert ExtensionProbe().probe(tmp_path / "image.png") == "image/png"

    def test_unknown_extension(self, tmp_path):
        assert ExtensionProbe().probe(tmp_path / "file.unknownext") is None


class _FixedProbe:
    def __init__(self, answer: Optional[str]) -> None:
        self.answer = answer
        self.calls = 0

    def probe(self, path: Path) -> Optional[str]:
        self.calls += 1
        return self.answer


class _FailingProbe:
    def probe(self, path: Path) -> Optional[str]:
        raise PermissionError("denied")


class TestContentTypeDetector:
    def test_content_wins_over_extension(self, tmp_path):
        """A PNG saved under a .pdf name is reported as PNG."""
        path = tmp_path / "mislabelled.pdf"
        path.write_bytes(PNG_HEADER)
        assert ContentTypeDetector().detect(path) == "image/png"

    def test_falls_back_to_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"plain text")
        assert ContentTypeDetector().detect(path) == "text/plain"

    def test_falls_back_for_missing_file(self, tmp_path):
        assert ContentTypeDetector().detect(tmp_path / "missing.pdf") == "application/pdf"

    def test_returns_none_when_nothing_matches(self, tmp_path):
        path = tmp_path / "blob"
        path.write_bytes(b"\x00\x01\x02")
        assert ContentTypeDetector().detect(path) is None

    def test_first_answer_short_circuits(self, tmp_path):
        first, second = _FixedProbe("a/b"), _FixedProbe("c/d")
        assert ContentTypeDetector([first, second]).detect(tmp_path / "x") == "a/b"
        assert second.calls == 0

    def test_probe_errors_are_skipped(self, tmp_path):
        fallback = _FixedProbe("text/plain")
        detector = ContentTypeDetector([_FailingProbe(), fallback])
        assert detector.detect(tmp_path / "x") == "text/plain"

    def test_empty_chain(self, tmp_path):
        assert ContentTypeDetector([]).detect(tmp_path / "x.pdf") is None
