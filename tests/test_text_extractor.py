"""Tests for page text acquisition"""
import asyncio
import threading
import time

import fitz
import pytest

from letter_extractor.errors import InvalidInputError, PageAcquisitionError
from letter_extractor.text_extractor import PdfPageSource, TextAcquirer, has_selectable_text

LONG_TEXT = "Surat dinas nomor 045.4/123/2024 perihal permohonan data arsip statis. " * 2


def build_pdf(page_texts):
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


def test_short_embedded_text_falls_back_to_ocr(make_acquirer, make_ocr):
    ocr = make_ocr(texts={0: "Teks hasil OCR halaman pertama"})
    acquirer = make_acquirer(["x" * 40], ocr=ocr)
    document = acquirer.acquire(b"%PDF")
    page = document.pages[0]
    assert page.source == "ocr"
    assert page.used_ocr
    assert page.text == "Teks hasil OCR halaman pertama"
    assert page.embedded_text == "x" * 40
    assert ocr.calls == [(0, "ind+eng")]


def test_long_embedded_text_skips_ocr(make_acquirer, make_ocr):
    ocr = make_ocr()
    acquirer = make_acquirer([LONG_TEXT], ocr=ocr)
    document = acquirer.acquire(b"%PDF")
    assert document.pages[0].source == "embedded"
    assert document.pages[0].text == LONG_TEXT
    assert ocr.calls == []


def test_threshold_counts_trimmed_text(make_acquirer):
    acquirer = make_acquirer(["   " + "a" * 99 + "   ", "a" * 100])
    document = acquirer.acquire(b"%PDF")
    assert [page.source for page in document.pages] == ["ocr", "embedded"]


def test_pages_kept_in_order_and_joined(make_acquirer, make_ocr):
    ocr = make_ocr(texts={1: "halaman dua dari OCR"})
    acquirer = make_acquirer([LONG_TEXT, "", LONG_TEXT], ocr=ocr)
    document = acquirer.acquire(b"%PDF")
    assert [page.index for page in document.pages] == [0, 1, 2]
    assert document.page_texts == [LONG_TEXT, "halaman dua dari OCR", LONG_TEXT]
    assert document.text == "\n\n".join(document.page_texts)


def test_failed_ocr_yields_empty_page(make_acquirer, make_ocr):
    acquirer = make_acquirer(["", LONG_TEXT], ocr=make_ocr(error=RuntimeError("tesseract crashed")))
    document = acquirer.acquire(b"%PDF")
    assert document.pages[0].source == "failed"
    assert document.pages[0].text == ""
    assert document.pages[1].text == LONG_TEXT
    assert document.failed_pages == [0]


def test_failed_render_yields_empty_page(make_acquirer):
    acquirer = make_acquirer([""], render_error=RuntimeError("cannot render"))
    document = acquirer.acquire(b"%PDF")
    assert document.failed_pages == [0]


def test_rendered_image_released_after_ocr(make_acquirer, make_ocr):
    acquirer = make_acquirer(["", ""], ocr=make_ocr(error=ValueError("bad image")))
    acquirer.acquire(b"%PDF")
    source = acquirer.opened_sources[0]
    assert len(source.rendered) == 2
    assert all(image.closed for image in source.rendered)
    assert source.closed


@pytest.mark.asyncio
async def test_async_acquisition_matches_sync(make_acquirer, make_ocr):
    ocr = make_ocr(texts={0: "hasil OCR"})
    acquirer = make_acquirer(["", LONG_TEXT], ocr=ocr)
    document = await acquirer.acquire_async(b"%PDF")
    assert document.page_texts == ["hasil OCR", LONG_TEXT]
    assert acquirer.opened_sources[0].closed


def test_real_pdf_embedded_text():
    pdf_bytes = build_pdf([LONG_TEXT[:70] + "\n" + LONG_TEXT[70:]])
    with PdfPageSource(pdf_bytes) as source:
        assert source.page_count == 1
        assert "permohonan data arsip" in source.embedded_text(0)


def test_real_pdf_render_and_ocr(make_ocr):
    ocr = make_ocr()
    acquirer = TextAcquirer(ocr_engine=ocr, render_scale=1.0)
    document = acquirer.acquire(build_pdf([""]))
    assert document.pages[0].source == "ocr"
    assert len(ocr.calls) == 1


def test_unreadable_pdf_rejected():
    with pytest.raises(InvalidInputError):
        PdfPageSource(b"this is not a pdf at all")


def test_has_selectable_text():
    assert has_selectable_text(build_pdf([LONG_TEXT[:70] + "\n" + LONG_TEXT[70:]]))
    assert not has_selectable_text(build_pdf(["", ""]))


def test_has_selectable_text_only_checks_first_pages(make_source):
    pages = ["", "", "", "a" * 80]
    assert not has_selectable_text(b"%PDF", source_factory=lambda data: make_source(pages))
    assert has_selectable_text(b"%PDF", pages_checked=4, source_factory=lambda data: make_source(pages))


def test_tesseract_missing_reported_unavailable(monkeypatch):
    import pytesseract
    from letter_extractor.ocr_engine import TesseractEngine

    def missing():
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)
    assert TesseractEngine().is_available() is False


def test_ocr_failure_raised_as_page_error(make_acquirer):
    acquirer = make_acquirer([""], render_error=RuntimeError("cannot render"))
    with acquirer.open(b"%PDF") as source:
        with pytest.raises(PageAcquisitionError) as excinfo:
            acquirer._ocr_page(source, 0)
    assert excinfo.value.page_index == 0
    assert "cannot render" in str(excinfo.value)


class SlowRenderSource:
    """Page source whose render blocks long enough to be cancelled mid-page"""

    def __init__(self, events):
        self.events = events
        self.render_started = threading.Event()

    page_count = 2

    def embedded_text(self, index):
        return ""

    def render(self, index, scale):
        self.render_started.set()
        time.sleep(0.3)
        self.events.append("render-finished")
        return FakeRenderedPage()

    def close(self):
        self.events.append("source-closed")


class FakeRenderedPage:
    def close(self):
        pass


@pytest.mark.asyncio
async def test_cancel_waits_for_page_in_progress(make_ocr):
    events = []
    source = SlowRenderSource(events)
    acquirer = TextAcquirer(ocr_engine=make_ocr(), source_factory=lambda data: source)

    task = asyncio.create_task(acquirer.acquire_async(b"%PDF"))
    while not source.render_started.is_set():
        await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert events == ["render-finished", "source-closed"]
