"""CLI interface for letter extraction"""
import asyncio
import click
import json
import logging
from pathlib import Path
from typing import Dict
from .config import LOG_LEVEL
from .errors import LetterExtractionError
from .extractor import LetterExtractor
from .models import PdfUpload
from .summary_extractor import SummaryExtractor
import time
import traceback


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def echo_progress(percent: int, message: str):
    click.echo(f"  [{percent:3d}%] {message}")


def write_json(path: Path, data: Dict):
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def process_pdf_file(extractor,
                     pdf_path: Path,
                     mode: str = "letter",
                     output_dir: Path = None,
                     show_progress: bool = False) -> Dict:
    """Extract one PDF and optionally save its JSON result; returns {} on failure"""
    try:
        upload = PdfUpload.from_path(pdf_path)

        click.echo(f"Processing: {pdf_path.name} (mode: {mode})")

        start_ts = time.perf_counter()
        if mode == "summary":
            results = extractor.extract_sync(upload).to_dict()
        else:
            letter = extractor.extract_sync(upload, echo_progress if show_progress else None)
            results = letter.to_dict()
            for warning in letter.warnings:
                click.echo(f"  Warning: {warning}", err=True)
        elapsed_s = time.perf_counter() - start_ts

        if output_dir:
            output_path = output_dir / f"{pdf_path.stem}_results.json"
            write_json(output_path, results)
            click.echo(f"  Saved: {output_path}")

        click.echo(f"  Time: {elapsed_s:.2f}s")

        return results

    except LetterExtractionError as e:
        click.echo(f"  Error processing {pdf_path.name}: {e}", err=True)
        return {}
    except Exception as e:
        click.echo(f"  Error processing {pdf_path.name}: {e}", err=True)
        ctx = click.get_current_context(silent=True)
        if ctx is not None and ctx.params.get('verbose'):
            traceback.print_exc()
        return {}


@click.command()
@click.argument('pdf_folder', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--mode', '-m', type=click.Choice(['letter', 'summary']), default='letter',
              show_default=True,
              help='"letter" extracts every field, "summary" only subject, date and classification code')
@click.option('--output-dir', '-o',
              type=click.Path(file_okay=False, path_type=Path),
              help='Directory to save extraction results')
@click.option('--scanned-only', is_flag=True,
              help='Reject PDFs that already carry selectable text (letter mode)')
@click.option('--verbose', '-v', is_flag=True,
              help='Verbose output')
def main(pdf_folder: Path, mode: str, output_dir: Path, scanned_only: bool, verbose: bool):
    """
    Extract structured fields from official letters in a folder.

    PDF_FOLDER: Folder containing PDF files to process

    Examples:

    \b
    # Full letter extraction, results written as JSON
    letter-extract /path/to/pdfs --output-dir results

    \b
    # Subject, date and classification code only
    letter-extract /path/to/pdfs --mode summary
    """
    configure_logging(verbose)

    try:
        if mode == 'summary':
            extractor = SummaryExtractor()
        else:
            extractor = LetterExtractor(require_scanned=scanned_only)
    except Exception as e:
        click.echo(f"Error initializing extractor: {e}", err=True)
        if verbose:
            traceback.print_exc()
        return

    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    pdf_files = sorted(pdf_folder.glob('*.pdf'))
    if not pdf_files:
        click.echo(f"No PDF files found in {pdf_folder}", err=True)
        return

    click.echo(f"Found {len(pdf_files)} PDF file(s)")

    all_results = {}
    for pdf_file in pdf_files:
        results = process_pdf_file(extractor, pdf_file, mode, output_dir, show_progress=verbose)
        if not results:
            continue
        all_results[pdf_file.name] = results

        if verbose:
            click.echo("  Extracted values:")
            for field, value in results.items():
                click.echo(f"    {field}: {value}")

    click.echo(f"\nProcessed {len(all_results)} of {len(pdf_files)} PDF(s) successfully")

    if output_dir and all_results:
        combined_path = output_dir / "all_results.json"
        write_json(combined_path, all_results)
        click.echo(f"Combined results: {combined_path}")


@click.command()
@click.argument('url')
@click.option('--form-fields', is_flag=True, help='Print the archive form field names instead')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def extract_url(url: str, form_fields: bool, verbose: bool):
    """Extract one letter from a PDF at URL and print it as JSON."""
    configure_logging(verbose)
    extractor = LetterExtractor()
    try:
        letter = asyncio.run(extractor.extract_from_url(url, echo_progress if verbose else None))
    except LetterExtractionError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    results = letter.to_form_fields() if form_fields else letter.to_dict()
    click.echo(json.dumps(results, indent=2, ensure_ascii=False))


if __name__ == '__main__':
    main()
