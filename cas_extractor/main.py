"""
Main entry point for the CAS extractor.

This module provides the CLI interface and orchestrates the parsing
process from PDF bytes through format detection, section parsing and
aggregation to JSON export.
"""

import argparse
import dataclasses
import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Type

from cas_extractor.cdsl_parser import CDSLParser
from cas_extractor.config import MAX_FILE_SIZE, MIN_TEXT_LENGTH, PARSER_VERSION
from cas_extractor.exceptions import (
    CASParseError,
    FileTooLargeError,
    FormatParseFailureError,
    InsufficientTextError,
    UnrecognizedFormatError,
)
from cas_extractor.extractor import PDFExtractor, read_pdf_file
from cas_extractor.format_detector import CASFormat, detect_format
from cas_extractor.models import ParsedStatement, ParseMeta
from cas_extractor.text_utils import clean_text
from cas_extractor.validator import validate_statement

logger = logging.getLogger(__name__)


class ParseStage(Enum):
    """Stages of a single parse run, in order."""
    IDLE = "idle"
    TEXT_EXTRACTING = "text_extracting"
    FORMAT_DETECTING = "format_detecting"
    UNRECOGNIZED = "unrecognized"
    DISPATCHING = "dispatching"
    SECTION_PARSING = "section_parsing"
    AGGREGATING = "aggregating"
    DONE = "done"


# Percentage reported when each stage starts
STAGE_PROGRESS: Dict[ParseStage, int] = {
    ParseStage.TEXT_EXTRACTING: 10,
    ParseStage.FORMAT_DETECTING: 30,
    ParseStage.DISPATCHING: 45,
    ParseStage.SECTION_PARSING: 60,
    ParseStage.AGGREGATING: 85,
    ParseStage.DONE: 100,
}

ProgressCallback = Callable[[ParseStage, int], None]

FORMAT_PARSERS: Dict[CASFormat, Type[CDSLParser]] = {
    CASFormat.CDSL: CDSLParser,
}


def generate_tracking_id() -> str:
    """Create an identifier used to correlate the log lines of one parse."""
    return f"CAS_SESSION_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class TrackingLogAdapter(logging.LoggerAdapter):
    """Prefix log messages with the tracking id of the current parse."""

    def process(self, msg, kwargs):
        return f"[{self.extra['tracking_id']}] {msg}", kwargs


class CASParser:
    """
    Orchestrates a single CAS parse.

    The pipeline runs synchronously and stops at the first fatal error:
    1. Extract page text from the PDF
    2. Canonicalize and join pages in document order
    3. Detect the statement format
    4. Dispatch to the format parser
    5. Attach metadata and aggregate the summary
    """

    def __init__(
        self,
        password: Optional[str] = None,
        extractor=None,
        progress: Optional[ProgressCallback] = None,
        min_text_length: int = MIN_TEXT_LENGTH,
    ):
        """
        Initialize the CAS parser.

        Args:
            password: Optional password for encrypted PDFs.
            extractor: Object with an ``extract(bytes)`` method returning an
                ExtractedDocument; defaults to PDFExtractor.
            progress: Optional callback receiving (stage, percent).
            min_text_length: Shortest canonical text accepted.
        """
        self.password = password
        self.extractor = extractor or PDFExtractor(password=password)
        self.progress = progress
        self.min_text_length = min_text_length

    def parse(self, data: bytes, file_name: Optional[str] = None) -> ParsedStatement:
        """
        Parse CAS PDF bytes.

        Args:
            data: Raw PDF file content.
            file_name: Original file name, recorded in the metadata.

        Returns:
            ParsedStatement with metadata attached.

        Raises:
            WrongPasswordError: If the password is rejected.
            UnreadableDocumentError: If the PDF cannot be decoded.
            InsufficientTextError: If too little text was extracted.
            UnrecognizedFormatError: If no known format matches.
            FormatParseFailureError: If nothing could be extracted.
        """
        tracking_id = generate_tracking_id()
        log = TrackingLogAdapter(logger, {"tracking_id": tracking_id})
        started = time.monotonic()

        log.info(
            f"Starting CAS parsing: file={file_name or '<bytes>'}, size={len(data)} bytes, "
            f"password={'yes' if self.password else 'no'}"
        )

        try:
            self._report(ParseStage.TEXT_EXTRACTING, log)
            text = self._extract_text(data, log)

            self._report(ParseStage.FORMAT_DETECTING, log)
            detection = detect_format(text)
            parser_class = FORMAT_PARSERS.get(detection.cas_format)
            if parser_class is None:
                log.info(f"Stage: {ParseStage.UNRECOGNIZED.value}")
                log.warning(f"Unrecognized CAS format, keyword hits: {detection.match_counts}")
                raise UnrecognizedFormatError(
                    "Unknown CAS format. Currently supported: "
                    + ", ".join(f.value for f in FORMAT_PARSERS)
                )
            cas_type = detection.cas_format.value

            self._report(ParseStage.DISPATCHING, log)
            parser = parser_class(log=log)

            self._report(ParseStage.SECTION_PARSING, log)
            statement = parser.parse(text)
            if not statement.demat_accounts and not statement.mutual_funds:
                raise FormatParseFailureError(
                    f"{cas_type} statement yielded no demat accounts or mutual funds",
                    cas_type=cas_type,
                )

            self._report(ParseStage.AGGREGATING, log)
            meta = ParseMeta(
                cas_type=cas_type,
                tracking_id=tracking_id,
                file_name=Path(file_name).name if file_name else None,
                file_size=len(data),
                parse_time_ms=int((time.monotonic() - started) * 1000),
                parser_version=PARSER_VERSION,
                generated_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
                statement_period=parser.extract_statement_period(text),
            )
            statement = dataclasses.replace(statement, meta=meta)
            summary = statement.summary

        except CASParseError as e:
            elapsed = int((time.monotonic() - started) * 1000)
            log.error(f"CAS parsing failed after {elapsed}ms: {e.error_code}: {e.message}")
            raise

        self._report(ParseStage.DONE, log)
        log.info(
            f"Parsing complete: {summary.demat.count} demat accounts, "
            f"{summary.mutual_funds.count} mutual fund folios, "
            f"total_value={summary.total_value}, "
            f"investor name={'extracted' if statement.investor.name else 'missing'}, "
            f"pan={'extracted' if statement.investor.pan else 'missing'}"
        )
        return statement

    def _extract_text(self, data: bytes, log: logging.LoggerAdapter) -> str:
        document = self.extractor.extract(data)

        # Pages stay in document order; segmentation relies on absolute order
        text = " ".join(
            cleaned for cleaned in (clean_text(page.raw_text) for page in document.pages)
            if cleaned
        )
        log.info(f"Extracted {len(text)} characters from {document.total_pages} pages")

        if len(text) < self.min_text_length:
            raise InsufficientTextError(
                f"Extracted only {len(text)} characters "
                f"(minimum {self.min_text_length}); the PDF may be a scanned image",
                text_length=len(text),
            )
        return text

    def _report(self, stage: ParseStage, log: logging.LoggerAdapter) -> None:
        log.debug(f"Stage: {stage.value}")
        if self.progress is None:
            return
        try:
            self.progress(stage, STAGE_PROGRESS[stage])
        except Exception:
            log.warning("Progress callback raised; ignoring", exc_info=True)


def parse_cas_bytes(
    data: bytes,
    password: Optional[str] = None,
    file_name: Optional[str] = None,
    progress: Optional[ProgressCallback] = None,
) -> ParsedStatement:
    """
    Parse CAS PDF bytes.

    This is the main entry point for programmatic use.

    Args:
        data: Raw PDF file content.
        password: Optional password for encrypted PDFs.
        file_name: Original file name for the metadata.
        progress: Optional callback receiving (stage, percent).

    Returns:
        ParsedStatement with all parsed data.
    """
    parser = CASParser(password=password, progress=progress)
    return parser.parse(data, file_name=file_name)


def parse_cas_pdf(pdf_path: str, password: Optional[str] = None) -> ParsedStatement:
    """
    Parse a CAS PDF file from disk.

    Args:
        pdf_path: Path to the CAS PDF file.
        password: Optional password for encrypted PDFs.

    Returns:
        ParsedStatement with all parsed data.

    Raises:
        FileNotFoundError: If the PDF file doesn't exist.
        FileTooLargeError: If the file exceeds MAX_FILE_SIZE.
    """
    path = Path(pdf_path)
    if path.exists() and path.stat().st_size > MAX_FILE_SIZE:
        raise FileTooLargeError(
            f"PDF is {path.stat().st_size} bytes, limit is {MAX_FILE_SIZE}",
            size=path.stat().st_size,
        )
    data = read_pdf_file(path)
    return parse_cas_bytes(data, password=password, file_name=path.name)


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal types."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


def export_to_json(statement: ParsedStatement, output_path: Optional[str] = None) -> str:
    """
    Export a parsed statement to JSON.

    Args:
        statement: Parsed CAS statement.
        output_path: Optional path to write JSON file.

    Returns:
        JSON string representation.
    """
    json_data = statement.to_dict()
    json_str = json.dumps(json_data, indent=2, ensure_ascii=False, cls=DecimalEncoder)

    if output_path:
        Path(output_path).write_text(json_str, encoding="utf-8")
        logger.info(f"Exported JSON to: {output_path}")

    return json_str


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Extract holdings from Consolidated Account Statement (CAS) PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s statement.pdf
  %(prog)s statement.pdf -o output.json
  %(prog)s statement.pdf --password mypass -v
        """,
    )
    parser.add_argument(
        "pdf_file",
        help="Path to the CAS PDF file",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output JSON file path (default: stdout)",
    )
    parser.add_argument(
        "-p", "--password",
        help="Password for encrypted PDF",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate, don't output full JSON",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    try:
        statement = parse_cas_pdf(args.pdf_file, password=args.password)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except CASParseError as e:
        print(f"Error: {e.user_message}", file=sys.stderr)
        if args.verbose:
            print(f"Details: {e.error_code}: {e.message}", file=sys.stderr)
        sys.exit(1)

    validation = validate_statement(statement)

    if args.validate_only:
        print(f"Validation: {'PASSED' if validation.is_valid else 'FAILED'}")
        if validation.errors:
            print("\nErrors:")
            for error in validation.errors:
                print(f"  - {error}")
        if validation.warnings:
            print("\nWarnings:")
            for warning in validation.warnings:
                print(f"  - {warning}")
        sys.exit(0 if validation.is_valid else 1)

    json_output = export_to_json(statement, args.output)

    if not args.output:
        print(json_output)

    if not args.quiet:
        summary = statement.summary
        print(
            f"\nParsed: {summary.demat.count} demat accounts, "
            f"{summary.mutual_funds.count} mutual fund folios, "
            f"total value {summary.total_value}",
            file=sys.stderr,
        )
        if validation.warnings:
            print(
                f"Validation warnings: {len(validation.warnings)}",
                file=sys.stderr,
            )


if __name__ == "__main__":
    main()
