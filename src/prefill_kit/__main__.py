"""CLI entry-point for prefill_kit.

Usage:
    python -m prefill_kit construct <base-url> --field ID=VALUE [--field ...] [--json]
    python -m prefill_kit parse <url> [--json]
    python -m prefill_kit validate <url>
    python -m prefill_kit to-row [FILE] [--delimiter D] [cleaning flags]
    python -m prefill_kit to-column [FILE] [--delimiter D] [cleaning flags]
    python -m prefill_kit batch <template.csv> --form-url URL [--values-delimiter D]
                                [--out FILE] [--label none|index|FIELD_ID] [--extra FIELD_ID ...]
                                [--no-url] [--json]
    python -m prefill_kit template [--out FILE]
    python -m prefill_kit match-names <file1.csv> <file2.csv> --column1 NAME --column2 NAME
                                      [--threshold F] [--keep COL ...] [--json]
    python -m prefill_kit letters-bulk <recipients.csv> --template-id ID --map FIELD=HEADER [--map ...]
                                       [--required FIELD ...] [--notify SMS|EMAIL --recipients-column HEADER]
                                       [--api-key KEY] [--base-url URL] [--dry-run]
    python -m prefill_kit serve [--host H] [--port N]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from prefill_kit import __version__
from prefill_kit.codec import construct_url, parse_url, validate_url
from prefill_kit.errors import PrefillError
from prefill_kit.model import ExportLabel, TransformDirection
from prefill_kit.model.field import Field
from prefill_kit.transform import CleaningOptions, transform
from prefill_kit.utils.exit_codes import ExitCode
from prefill_kit.utils.json_norm import stable_json_dump


def _read_input(path: Path | None) -> str:
    """Read *path*, or stdin when it is missing or ``-``."""
    if path is None or str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _write_output(text: str, out: Path | None) -> None:
    if out is None:
        sys.stdout.write(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    print(f"wrote {out}", file=sys.stderr)


def _parse_field(raw: str) -> Field:
    field_id, sep, value = raw.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected ID=VALUE, got {raw!r}")
    return Field(id=field_id, value=value)


def _parse_mapping(raw: str) -> tuple[str, str]:
    name, sep, header = raw.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected FIELD=HEADER, got {raw!r}")
    return name, header


# ── cleaning flags ──────────────────────────────────────────────────

_CLEANING_FLAGS = (
    ("--trim", "trim_whitespace", "Strip whitespace around every item."),
    ("--dedupe", "remove_duplicates", "Drop repeated items (first one wins)."),
    ("--lower", "to_lower_case", "Lower-case every item."),
    ("--upper", "to_upper_case", "Upper-case every item."),
    ("--strip-special", "remove_special_chars", "Remove non-word characters."),
    ("--squeeze-spaces", "replace_multiple_spaces", "Collapse runs of whitespace."),
    ("--strip-leading-numbers", "remove_leading_numbers", "Remove leading digits."),
    ("--strip-trailing-numbers", "remove_trailing_numbers", "Remove trailing digits."),
    ("--normalize-whitespace", "normalize_whitespace", "Tidy blank lines in the output."),
    ("--smart-email", "smart_email", "Keep only the e-mail address of each item."),
    ("--smart-phone", "smart_phone", "Keep only the digits of each item."),
    ("--smart-name", "smart_name", "Title-case each word."),
)


def _add_transform_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=None,
        help="Input file (default: stdin).",
    )
    p.add_argument(
        "--delimiter",
        "-d",
        default=",",
        help=r"Delimiter to join or split on; '\t' means tab (default: ',').",
    )
    p.add_argument(
        "--keep-empty",
        action="store_true",
        default=False,
        help="Keep blank items instead of dropping them.",
    )
    for flag, dest, help_text in _CLEANING_FLAGS:
        p.add_argument(flag, dest=dest, action="store_true", default=False, help=help_text)
    p.add_argument("--regex", default="", help="Custom regex applied to every item.")
    p.add_argument("--replacement", default="", help="Replacement for --regex matches.")
    p.add_argument("--count", action="store_true", default=False, help="Report the item count on stderr.")


def _cleaning_options(args: argparse.Namespace, direction: TransformDirection) -> CleaningOptions:
    flags = {dest: bool(getattr(args, dest)) for _, dest, _ in _CLEANING_FLAGS}
    if direction is TransformDirection.ROW_TO_COLUMN:
        flags["trim_whitespace"] = True
    return CleaningOptions(
        remove_empty_lines=not args.keep_empty,
        custom_regex=args.regex,
        custom_replacement=args.replacement,
        **flags,
    )


# ── parser ──────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="prefill-kit",
        description="Build, parse and batch-generate form prefill URLs.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    p.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Log progress to stderr.",
    )
    sub = p.add_subparsers(dest="command")

    # ── construct ───────────────────────────────────────────────────
    con_p = sub.add_parser("construct", help="Build a prefill URL.")
    con_p.add_argument("base_url", help="Form URL to prefill.")
    con_p.add_argument(
        "--field",
        "-f",
        dest="fields",
        action="append",
        type=_parse_field,
        default=[],
        metavar="ID=VALUE",
        help="Field to prefill (repeatable, order is kept).",
    )
    con_p.add_argument("--json", dest="json_out", action="store_true", default=False)

    # ── parse ───────────────────────────────────────────────────────
    parse_p = sub.add_parser("parse", help="Split a prefill URL into base URL and fields.")
    parse_p.add_argument("url")
    parse_p.add_argument("--json", dest="json_out", action="store_true", default=False)

    # ── validate ────────────────────────────────────────────────────
    val_p = sub.add_parser("validate", help="Check that a string is an absolute URL.")
    val_p.add_argument("url")

    # ── to-row / to-column ──────────────────────────────────────────
    row_p = sub.add_parser("to-row", help="Join lines into one delimited row.")
    _add_transform_args(row_p)
    col_p = sub.add_parser("to-column", help="Split a delimited row into lines.")
    _add_transform_args(col_p)

    # ── batch ───────────────────────────────────────────────────────
    batch_p = sub.add_parser("batch", help="Generate prefill links from a CSV template.")
    batch_p.add_argument("template", type=Path, help="Template CSV (FieldID, values, description).")
    batch_p.add_argument("--form-url", required=True, help="https://form.gov.sg/<form id>")
    batch_p.add_argument(
        "--values-delimiter",
        default=None,
        help="Delimiter inside the values column (default: detected, else ';').",
    )
    batch_p.add_argument("--out", type=Path, default=None, help="Write the CSV here instead of stdout.")
    batch_p.add_argument(
        "--label",
        default=ExportLabel.NONE.value,
        help="Label column: none, index, or a FieldID whose value labels each row.",
    )
    batch_p.add_argument("--extra", nargs="*", default=[], metavar="FIELD_ID", help="Extra columns to export.")
    batch_p.add_argument("--no-url", dest="include_url", action="store_false", default=True)
    batch_p.add_argument("--json", dest="json_out", action="store_true", default=False)

    # ── template ────────────────────────────────────────────────────
    tpl_p = sub.add_parser("template", help="Print the example batch template CSV.")
    tpl_p.add_argument("--out", type=Path, default=None)

    # ── match-names ─────────────────────────────────────────────────
    mn_p = sub.add_parser("match-names", help="Fuzzy-match names between two CSV files.")
    mn_p.add_argument("file1", type=Path)
    mn_p.add_argument("file2", type=Path)
    mn_p.add_argument("--column1", required=True, help="Name column in file1.")
    mn_p.add_argument("--column2", required=True, help="Name column in file2.")
    mn_p.add_argument("--threshold", type=float, default=0.8)
    mn_p.add_argument("--same-word-count", action="store_true", default=False)
    mn_p.add_argument(
        "--loose-short-names",
        dest="strict_short_names",
        action="store_false",
        default=True,
        help="Allow fuzzy matches for short single-word names.",
    )
    mn_p.add_argument("--keep", nargs="*", default=[], metavar="COLUMN", help="file1 columns to carry over.")
    mn_p.add_argument("--out", type=Path, default=None)
    mn_p.add_argument("--json", dest="json_out", action="store_true", default=False)

    # ── letters-bulk ────────────────────────────────────────────────
    lb_p = sub.add_parser("letters-bulk", help="Send bulk letters from a recipients CSV.")
    lb_p.add_argument("recipients", type=Path, help="Recipients CSV, one row per letter.")
    lb_p.add_argument("--template-id", required=True, help="Letters template id (sent as given).")
    lb_p.add_argument(
        "--map",
        dest="mapping",
        action="append",
        type=_parse_mapping,
        default=[],
        metavar="FIELD=HEADER",
        help="Template field and the CSV header holding its value (repeatable).",
    )
    lb_p.add_argument("--required", nargs="*", default=[], metavar="FIELD", help="Fields every letter must fill.")
    lb_p.add_argument("--notify", choices=["SMS", "EMAIL"], default=None, help="Notify recipients by SMS or e-mail.")
    lb_p.add_argument("--recipients-column", default=None, metavar="HEADER", help="CSV header of the phone/e-mail column.")
    lb_p.add_argument("--api-key", default=None, help="Letters API key (default: $LETTERS_API_KEY).")
    lb_p.add_argument("--base-url", default=None, help="Letters API base URL (default: $LETTERS_API_BASE_URL).")
    lb_p.add_argument("--dry-run", action="store_true", default=False, help="Print the request body instead of sending it.")

    # ── serve ───────────────────────────────────────────────────────
    serve_p = sub.add_parser("serve", help="Run the HTTP API (requires the api extra).")
    serve_p.add_argument("--host", default=None)
    serve_p.add_argument("--port", type=int, default=None)

    return p


# ── handlers ────────────────────────────────────────────────────────


def _handle_construct(args: argparse.Namespace) -> int:
    url = construct_url(args.base_url, args.fields)
    if args.json_out:
        stable_json_dump({"url": url}, sys.stdout)
    elif url is not None:
        print(url)
    if url is None:
        print("nothing to generate: no field has both an id and a value", file=sys.stderr)
        return ExitCode.NO_RESULT
    return ExitCode.SUCCESS


def _handle_parse(args: argparse.Namespace) -> int:
    parsed = parse_url(args.url)
    if parsed is None:
        print(f"error: not an absolute URL: {args.url}", file=sys.stderr)
        return ExitCode.NO_RESULT

    if args.json_out:
        stable_json_dump(parsed, sys.stdout)
    else:
        print(parsed.base_url)
        for p in parsed.params:
            print(f"  {p.id}\t{p.value}")
    return ExitCode.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    if validate_url(args.url):
        print("valid")
        return ExitCode.SUCCESS
    print("invalid")
    return ExitCode.NO_RESULT


def _handle_transform(args: argparse.Namespace, direction: TransformDirection) -> int:
    text = _read_input(args.input)
    result = transform(text, args.delimiter, direction, _cleaning_options(args, direction))
    sys.stdout.write(result.output + "\n")
    if args.count:
        print(f"{result.count} item(s)", file=sys.stderr)
    return ExitCode.SUCCESS


def _handle_batch(args: argparse.Namespace) -> int:
    from prefill_kit import batch

    csv_text = args.template.read_text(encoding="utf-8")
    delimiter = args.values_delimiter or batch.detect_values_delimiter(csv_text)
    columns = batch.load_columns(csv_text, delimiter)
    links = batch.generate_links(args.form_url, columns)
    print(f"Generated {len(links)} link(s) from {len(columns)} field(s)", file=sys.stderr)

    if args.json_out:
        stable_json_dump([link.to_dict() for link in links], sys.stdout)
        return ExitCode.SUCCESS

    config = batch.ExportConfig(
        include_url=args.include_url,
        label_field=args.label,
        additional_fields=tuple(args.extra),
    )
    _write_output(batch.export_links_csv(links, columns, config), args.out)
    return ExitCode.SUCCESS


def _handle_template(args: argparse.Namespace) -> int:
    from prefill_kit.batch import template_csv

    _write_output(template_csv(), args.out)
    return ExitCode.SUCCESS


def _handle_match_names(args: argparse.Namespace) -> int:
    from prefill_kit.transform.names import match_names, read_name_table, results_to_csv

    try:
        names, extras = read_name_table(
            args.file1.read_text(encoding="utf-8"), args.column1, args.keep
        )
        candidates, _ = read_name_table(args.file2.read_text(encoding="utf-8"), args.column2)
    except KeyError as exc:
        print(f"error: column not found: {exc.args[0]}", file=sys.stderr)
        return ExitCode.ERROR

    results = match_names(
        names,
        candidates,
        threshold=args.threshold,
        require_same_word_count=args.same_word_count,
        strict_short_names=args.strict_short_names,
        extras=extras,
    )
    matched = sum(1 for r in results if r.match is not None)
    print(f"{matched}/{len(results)} name(s) matched", file=sys.stderr)

    if args.json_out:
        stable_json_dump(results, sys.stdout)
    else:
        keep = [c for c in args.keep if c != args.column1]
        _write_output(results_to_csv(results, keep), args.out)
    return ExitCode.SUCCESS


_RECIPIENT_KEY = "\0recipient"


def _handle_letters_bulk(args: argparse.Namespace) -> int:
    import httpx

    from prefill_kit import letters

    mapping = dict(args.mapping)
    if args.recipients_column:
        mapping[_RECIPIENT_KEY] = args.recipients_column
    rows = letters.map_recipients(args.recipients.read_text(encoding="utf-8"), mapping)
    recipients = [row.pop(_RECIPIENT_KEY).strip() for row in rows] if args.recipients_column else None

    payload = letters.build_bulk_payload(
        args.template_id,
        rows,
        api_key=args.api_key or os.getenv("LETTERS_API_KEY"),
        required_fields=args.required,
        notify=args.notify is not None,
        notification_method=args.notify,
        recipients=recipients,
    )
    print(f"Prepared {len(rows)} letter(s)", file=sys.stderr)
    if args.dry_run:
        stable_json_dump(payload, sys.stdout)
        return ExitCode.SUCCESS

    client = letters.LettersClient(
        args.api_key or os.getenv("LETTERS_API_KEY"),
        base_url=args.base_url or os.getenv("LETTERS_API_BASE_URL") or letters.DEFAULT_BASE_URL,
    )
    try:
        result = asyncio.run(client.create_bulk(payload))
    except httpx.HTTPError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR

    if not result.ok:
        print(f"error: {letters.format_upstream_message(result.data, result.status_code)}", file=sys.stderr)
        return ExitCode.ERROR
    stable_json_dump(result.data, sys.stdout)
    return ExitCode.SUCCESS


def _handle_serve(args: argparse.Namespace) -> int:
    try:
        import uvicorn
    except ImportError:
        print("error: serving requires the api extra: pip install prefill-kit[api]", file=sys.stderr)
        return ExitCode.ERROR

    from prefill_kit.web_api.config import settings

    uvicorn.run(
        "prefill_kit.web_api.main:app",
        host=args.host or settings.HOST,
        port=args.port or settings.PORT,
    )
    return ExitCode.SUCCESS


_HANDLERS = {
    "construct": _handle_construct,
    "parse": _handle_parse,
    "validate": _handle_validate,
    "to-row": lambda a: _handle_transform(a, TransformDirection.COLUMN_TO_ROW),
    "to-column": lambda a: _handle_transform(a, TransformDirection.ROW_TO_COLUMN),
    "batch": _handle_batch,
    "template": _handle_template,
    "match-names": _handle_match_names,
    "letters-bulk": _handle_letters_bulk,
    "serve": _handle_serve,
}


def main(argv: list[str] | None = None) -> int:
    """Entry-point — returns an exit code (0 = ok, 1 = no result, 2 = error)."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handler = _HANDLERS.get(args.command)
    if handler is None:
        print("error: please choose a subcommand (see --help).", file=sys.stderr)
        return ExitCode.ERROR

    try:
        return int(handler(args))
    except PrefillError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return ExitCode.NO_RESULT
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR


if __name__ == "__main__":
    raise SystemExit(main())
