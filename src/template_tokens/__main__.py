"""CLI entry point: run `template-tokens app/templates` or `python -m template_tokens file.hbs`."""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional


def _display_token(usage, angle_bracket: bool) -> str:
    from .analysis.path_classifier import ClassificationKind, to_angle_bracket_name

    if angle_bracket and usage.kind is ClassificationKind.COMPONENT:
        return to_angle_bracket_name(usage.token)
    return usage.token


def _render_text(results: Dict[str, List], locations: bool, angle_bracket: bool) -> str:
    lines: List[str] = []
    for name, usages in results.items():
        lines.append(f"{name}:")
        for usage in usages:
            token = _display_token(usage, angle_bracket)
            if locations and usage.location is not None:
                token = f"{token}\t{usage.location.line}:{usage.location.column}"
            lines.append(f"  {token}")
    return "\n".join(lines)


def _render_json(results: Dict[str, List], locations: bool, angle_bracket: bool) -> str:
    payload: Dict[str, List[Any]] = {}
    for name, usages in results.items():
        entries: List[Any] = []
        for usage in usages:
            token = _display_token(usage, angle_bracket)
            if not locations:
                entries.append(token)
                continue
            loc = usage.location
            entries.append({
                "token": token,
                "kind": usage.kind.value,
                "line": loc.line if loc else None,
                "column": loc.column if loc else None,
            })
        payload[name] = entries
    return json.dumps(payload, indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .driver import TokenExtractor
    from .shared.errors import ErrorReporter, TemplateTokensError
    from .utils.io_utils import iter_template_files, read_source_file

    parser = argparse.ArgumentParser(
        prog="template-tokens",
        description="List the components, helpers and modifiers invoked by templates.",
    )
    parser.add_argument("paths", nargs="+", type=Path,
                        help="Template files, or directories to scan for .hbs/.handlebars files")
    parser.add_argument("--json", action="store_true", help="Print a JSON object mapping each file to its tokens")
    parser.add_argument("--locations", action="store_true", help="Include line:column of every token")
    parser.add_argument("--angle-bracket", action="store_true",
                        help="Show component tokens as tag names (my-component/bar -> MyComponent::Bar)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    extractor = TokenExtractor()
    reporter = ErrorReporter()
    results: Dict[str, List] = {}
    unreadable = 0

    for path in iter_template_files(args.paths):
        if not path.is_file():
            sys.stderr.write(f"template-tokens: error: not a file: {path}\n")
            unreadable += 1
            continue
        try:
            source = read_source_file(path)
        except (OSError, UnicodeDecodeError) as e:
            sys.stderr.write(f"template-tokens: error: could not read {path}: {e}\n")
            unreadable += 1
            continue
        try:
            results[str(path)] = extractor.collect(source, str(path))
        except TemplateTokensError as e:
            reporter.report_error(e)

    render = _render_json if args.json else _render_text
    output = render(results, args.locations, args.angle_bracket)
    if output:
        sys.stdout.write(output + "\n")

    if reporter.has_errors():
        sys.stderr.write(reporter.format_all() + "\n")
    return 1 if unreadable or reporter.has_errors() else 0


if __name__ == "__main__":
    sys.exit(main())
