#!/usr/bin/env python3
"""
Résumé Normalization CLI

Parses persisted résumé content (canonical JSON or legacy markdown) and
writes it back, with session logging.

Commands:
    detect    - Report the format of a résumé file
    parse     - Parse a résumé and show what was extracted
    convert   - Convert a résumé to the other format
    roundtrip - Check that parse → serialize → parse preserves content
    certs     - List certifications mentioned in a résumé

Examples:
    python scripts/normalize_cv.py detect data/resume.md
    python scripts/normalize_cv.py parse data/resume.json --json
    python scripts/normalize_cv.py convert data/resume.md --to json -o resume.json
    python scripts/normalize_cv.py roundtrip data/resume.md
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from jobtrail.contexts.normalization import ContentFormat, detect_format, parse_resume, serialize_cv
from jobtrail.contexts.normalization.exceptions import InvalidKeywordConfigError
from jobtrail.contexts.normalization.logger import log_parse_result, setup_normalization_logger
from jobtrail.contexts.normalization.section_patterns import load_keyword_config
from jobtrail.contexts.profile import ProfileImport, collect_profile_text, detect_certifications

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Parse and convert résumé content",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _start_session(phase: str) -> Path:
    """Create a timestamped log directory and attach the normalization logger."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_dir = LOGS_PATH / f"normalize_{phase}_{timestamp}"
    log_dir.mkdir(exist_ok=True, parents=True)
    return setup_normalization_logger(log_dir, phase=phase)


def _read(path: Path) -> str:
    if not path.exists():
        typer.secho(f"Error: File not found: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _keyword_config(keywords: Optional[Path]):
    if not keywords:
        return None
    try:
        return load_keyword_config(keywords)
    except InvalidKeywordConfigError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def _load(path: Path, keywords: Optional[Path]):
    return parse_resume(_read(path), _keyword_config(keywords))


def _without_ids(value):
    # Text re-parsing generates fresh entry ids
    if isinstance(value, dict):
        return {key: _without_ids(item) for key, item in value.items() if key != "id"}
    if isinstance(value, list):
        return [_without_ids(item) for item in value]
    return value


ResumeFile = Annotated[Path, typer.Argument(help="Résumé file (JSON or markdown)")]
KeywordsOption = Annotated[
    Optional[Path],
    typer.Option(
        "--keywords",
        "-k",
        help="YAML file with section keywords (overrides defaults)",
    ),
]


@app.command()
def detect(file: ResumeFile):
    """Report whether a file holds canonical JSON or legacy text."""
    typer.echo(detect_format(_read(file)).value)


@app.command()
def parse(
    file: ResumeFile,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print parsed content as JSON"),
    ] = False,
    keywords: KeywordsOption = None,
):
    """Parse a résumé and show extracted sections and uncertain fields."""
    log_file = _start_session("parse")
    document = _load(file, keywords)
    log_parse_result(document)

    if as_json:
        typer.echo(json.dumps(document.content.to_dict(), indent=2, ensure_ascii=False))
        return

    content = document.content
    typer.echo(f"Format: {document.origin.value}")
    typer.echo(f"Name: {content.personal_info.name or '(none)'}")
    typer.echo(f"Experiences: {len(content.experiences)}")
    for entry in content.experiences:
        typer.echo(f"  - {entry.title} @ {entry.company} ({entry.start_date or '?'})")
    typer.echo(f"Education: {len(content.education)}")
    for entry in content.education:
        typer.echo(f"  - {entry.degree} | {entry.institution} | {entry.year}")
    typer.echo(f"Skills: {', '.join(content.skills) or '(none)'}")

    for collection, tracker in document.uncertainties.items():
        for marker in tracker:
            typer.echo(f"  ? {collection}[{marker.entry_index}].{marker.field}: {marker.reason}")

    if document.extraction_failed:
        typer.echo("WARNING: nothing could be extracted from this file", err=True)
    typer.echo(f"Log: {log_file}")


@app.command()
def convert(
    file: ResumeFile,
    to: Annotated[
        ContentFormat,
        typer.Option("--to", help="Target format"),
    ] = ContentFormat.JSON,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file (default: stdout)"),
    ] = None,
    keywords: KeywordsOption = None,
):
    """Convert a résumé to canonical JSON or markdown text."""
    _start_session("convert")
    document = _load(file, keywords)
    log_parse_result(document)

    source = document.source if to == ContentFormat.JSON else None
    rendered = serialize_cv(document.content, to, source=source)
    if output:
        output.write_text(rendered + "\n", encoding="utf-8")
        typer.echo(f"Wrote {to.value} résumé to {output}")
    else:
        typer.echo(rendered)


@app.command()
def roundtrip(file: ResumeFile, keywords: KeywordsOption = None):
    """Check that writing a résumé back and re-parsing it preserves its content."""
    _start_session("roundtrip")
    config = _keyword_config(keywords)
    first = parse_resume(_read(file), config)
    second = parse_resume(first.serialize(), config)

    before, after = _without_ids(first.content.to_dict()), _without_ids(second.content.to_dict())
    if before == after:
        typer.echo(f"OK: {first.origin.value} round trip preserved content")
        return

    typer.echo(f"MISMATCH: {first.origin.value} round trip changed content", err=True)
    for key in sorted(set(before) | set(after)):
        if before.get(key) != after.get(key):
            typer.echo(f"  {key}:", err=True)
            typer.echo(f"    before: {json.dumps(before.get(key), ensure_ascii=False)}", err=True)
            typer.echo(f"    after:  {json.dumps(after.get(key), ensure_ascii=False)}", err=True)
    raise typer.Exit(1)


@app.command()
def certs(file: ResumeFile, keywords: KeywordsOption = None):
    """List certifications mentioned anywhere in a résumé."""
    document = _load(file, keywords)
    imported = ProfileImport.from_cv(document.content)
    text = collect_profile_text(
        experience=imported.experience_text,
        skills=", ".join(imported.skill_tags),
        summary=imported.summary,
        languages=imported.languages,
    )
    found = detect_certifications(text)
    if not found:
        typer.echo("No certifications detected")
        return
    for certification in found:
        typer.echo(f"{certification.name} ({certification.issuer})")


if __name__ == "__main__":
    app()
