#!/usr/bin/env python3
"""
Profile Merge CLI

Merges résumé data into a user profile JSON file.

Commands:
    import  - Merge a whole résumé (JSON or markdown) into a profile, add mode
    extract - Extract one résumé section with an LLM and merge its entries

Examples:
    # Import a résumé into a (possibly new) profile
    python scripts/merge_profile.py import data/resume.md data/profile.json

    # Extract skills with the configured LLM and add them
    python scripts/merge_profile.py extract skills data/skills.txt data/profile.json

    # Replace the whole education collection (asks for --yes when non-empty)
    python scripts/merge_profile.py extract education data/edu.txt data/profile.json --mode replace --yes
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from jobtrail.contexts.intake import LLMExtractionService, extract_section
from jobtrail.contexts.intake.logger import log_extraction_result, setup_intake_logger
from jobtrail.contexts.normalization import parse_resume
from jobtrail.contexts.normalization.logger import log_parse_result
from jobtrail.contexts.profile import (
    MergeMode,
    ProfileImport,
    ReplaceNotConfirmedError,
    UserProfile,
    import_into_profile,
    merge_collection,
)
from jobtrail.contexts.profile.logger import log_merge_result, setup_profile_logger

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Merge résumé data into a user profile",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _session_dir(name: str) -> Path:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_dir = LOGS_PATH / f"{name}_{timestamp}"
    log_dir.mkdir(exist_ok=True, parents=True)
    return log_dir


def _load_profile(path: Path) -> UserProfile:
    """Load a profile file, starting from an empty profile if it doesn't exist."""
    if not path.exists():
        typer.echo(f"Profile {path} not found, starting a new one")
        return UserProfile()
    try:
        return UserProfile.from_dict(json.loads(path.read_text(encoding="utf-8")))
    except json.JSONDecodeError as e:
        typer.secho(f"Error: {path} is not valid JSON: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def _save_profile(profile: UserProfile, path: Path) -> None:
    path.parent.mkdir(exist_ok=True, parents=True)
    path.write_text(json.dumps(profile.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    typer.echo(f"Saved profile to {path}")


ProfileFile = Annotated[Path, typer.Argument(help="Profile JSON file")]


@app.command("import")
def import_resume(
    resume: Annotated[Path, typer.Argument(help="Résumé file (JSON or markdown)")],
    profile_file: ProfileFile,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show the result without saving"),
    ] = False,
):
    """Merge a résumé into a profile: fill empty fields, add new entries."""
    setup_profile_logger(_session_dir("profile_import"), mode=MergeMode.ADD.value)

    if not resume.exists():
        typer.secho(f"Error: File not found: {resume}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    document = parse_resume(resume.read_text(encoding="utf-8"))
    log_parse_result(document)
    if document.extraction_failed:
        typer.secho("Error: nothing could be extracted from the résumé", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    result = import_into_profile(_load_profile(profile_file), ProfileImport.from_cv(document.content))
    log_merge_result(result)
    for collection, count in result.skipped.items():
        typer.echo(f"Skipped {count} incomplete {collection.replace('_', ' ')} entries")

    if not result.changed:
        typer.echo("Nothing new to import")
        return
    if dry_run:
        typer.echo(json.dumps(result.profile.to_dict(), indent=2, ensure_ascii=False))
        return
    _save_profile(result.profile, profile_file)


@app.command()
def extract(
    section: Annotated[str, typer.Argument(help="education, experience or skills")],
    content_file: Annotated[Path, typer.Argument(help="File with the section text")],
    profile_file: ProfileFile,
    mode: Annotated[MergeMode, typer.Option("--mode", help="Merge mode")] = MergeMode.ADD,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Confirm replacing existing entries"),
    ] = False,
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", help="LLM provider (default: LLM_PROVIDER)"),
    ] = None,
    model: Annotated[Optional[str], typer.Option("--model", help="Model override")] = None,
):
    """Extract a section with an LLM and merge its entries into a profile."""
    log_dir = _session_dir("profile_extract")
    setup_intake_logger(log_dir, section=section)

    if not content_file.exists():
        typer.secho(f"Error: File not found: {content_file}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    service = LLMExtractionService(provider_name=provider, model=model)
    result = extract_section(service, section, content_file.read_text(encoding="utf-8"))
    log_extraction_result(result)
    if not result.success:
        typer.secho(f"Error: {result.error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    if result.collection is None:
        typer.secho(f"Error: {section} entries can't be merged into a profile collection", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    for marker in result.uncertainties:
        typer.echo(f"  ? entry {marker.entry_index} {marker.field}: {marker.reason}")

    profile = _load_profile(profile_file)
    try:
        updated = merge_collection(profile, result.collection, result.entries, mode, confirm_replace=yes)
    except ReplaceNotConfirmedError as e:
        typer.secho(f"Error: {e} (pass --yes to confirm)", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    before = len(profile.collection(result.collection))
    after = len(updated.collection(result.collection))
    typer.echo(f"{result.collection}: {before} → {after} entries ({mode.value})")
    _save_profile(updated, profile_file)


if __name__ == "__main__":
    app()
