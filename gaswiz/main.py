from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from gaswiz.config.settings import WizardConfig, load_config
from gaswiz.core.protocol import DesignProposal
from gaswiz.llm.client import WizardClient
from gaswiz.orchestrator.orchestrator import DeploymentParams, Wizard
from gaswiz.project_state.credential_store import CredentialStore, resolve_api_key
from gaswiz.utils.file_bundle import (
    ArtifactBundle,
    archive_name,
    write_file_bundle,
    write_zip_bundle,
)
from gaswiz.utils.logger import get_logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Google Apps Script wizard: turn an app idea into a sheet-backed web app project."
    )
    parser.add_argument("--config", type=str, default=None, help="Path to gaswiz.yaml.")
    sub = parser.add_subparsers(dest="command", required=True)

    key = sub.add_parser("key", help="Manage the wizard's own Gemini API key.")
    key.add_argument("action", choices=["save", "show", "clear"])
    key.add_argument("value", nargs="?", default=None, help="API key (for 'save').")

    expand = sub.add_parser("expand", help="Write an app description from a project name.")
    expand.add_argument("--name", required=True, help="Project name, e.g. 'Recipe Box'.")

    design = sub.add_parser("design", help="Ask for a sheet schema + UI proposal.")
    design.add_argument("--name", required=True, help="Project name.")
    design.add_argument("--description", default="", help="Free-text app description.")
    design.add_argument(
        "--expand", action="store_true", help="Generate the description from the name first."
    )
    design.add_argument("--out", default="proposal.json", help="Where to write the proposal.")

    edit = sub.add_parser("edit", help="Replace single entries of a saved proposal.")
    edit.add_argument("proposal", help="Proposal JSON written by 'design'.")
    edit.add_argument("--sheet-name", default=None)
    edit.add_argument("--field", nargs=2, action="append", default=[], metavar=("INDEX", "VALUE"))
    edit.add_argument("--ui", nargs=2, action="append", default=[], metavar=("INDEX", "VALUE"))

    build = sub.add_parser("build", help="Generate Code.gs / index.html and package the project.")
    build.add_argument("proposal", help="Proposal JSON written by 'design'.")
    build.add_argument("--api-key", required=True, help="Gemini API key the generated app will use.")
    build.add_argument("--sheet-id", required=True, help="Google Sheet ID the generated app will use.")
    build.add_argument("--model", default=None, help="Gemini model the generated app will use.")
    build.add_argument("--sheet-name", default=None, help="Override the proposed sheet name.")
    build.add_argument("--no-stylish", action="store_true", help="Skip the polished design request.")
    build.add_argument("--no-responsive", action="store_true", help="Skip the responsive CSS request.")
    build.add_argument("--other", default="", help="Other free-text requests.")
    build.add_argument(
        "--prompts-only",
        action="store_true",
        help="Only write sheet_structure.txt and claude_prompt.txt (no model call).",
    )
    build.add_argument("--out-dir", default=None, help="Directory for the zip archive.")
    build.add_argument(
        "--files-dir", default=None, help="Also write the project files unzipped into this directory."
    )

    return parser.parse_args(argv)


class ProposalFileError(ValueError):
    pass


def _read_proposal_file(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return {
            "project_name": str(data["project_name"]),
            "app_description": str(data["app_description"]),
            "proposal": DesignProposal.model_validate(data["proposal"]),
        }
    except (OSError, ValueError, KeyError, TypeError) as exc:
        raise ProposalFileError(f"Cannot read proposal file {path}: {exc}") from exc


def _parse_index(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Entry index must be an integer, got '{text}'") from None


def _write_proposal_file(path: Path, project_name: str, app_description: str, proposal: DesignProposal) -> None:
    payload = {
        "project_name": project_name,
        "app_description": app_description,
        "proposal": proposal.model_dump(),
    }
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _build_wizard(cfg: WizardConfig, store: CredentialStore) -> Wizard:
    client = WizardClient(model=cfg.wizard_model)
    client.init(resolve_api_key(store))
    return Wizard(client, cfg)


def _fail_message(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _fail(wizard: Wizard) -> int:
    return _fail_message(wizard.error or "unknown error")


def run(args: argparse.Namespace) -> int:
    logger = get_logger("main")
    cfg = load_config(Path(args.config) if args.config else None)
    store = CredentialStore(cfg.credential_file)

    if args.command == "key":
        if args.action == "save":
            try:
                store.save(args.value or "")
            except ValueError as exc:
                return _fail_message(str(exc))
            logger.info("API key saved to %s", store.path)
        elif args.action == "clear":
            store.clear()
            logger.info("API key cleared.")
        else:
            key = resolve_api_key(store)
            print(f"{key[:4]}...{key[-4:]}" if key else "(no API key set)")
        return 0

    wizard = _build_wizard(cfg, store)

    if args.command == "expand":
        description = wizard.expand_idea(args.name)
        if description is None:
            return _fail(wizard)
        print(description)
        return 0

    if args.command == "design":
        description = args.description
        if args.expand and not description.strip():
            description = wizard.expand_idea(args.name) or ""
            if wizard.error:
                return _fail(wizard)

        proposal = wizard.request_design(args.name, description)
        if proposal is None:
            return _fail(wizard)

        out = Path(args.out)
        _write_proposal_file(out, args.name, description, proposal)
        logger.info("Proposal written to %s", out)
        return 0

    try:
        data = _read_proposal_file(Path(args.proposal))
    except ProposalFileError as exc:
        return _fail_message(str(exc))
    wizard.restore_proposal(data["project_name"], data["app_description"], data["proposal"])

    if args.command == "edit":
        try:
            field_edits = [(_parse_index(i), v) for i, v in args.field]
            ui_edits = [(_parse_index(i), v) for i, v in args.ui]
        except ValueError as exc:
            return _fail_message(str(exc))

        if args.sheet_name is not None and wizard.edit_sheet_name(args.sheet_name) is None:
            return _fail(wizard)
        for index, value in field_edits:
            if wizard.edit_field(index, value) is None:
                return _fail(wizard)
        for index, value in ui_edits:
            if wizard.edit_ui_element(index, value) is None:
                return _fail(wizard)
        _write_proposal_file(Path(args.proposal), data["project_name"], data["app_description"], wizard.proposal)
        logger.info("Proposal updated: %s", args.proposal)
        return 0

    params = DeploymentParams(
        target_api_key=args.api_key,
        target_sheet_id=args.sheet_id,
        target_model=args.model or cfg.target_model,
        final_sheet_name=args.sheet_name,
        apply_stylish_design=not args.no_stylish,
        include_responsive_css=not args.no_responsive,
        other_requests=args.other,
    )
    if args.prompts_only:
        artifacts = wizard.generate_prompts_only(params)
    else:
        artifacts = wizard.generate_code(params)
    if artifacts is None:
        return _fail(wizard)

    bundle = ArtifactBundle.from_artifacts(artifacts)
    if args.files_dir:
        written = write_file_bundle(bundle, Path(args.files_dir))
        logger.info("Wrote %d files to %s", len(written), args.files_dir)

    out_dir = Path(args.out_dir) if args.out_dir else cfg.output_dir
    zip_path = write_zip_bundle(
        bundle,
        out_dir / archive_name(data["project_name"]),
    )
    logger.info("Project archive written to %s", zip_path)
    return 0


def main() -> None:
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()
