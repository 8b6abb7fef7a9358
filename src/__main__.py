#!/usr/bin/env python3
"""
shortweave - Nested shortcode substitution for WYSIWYG HTML

Command line front end: reads an HTML content file, substitutes its
shortcodes using the handlers declared in a YAML manifest, and writes the
result to the output directory under the same name.

As with the rest of this codebase, the CLI leverages the ChRIS "plugin"
concept/pattern as a general purpose python app framework.

Usage:
    shortweave inputdir/ outputdir/ --inputFile page.html --manifest shortcodes.yaml

Examples:
    # Basic substitution
    shortweave . output/ --inputFile page.html --manifest shortcodes.yaml

    # Show warnings in the output instead of leaving unknown shortcodes
    shortweave . output/ --inputFile page.html --manifest shortcodes.yaml --errorBehavior warn

    # Trace every substitution
    shortweave . output/ --inputFile page.html --manifest shortcodes.yaml -vvv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings, ErrorBehavior
from .lib import ShortcodeParser, ShortcodeError, __version__, LOG, state_connectToLogger
from .lib import manifest_load as registry_loadManifest
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    description="shortweave - substitute nested [shortcodes] in editor HTML",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="HTML content file (relative to inputdir)"
)

parser.add_argument(
    "--manifest",
    default=None,
    type=str,
    help="YAML shortcode manifest (relative to inputdir)",
)

parser.add_argument(
    "--errorBehavior",
    default=None,
    choices=[behavior.value for behavior in ErrorBehavior],
    help="Override the configured error behavior",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the content file
            - manifestFile: Resolved path to the manifest (if given)
            - outputFile: Path the result is written to
            - envOK: True if environment is valid

    Exits:
        1 if the content file or manifest is not found
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.manifest:
        manifest_file = state.inputdir / state.manifest
        if not manifest_file.exists():
            print(f"Error: Manifest not found: {manifest_file}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.manifestFile = manifest_file
        LOG(f"Manifest: {manifest_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.outputFile = state.outputdir / Path(state.inputFile).name
    LOG(f"Output file: {state.outputFile}", level=2)

    state.envOK = True
    return state


def manifest_load(inputstate: ProgramState) -> ProgramState:
    """
    Build the shortcode parser and register the manifest's shortcodes.

    Returns:
        ProgramState with added field:
            - shortcodeParser: configured ShortcodeParser

    Exits:
        1 if the manifest is invalid
    """
    state = inputstate.copy()

    settings = appsettings
    if state.errorBehavior:
        settings = appsettings.model_copy(update={"error_behavior": ErrorBehavior(state.errorBehavior)})

    shortcode_parser = ShortcodeParser(settings=settings)
    if state.manifestFile:
        try:
            count = registry_loadManifest(state.manifestFile, shortcode_parser.registry)
            LOG(f"Registered {count} shortcodes", level=1)
        except ShortcodeError as e:
            print(f"Manifest error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        LOG("No manifest given, content will be copied unchanged", level=1)

    state.shortcodeParser = shortcode_parser
    return state


def content_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read the content file, substitute its shortcodes and write the result.

    Returns:
        ProgramState with added field:
            - parseResult: Dict containing:
                - status: bool
                - output_file: str
                - characters_in: int
                - characters_out: int

    Exits:
        1 if the file cannot be read or the parse fails
    """
    state = inputstate.copy()

    LOG("Reading content file...", level=1)
    try:
        content = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(content)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG("Substituting shortcodes...", level=1)
    try:
        output = state.shortcodeParser.parse(content)
    except ShortcodeError as e:
        print(f"Shortcode error: {e}", file=sys.stderr)
        sys.exit(1)

    state.outputFile.write_text(output, encoding="utf-8")
    LOG(f"Wrote {state.outputFile}", level=2)

    state.parseResult = {
        "status": True,
        "output_file": str(state.outputFile),
        "characters_in": len(content),
        "characters_out": len(output),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display results to user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if parseResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.parseResult:
        print("Error: Processing failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Substitution successful!", level=1)
    LOG(f"  Output: {state.parseResult['output_file']}", level=1)
    LOG(f"  Characters: {state.parseResult['characters_in']} -> {state.parseResult['characters_out']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="shortweave - nested shortcode substitution",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - substitute shortcodes in a content file.

    Orchestrates the pipeline:
        1. env_check: Validate paths
        2. manifest_load: Build the parser and register shortcodes
        3. content_parse: Substitute shortcodes and write the output
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, manifest_load, content_parse, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
