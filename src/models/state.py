"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as processing progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, manifest, errorBehavior
        - env_check: inputSourceFile, manifestFile, outputFile, envOK
        - manifest_load: shortcodeParser
        - content_parse: parseResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the content file
        outputdir: Directory for the processed output
        verbosity: Logging verbosity level (1-3)
        inputFile: Content filename (relative to inputdir)
        manifest: Optional shortcode manifest path (relative to inputdir)
        errorBehavior: Optional error behavior override (strip, warn, leave, fail)
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the content file
        manifestFile: Resolved path to the manifest (None if not given)
        outputFile: Path the processed content is written to
        shortcodeParser: Configured ShortcodeParser instance
        parseResult: Parse results (output_file, characters_in, characters_out)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    manifest: Optional[str] = field(default=None)
    errorBehavior: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    manifestFile: Optional[Path] = field(default=None)
    outputFile: Path = field(default=Path("/"))
    shortcodeParser: Optional[Any] = field(default=None)  # ShortcodeParser at runtime
    parseResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, manifest, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Ignore argparse entries with no ProgramState counterpart
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            manifest_load,
            content_parse,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
