"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern used by
the command line host, and the pipeline() helper for composing stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field

from .parameters import Parameter


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the host pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFile,
          searchdir, setting, propertiesFile
        - env_check: inputSourceFile, outputTargetFile, envOK
        - parameters_collect: parameters
        - source_filter: filterResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source file
        outputdir: Base output directory for the filtered file
        verbosity: Logging verbosity level (1-3)
        inputFile: Source filename (relative to inputdir)
        outputFile: Output filename (relative to outputdir), defaults to inputFile
        searchdir: Search directories from the command line, in order
        setting: KEY=VALUE settings from the command line, in order
        propertiesFile: Optional properties file with settings and searchdirs
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the source file
        outputTargetFile: Resolved path of the file to write
        parameters: Filter parameters built from the options
        filterResult: Filter results (output_file, include_count, characters)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputFile: Optional[str] = field(default=None)
    searchdir: Optional[List[str]] = field(default=None)
    setting: Optional[List[str]] = field(default=None)
    propertiesFile: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputTargetFile: Path = field(default=Path("/"))
    parameters: List[Parameter] = field(default_factory=list)
    filterResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, searchdir, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for filtered output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Drop anything argparse carries that the state does not model
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

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            parameters_collect,
            source_filter,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
