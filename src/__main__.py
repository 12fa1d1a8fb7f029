#!/usr/bin/env python3
"""
includefilter - Include-directive preprocessor for text pipelines

Reads one source file, splices every file named by an include directive
into it and writes the result. This is the command line host for the
IncludeFilter stream: it turns CLI options into filter parameters, runs the
filter and reports the outcome.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Directive syntax (default):
    ##include "header.txt"

    The directive line is replaced by the lines of header.txt, found in the
    first search directory that contains it. Included text is not scanned
    again, so directives inside included files are left as they are.

Usage:
    includefilter inputdir/ outputdir/ --inputFile page.txt

Examples:
    # Search inputdir for include files (the default search path)
    includefilter . out/ --inputFile page.txt

    # Two search directories, first match wins, quote every included line
    includefilter . out/ --inputFile page.txt \\
        --searchdir partials/ --searchdir /usr/share/partials \\
        --setting 'prefix=> '

    # Settings and search dirs from a properties file, custom directive
    includefilter . out/ --inputFile page.txt --propertiesFile include.properties

    # Verbose output
    includefilter . out/ --inputFile page.txt -vv
"""

import io
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import IncludeFilter, IncludeFilterError, __version__, LOG, state_connectToLogger
from .models import ProgramState, pipeline, Parameter, ParameterKind


DISPLAY_TITLE = r"""
  _            _           _       __ _ _ _
 (_)_ __   ___| |_   _  __| | ___ / _(_) | |_ ___ _ __
 | | '_ \ / __| | | | |/ _` |/ _ \ |_| | | __/ _ \ '__|
 | | | | | (__| | |_| | (_| |  __/  _| | | ||  __/ |
 |_|_| |_|\___|_|\__,_|\__,_|\___|_| |_|_|\__\___|_|

  Include-directive preprocessor
"""

# Define CLI arguments
parser = ArgumentParser(
    description="includefilter - splice include files into a text source",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Source file to filter (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default=None,
    type=str,
    help="Output filename (relative to outputdir). Defaults to the inputFile name",
)

parser.add_argument(
    "--searchdir",
    action="append",
    default=None,
    type=str,
    help="Directory searched for include files; repeat for more, first match wins. "
    "Relative paths are taken from inputdir. Defaults to inputdir",
)

parser.add_argument(
    "--setting",
    action="append",
    default=None,
    type=str,
    help="Filter setting as KEY=VALUE (prefix, suffix, pattern, group); repeatable",
)

parser.add_argument(
    "--propertiesFile",
    default=None,
    type=str,
    help="key=value file with settings; 'searchdir' entries add search directories",
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
    Validate environment and resolve input and output paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the source file
            - outputTargetFile: Path of the file to write
            - envOK: True if environment is valid

    Exits:
        1 if the source file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputTargetFile = state.outputdir / (state.outputFile or state.inputFile)
    state.outputTargetFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output file: {state.outputTargetFile}", level=2)

    state.envOK = True
    return state


def path_fromInputdir(state: ProgramState, path: str) -> str:
    """Anchor a relative path at inputdir, leave absolute paths alone"""
    candidate = Path(path)
    if candidate.is_absolute():
        return str(candidate)
    return str(state.inputdir / candidate)


def parameters_collect(inputstate: ProgramState) -> ProgramState:
    """
    Translate CLI options into filter parameters.

    Order matters: search directories keep their command line order, and
    --setting values come after the properties file so they override it.

    Args:
        inputstate: Program state with CLI options

    Returns:
        ProgramState with added field:
            - parameters: List[Parameter] for IncludeFilter

    Exits:
        1 if a --setting value is not of the form KEY=VALUE
    """

    state = inputstate.copy()
    parameters = []

    if state.propertiesFile:
        parameters.append(
            Parameter(ParameterKind.PROPERTIESFILE, value=path_fromInputdir(state, state.propertiesFile))
        )

    for directory in state.searchdir or [str(state.inputdir)]:
        parameters.append(Parameter(ParameterKind.SEARCHDIR, value=path_fromInputdir(state, directory)))

    for setting in state.setting or []:
        if '=' not in setting:
            print(f"Error: --setting expects KEY=VALUE, got {setting!r}", file=sys.stderr)
            sys.exit(1)
        key, value = setting.split('=', 1)
        parameters.append(Parameter(ParameterKind.SETTING, value=value, name=key.strip()))

    LOG(f"Collected {len(parameters)} filter parameters", level=2)
    state.parameters = parameters
    return state


def source_filter(inputstate: ProgramState) -> ProgramState:
    """
    Run the source file through the include filter and write the result.

    Args:
        inputstate: Program state with inputSourceFile and parameters

    Returns:
        ProgramState with added field:
            - filterResult: Dict containing:
                - status: bool (filter success)
                - output_file: str (path of the written file)
                - characters_in: int (size of the source)
                - characters_out: int (size of the expanded text)

    Exits:
        1 if an include is missing, the configuration is invalid, or a file
        cannot be read or written
    """

    state = inputstate.copy()

    LOG("Filtering source...", level=1)

    try:
        source = state.inputSourceFile.read_text(encoding=appsettings.source_encoding)
        characters_in = len(source)
        with IncludeFilter(io.StringIO(source), state.parameters) as include_filter:
            expanded = include_filter.read()
        state.outputTargetFile.write_text(expanded, encoding=appsettings.source_encoding)
    except IncludeFilterError as e:
        print(f"Include error: {e}", file=sys.stderr)
        sys.exit(1)
    except (OSError, UnicodeError) as e:
        print(f"Error processing {state.inputSourceFile}: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.filterResult = {
        'status': True,
        'output_file': str(state.outputTargetFile),
        'characters_in': characters_in,
        'characters_out': len(expanded),
    }
    LOG(f"Expanded {characters_in} -> {len(expanded)} characters", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display filter results to the user.

    Args:
        inputstate: Program state with filterResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if filterResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.filterResult:
        print("Error: Filtering failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Includes processed", level=1)
    LOG(f"  Output: {state.filterResult['output_file']}", level=1)
    LOG(
        f"  Size:   {state.filterResult['characters_in']} -> "
        f"{state.filterResult['characters_out']} characters",
        level=1,
    )
    return state


@chris_plugin(
    parser=parser,
    title="includefilter - Include-directive preprocessor",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - splice include files into one source file.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and environment
        2. parameters_collect: Build filter parameters from options
        3. source_filter: Expand includes and write the output
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the source file
        outputdir: Directory where the filtered file will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, parameters_collect, source_filter, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
