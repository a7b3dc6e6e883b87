"""
smlrun - SML Virtual Machine Command-Line Interface
===================================================

This module implements the command-line interface for running assembled
SML machine images.

Usage Examples
--------------
Run a program (READ prompts on the console):
    $ smlrun sum.mach

Supply READ input up front:
    $ smlrun double.mach --input 21

Single-step with register and memory dumps:
    $ smlrun sum.mach --step

Guard against infinite loops:
    $ smlrun loop.mach --max-cycles 10000
"""

from pathlib import Path
from typing import Optional

import click

from sml_sdk import __version__
from sml_sdk.cli.errors import handle_cli_exception, setup_logging
from sml_sdk.config import get_default_config
from sml_sdk.emulator import Emulator, ScriptedInput, StopReason
from sml_sdk.mach import MachineImage, load_mach


STEP_PROMPT = "Press Enter to proceed to next step..."


def execute_image(
    image: MachineImage,
    step: bool = False,
    inputs: Optional[tuple[str, ...]] = None,
    max_cycles: Optional[int] = None,
    verbose: bool = False,
) -> Emulator:
    """
    Load and execute a machine image.

    WRITE output goes to stdout. In step mode the register and memory dump
    is printed before every instruction.

    Args:
        image: The machine image to run
        step: Single-step with dumps
        inputs: READ tokens; None prompts on the console
        max_cycles: Cycle limit (None uses the configured limit)
        verbose: Report why execution stopped

    Returns:
        The emulator after execution

    Raises:
        RuntimeFault: If the program faults
    """
    config = get_default_config().with_overrides(max_cycles=max_cycles)
    input_source = ScriptedInput(inputs) if inputs is not None else None
    emu = Emulator(config, input_source=input_source)
    emu.load_image(image)

    if step:
        event = None
        while emu.pc < emu.memory.size:
            click.echo()
            click.echo(emu.dump())
            event = emu.step()
            if event.reason is not StopReason.STEP:
                break
            click.echo()
            click.pause(info=STEP_PROMPT)
    else:
        event = emu.run()

    if event is not None and event.reason is StopReason.MAX_CYCLES:
        click.echo(f"Warning: {event}; program did not halt", err=True)
    elif verbose and event is not None:
        click.echo(f"Stopped: {event}")

    return emu


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--step",
    is_flag=True,
    help="Single-step, printing registers and memory before each instruction",
)
@click.option(
    "--input", "inputs",
    multiple=True,
    metavar="TOKEN",
    help="Value for READ (can be repeated; default: prompt on the console)",
)
@click.option(
    "--max-cycles",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many instructions (default: no limit)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="smlrun")
def main(
    input_file: Path,
    step: bool,
    inputs: tuple[str, ...],
    max_cycles: Optional[int],
    verbose: bool,
) -> None:
    """
    Run an SML machine image.

    INPUT_FILE is a machine image (.mach) written by smlasm.

    \b
    Examples:
        smlrun sum.mach               # Run, prompting for READ
        smlrun double.mach --input 4  # Scripted READ input
        smlrun sum.mach --step        # Single-step with dumps
    """
    setup_logging(verbose)

    try:
        image = load_mach(input_file, max_words=get_default_config().memory_size)
        if verbose:
            click.echo(f"Loaded {len(image)} words from {input_file}, "
                       f"starting at {image.instruction_origin}")

        emu = execute_image(
            image,
            step=step,
            inputs=inputs if inputs else None,
            max_cycles=max_cycles,
            verbose=verbose,
        )

        if emu.cpu.warnings and verbose:
            click.echo(f"{len(emu.cpu.warnings)} runtime warnings")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Load")


if __name__ == "__main__":
    main()
