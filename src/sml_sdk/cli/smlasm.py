"""
smlasm - SML Assembler Command-Line Interface
=============================================

This module implements the command-line interface for the SML assembler.
It assembles a source file into a machine image and can run the result
straight away.

Usage Examples
--------------
Basic assembly:
    $ smlasm sum.sml

With output file:
    $ smlasm sum.sml -o out.mach

Generate all output files:
    $ smlasm sum.sml -o sum.mach -l sum.lst -s sum.sym

Assemble and run:
    $ smlasm sum.sml --run

Assemble and single-step:
    $ smlasm sum.sml --step

Verbose mode:
    $ smlasm -v sum.sml
"""

from pathlib import Path
from typing import Optional

import click

from sml_sdk import __version__
from sml_sdk.assembler import Assembler
from sml_sdk.cli.errors import handle_cli_exception, setup_logging
from sml_sdk.cli.smlrun import execute_image
from sml_sdk.config import get_default_config


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output machine image (default: input.mach)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat undefined operand symbols as errors instead of using 0",
)
@click.option(
    "-r", "--run", "run_program",
    is_flag=True,
    help="Run the program after assembling",
)
@click.option(
    "-S", "--step",
    is_flag=True,
    help="Single-step the program after assembling, with register and memory dumps",
)
@click.option(
    "--max-cycles",
    type=click.IntRange(min=1),
    default=None,
    help="Stop a --run after this many instructions (default: no limit)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="smlasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    strict: bool,
    run_program: bool,
    step: bool,
    max_cycles: Optional[int],
    verbose: bool,
) -> None:
    """
    Assemble SML source code into a machine image.

    INPUT_FILE is the SML source file (.sml) to assemble.

    The assembler writes a .mach machine image and prints the symbol and
    label tables. A program is only run when assembly succeeds.

    \b
    Examples:
        smlasm sum.sml               # Outputs sum.mach
        smlasm sum.sml -o out.mach   # Specify output file
        smlasm sum.sml --run         # Assemble and run
        smlasm sum.sml --step        # Assemble and single-step
    """
    setup_logging(verbose)

    if run_program and step:
        raise click.UsageError("-r/--run and -S/--step are mutually exclusive")

    output_file = output if output is not None else input_file.with_suffix(".mach")
    strict_symbols = strict or get_default_config().strict_symbols

    asm = Assembler(verbose=verbose, strict_symbols=strict_symbols)

    try:
        program = asm.assemble_file(input_file)

        asm.write_mach(output_file)

        # Write optional auxiliary files
        if listing:
            asm.write_listing(listing)

        if symbols:
            asm.write_symbols(symbols)

        click.echo(asm.get_tables())

        # Print summary
        if verbose:
            click.echo(f"Assembly complete: {len(program.symbols)} variables, "
                       f"{len(program.instructions)} instructions at {program.instruction_origin}")
            warnings = asm.get_warnings()
            if warnings:
                click.echo(f"{len(warnings)} warnings")

        if run_program or step:
            click.echo()
            execute_image(
                program.to_image(),
                step=step,
                max_cycles=max_cycles,
                verbose=verbose,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
