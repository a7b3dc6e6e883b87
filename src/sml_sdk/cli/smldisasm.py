"""
smldisasm - SML Machine Image Disassembler Command-Line Interface
=================================================================

This module implements the command-line interface for the SML disassembler.
It lists the words of a .mach machine image as decoded instructions, or
regenerates SML source that reassembles to the same image.

Usage Examples
--------------
List a machine image:
    $ smldisasm sum.mach

Output to file:
    $ smldisasm sum.mach -o sum.lst

Regenerate source:
    $ smldisasm sum.mach --source -o sum_again.sml

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from pathlib import Path
from typing import Optional

import click

from sml_sdk import __version__
from sml_sdk.cli.errors import handle_cli_exception, setup_logging
from sml_sdk.disassembler import SMLDisassembler
from sml_sdk.mach import load_mach


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
    help="Output file (default: stdout)",
)
@click.option(
    "--source",
    is_flag=True,
    help="Emit assemblable SML source instead of a listing",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="smldisasm")
def main(
    input_file: Path,
    output: Optional[Path],
    source: bool,
    verbose: bool,
) -> None:
    """
    Disassemble an SML machine image.

    INPUT_FILE is a machine image (.mach) written by smlasm.

    \b
    Examples:
        smldisasm sum.mach                 # Listing on stdout
        smldisasm sum.mach -o sum.lst      # Listing to a file
        smldisasm sum.mach --source        # Reassemblable source
    """
    setup_logging(verbose)

    try:
        image = load_mach(input_file)

        if verbose:
            click.echo(f"Input file: {input_file} ({len(image)} words)", err=True)
            click.echo(f"Instruction origin: {image.instruction_origin}", err=True)

        disasm = SMLDisassembler()
        if source:
            result = disasm.to_source(image)
        else:
            header = [
                f"// Disassembly of {input_file.name}",
                f"// Size: {len(image)} words",
                "",
            ]
            result = "\n".join(header) + "\n" + disasm.disassemble_to_text(image) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
