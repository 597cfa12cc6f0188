"""CLI entry point for sankey-dsl."""

import json
import logging
import sys

import click

from sankey_dsl.api import load_definition, serialize_definition
from sankey_dsl.config import CompilerConfig
from sankey_dsl.state import DiagramState


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option(
    "--format", "-f", "output_format", type=click.Choice(["json", "text"]), default="json", help="Output format"
)
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--reverse/--no-reverse", "reverse", default=None, help="Override the layout_reversegraph setting")
@click.option("--strict", is_flag=True, help="Exit with status 1 when the input has issues")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output and add section headers to text output")
@click.option("--quiet", "-q", is_flag=True, help="Do not print diagnostics")
def main(
    input: str | None,
    output_format: str,
    output: str | None,
    reverse: bool | None,
    strict: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Compile flow-diagram definition text into nodes, flows and settings."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if input:
        try:
            with open(input, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    config = CompilerConfig(reverse_override=reverse, strict=strict)
    state = DiagramState()
    diagram = load_definition(text, state, config)

    if not quiet:
        for diagnostic in diagram.diagnostics:
            click.echo(str(diagnostic), err=True)

    if output_format == "text":
        rendered = serialize_definition(diagram, state, verbose=verbose, precision=config.number_precision) + "\n"
    else:
        rendered = json.dumps(diagram.to_dict(), indent=2) + "\n"

    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)

    if config.strict and diagram.diagnostics.issues:
        sys.exit(1)


if __name__ == "__main__":
    main()
