"""
Command line interface: cplx
"""

import re
from typing import Dict, List, Optional, Tuple

import click

from .core import OUTPUT_FORMATS, Config, configure_logging, format_error, format_result, to_complex
from .errors import ComplexOpsError, ConfigurationError
from .operations import DEFAULT_OPERATION, Operation, Selector, apply_batch, dispatch, read_operands


NEGATIVE_OPERAND = re.compile(r"^-(?:\d|\.\d|inf|nan)", re.IGNORECASE)
VALUE_OPTIONS = {"-i", "--input", "--format", "--precision"}


class OperandCommand(click.Command):
    """Command that reads negative numbers such as -2-3j as operands, not options"""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        rewritten = []
        literal = False
        for index, arg in enumerate(args):
            takes_value = index > 0 and args[index - 1] in VALUE_OPTIONS
            if not literal and not takes_value and NEGATIVE_OPERAND.match(arg):
                # a leading space keeps the parser from treating it as an option
                arg = " " + arg
            literal = literal or arg == "--"
            rewritten.append(arg)
        return super().parse_args(ctx, rewritten)


def operation_flags(func):
    """Add one --<operation> flag per Operation"""
    for operation in reversed(list(Operation)):
        if operation.is_binary:
            help_text = f"Apply {operation.value} with the second operand."
        elif operation is DEFAULT_OPERATION:
            help_text = f"Apply {operation.value} (default)."
        else:
            help_text = f"Apply {operation.value}."
        func = click.option(
            f"--{operation.value}",
            f"op_{operation.value}",
            is_flag=True,
            default=False,
            help=help_text,
        )(func)
    return func


def selected_operation(flags: Dict[str, bool]) -> Operation:
    """Resolve the operation flags; at most one may be set"""
    chosen = [Operation(name[len("op_"):]) for name, enabled in flags.items() if enabled]
    if len(chosen) > 1:
        names = ", ".join(f"--{op.value}" for op in chosen)
        raise ConfigurationError(f"Options {names} are mutually exclusive")
    return chosen[0] if chosen else DEFAULT_OPERATION


def split_operands(operands: Tuple[str, ...], batch: bool) -> Tuple[Optional[str], Optional[str]]:
    """Split positionals into (primary operand, second operand)"""
    if batch:
        if len(operands) > 1:
            raise ConfigurationError("With --input only the second operand may be given positionally")
        return None, operands[0] if operands else None

    if not operands:
        raise ConfigurationError("Missing primary operand")
    if len(operands) > 2:
        raise ConfigurationError(f"Expected at most two operands, got {len(operands)}")
    return operands[0], operands[1] if len(operands) == 2 else None


@click.command(cls=OperandCommand, context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("operands", nargs=-1)
@operation_flags
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.File("r"),
    default=None,
    help="Read primary operands from a file, one per line ('-' for stdin).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="text",
    envvar="CPLX_FORMAT",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--precision",
    type=click.IntRange(min=0),
    default=6,
    envvar="CPLX_PRECISION",
    show_default=True,
    help="Digits after the decimal point in text output.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    envvar="CPLX_VERBOSE",
    help="Enable debug logging on stderr.",
)
@click.pass_context
def main(ctx: click.Context, operands: Tuple[str, ...], input_file, output_format: str,
         precision: int, verbose: bool, **flags: bool):
    """
    Apply an operation to a complex number.

    OPERANDS is the primary operand followed, for --pow and --log, by the
    second operand. Values may be written as 2, 2+3j, 2+3i or 2,3;
    negative values such as -2-3j are read as operands.

    \b
    Examples:
      cplx 2+3j --negate
      cplx 2+3j 2 --log
      cplx -2-3j --abs
      cplx --sqrt -i values.txt
    """
    logger = configure_logging(verbose)
    config = Config(precision=precision, output_format=output_format.lower(), verbose=verbose)

    try:
        operation = selected_operation(flags)
        value, argument = split_operands(operands, batch=input_file is not None)
        selector = Selector(operation, argument)
    except ConfigurationError as exc:
        raise click.UsageError(str(exc), ctx=ctx)
    except ComplexOpsError as exc:
        raise click.ClickException(str(exc))

    logger.debug(f"Selected {selector}")

    if input_file is None:
        try:
            result = dispatch(value, selector)
        except ComplexOpsError as exc:
            raise click.ClickException(str(exc))
        shown = to_complex(value) if config.output_format == "json" else None
        click.echo(format_result(result, config, value=shown, operation=operation.value))
        return

    items = apply_batch(read_operands(input_file), selector)
    for item in items:
        if item.ok:
            click.echo(format_result(item.result, config, value=to_complex(item.value),
                                     operation=operation.value))
        else:
            click.echo(format_error(item.error, config, value=item.value, operation=operation.value),
                       err=config.output_format == "text")

    if any(not item.ok for item in items):
        ctx.exit(1)


if __name__ == "__main__":
    main()
