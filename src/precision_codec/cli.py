"""
Command-line interface for Precision Codec.

Usage:
    precision-codec info           Show supported formats and their ranges
    precision-codec encode VALUE   Encode a value and show its bit fields
    precision-codec decode BITS    Decode a bit pattern
    precision-codec table          List every pattern of an 8-bit format
    precision-codec close A B      Tolerance comparison of two values
    precision-codec sweep          Round-trip error of sampled values
"""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from precision_codec import __version__
from precision_codec.algorithms import DEFAULT_SEED, measure_round_trip, sample_values
from precision_codec.codec import FlexFloat, Tolerance, encode_float, float_is_close
from precision_codec.data import (
    PrecisionFormat,
    get_spec,
    list_formats,
    parse_format,
)

app = typer.Typer(
    name="precision-codec",
    help="Bit-exact conversions between binary32 and reduced-precision formats",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"precision-codec version {__version__}")
        raise typer.Exit()


def _format_or_exit(name: str) -> PrecisionFormat:
    try:
        return parse_format(name)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _show(value: object) -> str:
    return repr(float(value))  # type: ignore[arg-type]


@app.callback()  # type: ignore[misc]
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Precision Codec - Floating-point format conversions."""
    pass


@app.command()  # type: ignore[misc]
def info() -> None:
    """Display bit layout and range of every supported format."""
    table = Table(title="Supported Formats")

    table.add_column("Format", style="cyan", no_wrap=True)
    table.add_column("Bits", justify="right")
    table.add_column("Exp", justify="right")
    table.add_column("Mant", justify="right")
    table.add_column("Bias", justify="right")
    table.add_column("Max finite", justify="right")
    table.add_column("Min normal", justify="right")
    table.add_column("Min subnormal", justify="right")
    table.add_column("Machine ε", justify="right")

    for fmt in list_formats():
        spec = get_spec(fmt)
        table.add_row(
            fmt.value.upper(),
            str(spec.bits),
            str(spec.exponent_bits),
            str(spec.mantissa_bits),
            str(spec.exponent_bias),
            f"{spec.max_finite:.4g}",
            f"{spec.min_normal:.4g}",
            f"{spec.min_subnormal:.4g}",
            f"{spec.machine_epsilon:.2e}",
        )

    console.print(table)


@app.command()  # type: ignore[misc]
def encode(
    value: Annotated[float, typer.Argument(help="Value to encode (nan/inf accepted)")],
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="Target format"),
    ] = "f16",
) -> None:
    """Encode a value and show its bit pattern."""
    flex = encode_float(value, _format_or_exit(fmt))
    sign, exponent, mantissa = flex.fields

    console.print(f"[bold]{flex.format.value.upper()}[/] {flex.to_hex()}")
    console.print(f"  binary:   {flex.to_binary()}")
    console.print(f"  sign:     {sign}")
    console.print(f"  exponent: {exponent}")
    console.print(f"  mantissa: {mantissa}")
    console.print(f"  decoded:  {_show(flex.value)}")


@app.command()  # type: ignore[misc]
def decode(
    bits: Annotated[str, typer.Argument(help="Bit pattern: decimal, 0x hex or 0b binary")],
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="Source format"),
    ] = "f16",
) -> None:
    """Decode a bit pattern to its binary32 value."""
    precision = _format_or_exit(fmt)
    try:
        flex = FlexFloat(bits=int(bits, 0), format=precision)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"[bold]{precision.value.upper()}[/] {flex.to_hex()} ({flex.to_binary()})")
    console.print(f"  decoded: {_show(flex.value)}")


@app.command()  # type: ignore[misc]
def table(
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="8-bit format to list"),
    ] = "f8",
) -> None:
    """List every bit pattern of an 8-bit format with its value."""
    precision = _format_or_exit(fmt)
    spec = get_spec(precision)
    if spec.bits != 8:
        console.print(
            f"[red]Error:[/] table lists 8-bit formats only, "
            f"'{precision.value}' has {spec.bits} bits"
        )
        raise typer.Exit(code=1)

    output = Table(title=f"{precision.value.upper()} Bit Table")
    output.add_column("Hex", style="cyan", no_wrap=True)
    output.add_column("Binary", no_wrap=True)
    output.add_column("Value", justify="right")

    for bits in range(1 << spec.bits):
        flex = FlexFloat(bits=bits, format=precision)
        output.add_row(flex.to_hex(), flex.to_binary(), _show(flex.value))

    console.print(output)


@app.command()  # type: ignore[misc]
def close(
    a: Annotated[float, typer.Argument(help="First value")],
    b: Annotated[float, typer.Argument(help="Second value")],
    relative: Annotated[
        float,
        typer.Option("--relative", "-r", help="Relative tolerance"),
    ] = 1e-3,
    absolute: Annotated[
        float,
        typer.Option("--absolute", "-a", help="Absolute tolerance"),
    ] = 0.0,
    digits: Annotated[
        int | None,
        typer.Option("--digits", "-d", help="Significant digits (overrides --relative)"),
    ] = None,
) -> None:
    """Compare two values within tolerance; exit code 1 when not close."""
    try:
        if digits is not None:
            tolerance = Tolerance.from_digits(digits, absolute=absolute)
        else:
            tolerance = Tolerance(relative=relative, absolute=absolute)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=2) from exc

    result = float_is_close(a, b, tolerance=tolerance)
    console.print(str(result))
    if not result:
        raise typer.Exit(code=1)


@app.command()  # type: ignore[misc]
def sweep(
    formats: Annotated[
        list[str] | None,
        typer.Option("--format", "-f", help="Formats to sweep (repeatable)"),
    ] = None,
    samples: Annotated[
        int,
        typer.Option("--samples", "-n", help="Number of sampled values"),
    ] = 10_000,
    seed: Annotated[
        int,
        typer.Option("--seed", "-s", help="Random seed"),
    ] = DEFAULT_SEED,
) -> None:
    """Measure round-trip error on log-uniform samples."""
    precisions = [_format_or_exit(f) for f in formats] if formats else list_formats()

    try:
        values = sample_values(samples, seed=seed)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    output = Table(title=f"Round-Trip Error ({samples} samples, seed {seed})")
    output.add_column("Format", style="cyan", no_wrap=True)
    output.add_column("Max rel", justify="right")
    output.add_column("Mean rel", justify="right")
    output.add_column("Overflow", justify="right")
    output.add_column("Underflow", justify="right")
    output.add_column("Exact", justify="right")

    for precision in precisions:
        stats = measure_round_trip(precision, values)
        output.add_row(
            precision.value.upper(),
            f"{stats.max_rel_error:.2e}",
            f"{stats.mean_rel_error:.2e}",
            str(stats.overflow_count),
            str(stats.underflow_count),
            str(stats.exact_count),
        )

    console.print(output)


if __name__ == "__main__":
    app()
