"""CLI commands for smschunk."""

import asyncio
import base64
import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console

from smschunk import __version__
from smschunk.config import Config, get_config_path, load_config, save_config
from smschunk.protocol import (
    InvalidInputError,
    MalformedSegmentError,
    SendError,
    decode,
    encode,
    new_message_id,
    split_payload,
)

app = typer.Typer(
    name="smschunk",
    help="smschunk - send large payloads as numbered SMS chunks",
    no_args_is_help=True,
)

console = Console()

DEMO_SENDER = "+15550000001"
DEMO_RECEIVER = "+15550000002"


def setup_logging(level: str) -> None:
    """Send log records to stderr at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def version_callback(value: bool):
    if value:
        console.print(f"smschunk v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
    log_level: str = typer.Option(None, "--log-level", help="Override the configured log level"),
):
    """smschunk - chunked payload transport over SMS."""
    setup_logging(log_level or load_config().logging.level)


# ============================================================================
# Codec Commands
# ============================================================================


@app.command("encode")
def encode_cmd(
    message_id: str = typer.Argument(..., help="Message ID"),
    total: int = typer.Argument(..., help="Number of chunks in the message"),
    index: int = typer.Argument(..., help="Zero-based chunk index"),
    payload: str = typer.Argument("", help="Chunk payload"),
):
    """Encode one chunk into its SMS segment."""
    try:
        segment = encode(message_id, total, index, payload)
    except InvalidInputError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    typer.echo(segment)


@app.command("decode")
def decode_cmd(raw: str = typer.Argument(..., help="Segment text as received")):
    """Decode an SMS segment and print its fields as JSON."""
    try:
        chunk = decode(raw)
    except MalformedSegmentError as e:
        console.print(f"[red]Malformed segment: {e}[/red]")
        raise typer.Exit(1)
    typer.echo(json.dumps(chunk.to_dict()))


@app.command()
def split(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to send"),
    chunk_size: int = typer.Option(None, "--chunk-size", "-c", help="Payload characters per SMS"),
    message_id: str = typer.Option(None, "--message-id", "-m", help="Message ID (random if omitted)"),
):
    """Base64-encode a file and print the SMS segments that would carry it."""
    config = load_config()
    size = chunk_size or config.transport.chunk_size
    message_id = message_id or new_message_id()

    payload = base64.b64encode(file.read_bytes()).decode("ascii")
    try:
        chunks = split_payload(payload, size)
        segments = [encode(message_id, len(chunks), i, c) for i, c in enumerate(chunks)]
    except InvalidInputError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[dim]{file.name}: {len(payload)} chars in {len(segments)} SMS[/dim]", highlight=False)
    for segment in segments:
        typer.echo(segment)


# ============================================================================
# Demo Command
# ============================================================================


async def run_demo(payload: str, config: Config, timeout: float = 5.0) -> tuple[bool, str]:
    """Send ``payload`` across an in-process loopback pair and reassemble it.

    Returns whether every segment was delivered and the reassembled text.
    """
    from smschunk.bus import CHUNK_RECEIVED
    from smschunk.channels import LoopbackGateway
    from smschunk.link import SmsLink

    sender_gw, receiver_gw = LoopbackGateway.pair(DEMO_SENDER, DEMO_RECEIVER)
    sender = SmsLink(sender_gw, config=config)
    receiver = SmsLink(receiver_gw, config=config)

    listener = asyncio.create_task(receiver.run())
    try:
        report = sender.send_payload(DEMO_RECEIVER, payload)
        delivered = await report.wait(timeout=timeout)

        parts: dict[int, str] = {}
        while len(parts) < report.total:
            event = await asyncio.wait_for(receiver.bus.consume_event(), timeout=timeout)
            if event.name != CHUNK_RECEIVED:
                continue
            data = event.data
            if data["messageId"] == report.message_id:
                parts[data["index"]] = data["payload"]
    finally:
        receiver.stop()
        await listener

    return delivered, "".join(parts[i] for i in range(report.total))


@app.command()
def demo(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to transfer"),
    chunk_size: int = typer.Option(None, "--chunk-size", "-c", help="Payload characters per SMS"),
):
    """Transfer a file between two in-process loopback gateways."""
    config = load_config()
    if chunk_size:
        config.transport.chunk_size = chunk_size

    payload = base64.b64encode(file.read_bytes()).decode("ascii")
    console.print(f"Sending {file.name} from {DEMO_SENDER} to {DEMO_RECEIVER}...")

    try:
        delivered, received = asyncio.run(run_demo(payload, config))
    except (InvalidInputError, SendError) as e:
        console.print(f"[red]Send failed: {e}[/red]")
        raise typer.Exit(1)
    except asyncio.TimeoutError:
        console.print("[red]Timed out waiting for chunks.[/red]")
        raise typer.Exit(1)

    if not delivered or received != payload:
        console.print("[red]Transfer incomplete or corrupted.[/red]")
        raise typer.Exit(1)

    console.print(f"  [green]>[/green] {len(received)} chars reassembled intact")


# ============================================================================
# Configure Command
# ============================================================================


@app.command()
def configure(
    chunk_size: int = typer.Option(None, "--chunk-size", "-c", help="Payload characters per SMS"),
    forward_unchunked: bool = typer.Option(
        None,
        "--forward-unchunked/--drop-unchunked",
        help="Publish non-protocol texts as plain messages",
    ),
    log_level: str = typer.Option(None, "--level", help="Default log level"),
):
    """Update the saved configuration."""
    config_path = get_config_path()
    config = load_config() if config_path.exists() else Config()

    if chunk_size is not None:
        if chunk_size < 1:
            console.print("[red]Chunk size must be at least 1.[/red]")
            raise typer.Exit(1)
        config.transport.chunk_size = chunk_size
    if forward_unchunked is not None:
        config.receiver.forward_unchunked = forward_unchunked
    if log_level:
        config.logging.level = log_level.upper()

    save_config(config)
    console.print(f"[green]>[/green] Config saved to {config_path}")
    console.print(f"Chunk size:        [cyan]{config.transport.chunk_size}[/cyan]")
    console.print(f"Forward unchunked: [cyan]{config.receiver.forward_unchunked}[/cyan]")
    console.print(f"Log level:         [cyan]{config.logging.level}[/cyan]")


if __name__ == "__main__":
    app()
