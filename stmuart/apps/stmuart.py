#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Console script for communication with the STM32 USART bootloader."""

import inspect
import json
import sys
from typing import Any, Optional

import click
import colorama
import prettytable

from stmuart.apps.utils import stm_logger
from stmuart.apps.utils.common_cli_options import (
    CommandsTreeGroup,
    build_serial_config,
    serial_port_options,
    stmuart_apps_common_options,
    stmuart_use_json_option,
)
from stmuart.apps.utils.utils import INT, StmUartAppError, catch_error, format_raw_data
from stmuart.stmboot import StmDevice
from stmuart.utils import misc
from stmuart.utils.interfaces.device.serial_device import (
    SerialConfig,
    SerialDevice,
    list_serial_ports,
)


@click.group(name="stmuart", no_args_is_help=True, cls=CommandsTreeGroup)
@serial_port_options
@stmuart_use_json_option
@stmuart_apps_common_options
@click.pass_context
def main(
    ctx: click.Context,
    port: Optional[str],
    baud: int,
    data_bits: str,
    parity: str,
    stop_bits: str,
    timeout: int,
    use_json: bool,
    log_level: int,
) -> int:
    """Utility for communication with the built-in bootloader of STM32 devices over USART."""
    stm_logger.install(level=log_level)
    ctx.obj = {
        "config": build_serial_config(port, baud, data_bits, parity, stop_bits, timeout),
        "use_json": use_json,
    }
    return 0


def open_session(config: SerialConfig) -> StmDevice:
    """Create a bootloader session on the configured serial port.

    :param config: Serial line configuration.
    :return: Session, not opened yet.
    :raises StmUartAppError: No port was given.
    """
    if not config.port:
        raise StmUartAppError("Serial port is not specified, use the -p/--port option.")
    return StmDevice(SerialDevice(config))


@main.command()
@click.pass_context
def list_devices(ctx: click.Context) -> None:
    """Lists serial ports available in the system."""
    ports = list_serial_ports()
    if ctx.obj["use_json"]:
        display_output(
            [
                {
                    "name": port.name,
                    "type": port.port_type,
                    "product": port.product,
                    "manufacturer": port.manufacturer,
                    "serial_number": port.serial_number,
                }
                for port in ports
            ],
            use_json=True,
        )
        return
    if not ports:
        click.echo("No serial ports found.")
        return
    table = prettytable.PrettyTable(["#", "Port", "Type", "Details"])
    table.align = "l"
    table.hrules = prettytable.HRuleStyle.HEADER
    table.vrules = prettytable.VRuleStyle.NONE
    for i, port in enumerate(ports):
        table.add_row(
            [
                colorama.Fore.YELLOW + str(i),
                colorama.Fore.WHITE + port.name,
                colorama.Fore.CYAN + port.port_type,
                colorama.Fore.GREEN + port.usb_details,
            ]
        )
    click.echo(table.get_string() + colorama.Style.RESET_ALL)


@main.command()
@click.pass_context
def connect(ctx: click.Context) -> None:
    """Wakes up the bootloader and checks it responds."""
    with open_session(ctx.obj["config"]) as device:
        device.initialise()
    display_output(
        {"initialised": device.initialised},
        ctx.obj["use_json"],
        extra_output=f"Bootloader on {ctx.obj['config'].port} is awake.",
    )


@main.command()
@click.pass_context
def get_protocol(ctx: click.Context) -> None:
    """Reads the protocol version and the commands supported by the bootloader."""
    with open_session(ctx.obj["config"]) as device:
        device.initialise()
        version = device.get_protocol()
    commands = [str(command) for command in device.available_commands]
    display_output(
        {"version": str(version), "commands": commands},
        ctx.obj["use_json"],
        extra_output=f"Protocol version: {version}\nSupported commands:\n  "
        + "\n  ".join(commands),
    )


@main.command()
@click.pass_context
def get_version(ctx: click.Context) -> None:
    """Reads the protocol version and the read protection option bytes."""
    with open_session(ctx.obj["config"]) as device:
        device.initialise()
        version = device.get_version()
    display_output(
        {"version": str(version.version), "option_bytes": version.option_bytes.hex()},
        ctx.obj["use_json"],
        extra_output=f"Protocol version: {version.version}\n"
        f"Option bytes: {format_raw_data(version.option_bytes)}",
    )


@main.command()
@click.pass_context
def get_id(ctx: click.Context) -> None:
    """Reads the product ID of the device."""
    with open_session(ctx.obj["config"]) as device:
        device.initialise()
        product_id = device.get_id()
    display_output(
        {"pid": product_id.pid, "raw": product_id.raw.hex()},
        ctx.obj["use_json"],
        extra_output=f"Product ID: {product_id}",
    )


@main.command()
@click.argument("address", type=INT(), required=True)
@click.argument("length", type=INT(), required=True)
@click.option(
    "-o",
    "--output",
    type=click.Path(resolve_path=True, dir_okay=False),
    help="Path to a file, where to store the data read.",
)
@click.option("-h", "--use-hexdump", is_flag=True, default=False, help="Use hexdump format")
@click.pass_context
def read_memory(
    ctx: click.Context, address: int, length: int, output: Optional[str], use_hexdump: bool
) -> None:
    """Reads memory of the device.

    Regions longer than 256 bytes are read in several commands.

    \b
    ADDRESS - starting address
    LENGTH  - number of bytes to read
    """
    with open_session(ctx.obj["config"]) as device:
        device.initialise()
        data = device.read_memory_range(address, length)
    if output:
        misc.write_file(data, output, mode="wb")
        click.echo(f"{len(data)} bytes written to {output}")
    elif ctx.obj["use_json"]:
        display_output({"address": address, "data": data.hex()}, use_json=True)
    else:
        click.echo(format_raw_data(data, use_hexdump=use_hexdump))


def display_output(
    response: Any, use_json: bool = False, extra_output: Optional[str] = None
) -> None:
    """Printout the response.

    :param response: Response data to display in JSON mode
    :param use_json: use JSON output format
    :param extra_output: Text to display in the default mode
    """
    if use_json:
        data = {
            # name of the calling command
            "command": inspect.stack()[1].function.replace("_", "-"),
            "response": response,
        }
        click.echo(json.dumps(data, indent=3))
    elif extra_output:
        click.echo(extra_output)


@catch_error
def safe_main() -> None:
    """Calls the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
