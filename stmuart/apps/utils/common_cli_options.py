#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI helper for Click."""

import logging
from gettext import gettext
from typing import Any, Callable, Optional, Sequence, TypeVar, Union

import click
from click_command_tree import _build_command_tree, _CommandWrapper

from stmuart import __version__ as stmuart_version
from stmuart.apps.utils.utils import INT
from stmuart.utils.interfaces.device.serial_device import (
    DATA_BITS,
    PARITIES,
    STOP_BITS,
    SerialConfig,
)

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])
logger = logging.getLogger(__name__)


def serial_port_options(options: FC) -> FC:
    """Click decorator handling the serial line configuration.

    Provides: `port: str`, `baud: int`, `data_bits: str`, `parity: str`,
    `stop_bits: str` and `timeout: int`; see :func:`build_serial_config`.

    :return: Click decorator
    """
    defaults = SerialConfig()
    options = click.option(
        "-t",
        "--timeout",
        type=INT(),
        metavar="<ms>",
        default=defaults.timeout,
        help="Sets timeout when waiting on data over a serial line. "
        f"The default is {defaults.timeout} milliseconds.",
    )(options)
    options = click.option(
        "-s",
        "--stop-bits",
        type=click.Choice([str(s) for s in STOP_BITS]),
        default=str(defaults.stopbits),
        help=f"Number of stop bits. The default is {defaults.stopbits}.",
    )(options)
    options = click.option(
        "-a",
        "--parity",
        type=click.Choice(list(PARITIES), case_sensitive=False),
        default=defaults.parity,
        help=f"Parity of the serial line. The default is {defaults.parity}.",
    )(options)
    options = click.option(
        "-d",
        "--data-bits",
        type=click.Choice([str(d) for d in DATA_BITS]),
        default=str(defaults.bytesize),
        help=f"Number of data bits. The default is {defaults.bytesize}.",
    )(options)
    options = click.option(
        "-b",
        "--baud",
        type=INT(),
        default=defaults.baudrate,
        help=f"Baud rate of the serial line. The default is {defaults.baudrate}.",
    )(options)
    options = click.option(
        "-p",
        "--port",
        metavar="PORT",
        help="Serial port name, e.g. COM3 or /dev/ttyUSB0. Use 'list-devices' to find it.",
    )(options)
    return options


def build_serial_config(
    port: Optional[str],
    baud: int,
    data_bits: str,
    parity: str,
    stop_bits: str,
    timeout: int,
) -> SerialConfig:
    """Create serial line configuration from the values of :func:`serial_port_options`.

    :param port: Serial port name, None if not given.
    :param baud: Baud rate.
    :param data_bits: Number of data bits as chosen on command line.
    :param parity: Parity name.
    :param stop_bits: Number of stop bits as chosen on command line.
    :param timeout: Read timeout in milliseconds.
    :return: Validated serial configuration.
    :raises StmUartValueError: Invalid combination of values.
    """
    return SerialConfig(
        port=port,
        baudrate=baud,
        bytesize=int(data_bits),
        parity=parity.lower(),
        stopbits=int(stop_bits),
        timeout=timeout,
    )


def stmuart_use_json_option(options: FC) -> FC:
    """Use json click option decorator.

    Provides: `use_json: bool` a use_json flag.

    :return: Click decorator
    """
    return click.option(
        "-j",
        "--json",
        "use_json",
        is_flag=True,
        help="Use JSON output",
    )(options)


def stmuart_apps_common_options(options: FC) -> FC:
    """Common click options.

    Sets --help, --version; provides: `log_level: int` for logging.

    :return: click decorator
    """
    options = click.help_option("--help")(options)
    options = click.version_option(stmuart_version, "--version")(options)
    options = click.option(
        "-vv",
        "--debug",
        "log_level",
        flag_value=logging.DEBUG,
        help="Display more debugging information.",
    )(options)
    options = click.option(
        "-v",
        "--verbose",
        "log_level",
        flag_value=logging.INFO,
        help="Print more detailed information",
    )(options)
    return options


class CommandsTreeGroup(click.Group):
    """Custom help formatter, overrides click group standard formatter.

    Provides command section in help as command tree
    """

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Extra format methods for multi methods that adds all the commands after the options.

        :param ctx: click Context
        :param formatter: click HelpFormatter
        """
        root_cmd = _build_command_tree(ctx.find_root().command)
        rows = _get_tree(root_cmd)

        with formatter.section(gettext("Commands")):
            formatter.width = 160
            formatter.write_dl(rows, col_max=80)


def _get_tree(
    command: _CommandWrapper,
    rows: Optional[list] = None,
    depth: int = 0,
    is_last_item: bool = False,
) -> Sequence[tuple[str, str]]:
    """Generate tree of commands to be used with Click HelpFormatter.

    :param command: command wrapper
    :param rows: list of str lines to be printed, defaults to None
    :param depth: tree depth, defaults to 0
    :param is_last_item: last item has different formatting, defaults to False
    :return: definition list to be used with click HelpFormatter
    """
    if rows is None:
        rows = []
    tree_item = ""
    if depth:
        tree_item = "└── " if is_last_item else "├── "

    doc: str = command.command.__doc__ or ""
    # first line only, cut to the column width
    first_line = doc.strip().partition("\n")[0]
    rows.append((tree_item + command.name, first_line[:78] + (first_line[78:] and "..")))

    children = sorted(command.children, key=lambda x: x.name)
    for i, child in enumerate(children):
        _get_tree(child, rows, depth=depth + 1, is_last_item=i == len(children) - 1)
    return rows
