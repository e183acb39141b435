# filename : main.py
# created  : 10/19/2026


from __future__ import annotations

import logging
import os

import click

from copynfc import __version__
from copynfc.app.display import format_tag, format_tag_list
from copynfc.app.session import clear, open_store, scan, write_command
from copynfc.core.smartcard.transport import PcscTransport
from copynfc.core.tag import SessionState, TagArchive

lg = logging.getLogger(__name__)


def main(
    store: str | os.PathLike,
    action: str = "scan",
    ref: str | None = None,
    timeout: float = 60.0,
    interval: float = 0.5,
) -> None:
    """Run one command-line action against the saved tag list.

    Raises TagError when a scan does not complete or *ref* matches no tag.
    """
    lg.debug("copynfc v%s, store %s", __version__, store)
    archive = TagArchive(store)

    if action == "clear":
        clear(archive)
        return

    tags = open_store(archive)

    if action == "list":
        click.echo(format_tag_list(tags.all()))
    elif action == "show":
        click.echo(format_tag(tags.find(ref)))
    elif action == "write":
        record, command = write_command(tags, ref)
        lg.info("write command for UID %s", record.uid)
        click.echo(command.hex(" ").upper())
    elif action == "scan":
        transport = PcscTransport(timeout=timeout, interval=interval)
        session = scan(tags, transport)
        if session.state is not SessionState.COMPLETED:
            raise session.error
        click.echo(format_tag(session.record))
    else:
        raise ValueError(f"unknown action: {action}")
