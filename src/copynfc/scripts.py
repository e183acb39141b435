# filename : scripts.py
# created  : 10/19/2026


import logging
import os

import click

from copynfc.core.smartcard.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


def _default_store() -> str:
    return os.path.join(click.get_app_dir("copynfc"), "settings.json")


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show raw commands).")
@click.option(
    "--store",
    type=click.Path(dir_okay=False),
    envvar="COPYNFC_STORE",
    default=None,
    help="Settings file holding saved tags.",
)
@click.option(
    "-t",
    "--timeout",
    type=click.FloatRange(min=0),
    envvar="COPYNFC_TIMEOUT",
    default=60.0,
    show_default=True,
    help="Seconds to wait for a tag.",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=0.5,
    show_default=True,
    help="Seconds between reader polls.",
)
@click.option("-l", "--list", "list_tags", is_flag=True, help="List saved tags.")
@click.option("--show", default=None, metavar="ID", help="Show one saved tag.")
@click.option(
    "-w",
    "--write",
    default=None,
    metavar="ID",
    help="Print the block write command for a saved tag.",
)
@click.option("--clear", is_flag=True, help="Remove all saved tags.")
def copynfc(verbose, store, timeout, interval, list_tags, show, write, clear):
    """Scan a tag and save it, or work with saved tags."""

    logging.basicConfig(
        level=TRACE if verbose else PROTOCOL,
        format="%(levelname)-8s %(name)s: %(message)s",
    )

    chosen = [
        (name, ref)
        for name, ref, flag in (
            ("list", None, list_tags),
            ("show", show, show is not None),
            ("write", write, write is not None),
            ("clear", None, clear),
        )
        if flag
    ]
    if len(chosen) > 1:
        raise click.UsageError("--list, --show, --write and --clear are exclusive")
    action, ref = chosen[0] if chosen else ("scan", None)

    from copynfc.app.main import main
    from copynfc.core.tag import TagError

    try:
        main(
            store=store or _default_store(),
            action=action,
            ref=ref,
            timeout=timeout,
            interval=interval,
        )
    except TagError as exc:
        raise click.ClickException(str(exc)) from exc
