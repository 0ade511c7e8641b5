import logging
from typing import Callable, Dict, List, Optional, Tuple, Union

import click
import requests

from .client import EntrezClient
from .config import EMAIL_ENV_VAR, OPERATORS, REQUEST_TIMEOUT, TOOL_ENV_VAR
from .exceptions import ConfigurationError, TransportError


def _build_client(
    email: Optional[str],
    tool: Optional[str],
    timeout: Optional[float],
) -> EntrezClient:
    """Construct an EntrezClient, turning configuration problems into usage errors."""
    if not email:
        raise click.UsageError(
            f"Email must be provided via --email or {EMAIL_ENV_VAR} environment variable."
        )

    overrides = {"timeout": timeout}
    if tool:
        overrides["tool"] = tool

    try:
        return EntrezClient(email=email, **overrides)
    except ConfigurationError as e:
        raise click.UsageError(str(e))


def _parse_pairs(pairs: Tuple[str, ...], option: str) -> Dict[str, Union[str, List[str]]]:
    """Parse repeated KEY=VALUE options; a repeated key collects its values in a list."""
    parsed: Dict[str, Union[str, List[str]]] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint=option)
        if key in parsed:
            existing = parsed[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                parsed[key] = [existing, value]
        else:
            parsed[key] = value
    return parsed


def _emit(call: Callable[[], requests.Response]) -> None:
    """Run a client call and print the response body; exit non-zero on failure."""
    try:
        response = call()
    except TransportError as e:
        raise click.ClickException(str(e))

    if response.ok:
        click.echo(response.text)
        return
    click.echo(response.text, err=True)
    click.echo(f"Error: HTTP {response.status_code}", err=True)
    raise click.exceptions.Exit(1)


param_option = click.option(
    "-p",
    "--param",
    "params",
    multiple=True,
    metavar="KEY=VALUE",
    help="Extra query parameter (repeatable, e.g. -p retmode=xml).",
)


@click.group()
@click.option(
    "--email",
    envvar=EMAIL_ENV_VAR,
    help=f"Contact email required by NCBI (or set {EMAIL_ENV_VAR}).",
)
@click.option(
    "--tool",
    envvar=TOOL_ENV_VAR,
    help=f"Tool identifier sent with each request (or set {TOOL_ENV_VAR}).",
)
@click.option(
    "--timeout",
    type=float,
    default=REQUEST_TIMEOUT,
    show_default=True,
    help="Seconds to wait for each response.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log requests and rate limiting to stderr.")
@click.pass_context
def main(
    ctx: click.Context,
    email: Optional[str],
    tool: Optional[str],
    timeout: float,
    verbose: bool,
) -> None:
    """NCBI Entrez E-utilities command line client."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    ctx.obj = {"options": {"email": email, "tool": tool, "timeout": timeout}}


def _client(ctx: click.Context) -> EntrezClient:
    """Build the client on first use, so --help needs no email."""
    if "client" not in ctx.obj:
        client = _build_client(**ctx.obj["options"])
        ctx.find_root().call_on_close(client.close)
        ctx.obj["client"] = client
    return ctx.obj["client"]


@main.command()
@click.argument("db")
@param_option
@click.pass_context
def fetch(ctx: click.Context, db: str, params: Tuple[str, ...]) -> None:
    """Fetch records from DB with EFetch (e.g. -p id=123 -p retmode=xml)."""
    query = _parse_pairs(params, "--param")
    client = _client(ctx)
    _emit(lambda: client.fetch(db, query))


@main.command()
@click.argument("db", required=False)
@param_option
@click.pass_context
def info(ctx: click.Context, db: Optional[str], params: Tuple[str, ...]) -> None:
    """Describe DB with EInfo, or list all databases."""
    query = _parse_pairs(params, "--param")
    client = _client(ctx)
    _emit(lambda: client.info(db, query))


@main.command()
@click.argument("db")
@click.argument("term", required=False)
@click.option(
    "-f",
    "--field",
    "fields",
    multiple=True,
    metavar="FIELD=VALUE",
    help="Field-tagged search term (repeatable, e.g. -f WORD=hapmap).",
)
@click.option(
    "--operator",
    type=click.Choice(OPERATORS, case_sensitive=False),
    default="AND",
    show_default=True,
    help="Operator joining field terms.",
)
@param_option
@click.pass_context
def search(
    ctx: click.Context,
    db: str,
    term: Optional[str],
    fields: Tuple[str, ...],
    operator: str,
    params: Tuple[str, ...],
) -> None:
    """Search DB with ESearch using a literal TERM or --field terms."""
    if term and fields:
        raise click.UsageError("Give either TERM or --field options, not both.")
    if not term and not fields:
        raise click.UsageError("A search TERM or at least one --field is required.")

    search_terms = term if term else _parse_pairs(fields, "--field")
    query = _parse_pairs(params, "--param")
    client = _client(ctx)
    _emit(lambda: client.search(db, search_terms, query, operator=operator.upper()))


@main.command()
@click.argument("db")
@param_option
@click.pass_context
def summary(ctx: click.Context, db: str, params: Tuple[str, ...]) -> None:
    """Fetch document summaries from DB with ESummary (e.g. -p id=123)."""
    query = _parse_pairs(params, "--param")
    client = _client(ctx)
    _emit(lambda: client.summary(db, query))


if __name__ == "__main__":
    main()
