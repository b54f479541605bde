"""n8n_tools CLI - curlify and the n8n-tools tool dispatcher."""

import sys
from importlib.metadata import PackageNotFoundError, version

import click

PACKAGE_NAME = "n8n-tools"

AVAILABLE_TOOLS = {
    "curlify": {
        "description": "Convert n8n HTTP request JSON logs to curl commands",
        "usage": "curlify [<json-string>|<file-path>|-]",
    },
}

CURLIFY_HELP = """\
curlify — Convert n8n HTTP request JSON logs to curl commands.

Converts the request configuration from an n8n HTTP Request node
(Error Output > Request) into an executable curl command for
debugging, sharing and testing. The command is printed, never run.

\b
INPUT
─────
  curlify '<json_string>'        Convert a JSON string
  curlify path/to/request.json   Read JSON from a file
  curlify -                      Read JSON from stdin

  The JSON typically starts with: {"headers": {...}, "method": "...", ...}

\b
EXAMPLES
────────
  curlify '{"method":"GET","url":"https://api.example.com"}'
  curlify n8n-request.json
  pbpaste | curlify -

\b
SUPPORTED N8N PROPERTIES
────────────────────────
  \b
  method                   -X METHOD (omitted for GET)
  headers                  -H 'Name: Value'
  form                     -d 'k=v&...' (URL-encoded)
  body, json               -d '<body>' (objects serialized as JSON)
  gzip                     --compressed
  rejectUnauthorized       -k when false
  followRedirect           -L (also followAllRedirects)
  timeout                  --max-time (ms rounded up to seconds)
  resolveWithFullResponse  -i
  uri / url                the request URL (uri wins)

\b
CONFIG FILE FORMAT (.n8n-tools.yaml)
────────────────────────────────────
  Config resolution order:
    1. -c/--config flag (explicit path)
    2. .n8n-tools.yaml / .n8n-tools.yml / n8n-tools.yaml / n8n-tools.yml in CWD
    3. ~/.n8n-tools/config.yaml (global)

  \b
  defaults:
    env_file: .env                  # load .env file
    multiline: true                 # false = one-line command
    escape_url: false               # escape single quotes in the URL
    headers:                        # override captured headers
      Authorization: Bearer ${N8N_API_TOKEN}

  n8n hides credentials in its logs; put the real values in config
  headers or pass -H to get a command that actually authenticates.
"""

COLLECTION_HELP = """\
n8n-tools — A collection of tools for n8n workflow automation.

\b
USAGE
─────
  n8n-tools <tool> [options]
  n8n-tools help
  n8n-tools version
  n8n-tools list

\b
EXAMPLES
────────
  n8n-tools curlify '{"method":"GET","url":"https://api.example.com"}'
  n8n-tools curlify --help

  Each tool is also installed as its own command:
    curlify '{"method":"GET","url":"https://example.com"}'
"""


def _version():
    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        return "unknown"


def _print_curlify_version(ctx, _param, value):
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"curlify v{_version()}")
    click.echo(f"Part of {PACKAGE_NAME} collection")
    ctx.exit(0)


def _print_collection_version(ctx, _param, value):
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"{PACKAGE_NAME} v{_version()}")
    ctx.exit(0)


@click.command(
    name="curlify",
    help=CURLIFY_HELP,
    context_settings={"max_content_width": 88, "help_option_names": ["-h", "--help"]},
)
@click.argument("input_value", metavar="INPUT", required=False)
@click.option(
    "-c",
    "--config",
    "config_file",
    default=None,
    help="Config file path. Default: .n8n-tools.yaml in CWD, then ~/.n8n-tools/config.yaml.",
)
@click.option(
    "-H",
    "--header",
    multiple=True,
    help="Override a captured header, as 'Name: Value'. Repeatable.",
)
@click.option(
    "--single-line",
    is_flag=True,
    default=False,
    help="Print the command on one line instead of one flag per line.",
)
@click.option(
    "--escape-url",
    is_flag=True,
    default=False,
    help="Escape single quotes in the URL too.",
)
@click.option(
    "--verbose",
    is_flag=True,
    default=False,
    help="Report the config file and input source on stderr.",
)
@click.option(
    "-v",
    "--version",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_print_curlify_version,
    help="Show version information.",
)
def curlify(input_value, config_file, header, single_line, escape_url, verbose):
    """Convert an n8n request JSON to a curl command."""
    from n8n_tools.core import (
        apply_defaults,
        load_config,
        load_env,
        load_request_input,
        resolve_config_path,
    )
    from n8n_tools.curlify import json_to_curl

    if not input_value:
        click.echo("Error: No input provided", err=True)
        click.echo(click.get_current_context().get_help(), err=True)
        sys.exit(1)

    # --- Load config ---
    config_path = resolve_config_path(config_file)
    config = load_config(config_path)
    defaults = config.get("defaults", {})
    env = load_env(defaults.get("env_file"), config.get("_config_dir"))

    if verbose:
        click.echo(f"config: {config_path or '(none)'}", err=True)

    # --- Load request ---
    loaded = load_request_input(input_value)
    if loaded["error"]:
        click.echo(loaded["error"], err=True)
        if loaded["source"] == "literal":
            click.echo(
                "Make sure to wrap the JSON in quotes: curlify '{\"json\": \"here\"}'",
                err=True,
            )
        sys.exit(1)

    if verbose:
        label = loaded["path"] if loaded["source"] == "file" else loaded["source"]
        click.echo(f"input: {label}", err=True)

    request = apply_defaults(loaded["config"], defaults, env, _parse_headers(header))

    multiline = not single_line and defaults.get("multiline", True) is not False
    escape_url = escape_url or bool(defaults.get("escape_url"))
    click.echo(json_to_curl(request, multiline=multiline, escape_url=escape_url))


# ── Dispatcher ───────────────────────────────────────────────────────────


class ToolGroup(click.Group):
    """Group that accepts command aliases and reports unknown tools."""

    aliases = {"tools": "list"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else None
        if (
            cmd_name
            and not cmd_name.startswith("-")
            and self.get_command(ctx, cmd_name) is None
            and not ctx.resilient_parsing
        ):
            click.echo(f'Error: Unknown tool "{cmd_name}"', err=True)
            click.echo(err=True)
            _echo_tools(err=True)
            click.echo(
                f'\nRun "{PACKAGE_NAME} help" for more information.',
                err=True,
            )
            sys.exit(1)
        return super().resolve_command(ctx, args)

    def format_commands(self, ctx, formatter):
        tool_rows = []
        for name, info in AVAILABLE_TOOLS.items():
            tool_rows.append((name, f"{info['description']}. Usage: {info['usage']}"))
        with formatter.section("Available tools"):
            formatter.write_dl(tool_rows)


@click.group(
    cls=ToolGroup,
    name=PACKAGE_NAME,
    help=COLLECTION_HELP,
    invoke_without_command=True,
    context_settings={"max_content_width": 88, "help_option_names": ["-h", "--help"]},
)
@click.option(
    "-v",
    "--version",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_print_collection_version,
    help="Show version information.",
)
@click.pass_context
def main(ctx):
    """Dispatch to an n8n tool."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


main.add_command(curlify)


@main.command(name="help")
@click.pass_context
def help_cmd(ctx):
    """Show this help message."""
    click.echo(ctx.parent.get_help())


@main.command(name="version")
def version_cmd():
    """Show version information."""
    click.echo(f"{PACKAGE_NAME} v{_version()}")


@main.command(name="list")
def list_cmd():
    """List available tools."""
    _echo_tools()


# ── Helpers ──────────────────────────────────────────────────────────────


def _echo_tools(err=False):
    click.echo("Available tools:", err=err)
    for name, info in AVAILABLE_TOOLS.items():
        click.echo(f"  {name:<12} {info['description']}", err=err)


def _parse_headers(header_tuples):
    """Parse -H 'Name: Value' tuples into a dict."""
    headers = {}
    for h in header_tuples:
        if ":" in h:
            k, v = h.split(":", 1)
            headers[k.strip()] = v.strip()
    return headers
