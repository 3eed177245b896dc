"""Command-line client: build a request from arguments, send it, print the result."""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from funkoshelf.config import CLIENT_HOST, CLIENT_TIMEOUT_SEC, SERVER_PORT
from funkoshelf.models.envelope import FunkoBody, Request, Response
from funkoshelf.models.funko import FunkoGenre, FunkoType
from funkoshelf.net.client import ClientError, send_request

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
CYAN = "\033[36m"
RESET = "\033[0m"

# CLI option -> (Funko wire field, argparse kwargs)
_FIELD_OPTIONS = {
    "name": ("name", {"type": str, "help": "Name of the Funko"}),
    "desc": ("description", {"type": str, "help": "Description of the Funko"}),
    "type": ("type", {"choices": [t.value for t in FunkoType], "help": "Type of the Funko"}),
    "genre": ("genre", {"choices": [g.value for g in FunkoGenre], "help": "Genre of the Funko"}),
    "franchise": ("franchise", {"type": str, "help": "Franchise the Funko belongs to"}),
    "number": ("number", {"type": int, "help": "Number within the franchise"}),
    "exclusive": (
        "exclusive",
        {"action": argparse.BooleanOptionalAction, "help": "Is the Funko exclusive?"},
    ),
    "special-features": (
        "specialFeatures",
        {"type": str, "help": "Special features (e.g. Glows in the dark)"},
    ),
    "market-value": ("marketValue", {"type": float, "help": "Current market value"}),
}


def market_value_color(value: float) -> str:
    """ANSI color for a market value: red <20, yellow <50, blue <100, green otherwise."""
    if value < 20:
        return RED
    if value < 50:
        return YELLOW
    if value < 100:
        return BLUE
    return GREEN


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{RESET}" if enabled else text


def format_funko(funko: FunkoBody, color: bool = True) -> str:
    value = _paint(f"{funko.market_value:g}", market_value_color(funko.market_value), color)
    return "\n".join([
        f"ID: {funko.id}",
        f"Name: {funko.name}",
        f"Description: {funko.description}",
        f"Type: {funko.type.value}",
        f"Genre: {funko.genre.value}",
        f"Franchise: {funko.franchise}",
        f"Number: {funko.number}",
        f"Exclusive: {'Yes' if funko.exclusive else 'No'}",
        f"Special Features: {funko.special_features}",
        f"Market Value: {value}",
    ])


def render_response(response: Response, user: str, color: bool = True) -> str:
    """Human-readable output for a server response."""
    if not response.success:
        return _paint("Error: ", RED, color) + (
            response.message or f"Operation {response.type} failed."
        )
    lines = [_paint("Success: ", GREEN, color) + (
        response.message or f"Operation {response.type} completed."
    )]
    if response.funkos:
        sep = "-" * 32
        lines.append(sep)
        for f in response.funkos:
            lines.append(format_funko(f, color))
            lines.append(sep)
    elif response.type == "list":
        lines.append(_paint(f"{user} has no Funko collection.", YELLOW, color))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="funkoshelf", description="Manage Funko collections on a funkoshelf server")
    parser.add_argument("--host", default=CLIENT_HOST, help="Server host")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="Server port")
    parser.add_argument("--timeout", type=float, default=CLIENT_TIMEOUT_SEC, help="Seconds to wait for a response")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a new Funko Pop to a user collection")
    add.add_argument("--user", required=True, help="Username of the collection owner")
    add.add_argument("--id", type=int, required=True, help="Unique ID for the Funko")
    for opt, (_, kwargs) in _FIELD_OPTIONS.items():
        if opt == "special-features":
            add.add_argument(f"--{opt}", default="None", **kwargs)
        else:
            add.add_argument(f"--{opt}", required=True, **kwargs)

    update = sub.add_parser("update", help="Update an existing Funko Pop in a user collection")
    update.add_argument("--user", required=True, help="Username of the collection owner")
    update.add_argument("--id", type=int, required=True, help="ID of the Funko to update")
    for opt, (_, kwargs) in _FIELD_OPTIONS.items():
        update.add_argument(f"--{opt}", default=None, **kwargs)

    for name, help_ in (
        ("remove", "Remove a Funko Pop from a user collection"),
        ("read", "Show details of a specific Funko in a user collection"),
    ):
        p = sub.add_parser(name, help=help_)
        p.add_argument("--user", required=True, help="Username of the collection owner")
        p.add_argument("--id", type=int, required=True, help="ID of the Funko")

    lst = sub.add_parser("list", help="List all Funkos in a user collection")
    lst.add_argument("--user", required=True, help="Username of the collection owner")
    return parser


def _field_values(args: argparse.Namespace) -> dict:
    out = {}
    for opt, (wire_name, _) in _FIELD_OPTIONS.items():
        value = getattr(args, opt.replace("-", "_"))
        if value is not None:
            out[wire_name] = value
    return out


def build_request(args: argparse.Namespace) -> Request:
    """Request envelope for parsed arguments. Raises ValueError for an empty update."""
    if args.command == "add":
        return Request(type="add", user=args.user, funko={"id": args.id, **_field_values(args)})
    if args.command == "update":
        fields = _field_values(args)
        if not fields:
            raise ValueError(
                "You must provide at least one property to update (e.g., --name, --market-value)."
            )
        return Request(type="update", user=args.user, id=args.id, funko=fields)
    if args.command in ("remove", "read"):
        return Request(type=args.command, user=args.user, id=args.id)
    return Request(type="list", user=args.user)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    color = not args.no_color and sys.stdout.isatty()

    try:
        request = build_request(args)
    except ValueError as e:
        print(_paint("Error: ", RED, color) + str(e), file=sys.stderr)
        return 1

    try:
        response = asyncio.run(send_request(request, args.host, args.port, args.timeout))
    except ConnectionRefusedError:
        print(
            _paint(f"Could not connect to server at {args.host}:{args.port}. Is the server running?", RED, color),
            file=sys.stderr,
        )
        return 1
    except (ClientError, OSError) as e:
        print(_paint("Connection error: ", RED, color) + str(e), file=sys.stderr)
        return 1

    print(render_response(response, args.user, color))
    return 0 if response.success else 1


if __name__ == "__main__":
    sys.exit(main())
