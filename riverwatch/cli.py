"""CLI entry point for the river monitoring dashboard."""

import argparse
import asyncio
import logging

import httpx

from riverwatch.config.loader import get_config_value, load_config
from riverwatch.config.schema import DashboardConfig
from riverwatch.pipeline.dashboard_session import DashboardSession
from riverwatch.reporting.formatters import format_dashboard_json, format_dashboard_text

DEFAULT_CONFIG = "configs/default.yaml"
DEFAULT_PORT = 8777


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="riverwatch",
        description="River temperature, forecast and E. coli dashboard",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # snapshot
    snap_p = sub.add_parser("snapshot", help="Load all sources once and print the dashboard")
    snap_p.add_argument("--json", action="store_true", help="Print JSON instead of text")

    # serve
    serve_p = sub.add_parser("serve", help="Run the web dashboard")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=DEFAULT_PORT)

    # health
    sub.add_parser("health", help="Check upstream service reachability")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Print one config value")
    get_p.add_argument("key", help="Dotted key, e.g. forecast.latitude")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "snapshot":
        return _cmd_snapshot(config, args)
    elif args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "health":
        return _cmd_health(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_snapshot(config: DashboardConfig, args) -> int:
    async def _load():
        async with DashboardSession.from_config(config) as session:
            return session.view(), session.state.errors()

    view, errors = asyncio.run(_load())
    if args.json:
        print(format_dashboard_json(view))
    else:
        print(format_dashboard_text(view))
    return 0 if not errors else 1


def _cmd_serve(config: DashboardConfig, args) -> int:
    import uvicorn

    from riverwatch.dashboard import create_app

    app = create_app(lambda: DashboardSession.from_config(config))
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def _cmd_health(config: DashboardConfig) -> int:
    checks = {
        "USGS water services": config.api.water_base_url,
        "NWS API": config.api.weather_base_url,
    }
    ok = True
    for name, url in checks.items():
        reachable = _check_reachable(url, config.api.user_agent)
        ok = ok and reachable
        print(f"{name}: {'OK' if reachable else 'FAIL'}")
    return 0 if ok else 1


def _check_reachable(url: str, user_agent: str) -> bool:
    try:
        resp = httpx.get(url, headers={"User-Agent": user_agent}, timeout=10.0)
        return resp.status_code < 500
    except httpx.HTTPError:
        return False


def _cmd_config(config: DashboardConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            print(f"{args.key} = {get_config_value(config, args.key)}")
            return 0
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config get key")
        return 1
