#!/usr/bin/env python3
"""
Start the POI Catalog API with uvicorn.

    python run.py --env production --port 8080
    python run.py --create-sample staging
"""

import argparse
import os
import sys

from poi_catalog.config import Environment, Settings, reload_settings
from poi_catalog.config.loader import ConfigLoader, load_config_for_environment

ENVIRONMENTS = [env.value for env in Environment]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="POI Catalog API server")
    parser.add_argument("--env", choices=ENVIRONMENTS, default=None,
                        help="Settings environment (default: ENVIRONMENT variable, then development)")

    server = parser.add_argument_group("server overrides")
    server.add_argument("--host", default=None)
    server.add_argument("--port", type=int, default=None)
    server.add_argument("--workers", type=int, default=None)
    server.add_argument("--reload", action="store_true", help="Restart on code changes (forces one worker)")
    server.add_argument("--debug", action="store_true")

    tools = parser.add_argument_group("configuration files")
    tools.add_argument("--list-envs", action="store_true", help="List environments that have a .env file")
    tools.add_argument("--validate-env", metavar="ENV", help="Check that ENV settings load")
    tools.add_argument("--create-sample", metavar="ENV", help="Write a .env.ENV.sample template")
    return parser


def run_config_command(args) -> int | None:
    """Exit status of a configuration-file command, None when none was requested"""
    if args.list_envs:
        envs = ConfigLoader.get_available_environments()
        print("Environments with a settings file: " + (", ".join(envs) or "none"))
        return 0

    if args.validate_env:
        if ConfigLoader.validate_environment_config(args.validate_env):
            print(f"OK: '{args.validate_env}' settings load")
            return 0
        print(f"FAILED: '{args.validate_env}' settings are missing or invalid")
        return 1

    if args.create_sample:
        try:
            path = ConfigLoader.create_sample_env_file(args.create_sample)
        except (OSError, ValueError) as e:
            print(f"FAILED: could not write sample settings: {e}")
            return 1
        print(f"Wrote {path}")
        return 0

    return None


def apply_overrides(settings: Settings, args) -> Settings:
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.workers:
        settings.workers = args.workers
    if args.reload:
        settings.reload = True
    if args.debug:
        settings.debug = True
    return settings


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    status = run_config_command(args)
    if status is not None:
        return status

    try:
        settings = apply_overrides(load_config_for_environment(args.env), args)
    except ValueError as e:
        print(f"FAILED: could not load settings: {e}")
        return 1

    # The server process re-reads its settings; point it at the same environment
    os.environ["ENVIRONMENT"] = settings.environment.value
    if args.debug:
        os.environ["DEBUG"] = "true"
    reload_settings()

    print(f"{settings.app_name} v{settings.app_version} [{settings.environment.value}]")
    print(f"  listening on {settings.host}:{settings.port}, {settings.workers} worker(s), reload={settings.reload}")
    print(f"  database {settings.database.url}")

    import uvicorn

    uvicorn.run(
        "poi_catalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=1 if settings.reload else settings.workers,
        log_level=settings.log_level.value.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
