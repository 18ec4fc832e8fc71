"""Pre-deploy check that the IDP's settings load from a ``.env`` file.

Instantiates ``AppSettings`` from the given file so missing or malformed
entries (Velux client credentials, the credential encryption secret, the
store backend) surface before a deployment starts answering account-linking
requests with 500s.

Example usages::

    python -m scripts.check_env --env-file .env

    # Also print the resolved, non-secret settings.
    python -m scripts.check_env --env-file .env.production --show
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from idp.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_RUNTIME_ERROR = 5


def _load_settings(env_file: Path) -> AppSettings:
    if not env_file.is_file():
        raise FileNotFoundError(f"Environment file {env_file} does not exist.")
    _load_env_file(str(env_file))
    return AppSettings()  # type: ignore[call-arg]


def _describe(settings: AppSettings) -> str:
    """Summarize the settings that decide where records go and whom we call."""
    lines = [
        f"environment:        {settings.environment}",
        f"record store:       {settings.store.backend}",
    ]
    if settings.store.backend == "sqlite":
        lines.append(f"sqlite path:        {settings.store.sqlite_path}")
    else:
        lines.extend(
            [
                f"aws region:         {settings.aws.region_name}",
                f"auth code table:    {settings.aws.auth_code_table_name}",
                f"access token table: {settings.aws.access_token_table_name}",
                f"user table:         {settings.aws.user_table_name}",
            ]
        )
    lines.extend(
        [
            f"velux base url:     {settings.velux.base_url}",
            f"code ttl (s):       {settings.oauth.auth_code_ttl_seconds}",
            f"token ttl (s):      {settings.oauth.access_token_ttl_seconds}",
            f"single-use codes:   {settings.oauth.single_use_codes}",
            f"client binding:     {settings.oauth.enforce_client_binding}",
        ]
    )
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate that IDP settings load from an environment file."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        type=Path,
        help="Path to the environment file (default: .env in the working directory).",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the resolved non-secret settings.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = _load_settings(args.env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    if args.show:
        print(_describe(settings))
    else:
        print("Settings OK.")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
