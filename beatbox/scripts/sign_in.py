"""Local sign-in CLI (runs sign-in completion the way the provider callback does).

Usage examples:
    flask sign-in --email=someone@example.com --name="Some One"
    python -m beatbox.scripts.sign_in --email=someone@example.com
"""

from __future__ import annotations

import sys

import click
from flask import Flask
from flask.cli import with_appcontext

from beatbox.core.auth.gate import AccessDenied
from beatbox.core.auth.sign_in import EmailInUse, ProviderProfile, complete_sign_in


@click.command("sign-in")
@click.option("--email", required=True, help="Email reported by the identity provider")
@click.option("--subject", type=str, help="Provider subject id (stable identity id)")
@click.option("--name", type=str, help="Display name")
@with_appcontext
def sign_in_command(email: str, subject: str | None, name: str | None):
    """Complete a sign-in for EMAIL and print the issued access token."""
    profile = ProviderProfile(email=email, subject=subject, name=name)
    try:
        result = complete_sign_in(profile, user_agent="beatbox-cli")
    except (AccessDenied, EmailInUse) as exc:
        click.echo(str(exc), err=True)
        raise click.Abort()

    click.echo(
        f"sign-in ok: user_id={result.identity.id} session_id={result.session.id} email={result.session.email}"
    )
    click.echo(result.credentials["access_token"])


def register_commands(app: Flask) -> None:
    app.cli.add_command(sign_in_command)


def main(argv: list[str] | None = None) -> int:
    """Entry point for python -m beatbox.scripts.sign_in."""
    from beatbox import create_app

    app = create_app()
    with app.app_context():
        try:
            sign_in_command.main(standalone_mode=False, args=argv)
        except click.Abort:
            return 1
        except SystemExit as exc:  # click may raise SystemExit
            return exc.code if isinstance(exc.code, int) else 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
