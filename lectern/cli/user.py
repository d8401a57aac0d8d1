"""CLI commands for managing users."""

from __future__ import annotations

import asyncio
import secrets

import pydantic as p

import lectern.lib.cli as click
from lectern.auth import state as auth_state
from lectern.catalog import Synchronizer
from lectern.core import di
from lectern.errors import LecternError
from lectern.model import UserID, UserRole, UserState
from lectern.storage import user as user_storage
from lectern.storage.record import RecordStore


@click.group("user")
def user():
    """Manage users."""
    ...


@user.command("create-super")
@click.argument("email")
@click.argument("name")
@click.option("--password", "-p", help="Password (if not provided, a random one is generated)")
@di.inject
def user_create_super(
    email: str,
    name: str,
    password: str | None,
    records: RecordStore = di.Provide["storage.records"],
    bcrypt_rounds: int = di.Provide["config.web.market.auth.bcrypt_rounds"],
) -> None:
    """Create a super user.

    EMAIL is the user's email address (used for login).
    NAME is the user's display name.
    """
    generated_password = None
    if not password:
        generated_password = secrets.token_urlsafe(12)
        password = generated_password

    async def run():
        await records.initialize()
        try:
            return await user_storage.create(
                name=name,
                email=email,
                password=p.Secret(password),
                role=UserRole.Super,
                bcrypt_rounds=bcrypt_rounds,
                store=records,
            )
        finally:
            await records.close()

    try:
        new_user = asyncio.run(run())
    except LecternError as e:
        raise click.ClickException(e.message) from e

    click.echo(f"Created super user: {new_user.user_name}")
    click.echo(f"  ID: {new_user.user_id}")
    click.echo(f"  Email: {new_user.user_email}")
    if generated_password:
        click.echo(f"  Generated password: {generated_password}")


@user.command("approve")
@click.argument("user_id")
@click.option("--state", "-s", "state", type=click.EnumType(UserState), default=UserState.Active)
@di.inject
def user_approve(
    user_id: str,
    state: UserState,
    records: RecordStore = di.Provide["storage.records"],
    synchronizer: Synchronizer = di.Provide["catalog.synchronizer"],
) -> None:
    """Set an admin's state and refresh their snapshot in every course they instruct.

    USER_ID is the admin's ID.
    """
    try:
        uid = UserID(user_id)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="USER_ID") from e

    async def run():
        await records.initialize()
        try:
            target = await user_storage.get(uid, store=records)
            if target is None:
                raise click.ClickException(f"User '{user_id}' not found.")
            new_state = auth_state.transition(target, state)
            updated = await user_storage.update(uid, state=new_state, store=records)
            assert updated is not None
            return updated, await synchronizer.on_admin_change(updated)
        finally:
            await records.close()

    try:
        updated, report = asyncio.run(run())
    except LecternError as e:
        raise click.ClickException(e.message) from e

    click.echo(f"{updated.user_name} ({updated.user_id}) is now {updated.user_state.value}")
    for warning in report.warnings:
        click.echo(click.style("WARNING ", fg="yellow") + warning, err=True)
