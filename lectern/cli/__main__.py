from __future__ import annotations

import importlib
import sys
import threading
import traceback
import types
import typing as t
from pathlib import Path

import pydantic as p

import lectern
import lectern.lib.cli as click
from lectern.core import LecternContainer
from lectern.model import DeploymentEnvironment

DefaultConfigRoot = Path(lectern.__file__).resolve().parents[1] / "config"
Commands = ("storage", "user", "web")

_loaded: list[types.ModuleType] = []
_booted = False


class LecternCommands(click.Group):
    """Subcommands live in `lectern.cli.<name>` and are imported only when invoked."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(Commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in Commands:
            return None
        module = importlib.import_module(f"lectern.cli.{cmd_name}")
        _loaded.append(module)
        return getattr(module, cmd_name)


@click.group(cls=LecternCommands)
@click.option("-E", "--env", type=click.EnumType(DeploymentEnvironment), default=DeploymentEnvironment.Local)
@click.option("-c", "--config-root", type=click.ConfigRootType(), default=DefaultConfigRoot)
@click.option(
    "-o",
    "--override",
    multiple=True,
    metavar="PATH=VALUE",
    help="override one configuration value, e.g. -o storage.records.backend=memory",
)
@click.option("-D", "--debug", is_flag=True, default=False, help="verbose errors, with tracebacks")
@click.pass_obj
def main(ct: LecternContainer, env: DeploymentEnvironment, config_root: p.FileUrl, override: tuple[str, ...], debug: bool):
    global _booted
    LecternContainer.boot(
        ct, debug=debug, env=env, config_root=config_root, override=override, wiring=tuple(_loaded)
    )
    _booted = True


def execute_command(*argv: str) -> None:
    threading.current_thread().name = "lectern-main"
    args = list(argv or sys.argv)
    prog = Path(args[0]).name
    ct = LecternContainer()

    try:
        with main.make_context(prog, args=args[1:]) as ctx:
            ctx.obj = ct
            sys.exit(t.cast(int | None, main.invoke(ctx)) or 0)
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except click.exceptions.Exit as ex:
        sys.exit(ex.exit_code)
    except click.ClickException as ex:
        ex.show()
        sys.exit(ex.exit_code)
    except Exception as ex:
        click.echo(click.style("ERROR ", fg="red") + str(ex), err=True)
        if ct.debug() or (not _booted and "-D" in args[1:]):
            traceback.print_exc()
        sys.exit(1)
    finally:
        ct.shutdown_resources()


if __name__ == "__main__":
    execute_command(*sys.argv)
