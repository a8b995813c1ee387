"""
Command-line interface for waypoint_sampler.

Inspects the robot and sampler configurations that samplers are built from.
Sampling itself happens inside a planner, not from the command line.
"""

import math
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from waypoint_sampler import __version__
from waypoint_sampler.core.config import ConfigManager
from waypoint_sampler.core.logging import configure_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config-dir",
    type=click.Path(exists=True, path_type=Path),
    default="config",
    help="Configuration directory",
)
@click.option("--log-level", default="WARNING", help="Log level")
@click.pass_context
def main(ctx: click.Context, config_dir: Path, log_level: str) -> None:
    """waypoint-sampler - Candidate joint states for Cartesian planning."""
    configure_logging(level=log_level)
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


@main.group()
def config() -> None:
    """Configuration inspection commands."""
    pass


@config.command("list-robots")
@click.pass_context
def config_list_robots(ctx: click.Context) -> None:
    """List available robot configurations."""
    try:
        config_mgr = ConfigManager(ctx.obj["config_dir"])
        robots = config_mgr.list_robots()

        if not robots:
            console.print("[yellow]No robot configurations found.[/yellow]")
            return

        table = Table(title="Available Robots")
        table.add_column("Name", style="cyan")
        table.add_column("Manufacturer")
        table.add_column("DOF", justify="right")
        table.add_column("Redundant joints")

        for name in robots:
            robot = config_mgr.get_robot(name)
            table.add_row(
                name,
                robot.manufacturer or "-",
                str(robot.dof),
                ", ".join(str(i) for i in robot.redundancy_joints) or "-",
            )

        console.print(table)

    except Exception as e:
        console.print(f"[red]✗[/red] Failed to list robots: {e}")
        raise SystemExit(1)


@config.command("list-samplers")
@click.pass_context
def config_list_samplers(ctx: click.Context) -> None:
    """List available sampler settings."""
    try:
        config_mgr = ConfigManager(ctx.obj["config_dir"])
        samplers = config_mgr.list_samplers()

        if not samplers:
            console.print("[yellow]No sampler configurations found.[/yellow]")
            return

        table = Table(title="Available Samplers")
        table.add_column("Name", style="cyan")
        table.add_column("Pose sampling")
        table.add_column("Step (deg)", justify="right")
        table.add_column("Collide")
        table.add_column("Margin (m)", justify="right")
        table.add_column("dtype")

        for name in samplers:
            settings = config_mgr.get_sampler(name)
            sweep = settings.pose_sampling == "tool_axis"
            table.add_row(
                name,
                f"tool_axis ({settings.tool_axis})" if sweep else "fixed",
                f"{math.degrees(settings.resolution):.1f}" if sweep else "-",
                "✓" if settings.allow_collision else "-",
                f"{settings.collision_margin:g}",
                settings.dtype,
            )

        console.print(table)

    except Exception as e:
        console.print(f"[red]✗[/red] Failed to list samplers: {e}")
        raise SystemExit(1)


@config.command("show-robot")
@click.argument("name")
@click.pass_context
def config_show_robot(ctx: click.Context, name: str) -> None:
    """Show joint limits, turn periods and tool offset of a robot."""
    try:
        robot = ConfigManager(ctx.obj["config_dir"]).get_robot(name)

        table = Table(title=f"Robot: {robot.name}")
        table.add_column("#", justify="right")
        table.add_column("Joint", style="cyan")
        table.add_column("Lower (deg)", justify="right")
        table.add_column("Upper (deg)", justify="right")
        table.add_column("Period (deg)", justify="right")
        table.add_column("Redundant")

        for index, joint in enumerate(robot.joints):
            table.add_row(
                str(index),
                joint.name,
                f"{math.degrees(joint.lower):.1f}",
                f"{math.degrees(joint.upper):.1f}",
                f"{math.degrees(joint.period):.1f}",
                "✓" if index in robot.redundancy_joints else "-",
            )

        console.print(table)
        offset = ", ".join(f"{v:g}" for v in robot.tool_offset)
        console.print(f"Tool offset (x, y, z, rx, ry, rz): [{offset}]")

    except Exception as e:
        console.print(f"[red]✗[/red] Failed to show robot: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
