"""Entry point for running Taskboard via `python -m taskboard`."""

from taskboard.cli import cli

if __name__ == "__main__":
    cli(prog_name="taskboard")
