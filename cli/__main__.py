"""CLI entry point for StoryLearner."""

from cli.commands.main import cli

if __name__ == "__main__":
    cli()
