"""Command-line interface for StoryLearner."""
