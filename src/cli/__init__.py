"""Command line interface for quizmark."""
