"""Quizmark: Markdown quiz compiler and validator."""
