"""HTTP API for quizmark."""
