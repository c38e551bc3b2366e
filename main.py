"""
Quizmark HTTP service launcher.

Serves the quiz compile/validate API from src/api/main.py with the host,
port and log level taken from QUIZMARK_* settings. For command line use
see the `quizmark` console script (src/cli/quiz_cli.py).

Run with:
    python main.py
    uvicorn src.api.main:app --port 8100
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

import uvicorn
from config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
