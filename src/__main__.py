"""Run the service with `python -m src`."""

from src.main import run

run()
