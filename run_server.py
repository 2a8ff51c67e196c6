"""Entry point for running the AthlNet application with Uvicorn."""
from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
  logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
  port = int(os.getenv("ATHLNET_PORT", "8000"))
  reload = os.getenv("UVICORN_RELOAD", "true").lower() == "true"
  uvicorn.run("athlnet.main:app", host="0.0.0.0", port=port, reload=reload)


if __name__ == "__main__":
  main()
