"""Run the service under uvicorn: ``python -m talent_questionnaire``."""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

import uvicorn

from talent_questionnaire.main import create_app


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="talent-questionnaire")
    parser.add_argument("--host", default=os.environ.get("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")))
    args = parser.parse_args(argv)
    # log_config=None keeps the handlers installed by configure_logging
    uvicorn.run(create_app(), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
