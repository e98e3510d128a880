# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Entry point for principal-store runner.

Usage:
    python -m principal_store.runner < input.json > output.json

The runner reads JSON input from stdin, executes the store operations,
and writes JSON output to stdout.  Logs go to stderr.

Exit codes:
    0: Success
    1: Failure (error details in JSON output)
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from .executor import Executor
from .schema import RunnerInput, RunnerOutput


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("PRINCIPAL_STORE_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        input_data = RunnerInput.model_validate_json(sys.stdin.read())

        executor = Executor()
        output = asyncio.run(executor.execute(input_data))

        print(output.model_dump_json())

        return 0 if output.success else 1

    except Exception as e:
        # Ensure we always output valid JSON, even on unexpected errors
        error_output = RunnerOutput(
            success=False,
            error=str(e),
            error_type=type(e).__name__,
        )
        print(error_output.model_dump_json())
        return 1


if __name__ == "__main__":
    sys.exit(main())
