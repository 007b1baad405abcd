#!/usr/bin/env python3
"""Run the network RPC client against a local node."""

import os
import sys

# Set environment variables for local development
os.environ.setdefault("TZRPC_RPC_URL", "http://localhost:8732")
os.environ.setdefault("TZRPC_DEBUG", "true")

from tzrpc.main import main

if __name__ == "__main__":
    sys.exit(main())
