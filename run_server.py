# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

#!/usr/bin/env python3
"""
Main entry point for the Fleet Governance service.

Usage:
    python run_server.py

Or with uvicorn directly:
    uvicorn fleet_governance.main:app --host 0.0.0.0 --port 8080
"""

from fleet_governance.server import main


if __name__ == "__main__":
    main()
