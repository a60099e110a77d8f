"""medis: employee health-check logging, classification and reporting.

The core (domain models and services) is free of I/O; storage, PDF export
and terminal rendering live in `medis.adapters`.
"""

__version__ = "0.1.0"
