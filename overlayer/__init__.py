"""
Overlayer Contract Operations
=============================

Deployment and interaction tooling for the Overlayer Protocol contracts.

Structure:
- config: environment, networks and logging
- chain: connect, resolve signer, deploy/attach, transact
- operations/: one function per deployment, query or transfer
- events: contract event listener
- pyth: Pyth price service client
- cli: command line entry point
"""

__version__ = "1.0.0"
__author__ = "Overlayer Protocol Team"
