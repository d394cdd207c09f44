# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
dependabot-approve CLI

Usage:
    dependabot-approve approve -u <user> -r <owner/repo> -k <key file>
    dependabot-approve clear-junk -u <user> -r <owner/repo> -l <reviewer>
    dependabot-approve config
"""

from .main import cli, main

__all__ = ['cli', 'main']
