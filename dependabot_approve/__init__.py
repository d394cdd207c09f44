# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
dependabot-approve - approve automated dependency-upgrade pull requests.
"""

__version__ = '0.4.0'
