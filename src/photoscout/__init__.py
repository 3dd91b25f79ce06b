"""
PhotoScout - Photo Discovery Integration Layer

Identity resolution across Instagram and Twitter, cached API access to the
photo network, and paginated full-text search over an IndexTank-style index.
"""

__version__ = "0.1.0"
__author__ = "PhotoScout Team"
__email__ = "contact@photoscout.dev"

__all__ = ["__version__"]
