"""kubexray -- resource-relationship trees and view customization for a cluster dashboard."""

__version__ = "0.3.0"
