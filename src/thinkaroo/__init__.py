"""
Thinkaroo content service.

Serves LLM-generated reading content through a time-bucketed
generate-or-reuse cache built on pluggable storage backends.
"""

__version__ = "0.1.0"
