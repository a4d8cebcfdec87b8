"""
Reading comprehension content.
"""

from thinkaroo.reading.generator import ReadingGenerator
from thinkaroo.reading.service import ReadingService

__all__ = ["ReadingGenerator", "ReadingService"]
