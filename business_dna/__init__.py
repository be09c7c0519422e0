"""Business DNA: crawl a small-business website and extract its identity."""

from business_dna.constants import PIPELINE_VERSION

__version__ = PIPELINE_VERSION
