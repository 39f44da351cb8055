"""
Trail pipeline: repeated-phrase mining, subsumption filtering, anchor
construction along a chapter trail, and chapter navigation resolution.
"""

__version__ = "0.1.0"
