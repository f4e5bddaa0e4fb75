"""
PM Autopilot: VOC analysis, task ranking, PRD drafting and launch content generation.
"""

__version__ = "0.1.0"
