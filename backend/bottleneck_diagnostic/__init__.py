"""
bottleneck-diagnostic: lead-generation quiz that finds a department's main
operational bottleneck, with an AI assistant to explain the result.
"""

__version__ = "1.0.0"
