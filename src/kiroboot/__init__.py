"""kiroboot: fetch, verify and run the Kiro Linux installer.

The installer is cloned from a fixed repository into a private temporary
directory, checked through an ordered trust chain and only then executed.
"""

__version__ = "0.1.0"
