"""
RepoTriage

Triage of GitHub accounts suspected of distributing malware as archive files.
"""

__version__ = "0.1.0"
