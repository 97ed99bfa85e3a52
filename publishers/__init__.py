"""
Publishing package for pushing the generated wiki tree.

GitHub wikis are plain git repositories; this package clones the wiki,
commits the regenerated tree and pushes it back.
"""

from .wiki_repository import WikiRepository, read_commit_info, run_git

__all__ = [
    'WikiRepository',
    'read_commit_info',
    'run_git'
]
