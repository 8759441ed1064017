"""Remote store services.

Exports:
    CategorySequencer: Per-category sequence numbers used as file names.
    GitHubUploader: Create-only PUT to the GitHub contents API.
    UploadRecord: One planned write (destination, commit message, payload).
"""

from .sequencer import CategorySequencer
from .github_uploader import GitHubUploader, UploadRecord

__all__ = ["CategorySequencer", "GitHubUploader", "UploadRecord"]
