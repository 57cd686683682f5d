"""Map request paths onto the data directory."""

import logging
import os
import stat
from datetime import datetime

from .models import ResolvedTarget, TargetKind
from .utils import clean_request_path, relative_to_root

logger = logging.getLogger(__name__)


def join_under_root(root: str, request_path: str) -> str:
    """Join an untrusted request path under ``root``.

    The request path is cleaned before the join; cleaning after would
    let ``..`` segments eat into the root itself.
    """
    relative = clean_request_path(request_path).lstrip("/")
    return os.path.join(root, relative) if relative else root


def resolve(root: str, request_path: str) -> ResolvedTarget:
    """Resolve a request path and classify what it points at.

    Returns a MISSING target when nothing exists at the path. Any other
    OSError (permission denied, I/O error) is raised to the caller.
    """
    path = join_under_root(root, request_path)
    display_path = relative_to_root(root, path)

    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return ResolvedTarget(kind=TargetKind.MISSING, path=path, display_path=display_path)
    except ValueError:
        # embedded null byte
        logger.debug("Rejected request path %r", request_path)
        return ResolvedTarget(kind=TargetKind.MISSING, path=path, display_path=display_path)

    modified = datetime.fromtimestamp(st.st_mtime)
    if stat.S_ISDIR(st.st_mode):
        return ResolvedTarget(
            kind=TargetKind.DIRECTORY,
            path=path,
            display_path=display_path,
            modified=modified,
        )

    return ResolvedTarget(
        kind=TargetKind.FILE,
        path=path,
        display_path=display_path,
        size=st.st_size,
        regular=stat.S_ISREG(st.st_mode),
        modified=modified,
    )
