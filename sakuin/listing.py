"""Directory view construction: breadcrumbs and listing rows."""

import os
import posixpath
from datetime import datetime

from .models import Breadcrumb, FileItem
from .utils import display_name, human_bytes, human_time, url_path


def build_breadcrumbs(display_path: str) -> list[Breadcrumb]:
    """Build breadcrumbs, root to leaf, for a root-relative path.

    The root itself gets no crumb: ``/a/b`` yields ``a`` and ``b``.
    """
    segments = display_path.rstrip("/").split("/")

    crumbs = []
    while len(segments) > 1:
        crumbs.append(Breadcrumb(
            name=display_name(segments[-1]),
            path=url_path("/".join(segments)),
        ))
        segments = segments[:-1]
    crumbs.reverse()
    return crumbs


def build_listing(
    directory: str,
    display_path: str,
    now: datetime | None = None,
) -> list[FileItem]:
    """List the immediate children of ``directory``.

    Rows come back in enumeration order, unsorted and unfiltered.
    Entries removed while listing are skipped; any other OSError from
    the enumeration propagates.
    """
    if now is None:
        now = datetime.now()
    base = display_path or "/"

    files = []
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                st = entry.stat(follow_symlinks=False)
                is_dir = entry.is_dir()
            except FileNotFoundError:
                continue

            files.append(FileItem(
                name=display_name(entry.name),
                size=human_bytes(st.st_size),
                date=human_time(datetime.fromtimestamp(st.st_mtime), now),
                is_dir=is_dir,
                path=url_path(posixpath.join(base, posixpath.normpath(entry.name))),
            ))
    return files
