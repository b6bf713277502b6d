"""
Helper operations over a Drive session.

Every function takes the caller's DriveSession first and returns a Result.
Remote, network and local precondition failures are logged and reported in
the Result; nothing here raises for them.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
import time
from pathlib import Path
from typing import Optional, Union

from drivehelper.config import HelperConfig
from drivehelper.controller import GoogleDriveController
from drivehelper.errors import (
    DriveHelperError,
    DuplicateFolderError,
    FolderResolutionTimeout,
    InvalidArgumentError,
    LocalPreconditionError,
    LocalWriteError,
    classify_error,
)
from drivehelper.models import AboutInfo, FileResource, Permission, Result
from drivehelper.session import DriveSession
from drivehelper.util.mime import guess_mime_type
from drivehelper.util.query import build_title_query

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

ROOT_FOLDER_ID = "root"
APP_FOLDER_DESCRIPTION = "Application folder created by drivehelper"


def download_file(
    session: DriveSession,
    resource: FileResource,
    destination_path: PathLike,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[str]:
    """
    Download the content behind resource.download_url to destination_path.

    Returns a failed Result without touching the network when the resource
    has no download URL (folders, Google-native documents). An existing file
    at destination_path is replaced only after the full payload arrived, and
    keeps its permission bits; a new file gets the umask default. A write
    failure after a successful fetch reports LOCAL_WRITE_FAILED.
    """
    destination = os.fspath(destination_path)
    if not resource.download_url:
        return _fail(
            "download_file",
            LocalPreconditionError(
                "File has no downloadable content",
                details={"file_id": resource.file_id, "mime_type": resource.mime_type},
            ),
        )

    controller = _controller(session, config)
    try:
        content = controller.fetch_bytes(resource.download_url)
        _write_replace(destination, content)
    except DriveHelperError as exc:
        return _fail("download_file", exc)

    logger.debug(f"Downloaded {resource.file_id} ({len(content)} bytes) to {destination}")
    return Result.success(destination)


def upload_file(
    session: DriveSession,
    source_path: PathLike,
    parent_folder_id: str,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[FileResource]:
    """Upload a local file as a new Drive file under parent_folder_id."""
    config = config or HelperConfig()
    source = os.fspath(source_path)
    try:
        content = _read_source(source)
    except LocalPreconditionError as exc:
        return _fail("upload_file", exc)

    controller = _controller(session, config)
    try:
        resource = controller.insert_file(
            content,
            name=os.path.basename(source),
            description=config.upload_description,
            mime_type=guess_mime_type(source, config.default_mime_type),
            parent_id=parent_folder_id,
        )
    except DriveHelperError as exc:
        return _fail("upload_file", exc)

    logger.debug(f"Uploaded {source} as {resource.file_id}")
    return Result.success(resource)


def update_file(
    session: DriveSession,
    source_path: PathLike,
    parent_folder_id: str,
    file_id: str,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[FileResource]:
    """
    Replace content and metadata of file_id with a local file.

    Name, description, MIME type and the parent list are all overwritten;
    after the call parent_folder_id is the only parent.
    """
    config = config or HelperConfig()
    source = os.fspath(source_path)
    try:
        content = _read_source(source)
    except LocalPreconditionError as exc:
        return _fail("update_file", exc)

    controller = _controller(session, config)
    try:
        resource = controller.update_file(
            file_id,
            content,
            name=os.path.basename(source),
            description=config.update_description,
            mime_type=guess_mime_type(source, config.default_mime_type),
            parent_id=parent_folder_id,
        )
    except DriveHelperError as exc:
        return _fail("update_file", exc)

    logger.debug(f"Updated {file_id} from {source}")
    return Result.success(resource)


def create_directory(
    session: DriveSession,
    title: str,
    description: str,
    parent_folder_id: str,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[FileResource]:
    """Create a folder. Existing folders with the same title are not checked."""
    controller = _controller(session, config)
    try:
        folder = controller.create_folder(title, description, parent_folder_id)
    except DriveHelperError as exc:
        return _fail("create_directory", exc)

    logger.debug(f"Created folder '{title}' as {folder.file_id}")
    return Result.success(folder)


def list_files(
    session: DriveSession,
    query: Optional[str] = None,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[list[FileResource]]:
    """
    List every file matching query, following continuation tokens.

    The query is sent verbatim. When a page fails, the failed Result still
    carries the items of the pages fetched before it.
    """
    controller = _controller(session, config)
    files: list[FileResource] = []
    try:
        for page in controller.iter_file_pages(query):
            files.extend(page)
    except DriveHelperError as exc:
        return _fail("list_files", exc, value=files)

    return Result.success(files)


def share(
    session: DriveSession,
    file_id: str,
    principal_value: str,
    principal_type: str,
    role: str,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[Permission]:
    """Grant role to a principal ('user', 'group', 'domain' or 'anyone') on file_id."""
    permission = Permission(value=principal_value, type=principal_type, role=role)
    controller = _controller(session, config)
    try:
        granted = controller.insert_permission(file_id, permission)
    except DriveHelperError as exc:
        return _fail("share", exc)

    logger.debug(f"Shared {file_id} with {principal_type} '{principal_value}' as {role}")
    return Result.success(granted)


def get_app_folder_id(
    session: DriveSession,
    app_name: str,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[str]:
    """
    Resolve the id of the top-level folder named app_name, creating it if needed.

    Policy:
        - Only non-trashed folders whose name equals app_name match.
        - A freshly created folder is polled for with backoff until listings
          show it; exhaustion is a TIMEOUT failure.
        - Several matches are a CONFLICT failure, unless one of them is the
          folder this call just created.
        - With config.share_app_folder, 'anyone' gets 'reader' on every call.
    """
    if not isinstance(app_name, str) or not app_name.strip():
        raise InvalidArgumentError("app_name must be a non-empty string")

    config = config or HelperConfig()
    query = build_title_query(app_name, folders_only=True)

    listing = list_files(session, query, config=config)
    if not listing.ok:
        return Result.failure(listing.error)
    folders = listing.value or []

    created_id: Optional[str] = None
    if not folders:
        created = create_directory(
            session, app_name, APP_FOLDER_DESCRIPTION, ROOT_FOLDER_ID, config=config
        )
        if not created.ok:
            return Result.failure(created.error)
        created_id = created.value.file_id

        polled = _poll_for_folders(session, app_name, query, config)
        if not polled.ok:
            return Result.failure(polled.error)
        folders = polled.value or []

    for folder in folders:
        logger.debug(f"Folder '{folder.title}' ({folder.mime_type}) id={folder.file_id}")

    folder_ids = [folder.file_id for folder in folders]
    if created_id is not None and created_id in folder_ids:
        folder_id = created_id
    elif len(folder_ids) == 1:
        folder_id = folder_ids[0]
    else:
        return _fail(
            "get_app_folder_id",
            DuplicateFolderError(
                "More than one folder matches the app name",
                details={"app_name": app_name, "folder_ids": folder_ids},
            ),
        )

    if config.share_app_folder:
        shared = share(session, folder_id, "", "anyone", "reader", config=config)
        if not shared.ok:
            return Result.failure(shared.error)

    return Result.success(folder_id)


def get_about(
    session: DriveSession,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[AboutInfo]:
    controller = _controller(session, config)
    try:
        about = controller.get_about()
    except DriveHelperError as exc:
        return _fail("get_about", exc)
    return Result.success(about)


def print_about(
    session: DriveSession,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[AboutInfo]:
    """Log account name, root folder id and quota figures at INFO."""
    result = get_about(session, config=config)
    if not result.ok:
        return result

    about = result.value
    quota = about.quota
    logger.info(f"Current user name: {about.user_name}")
    logger.info(f"Root folder ID: {about.root_folder_id}")
    if quota.unlimited:
        logger.info("Total quota (bytes): unlimited")
    else:
        logger.info(f"Total quota (bytes): {quota.total}")
    logger.info(f"Used quota (bytes): {quota.used}")
    if not quota.unlimited:
        logger.info(f"Free quota (bytes): {quota.free}")
    return result


def can_upload(
    session: DriveSession,
    candidate_size: int,
    *,
    config: Optional[HelperConfig] = None,
) -> Result[bool]:
    """
    Return whether a file of candidate_size bytes fits in the remaining quota.

    Accounts without a storage limit always fit. A failed quota lookup yields
    a failed Result whose value is False.
    """
    if isinstance(candidate_size, bool) or not isinstance(candidate_size, int):
        raise InvalidArgumentError("candidate_size must be an integer")
    if candidate_size < 0:
        raise InvalidArgumentError(
            "candidate_size must be non-negative",
            details={"candidate_size": candidate_size},
        )

    controller = _controller(session, config)
    try:
        quota = controller.get_quota()
    except DriveHelperError as exc:
        return _fail("can_upload", exc, value=False)

    if quota.unlimited:
        return Result.success(True)

    free = quota.free or 0
    allowed = free > 0 and free >= candidate_size
    logger.debug(f"can_upload size={candidate_size} free={free} -> {allowed}")
    return Result.success(allowed)


# ----------------------------
# Internals
# ----------------------------
def _controller(session: DriveSession, config: Optional[HelperConfig]) -> GoogleDriveController:
    return GoogleDriveController(session, config)


def _fail(operation: str, exc: DriveHelperError, value=None) -> Result:
    kind = classify_error(exc)
    if isinstance(exc, LocalPreconditionError):
        logger.warning(f"{operation} failed ({kind.value}): {exc}")
    else:
        logger.error(f"{operation} failed ({kind.value}): {exc}")
    return Result.failure(exc, value=value)


def _read_source(source: str) -> bytes:
    if not os.path.isfile(source):
        raise LocalPreconditionError(
            "File does not exist",
            details={"source_path": source},
        )
    try:
        return Path(source).read_bytes()
    except OSError as exc:
        raise LocalPreconditionError(
            "Failed to read source file",
            details={"source_path": source},
            cause=exc,
        ) from exc


def _write_replace(destination: str, content: bytes) -> None:
    parent_dir = os.path.dirname(os.path.abspath(destination))
    tmp_path = None
    try:
        mode = _target_mode(destination)
        with tempfile.NamedTemporaryFile(
            dir=parent_dir,
            prefix=".drivehelper-",
            delete=False,
        ) as tmp:
            tmp_path = tmp.name
            tmp.write(content)
        # mkstemp always creates 0600
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, destination)
    except OSError as exc:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise LocalWriteError(
            "Failed to write destination file",
            details={"destination_path": destination},
            cause=exc,
        ) from exc


def _target_mode(destination: str) -> int:
    try:
        return stat.S_IMODE(os.stat(destination).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _poll_for_folders(
    session: DriveSession,
    app_name: str,
    query: str,
    config: HelperConfig,
) -> Result[list[FileResource]]:
    attempts = 0
    for delay in config.folder_poll.schedule():
        time.sleep(delay)
        attempts += 1
        listing = list_files(session, query, config=config)
        if not listing.ok:
            return listing
        if listing.value:
            return listing
        logger.debug(f"Folder '{app_name}' not listed yet (attempt {attempts})")

    return _fail(
        "get_app_folder_id",
        FolderResolutionTimeout(
            "Created folder did not appear in listings",
            details={"app_name": app_name, "attempts": attempts},
        ),
    )
