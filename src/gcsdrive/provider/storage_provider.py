"""GoogleCloudStorageProvider: navigation verbs for the gs: drive."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from gcsdrive.auth import AuthInfo
from gcsdrive.cache import BucketCatalog, Clock, ProviderCache
from gcsdrive.config import DriveSettings
from gcsdrive.controller import GcsController
from gcsdrive.errors import (
    ConflictError,
    GcsDriveError,
    InvalidArgumentError,
    InvalidOperationError,
    NotFoundError,
    PermissionError,
)
from gcsdrive.models import (
    BucketInfo,
    DriveInfo,
    ErrorRecord,
    ItemEntry,
    ObjectInfo,
    ProgressRecord,
)
from gcsdrive.path import (
    SEPARATOR,
    ObjectPath,
    PathType,
    VirtualPath,
    child_name,
    from_object,
    make_path,
    parse,
    relative_path_to_child,
)
from gcsdrive.util.mime import FOLDER_CONTENT_TYPE, UTF8_TEXT_MIME, infer_content_type

from .confirm import ConfirmationPolicy
from .content import GcsContentReader, GcsContentWriter
from .options import (
    ContentWriterOptions,
    CopyOptions,
    NewBucketOptions,
    NewItemOptions,
    NewObjectOptions,
    options_for_new_item,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressRecord], None]

DIRECTORY_ITEM_TYPE = "Directory"

_DELETE_ACTIVITY = "Delete bucket objects"


class GoogleCloudStorageProvider:
    """
    Exposes Cloud Storage as a drive of buckets, folders and objects.

    Paths are ``bucket/object/key``; the empty path is the drive root.
    Queries are answered from per-bucket models where possible. Every
    mutating verb drops all bucket models afterwards.

    Non-fatal problems (a project whose buckets cannot be listed, an object
    that failed to delete) are logged and kept in `error_records`.
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        settings: Optional[DriveSettings] = None,
        confirmation: Optional[ConfirmationPolicy] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        settings = settings or DriveSettings()
        controller = GcsController(auth_info, settings=settings)
        self._init_state(controller, settings, confirmation, on_progress, time.monotonic)

    @classmethod
    def from_controller(
        cls,
        controller: Any,
        *,
        settings: Optional[DriveSettings] = None,
        confirmation: Optional[ConfirmationPolicy] = None,
        on_progress: Optional[ProgressCallback] = None,
        clock: Clock = time.monotonic,
    ) -> "GoogleCloudStorageProvider":
        """Create a provider around an injected controller (useful for tests)."""
        obj = cls.__new__(cls)
        obj._init_state(controller, settings or DriveSettings(), confirmation, on_progress, clock)
        return obj

    def _init_state(
        self,
        controller: Any,
        settings: DriveSettings,
        confirmation: Optional[ConfirmationPolicy],
        on_progress: Optional[ProgressCallback],
        clock: Clock,
    ) -> None:
        self._controller = controller
        self._settings = settings
        self._confirmation = confirmation or ConfirmationPolicy()
        self._on_progress = on_progress
        self._cache = ProviderCache(
            controller,
            lifetime_sec=settings.cache_lifetime_sec,
            clock=clock,
        )
        self._stopping = False
        self.error_records: list[ErrorRecord] = []

    @property
    def cache(self) -> ProviderCache:
        return self._cache

    @property
    def stopping(self) -> bool:
        return self._stopping

    # ----------------------------
    # Drive
    # ----------------------------
    def initialize_default_drives(self) -> list[DriveInfo]:
        return [DriveInfo(name=self._settings.drive_name)]

    def clear_cache(self) -> None:
        self._cache.clear()

    def request_stop(self) -> None:
        """Ask long listings and bulk deletes to end at the next page boundary."""
        logger.info("Stop requested")
        self._stopping = True

    def resume(self) -> None:
        self._stopping = False

    # ----------------------------
    # Queries
    # ----------------------------
    def is_valid_path(self, path: str) -> bool:
        # Every string parses to some path.
        return True

    def item_exists(self, path: str) -> bool:
        p = parse(path)
        if p.type is PathType.DRIVE:
            return True
        if p.type is PathType.BUCKET:
            return self._bucket_exists(p.bucket)
        try:
            return self._cache.bucket_model(p.bucket).object_exists(p.object_path)
        except NotFoundError:
            # The bucket itself is missing.
            return False

    def is_item_container(self, path: str) -> bool:
        p = parse(path)
        if p.type is not PathType.OBJECT:
            return True
        try:
            return self._cache.bucket_model(p.bucket).is_container(p.object_path)
        except NotFoundError:
            return False

    def has_child_items(self, path: str) -> bool:
        p = parse(path)
        if p.type is PathType.DRIVE:
            return True
        try:
            return self._cache.bucket_model(p.bucket).has_children(p.object_path)
        except NotFoundError:
            return False

    def get_item(self, path: str) -> ItemEntry:
        """
        Return the item at a path.

        Raises:
            NotFoundError: if the bucket or object does not exist.
        """
        p = parse(path)
        if p.type is PathType.DRIVE:
            return ItemEntry(self.initialize_default_drives()[0], path, True)
        if p.type is PathType.BUCKET:
            return ItemEntry(self._get_bucket(p.bucket), path, True)

        info = self._cache.bucket_model(p.bucket).get_object(p.object_path)
        return ItemEntry(info, path, self.is_item_container(path))

    def get_child_names(self, path: str) -> list[ItemEntry]:
        """
        Return the names of the direct children of a path.

        For a bucket or folder only the first listing page is used.
        """
        p = parse(path)
        if p.type is PathType.DRIVE:
            return [ItemEntry(b.name, b.name, True) for b in self._each_bucket()]

        entries: list[ItemEntry] = []
        for child in self._list_children(p, recurse=False, all_pages=False):
            child_path = str(from_object(child.bucket, child.name))
            entries.append(
                ItemEntry(
                    child_name(child_path),
                    child_path.rstrip(SEPARATOR),
                    self.is_item_container(child_path),
                )
            )
        return entries

    def get_child_items(self, path: str, recurse: bool = False) -> list[ItemEntry]:
        """
        Return the children of a path.

        For the drive root these are the buckets of every active project;
        with `recurse` each bucket's objects follow it. A bucket whose objects
        cannot be read is skipped. Without `recurse`, folders are reported
        as synthetic "Folder" objects named by their prefix.
        """
        p = parse(path)
        if p.type is PathType.DRIVE:
            entries: list[ItemEntry] = []
            for bucket in self._each_bucket():
                entries.append(ItemEntry(bucket, bucket.name, True))
                if not recurse:
                    continue
                if self._stopping:
                    break
                try:
                    entries.extend(self.get_child_items(bucket.name, recurse=True))
                except PermissionError:
                    logger.debug("Access to the objects of bucket %s is restricted", bucket.name)
                except GcsDriveError as exc:
                    self._report_error(bucket.name, exc)
            return entries

        if not self.is_item_container(path):
            return [self.get_item(path)]

        entries = []
        for child in self._list_children(p, recurse=recurse):
            child_path = str(from_object(child.bucket, child.name))
            entries.append(ItemEntry(child, child_path, self.is_item_container(child_path)))
        return entries

    # ----------------------------
    # Mutations
    # ----------------------------
    def new_item(
        self,
        path: str,
        item_type: Optional[str] = None,
        value: Any = None,
        options: Optional[NewItemOptions] = None,
    ) -> Optional[ItemEntry]:
        """
        Create a bucket or object.

        An `item_type` of "Directory" creates a folder placeholder object
        (the key gets a trailing "/"). Object content comes from
        `options.file` when set, else from `value` as UTF-8 text.

        Returns:
            The new item, or None if the operation was not confirmed.

        Raises:
            InvalidOperationError: for the drive root.
            InvalidArgumentError: for options that do not fit the path.
        """
        self._confirmation.reset()
        if not self._confirmation.should_process(path, "New-Item"):
            return None

        new_folder = item_type == DIRECTORY_ITEM_TYPE
        if new_folder and not path.endswith(SEPARATOR):
            path += SEPARATOR

        p = parse(path)
        if p.type is PathType.DRIVE:
            raise InvalidOperationError("Use a new drive mapping to create a drive")

        if p.type is PathType.BUCKET:
            bucket = self._new_bucket(p.bucket, self._resolve_options(p, options))
            entry = ItemEntry(bucket, path, True)
        else:
            info = self._new_object(p, self._resolve_options(p, options), value)
            entry = ItemEntry(info, path, new_folder)

        self._cache.invalidate_bucket_models()
        return entry

    def copy_item(
        self,
        path: str,
        copy_path: str,
        recurse: bool = False,
        options: Optional[CopyOptions] = None,
    ) -> list[ItemEntry]:
        """
        Copy an object, or with `recurse` a folder and everything below it.

        A folder's placeholder object is copied too when it exists.

        Raises:
            InvalidOperationError: if the source or destination is not
                inside a bucket.
        """
        self._confirmation.reset()
        if not self._confirmation.should_process(f"{path} -> {copy_path}", "Copy-Item"):
            return []
        if options is not None and not isinstance(options, CopyOptions):
            raise InvalidArgumentError(f"copy_item takes CopyOptions, not {type(options).__name__}")
        opts = options or CopyOptions()

        if recurse and not self.is_item_container(path):
            recurse = False
        if recurse:
            path = path.rstrip("/\\") + SEPARATOR
            copy_path = copy_path.rstrip("/\\") + SEPARATOR

        src = parse(path)
        dst = parse(copy_path)
        if src.type is PathType.DRIVE or dst.type is PathType.DRIVE:
            raise InvalidOperationError("Items can only be copied within and between buckets")

        entries: list[ItemEntry] = []
        if recurse:
            for child in self._list_children(src, recurse=True):
                if self._stopping:
                    break
                target = parse(make_path(copy_path, relative_path_to_child(src, child.name)))
                info = self._controller.copy_object(
                    child.bucket,
                    child.name,
                    target.bucket,
                    target.object_path,
                    destination_predefined_acl=opts.destination_acl,
                )
                entries.append(ItemEntry(info, str(target), info.name.endswith(SEPARATOR)))

        single = not recurse
        if recurse and src.type is PathType.OBJECT:
            single = self._cache.bucket_model(src.bucket).is_real(src.object_path)
        if single:
            if src.type is not PathType.OBJECT:
                raise InvalidOperationError("A bucket can only be copied with recurse")
            destination_name = dst.object_path or child_name(src.object_path)
            info = self._controller.copy_object(
                src.bucket,
                src.object_path,
                dst.bucket,
                destination_name,
                source_generation=None if recurse else opts.source_generation,
                destination_predefined_acl=opts.destination_acl,
            )
            target_path = str(from_object(dst.bucket, destination_name))
            entries.append(ItemEntry(info, target_path, info.name.endswith(SEPARATOR)))

        logger.info("Copied %d objects from %s to %s", len(entries), path, copy_path)
        self._cache.invalidate_bucket_models()
        return entries

    def remove_item(self, path: str, recurse: bool = False) -> None:
        """
        Remove a bucket, folder or object.

        A bucket is deleted directly; if it is not empty and `recurse` is
        set, its objects are deleted in batches and the bucket delete is
        retried. A folder loses every object below it, then its placeholder.

        Raises:
            InvalidOperationError: for the drive root.
            ConflictError: if a non-empty bucket is removed without `recurse`,
                or objects remain after emptying it.
        """
        self._confirmation.reset()
        if not self._confirmation.should_process(path, "Remove-Item"):
            return

        p = parse(path)
        if p.type is PathType.DRIVE:
            raise InvalidOperationError("The drive root cannot be removed")

        try:
            if p.type is PathType.BUCKET:
                self._remove_bucket(p.bucket, recurse)
                catalog = self._cache.known_catalog()
                if catalog is not None:
                    catalog.remove(p.bucket)
            elif self.is_item_container(path):
                self._remove_folder(parse(path.rstrip("/\\") + SEPARATOR), recurse)
            else:
                self._controller.delete_object(p.bucket, p.object_path)
                logger.info("Deleted gs://%s/%s", p.bucket, p.object_path)
        finally:
            self._cache.invalidate_bucket_models()

    def get_content_reader(self, path: str) -> GcsContentReader:
        p = self._require_object_path(path, "get the contents of")
        data = self._controller.download_object(p.bucket, p.object_path)
        return GcsContentReader(data)

    def get_content_writer(
        self,
        path: str,
        options: Optional[ContentWriterOptions] = None,
    ) -> GcsContentWriter:
        """Return a writer that replaces the object's content when closed."""
        p = self._require_object_path(path, "set the contents of")
        content_type = (options.content_type if options else None) or UTF8_TEXT_MIME

        def _upload(data: bytes) -> ObjectInfo:
            info = self._controller.upload_object(
                p.bucket,
                p.object_path,
                data,
                content_type=content_type,
            )
            self._cache.invalidate_bucket_models()
            return info

        return GcsContentWriter(_upload)

    def clear_content(self, path: str) -> Optional[ObjectInfo]:
        """Replace an object's content with empty text."""
        self._confirmation.reset()
        if not self._confirmation.should_process(path, "Clear-Content"):
            return None
        p = self._require_object_path(path, "clear the contents of")
        info = self._controller.upload_object(
            p.bucket,
            p.object_path,
            b"",
            content_type=UTF8_TEXT_MIME,
        )
        self._cache.invalidate_bucket_models()
        return info

    # ----------------------------
    # Buckets
    # ----------------------------
    def _each_bucket(self) -> list[BucketInfo]:
        """Buckets of every active project, from the catalog while it is fresh."""
        cached = self._cache.known_catalog()
        if cached is not None and not self._cache.buckets.out_of_date():
            return cached.buckets()

        try:
            catalog = self._load_bucket_catalog()
        except GcsDriveError as exc:
            self._report_error("projects", exc)
            return []
        self._cache.buckets.set(catalog)
        return catalog.buckets()

    def _load_bucket_catalog(self) -> BucketCatalog:
        catalog = BucketCatalog()
        for project in self._controller.list_projects():
            if self._stopping:
                break
            try:
                buckets = self._controller.list_buckets(project.project_id)
            except GcsDriveError as exc:
                self._report_error(project.project_id, exc)
                continue
            for bucket in buckets:
                catalog.add(bucket, project.project_id)

        logger.debug("Loaded catalog of %d buckets", len(catalog))
        return catalog

    def _bucket_exists(self, name: str) -> bool:
        catalog = self._cache.known_catalog()
        if catalog is not None and name in catalog:
            return True
        try:
            bucket = self._controller.find_bucket(name)
        except PermissionError:
            logger.debug("Bucket %s exists but is not accessible", name)
            return False
        if bucket is None:
            return False
        if catalog is not None:
            catalog.add(bucket)
        return True

    def _get_bucket(self, name: str) -> BucketInfo:
        catalog = self._cache.known_catalog()
        if catalog is not None:
            bucket = catalog.get(name)
            if bucket is not None:
                return bucket
        bucket = self._controller.get_bucket(name)
        if catalog is not None:
            catalog.add(bucket)
        return bucket

    def _new_bucket(self, name: str, opts: NewBucketOptions) -> BucketInfo:
        project = (
            opts.project
            or self._settings.default_project
            or getattr(self._controller, "default_project", None)
        )
        if not project:
            raise InvalidArgumentError(
                "No project given for the new bucket and no default project is configured",
                details={"bucket": name},
            )

        bucket = self._controller.insert_bucket(
            project,
            name,
            location=opts.location,
            storage_class=opts.storage_class,
            predefined_acl=opts.default_bucket_acl,
            predefined_default_object_acl=opts.default_object_acl,
        )
        catalog = self._cache.known_catalog()
        if catalog is not None:
            catalog.add(bucket, project)
        logger.info("Created bucket %s in project %s", name, project)
        return bucket

    def _remove_bucket(self, name: str, recurse: bool) -> None:
        try:
            self._controller.delete_bucket(name)
            logger.info("Deleted bucket %s", name)
            return
        except ConflictError:
            if not recurse:
                raise
            logger.info("Bucket %s is not empty; deleting its objects", name)

        failures = self._delete_all_objects(name)
        try:
            self._controller.delete_bucket(name)
        except ConflictError as exc:
            raise ConflictError(
                f"Bucket {name} is still not empty",
                details={**exc.details, "failed_objects": sorted(failures)},
                cause=exc,
            ) from exc
        logger.info("Deleted bucket %s", name)

    def _delete_all_objects(self, bucket: str) -> dict[str, GcsDriveError]:
        names: list[str] = []
        for page in self._controller.iter_object_pages(bucket, should_stop=lambda: self._stopping):
            page_names = [item.name for item in page.items]
            if not page_names:
                continue
            query = f"Delete {len(page_names)} objects from bucket {bucket}?"
            if self._confirmation.should_continue(query, "Remove-Item"):
                names.extend(page_names)
            elif self._confirmation.refused_all:
                break

        total = len(names)
        done = 0

        def _on_complete(name: str, error: Optional[GcsDriveError]) -> None:
            nonlocal done
            done += 1
            self._report_progress(
                ProgressRecord(_DELETE_ACTIVITY, f"Deleted {done} of {total}", done * 100 // total)
            )

        failures = self._controller.delete_objects(bucket, names, on_complete=_on_complete)
        self._report_progress(
            ProgressRecord(_DELETE_ACTIVITY, f"Deleted {total - len(failures)} of {total}", 100, "completed")
        )
        for name, error in failures.items():
            self._report_error(f"gs://{bucket}/{name}", error)
        return failures

    # ----------------------------
    # Objects
    # ----------------------------
    def _list_children(
        self,
        p: VirtualPath,
        *,
        recurse: bool,
        all_pages: bool = True,
    ) -> list[ObjectInfo]:
        """
        List the objects below a bucket or folder.

        The folder's own placeholder is skipped. Without `recurse`, prefixes
        come back as synthetic "Folder" records. Listed objects are fed into
        the bucket model.
        """
        prefix = p.object_path or ""
        if prefix and not prefix.endswith(SEPARATOR):
            prefix += SEPARATOR

        model = self._cache.bucket_model(p.bucket)
        children: list[ObjectInfo] = []
        for page in self._controller.iter_object_pages(
            p.bucket,
            prefix=prefix or None,
            delimiter=None if recurse else SEPARATOR,
            all_pages=all_pages,
            should_stop=lambda: self._stopping,
        ):
            for item in page.items:
                if item.name == prefix:
                    continue
                model.add_object(item)
                children.append(item)
            for folder in page.prefixes:
                children.append(
                    ObjectInfo(name=folder, bucket=p.bucket, content_type=FOLDER_CONTENT_TYPE)
                )
        return children

    def _new_object(self, p: ObjectPath, opts: NewObjectOptions, value: Any) -> ObjectInfo:
        if opts.file is not None:
            info = self._controller.upload_file(
                p.bucket,
                p.object_path,
                opts.file,
                content_type=opts.content_type or infer_content_type(opts.file),
                predefined_acl=opts.predefined_acl,
            )
        else:
            if value is None:
                data = b""
            elif isinstance(value, (bytes, bytearray)):
                data = bytes(value)
            else:
                data = str(value).encode("utf-8")
            info = self._controller.upload_object(
                p.bucket,
                p.object_path,
                data,
                content_type=opts.content_type or UTF8_TEXT_MIME,
                predefined_acl=opts.predefined_acl,
            )
        logger.info("Created gs://%s/%s", p.bucket, p.object_path)
        return info

    def _remove_folder(self, p: VirtualPath, recurse: bool) -> None:
        children = self._list_children(p, recurse=True)
        if children and not recurse:
            query = (
                f"The item at {p} has children and recurse was not specified. "
                "Removing it will remove all of its children."
            )
            if not self._confirmation.should_continue(query, "Remove-Item"):
                return

        for child in children:
            if self._stopping:
                return
            self._controller.delete_object(p.bucket, child.name)
        if self._cache.bucket_model(p.bucket).is_real(p.object_path):
            self._controller.delete_object(p.bucket, p.object_path)
        logger.info("Deleted folder gs://%s (%d objects below it)", p, len(children))

    # ----------------------------
    # Internals
    # ----------------------------
    def _resolve_options(self, p: VirtualPath, options: Optional[NewItemOptions]) -> Any:
        expected = options_for_new_item(p)
        if options is None:
            return expected()
        if not isinstance(options, expected):
            raise InvalidArgumentError(
                f"{p.type.value} paths take {expected.__name__}, not {type(options).__name__}",
                details={"path": str(p)},
            )
        return options

    def _require_object_path(self, path: str, action: str) -> ObjectPath:
        p = parse(path)
        if p.type is not PathType.OBJECT:
            raise InvalidOperationError(f"Can not {action} a {p.type.value.lower()}")
        return p

    def _report_error(self, target: str, error: GcsDriveError) -> None:
        logger.warning("%s: %s", target, error)
        self.error_records.append(ErrorRecord(target, error))

    def _report_progress(self, record: ProgressRecord) -> None:
        if self._on_progress is not None:
            self._on_progress(record)
