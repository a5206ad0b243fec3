import io
import re
import zipfile
from typing import Mapping

# Fixed entry timestamp keeps the archive bytes a function of its contents
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def archive_filename(project_name: str) -> str:
    base = re.sub(r"\s+", "-", project_name.strip()).lower()
    base = re.sub(r"[^a-z0-9._-]", "", base)
    return f"{base or 'site'}.zip"


def build_archive(artifacts: Mapping[str, str], *, compression_level: int = 9) -> bytes:
    """
    Write every artifact into a deflate-compressed zip and return its bytes.
    Entries are written in sorted path order.
    """
    buffer = io.BytesIO()

    with zipfile.ZipFile(
        buffer,
        mode="w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=compression_level,
    ) as archive:
        for path in sorted(artifacts):
            info = zipfile.ZipInfo(path, date_time=_ZIP_EPOCH)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            archive.writestr(info, artifacts[path].encode("utf-8"), compresslevel=compression_level)

    return buffer.getvalue()
