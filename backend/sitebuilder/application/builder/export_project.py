# sitebuilder/application/builder/export_project.py
import logging
from typing import Any, Dict, Tuple

from sitebuilder.codegen import generate
from sitebuilder.domain.document import Project
from sitebuilder.domain.errors import ValidationError
from sitebuilder.utils.archive import archive_filename, build_archive

logger = logging.getLogger(__name__)


def export_archive(
    *,
    data: Dict[str, Any],
    compression_level: int = 9,
) -> Tuple[str, bytes]:
    """
    Compile a project and package the artifacts as a zip.

    Returns (download filename, archive bytes). The project is validated by
    the generator; nothing is read from or written to the store.
    """
    if not isinstance(data, dict) or not data.get("name") or not isinstance(data.get("pages"), list):
        raise ValidationError("Invalid project data")

    project = Project.from_dict(data)
    artifacts = generate(project)
    archive = build_archive(artifacts, compression_level=compression_level)

    logger.info("exported project %s: %d files, %d bytes", project.id, len(artifacts), len(archive))
    return archive_filename(project.name), archive
