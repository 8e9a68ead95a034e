"""
Device descriptor lookup and stage-1 packaging.
"""

import logging
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path

from stager.core.config import Settings
from stager.core.errors import DescriptorNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedDescriptor:
    path: Path
    real_path: Path
    size: int


def normalize_product_id(product_id: str, separators: str = ",") -> str:
    """Replace every separator character with a dash (``iPhone12,1`` -> ``iPhone12-1``)."""
    return product_id.translate({ord(c): "-" for c in separators})


def candidate_paths(settings: Settings, product_id: str) -> list[Path]:
    """Primary path first, then the alternate base, then the document root."""
    rel = Path(settings.DESCRIPTOR_DIR) / product_id / settings.DESCRIPTOR_FILENAME
    return [
        settings.BASE_PATH / rel,
        settings.alt_base_path / rel,
        Path(settings.DOCUMENT_ROOT) / settings.DOCUMENT_ROOT_SUBDIR / rel,
    ]


def resolve_descriptor(settings: Settings, product_id: str) -> ResolvedDescriptor:
    candidates = candidate_paths(settings, product_id)
    for path in candidates:
        logger.debug("Trying descriptor: %s", path)
        if path.is_file():
            real = path.resolve()
            size = real.stat().st_size
            logger.info("Using descriptor: %s (size: %d bytes)", real, size)
            return ResolvedDescriptor(path=path, real_path=real, size=size)

    tried = [str(p) for p in candidates]
    logger.error("Descriptor not found. Tried: %s", ", ".join(tried))
    lines = "\n".join(f"{i}. {p}" for i, p in enumerate(tried, start=1))
    raise DescriptorNotFoundError(
        "Error: Plist file not found. Tried:\n"
        f"{lines}\n"
        f"Base Dir: {settings.BASE_PATH}\n"
        f"Document Root: {settings.DOCUMENT_ROOT or 'Not set'}",
        tried=tried,
    )


def package_descriptor(descriptor: Path, stage_dir: Path, settings: Settings) -> Path:
    """
    Build ``<stage_dir>/<STAGE1_OUTPUT>`` holding the descriptor under the scratch dir.

    The descriptor is copied into ``<stage_dir>/<STAGE1_SCRATCH_DIR>/``, that
    directory is zipped into ``STAGE1_ARCHIVE`` (optionally led by a stored
    ``mimetype`` entry, as EPUB readers require), the scratch directory is
    removed and the archive renamed to the fixed output name.
    """
    scratch = stage_dir / settings.STAGE1_SCRATCH_DIR
    scratch.mkdir(mode=0o755, exist_ok=True)
    shutil.copyfile(descriptor, scratch / settings.DESCRIPTOR_FILENAME)

    archive = stage_dir / settings.STAGE1_ARCHIVE
    with zipfile.ZipFile(archive, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        if settings.STAGE1_MIMETYPE:
            zf.writestr("mimetype", settings.STAGE1_MIMETYPE, compress_type=zipfile.ZIP_STORED)
        for path in sorted(p for p in scratch.rglob("*") if p.is_file()):
            zf.write(path, arcname=path.relative_to(stage_dir).as_posix())

    shutil.rmtree(scratch)
    output = stage_dir / settings.STAGE1_OUTPUT
    archive.replace(output)
    return output
