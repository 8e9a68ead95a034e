"""
Three-stage artifact pipeline.

1. Package the device descriptor into ``firststp/<name>/fixedfile``.
2. Put the stage-1 URL into the first dump and materialize it into
   ``2ndd/<name>/belliloveu.png``.
3. Put the stage-2 URL and the guid into the second dump and materialize it
   into ``last/<name>/apllefuckedhhh.png``.

Each stage works in its own randomly named directory. A failing stage aborts
the run; directories of earlier stages stay on disk until the retention sweep
removes them.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from stager.core.config import Settings
from stager.core.descriptor import (
    ResolvedDescriptor,
    normalize_product_id,
    package_descriptor,
    resolve_descriptor,
)
from stager.core.errors import MissingParameterError
from stager.core.naming import NameGenerator, TokenNameGenerator
from stager.engines.sql import DumpTemplate, SQLMaterializer, SQLTemplateEngine, get_storage_engine

logger = logging.getLogger(__name__)

_MKDIR_ATTEMPTS = 3


@dataclass
class StageArtifact:
    stage: str
    name: str
    url: str
    path: Path


@dataclass
class GenerationResult:
    product_id: str
    guid: str
    serial: str
    descriptor: ResolvedDescriptor
    artifacts: list[StageArtifact] = field(default_factory=list)

    @property
    def links(self) -> dict[str, str]:
        return {a.stage: a.url for a in self.artifacts}

    @property
    def paths(self) -> dict[str, str]:
        return {a.stage: str(a.path) for a in self.artifacts}


class ArtifactGenerator:
    """
    generate(product_id, guid, serial, *, base_url=None) -> GenerationResult

    Collaborators are injected; ``from_settings`` wires the defaults.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        name_generator: NameGenerator,
        materializer: SQLMaterializer,
        template_engine: SQLTemplateEngine | None = None,
    ) -> None:
        self.settings = settings
        self.name_generator = name_generator
        self.materializer = materializer
        self.template_engine = template_engine or SQLTemplateEngine()
        self.first_dump = DumpTemplate(
            name="stage2",
            filename=settings.STAGE2_TEMPLATE,
            tokens=(settings.KEY_PLACEHOLDER,),
        )
        self.second_dump = DumpTemplate(
            name="stage3",
            filename=settings.STAGE3_TEMPLATE,
            tokens=(settings.SENTINEL_URL, settings.SENTINEL_KEY),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArtifactGenerator":
        return cls(
            settings,
            name_generator=TokenNameGenerator(settings.RANDOM_NAME_LENGTH),
            materializer=SQLMaterializer(
                get_storage_engine(settings), encoding=settings.TEMPLATE_ENCODING
            ),
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def generate(
        self,
        product_id: str | None,
        guid: str | None,
        serial: str | None,
        *,
        base_url: str | None = None,
    ) -> GenerationResult:
        if not (product_id and product_id.strip()) or not (guid and guid.strip()) or not (
            serial and serial.strip()
        ):
            logger.error(
                "Missing params: productId=%r, guid=%r, serial=%r", product_id, guid, serial
            )
            raise MissingParameterError(
                "Error: Missing required parameters (productId, guid, serial)"
            )

        base = (base_url or self.settings.public_base_url).rstrip("/")
        logger.info("=== Starting artifact generation for %s ===", product_id)

        descriptor = resolve_descriptor(
            self.settings,
            normalize_product_id(product_id, self.settings.PRODUCT_ID_SEPARATORS),
        )
        result = GenerationResult(
            product_id=product_id, guid=guid, serial=serial, descriptor=descriptor
        )

        stage1 = self._package_stage(descriptor, base)
        result.artifacts.append(stage1)

        stage2 = self._database_stage(
            "stage2",
            self.first_dump,
            (stage1.url,),
            database=self.settings.STAGE2_DATABASE,
            output=self.settings.STAGE2_OUTPUT,
            base_url=base,
        )
        result.artifacts.append(stage2)

        stage3 = self._database_stage(
            "stage3",
            self.second_dump,
            (stage2.url, guid),
            database=self.settings.STAGE3_DATABASE,
            output=self.settings.STAGE3_OUTPUT,
            base_url=base,
        )
        result.artifacts.append(stage3)

        logger.info("All stages generated for %s", product_id)
        return result

    def _package_stage(self, descriptor: ResolvedDescriptor, base_url: str) -> StageArtifact:
        logger.info("Starting stage1")
        prefix = self.settings.stage_dirs["stage1"]
        name, stage_dir = self._make_stage_dir(prefix)
        with self._in_progress(stage_dir):
            path = package_descriptor(descriptor.real_path, stage_dir, self.settings)
        artifact = StageArtifact(
            stage="stage1",
            name=name,
            url=f"{base_url}/{prefix}/{name}/{path.name}",
            path=path,
        )
        logger.info("stage1 created: %s", artifact.path)
        return artifact

    def _database_stage(
        self,
        stage: str,
        template: DumpTemplate,
        values: tuple[str, ...],
        *,
        database: str,
        output: str,
        base_url: str,
    ) -> StageArtifact:
        logger.info("Starting %s", stage)
        text = template.read(self.settings.BASE_PATH, self.settings.TEMPLATE_ENCODING)
        sql = self.template_engine.render(text, template.bind(*values))

        prefix = self.settings.stage_dirs[stage]
        name, stage_dir = self._make_stage_dir(prefix)
        with self._in_progress(stage_dir):
            db_path = stage_dir / database
            self.materializer.materialize(sql, db_path)
            final = stage_dir / output
            db_path.replace(final)
        artifact = StageArtifact(
            stage=stage,
            name=name,
            url=f"{base_url}/{prefix}/{name}/{output}",
            path=final,
        )
        logger.info("%s created: %s", stage, artifact.path)
        return artifact

    # ------------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------------

    def _make_stage_dir(self, prefix: str) -> tuple[str, Path]:
        root = self.settings.BASE_PATH / prefix
        root.mkdir(parents=True, exist_ok=True)
        attempt = 0
        while True:
            attempt += 1
            name = self.name_generator()
            stage_dir = root / name
            try:
                stage_dir.mkdir(mode=0o755)
            except FileExistsError:
                if attempt >= _MKDIR_ATTEMPTS:
                    raise
                logger.warning("Directory name collision on %s, drawing a new name", stage_dir)
                continue
            return name, stage_dir

    @contextmanager
    def _in_progress(self, stage_dir: Path) -> Iterator[None]:
        """Hold the in-progress marker in *stage_dir* so the sweeper leaves it alone."""
        marker = stage_dir / self.settings.IN_PROGRESS_MARKER
        marker.touch()
        try:
            yield
        finally:
            marker.unlink(missing_ok=True)
