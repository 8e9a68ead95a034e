"""
Response schemas for the public API.
"""

from pydantic import BaseModel, ConfigDict, Field

from stager.core.generator import GenerationResult
from stager.core.retention import SweepReport


class GenerateParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(serialization_alias="productId")
    guid: str
    serial: str


class StageLinks(BaseModel):
    stage1: str
    stage2: str
    stage3: str


class DescriptorDebug(BaseModel):
    descriptor_path: str
    descriptor_size: int


class GenerateResponse(BaseModel):
    success: bool = True
    parameters: GenerateParameters
    links: StageLinks
    paths: StageLinks
    debug: DescriptorDebug | None = None

    @classmethod
    def from_result(cls, result: GenerationResult, *, debug: bool = False) -> "GenerateResponse":
        return cls(
            parameters=GenerateParameters(
                product_id=result.product_id, guid=result.guid, serial=result.serial
            ),
            links=StageLinks(**result.links),
            paths=StageLinks(**result.paths),
            debug=DescriptorDebug(
                descriptor_path=str(result.descriptor.real_path),
                descriptor_size=result.descriptor.size,
            )
            if debug
            else None,
        )


# Response shape of the pre-migration /get and /get2 endpoints.


class LegacyParameters(BaseModel):
    prd: str
    guid: str
    sn: str


class LegacyLinks(BaseModel):
    step1_fixedfile: str
    step2_bldatabase: str
    step3_final: str


class LegacyPaths(BaseModel):
    step1: str
    step2: str
    step3: str


class LegacyDebug(BaseModel):
    plist_used: str
    plist_size: int


class LegacyGenerateResponse(BaseModel):
    """
    /get carries ``paths``; /get2 carries ``debug`` instead.
    """

    success: bool = True
    parameters: LegacyParameters
    links: LegacyLinks
    paths: LegacyPaths | None = None
    debug: LegacyDebug | None = None

    @classmethod
    def from_result(
        cls, result: GenerationResult, *, debug: bool = False
    ) -> "LegacyGenerateResponse":
        links, paths = result.links, result.paths
        return cls(
            parameters=LegacyParameters(prd=result.product_id, guid=result.guid, sn=result.serial),
            links=LegacyLinks(
                step1_fixedfile=links["stage1"],
                step2_bldatabase=links["stage2"],
                step3_final=links["stage3"],
            ),
            paths=None
            if debug
            else LegacyPaths(step1=paths["stage1"], step2=paths["stage2"], step3=paths["stage3"]),
            debug=LegacyDebug(
                plist_used=str(result.descriptor.real_path),
                plist_size=result.descriptor.size,
            )
            if debug
            else None,
        )


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class DeletedDirectoryOut(BaseModel):
    path: str
    age_seconds: int


class CleanupResponse(BaseModel):
    success: bool = True
    message: str = "Cleanup done"
    deleted: list[DeletedDirectoryOut] = []
    skipped: list[str] = []
    errors: list[str] = []

    @classmethod
    def from_report(cls, report: SweepReport) -> "CleanupResponse":
        return cls(
            deleted=[DeletedDirectoryOut(path=d.path, age_seconds=d.age_seconds) for d in report.deleted],
            skipped=report.skipped,
            errors=report.errors,
        )
