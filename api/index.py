import base64
from datetime import datetime
from functools import lru_cache
from io import BytesIO
import logging
import os

from fastapi import FastAPI, File, HTTPException, Request, Response, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

from drink_points.catalog import ProductCatalog
from drink_points.core import CaptureResult, classify_with_metadata, score_capture
from drink_points.exceptions import AuthenticationError, ImageError, RateLimitError
from drink_points.intake import IntakeConfig, IntakeError
from drink_points.rules import BadgeEngine, grant_badges
from drink_points.stats import RecordSummary, UserStatsSnapshot

app = FastAPI(title="drink-points API", version="1.0.0")
logger = logging.getLogger(__name__)

raw_origins = os.getenv("FRONTEND_ORIGINS", "*")
allow_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))
ALLOWED_MIME_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}
CATALOG_VERSION = os.getenv("CATALOG_VERSION", "v1")
INTAKE_CONFIG = IntakeConfig.from_env()
BADGE_ENGINE = BadgeEngine()

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


class AnalyzeRequest(BaseModel):
    imageBase64: str


class ScoreRequest(BaseModel):
    brandName: str | None = None
    category: str | None = None
    volumeMl: float | None = None
    quantity: float | None = None
    confidence: float | None = None
    isTargetBrand: bool | None = None


class ObservationResponse(BaseModel):
    brandName: str
    category: str
    volumeMl: int
    quantity: int
    confidence: float
    isTargetBrand: bool


class AwardResponse(BaseModel):
    basePoints: int
    categoryMultiplier: float
    volumeBonus: float
    confidenceBonus: float
    quantity: int
    finalPoints: int


class AnalyzeMetadata(BaseModel):
    provider: str | None = None
    model: str | None = None


class ScoreResponse(BaseModel):
    observation: ObservationResponse
    award: AwardResponse
    points: int
    characterId: str | None = None
    warnings: list[str] = Field(default_factory=list)


class AnalyzeResponse(ScoreResponse):
    errorMessage: str | None = None
    metadata: AnalyzeMetadata


class RecordRequest(BaseModel):
    category: str
    hour: int = Field(ge=0, le=23)
    brandName: str | None = None


class StatsRequest(BaseModel):
    totalPoints: int = 0
    totalConsumptions: int = 0
    consecutiveDays: int = 0
    uniqueProductCount: int = 0
    totalVolumeMl: int = 0
    daysSinceJoined: int = 0
    weeklyRank: int | None = None
    monthlyRank: int | None = None
    favoriteCategory: str | None = None
    recentRecords: list[RecordRequest] = Field(default_factory=list)

    def to_snapshot(self) -> UserStatsSnapshot:
        return UserStatsSnapshot(
            total_points=self.totalPoints,
            total_consumptions=self.totalConsumptions,
            consecutive_days=self.consecutiveDays,
            unique_product_count=self.uniqueProductCount,
            total_volume_ml=self.totalVolumeMl,
            days_since_joined=self.daysSinceJoined,
            weekly_rank=self.weeklyRank,
            monthly_rank=self.monthlyRank,
            favorite_category=self.favoriteCategory,
            recent_records=[
                RecordSummary(category=record.category, hour=record.hour, brand_name=record.brandName)
                for record in self.recentRecords
            ],
        )


class BadgeEvaluationRequest(BaseModel):
    stats: StatsRequest
    alreadyHeld: list[str] = Field(default_factory=list)


class GrantResponse(BaseModel):
    badgeId: str
    earnedAt: datetime


class BadgeEvaluationResponse(BaseModel):
    newBadges: list[str]
    grants: list[GrantResponse]


class BadgeOption(BaseModel):
    id: str
    name: str
    nameJa: str
    description: str
    icon: str


class ProductOption(BaseModel):
    brandName: str
    category: str


class CatalogProductsResponse(BaseModel):
    version: str
    total: int
    products: list[ProductOption]


@lru_cache(maxsize=8)
def _load_catalog(version: str) -> ProductCatalog:
    return ProductCatalog(version=version)


def _validate_payload_size(payload: bytes) -> None:
    if len(payload) > MAX_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="image too large")


def _validate_multipart_content_type(content_type: str | None) -> None:
    if not content_type:
        raise HTTPException(status_code=400, detail="image file is required")
    normalized = content_type.split(";")[0].strip().lower()
    if normalized not in ALLOWED_MIME_TYPES:
        raise HTTPException(status_code=400, detail="unsupported image content type")


def _decode_base64_image(image_base64: str) -> bytes:
    value = image_base64.strip()
    if not value:
        raise HTTPException(status_code=400, detail="imageBase64 is required")

    # Support data URL format: data:image/jpeg;base64,<payload>
    if value.startswith("data:"):
        _, sep, value = value.partition(",")
        if not sep:
            raise HTTPException(status_code=400, detail="invalid imageBase64 data URL")

    try:
        payload = base64.b64decode(value, validate=True)
    except Exception as exc:
        raise HTTPException(status_code=400, detail="invalid imageBase64 encoding") from exc

    if not payload:
        raise HTTPException(status_code=400, detail="empty file")
    _validate_payload_size(payload)

    return payload


def _score_response(result: CaptureResult) -> dict:
    observation = result.observation
    award = result.award
    return {
        "observation": ObservationResponse(
            brandName=observation.brand_name,
            category=observation.category,
            volumeMl=observation.volume_ml,
            quantity=observation.quantity,
            confidence=observation.confidence,
            isTargetBrand=observation.is_target_brand,
        ),
        "award": AwardResponse(
            basePoints=award.base_points,
            categoryMultiplier=award.category_multiplier,
            volumeBonus=award.volume_bonus,
            confidenceBonus=award.confidence_bonus,
            quantity=award.quantity,
            finalPoints=award.final_points,
        ),
        "points": award.final_points,
        "characterId": result.character_id,
        "warnings": observation.warnings,
    }


@app.exception_handler(RequestValidationError)
async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    # 422 is reserved for drinks the classifier could not identify.
    return JSONResponse(
        status_code=400,
        content={"detail": "invalid_request", "errors": jsonable_encoder(exc.errors())},
    )


def _score_or_422(raw: object) -> CaptureResult:
    outcome = score_capture(raw, intake_config=INTAKE_CONFIG, catalog=_load_catalog(CATALOG_VERSION))
    if isinstance(outcome, IntakeError):
        # Clients fall back to manual product selection on this status.
        raise HTTPException(status_code=422, detail=outcome.code)
    return outcome


@app.get("/catalog/{version}/products", response_model=CatalogProductsResponse)
def catalog_products(version: str, response: Response) -> CatalogProductsResponse:
    try:
        catalog = _load_catalog(version)
    except Exception as exc:
        raise HTTPException(status_code=404, detail=f"catalog version not found: {version}") from exc

    products = [
        ProductOption(brandName=product.brand_name, category=product.category)
        for product in catalog.active_products()
    ]
    response.headers["Cache-Control"] = "public, max-age=86400"
    return CatalogProductsResponse(version=version, total=len(products), products=products)


@app.get("/badges", response_model=list[BadgeOption])
def badge_definitions(response: Response) -> list[BadgeOption]:
    response.headers["Cache-Control"] = "public, max-age=86400"
    return [
        BadgeOption(
            id=definition.id,
            name=definition.name,
            nameJa=definition.name_ja,
            description=definition.description,
            icon=definition.icon,
        )
        for definition in BADGE_ENGINE.definitions
    ]


@app.post("/badges/evaluate", response_model=BadgeEvaluationResponse)
def evaluate_badges(body: BadgeEvaluationRequest) -> BadgeEvaluationResponse:
    new_badges = BADGE_ENGINE.evaluate(body.stats.to_snapshot(), body.alreadyHeld)
    grants = [GrantResponse(badgeId=grant.badge_id, earnedAt=grant.earned_at) for grant in grant_badges(new_badges)]
    return BadgeEvaluationResponse(newBadges=new_badges, grants=grants)


@app.post("/score", response_model=ScoreResponse)
def score(body: ScoreRequest) -> ScoreResponse:
    result = _score_or_422(body.model_dump(exclude_none=True))
    return ScoreResponse(**_score_response(result))


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze(request: Request, image: UploadFile | None = File(default=None)) -> AnalyzeResponse:
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = AnalyzeRequest.model_validate(await request.json())
        except Exception as exc:
            raise HTTPException(status_code=400, detail="imageBase64 is required in JSON body") from exc
        payload = _decode_base64_image(body.imageBase64)
    else:
        if image is None:
            raise HTTPException(status_code=400, detail="image file is required")
        _validate_multipart_content_type(image.content_type)
        payload = await image.read()
        if not payload:
            raise HTTPException(status_code=400, detail="empty file")
        _validate_payload_size(payload)

    try:
        pil_image = Image.open(BytesIO(payload))
        classification, metadata = classify_with_metadata(pil_image)
    except UnidentifiedImageError as exc:
        raise HTTPException(status_code=400, detail="invalid image format") from exc
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except RateLimitError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    except ImageError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("analyze failed")
        raise HTTPException(status_code=500, detail="internal_error") from exc

    result = _score_or_422(classification)
    return AnalyzeResponse(
        **_score_response(result),
        errorMessage=classification.error_message,
        metadata=AnalyzeMetadata(provider=metadata.get("provider"), model=metadata.get("model")),
    )
