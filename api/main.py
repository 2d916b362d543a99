"""FastAPI application."""
from datetime import datetime, timezone
from typing import Callable, List, Optional
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger

from config.settings import settings  # This will trigger logger setup via config.__init__
from exceptions import NotFoundError, StoreError, ValidationError
from storage.models import University
from storage.neo4j_store import UniversityStore
from services.analytics_service import AnalyticsService
from services.query_service import UniversityQueryService
from services.seed_service import SeedService

# Initialize FastAPI app
app = FastAPI(
    title="World Universities Directory API",
    description="Browse, search and aggregate the world universities dataset",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter(prefix="/api")
analytics_router = APIRouter(prefix="/api/analytics")


@app.on_event("startup")
async def startup_event():
    """Connect to Neo4j, seed an empty database and build the services."""
    logger.info("Initializing services...")
    
    try:
        store = UniversityStore()
        store.verify_connectivity()
        store.ensure_indexes()
        
        if settings.seed_on_startup:
            SeedService(store).ensure_seeded()
        
        app.state.store = store
        app.state.query_service = UniversityQueryService(store)
        app.state.analytics_service = AnalyticsService(store)
        
        logger.info(f"Server ready on http://{settings.api_host}:{settings.api_port}/api")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    store = getattr(app.state, "store", None)
    if store:
        store.close()
    logger.info("Services shut down")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}: {exc!r}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def get_store(request: Request) -> Optional[UniversityStore]:
    return getattr(request.app.state, "store", None)


def get_query_service(request: Request) -> UniversityQueryService:
    service = getattr(request.app.state, "query_service", None)
    if service is None:
        raise HTTPException(status_code=500, detail="Query service not initialized")
    return service


def get_analytics_service(request: Request) -> AnalyticsService:
    service = getattr(request.app.state, "analytics_service", None)
    if service is None:
        raise HTTPException(status_code=500, detail="Analytics service not initialized")
    return service


def _serve(operation: Callable, failure_message: str, *args, **kwargs):
    """Run a service call, mapping service errors onto HTTP errors."""
    try:
        return operation(*args, **kwargs)
    except (ValidationError, NotFoundError) as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except StoreError as e:
        logger.error(f"{failure_message}: {e!r}")
        raise HTTPException(status_code=500, detail=failure_message)
    except Exception as e:
        logger.exception(f"{failure_message}: {e!r}")
        raise HTTPException(status_code=500, detail=failure_message)


@app.get("/")
def root():
    """Service banner."""
    return {"status": "ok", "message": "World Universities Directory API"}


@app.get("/health")
def health_check(store: Optional[UniversityStore] = Depends(get_store)):
    """Liveness with a timestamp and database connectivity."""
    health = {
        "status": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "neo4j": "unknown",
    }
    
    if store:
        try:
            store.verify_connectivity()
            health["neo4j"] = "connected"
        except StoreError as e:
            health["neo4j"] = f"error: {e}"
    
    return health


# University browsing

@router.get("/countries", response_model=List[str])
def get_countries(service: UniversityQueryService = Depends(get_query_service)):
    """All countries, sorted."""
    return _serve(service.list_countries, "Failed to fetch countries")


@router.get("/provinces/{country}", response_model=List[str])
def get_provinces(country: str, service: UniversityQueryService = Depends(get_query_service)):
    """Provinces of a country, sorted."""
    return _serve(service.list_provinces, "Failed to fetch provinces", country)


@router.get("/universities", response_model=List[University])
def get_universities(
    country: Optional[str] = None,
    province: Optional[str] = None,
    service: UniversityQueryService = Depends(get_query_service),
):
    """Universities filtered by country and/or province."""
    return _serve(
        service.list_universities,
        "Failed to fetch universities",
        country=country,
        province=province,
    )


@router.get("/university/{name:path}", response_model=University)
def get_university_by_name(name: str, service: UniversityQueryService = Depends(get_query_service)):
    """A single university by exact name."""
    return _serve(service.get_university_by_name, "Failed to fetch university", name)


@router.get("/search", response_model=List[University])
def search_universities(
    q: Optional[str] = None,
    service: UniversityQueryService = Depends(get_query_service),
):
    """Universities whose name contains q."""
    return _serve(service.search_universities, "Failed to search universities", q)


# Analytics

@analytics_router.get("/stats")
def get_stats(service: AnalyticsService = Depends(get_analytics_service)):
    """Overall totals."""
    return _serve(service.get_overview_stats, "Failed to fetch statistics")


@analytics_router.get("/universities-by-country")
def get_universities_by_country(
    limit: int = Query(30),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Universities per country, largest first."""
    return _serve(service.get_counts_by_country, "Failed to fetch universities by country", limit)


@analytics_router.get("/top-countries")
def get_top_countries(
    limit: int = Query(15),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """The countries with the most universities."""
    return _serve(service.get_counts_by_country, "Failed to fetch top countries", limit)


@analytics_router.get("/country/{country}")
def get_country_details(country: str, service: AnalyticsService = Depends(get_analytics_service)):
    """Country total with its province split."""
    return _serve(service.get_country_detail, "Failed to fetch country details", country)


@analytics_router.get("/region-distribution")
def get_region_distribution(service: AnalyticsService = Depends(get_analytics_service)):
    """Spread of university counts across countries."""
    return _serve(service.get_country_distribution, "Failed to fetch distribution")


@analytics_router.get("/website-stats")
def get_website_stats(service: AnalyticsService = Depends(get_analytics_service)):
    """Universities with and without a web page."""
    return _serve(service.get_website_presence, "Failed to fetch website stats")


@analytics_router.get("/provinces/{country}")
def get_province_stats(country: str, service: AnalyticsService = Depends(get_analytics_service)):
    """Province counts and universities of a country."""
    return _serve(service.get_province_breakdown, "Failed to fetch country data", country)


app.include_router(router)
app.include_router(analytics_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
