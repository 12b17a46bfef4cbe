import time
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from plan_advisor.errors import ShapeError
from plan_advisor.log import configure_logging

from .core.config import LOG_FORMAT, LOG_LEVEL, get_cors_origins
from .core.lifespan import lifespan
from .routers import addons, comparison, health

configure_logging(LOG_LEVEL, LOG_FORMAT)
logger = structlog.get_logger()

app = FastAPI(
    title="Plan Advisor API",
    version="1.0.0",
    description="Health plan comparison and supplemental coverage recommendations",
    lifespan=lifespan,
)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    run_id = str(uuid.uuid4())
    request.state.run_id = run_id
    start = time.time()
    response = await call_next(request)
    logger.info(
        "request_completed",
        run_id=run_id,
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=int((time.time() - start) * 1000),
    )
    response.headers["X-Run-ID"] = run_id
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning("request_invalid", path=request.url.path, errors=len(details))
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


@app.exception_handler(ShapeError)
async def shape_exception_handler(request: Request, exc: ShapeError):
    logger.warning("request_shape_error", path=request.url.path, field=exc.field)
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": [{"field": exc.field, "message": str(exc)}]},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        run_id=getattr(request.state, "run_id", None),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(comparison.router)
app.include_router(addons.router)
