from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from drkleen.auth.dependencies import require_api_key
from drkleen.config import settings
from drkleen.errors import ApiError, ErrorCode

# Init app
app = FastAPI(
    title="Dr. Kleen Back Office API",
    version="1.0.0",
    description="Admin accounts, back-office content and public catalog for the Dr. Kleen website",
    debug=settings.DEBUG,
)

# Enable logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    max_age=86400,
)


def error_response(status_code: int, code: ErrorCode, message: str, **details) -> JSONResponse:
    body = {"code": code.value, "message": message}
    body.update({k: v for k, v in details.items() if v is not None})
    return JSONResponse(status_code=status_code, content={"error": body})


# Exception handlers
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code.value} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems[field or "body"] = err.get("msg")
    return error_response(400, ErrorCode.VALIDATION_ERROR, "Invalid request data", details=problems)


@app.exception_handler(404)
async def not_found_handler(request: Request, exc: Exception):
    return error_response(404, ErrorCode.NOT_FOUND, "Endpoint not found")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, ErrorCode.INTERNAL_SERVER_ERROR, "Internal server error")


# Route Registrations
from drkleen.routes import (
    admin_auth_router,
    admin_register_router,
    admin_management_router,
    admin_data_router,
    admin_inquiries_router,
    bookings_router,
    public_router,
    email_display_router,
    admin_emails_router,
    health_router,
)

routers = [
    admin_auth_router,
    admin_register_router,
    admin_management_router,
    admin_data_router,
    admin_inquiries_router,
    bookings_router,
    public_router,
    email_display_router,
    admin_emails_router,
]

for router in routers:
    app.include_router(router, dependencies=[Depends(require_api_key)])
    logger.info(f"Included router: {router.prefix or '/'}")

app.include_router(health_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "status": "ok",
        "message": "Welcome to the Dr. Kleen Back Office API",
        "version": app.version,
        "docs": "/docs",
        "endpoints": [
            "/admin-auth/* - Admin login, session check and first-admin setup",
            "/admin-register/* - Registration and email verification",
            "/admin-management/* - Admin accounts, settings and catalog",
            "/admin-data/* - Dashboard and back-office tables",
            "/admin-inquiries - Contact inquiries",
            "/bookings-api - Bookings",
            "/products-api, /services-api, /banners-api, /testimonials-api - Public catalog",
            "/admin-emails - Stage a verification or welcome email",
            "/email-display - Stored outbound messages",
            "/health - System health check",
        ],
    }


@app.on_event("startup")
async def startup_event():
    logger.info("Dr. Kleen Back Office API starting up...")
    logger.info(f"Row store: {settings.STORE_URL or '(not configured)'}")
    logger.info(f"Admin cap: {settings.MAX_ADMIN_USERS}")
    logger.info(f"CORS enabled for origins: {settings.cors_origins}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Dr. Kleen Back Office API shutting down...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "drkleen.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )
