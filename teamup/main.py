# ========================================
# teamup/main.py
# ========================================

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from teamup.config import ALLOWED_ORIGINS
from teamup.database import connect_to_mongo, close_mongo_connection, get_db
from teamup.utils.errors import register_exception_handlers
from teamup.utils.logging import configure_logging

# ===========================
# IMPORT ALL ROUTERS
# ===========================

# Identity
from teamup.routes.auth import router as auth_router
from teamup.routes.user import router as user_router

# Projects & Applications
from teamup.routes.project import router as project_router
from teamup.routes.application import router as application_router

# Social
from teamup.routes.post import router as post_router
from teamup.routes.comment import router as comment_router

# Moderation
from teamup.routes.report import router as report_router

configure_logging()
logger = structlog.get_logger()

# ===========================
# CREATE FASTAPI APP
# ===========================

app = FastAPI(
    title="TeamUp API",
    description="Project collaboration backend: projects with role slots, applications, posts and moderation",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# ===========================
# CORS MIDDLEWARE
# ===========================
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# ===========================
# DATABASE EVENTS
# ===========================

@app.on_event("startup")
async def start_db():
    """Connect to MongoDB on startup"""
    logger.info("starting_teamup_api", version=app.version)
    await connect_to_mongo()

@app.on_event("shutdown")
async def stop_db():
    """Close MongoDB connection on shutdown"""
    await close_mongo_connection()

# ===========================
# REGISTER ROUTERS
# ===========================

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(project_router)
app.include_router(application_router)
app.include_router(post_router)
app.include_router(comment_router)
app.include_router(report_router)

# ===========================
# ROOT ENDPOINTS
# ===========================

@app.get("/")
async def root():
    """API root endpoint with feature summary"""
    return {
        "status": "TeamUp API Running",
        "version": app.version,
        "documentation": "/docs",
        "endpoints": {
            "auth": ["/auth/register", "/auth/login", "/auth/token-refresh", "/auth/logout"],
            "users": ["/users/profile"],
            "projects": [
                "/projects",
                "/projects/my-projects",
                "/projects/{project_id}",
                "/projects/{project_id}/slots",
                "/projects/{project_id}/slots/{slot_id}"
            ],
            "applications": [
                "/applications/apply",
                "/applications/my-applications",
                "/applications/cancel/{application_id}",
                "/applications/{project_id}",
                "/applications/accept/{application_id}",
                "/applications/reject/{application_id}"
            ],
            "posts": ["/posts", "/posts/{post_id}", "/posts/user/{user_id}", "/posts/{post_id}/like"],
            "comments": ["/comments", "/comments/post/{post_id}", "/comments/{comment_id}", "/comments/{comment_id}/like"],
            "reports": [
                "/reports",
                "/reports/my-reports",
                "/reports/admin",
                "/reports/{report_id}",
                "/reports/cancel/{report_id}",
                "/reports/resolve/{report_id}",
                "/reports/reject/{report_id}"
            ]
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    db = get_db()
    return {
        "status": "healthy",
        "database": "connected" if db is not None else "disconnected",
        "version": app.version
    }
