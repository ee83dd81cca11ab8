import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resume_analyzer.routers.analyze import ERROR_KIND_HEADER, GENERIC_ERROR, get_settings
from resume_analyzer.routers.analyze import router as analyze_router

# Load environment variables
load_dotenv()

settings = get_settings()

# Logging
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger("uvicorn.error")

# Create FastAPI app
app = FastAPI(
    title="AI Resume Analyzer",
    description="Resume-to-job suitability scoring with Gemini",
    version="0.1.0",
    redoc_url="/redoc",
    docs_url="/docs",
)

app.include_router(analyze_router)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_ERROR},
        headers={ERROR_KIND_HEADER: "internal"},
    )


# Root endpoint
@app.get("/")
def read_root():
    return {"message": "Welcome to AI Resume Analyzer"}


# Local run entrypoint
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("resume_analyzer.server:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
