from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import time
import uvicorn

from star_registry.api.v1.ledger import router as ledger_router
from star_registry.lifespan import lifespan
from star_registry.utils import config

app = FastAPI(
   title="Star Registry API",
   version="1.0.0",
   description="Private blockchain notary for star ownership",
   docs_url="/docs",
   redoc_url="/redoc",
   openapi_url="/api/v1/openapi.json",
   lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # В production укажите конкретные домены
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Роутеры v1 с префиксом /api/v1
app.include_router(ledger_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Корневой эндпоинт с информацией о сервисе"""
    return {
        "service": "Star Registry",
        "version": "1.0.0",
        "api_version": "v1",
        "endpoints": {
            "v1_docs": "/docs",
            "v1_openapi": "/api/v1/openapi.json",
            "height": "/api/v1/height",
            "request_validation": "/api/v1/requestValidation",
            "submit_star": "/api/v1/submitstar",
            "validate_chain": "/api/v1/validateChain"
        }
    }


@app.get("/health")
async def health():
    """Базовая проверка здоровья сервиса"""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "service": "star-registry-api",
        "version": "1.0.0"
    }


def run():
    """Запуск API сервера (точка входа star-registry)"""
    settings = config.settings
    uvicorn.run(
        "star_registry.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
