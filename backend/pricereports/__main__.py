import uvicorn

from pricereports.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "pricereports.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
    )
