"""FastAPI dependency injection functions."""

from fastapi import HTTPException, Request, status

from insights_service.application.usecases.extract_insight import DocumentInsightExtractor


async def get_extractor(request: Request) -> DocumentInsightExtractor:
    """Get the insight extractor from app state.

    Raises:
        HTTPException: 503 if the extractor could not be built at startup
    """
    extractor = getattr(request.app.state, "extractor", None)

    if extractor is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Insight extractor unavailable",
        )

    return extractor
