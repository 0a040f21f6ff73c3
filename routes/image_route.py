from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.image_controller import generate_image

router = APIRouter(prefix="/api")


class ImageRequest(BaseModel):
    prompt: str = ""


@router.post("/generate-image")
async def post_generate_image(request: Request, payload: ImageRequest):
    """Generate one image from a prompt and return it as a data URL."""
    try:
        return await generate_image(request, payload.prompt)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail="Failed to generate image") from exc
