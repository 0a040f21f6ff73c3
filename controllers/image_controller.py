from typing import Any, Dict

from fastapi import HTTPException, Request


async def generate_image(request: Request, prompt: str) -> Dict[str, Any]:
    """Synthesize a single image outside of any agent session.

    Args:
        request: FastAPI Request (used to access the shared providers).
        prompt: Image description, trimmed by the synthesizer.

    Returns:
        A dict with `success` and the image as a data URL under `imageUrl`.

    Raises:
        HTTPException(400) for an empty prompt, HTTPException(500) if no image was produced.
    """
    providers = getattr(request.app.state, "providers", None)
    if providers is None:
        raise HTTPException(status_code=500, detail="Model providers not initialized.")

    cleaned = (prompt or "").strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail="Prompt is required.")

    image_url = await providers.images.synthesize(cleaned)
    if not image_url:
        raise HTTPException(status_code=500, detail="Failed to generate image")

    return {"success": True, "imageUrl": image_url}
