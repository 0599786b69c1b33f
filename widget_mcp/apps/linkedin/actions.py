"""compose_linkedin_post tool and the server actions the composer widget calls."""
import logging
from typing import Any, Dict, Optional

from .image_client import ImageGenerationClient
from .token_store import TokenStore

logger = logging.getLogger(__name__)

MIN_PROMPT_LENGTH = 10
MAX_PROMPT_LENGTH = 500
MAX_POST_LENGTH = 3000
MIN_CAROUSEL_IMAGES = 2
MAX_CAROUSEL_IMAGES = 20

READ_ONLY_HINT = (
    "Your LinkedIn post is ready in the composer above. Use the interface to select an "
    "account, add an image if desired, and click Publish. I've completed my part - the "
    "rest is in your hands!"
)


def mock_accounts() -> Dict[str, Any]:
    """Accounts shown when nobody has authenticated."""
    return {
        "personal": {
            "id": "urn:li:person:MOCK_123",
            "name": "Jordan Example",
            "profileUrl": "https://linkedin.com/in/jordanexample",
        },
        "organizations": [
            {
                "id": "urn:li:organization:MOCK_456",
                "name": "TechCorp AI",
                "pageUrl": "https://linkedin.com/company/techcorp-ai",
            },
            {
                "id": "urn:li:organization:MOCK_789",
                "name": "Innovation Labs",
                "pageUrl": "https://linkedin.com/company/innovation-labs",
            },
        ],
    }


def _accounts_for(token_store: TokenStore) -> Dict[str, Any]:
    authenticated = token_store.authenticated_user()
    if authenticated is None:
        logger.info("No authenticated user, using mock accounts")
        return mock_accounts()

    user_id, token = authenticated
    profile = token.profile
    return {
        "personal": {
            "id": f"urn:li:person:{user_id}",
            "name": profile.get("name", user_id),
            "profileUrl": profile.get("profileUrl", ""),
        },
        "organizations": list(profile.get("organizations", [])),
    }


def make_compose_post(token_store: TokenStore):
    def compose_linkedin_post(args: Dict[str, Any]) -> Dict[str, Any]:
        post_type = args.get("postType") or "text"
        accounts = _accounts_for(token_store)

        output: Dict[str, Any] = {
            "content": args.get("content", ""),
            "postType": post_type,
            "accounts": accounts,
            "selectedAccountId": accounts["personal"]["id"],
            "phase1Features": {
                "allowImageUpload": True,
                "allowAiGeneration": True,
            },
            "readOnlyHint": READ_ONLY_HINT,
        }

        image_url = args.get("imageUrl")
        if post_type == "image" and args.get("imageSource") == "url" and image_url:
            output["image"] = {"source": "url", "url": image_url}

        if args.get("suggestedImagePrompt"):
            output["suggestedImagePrompt"] = args["suggestedImagePrompt"]

        return output

    return compose_linkedin_post


def make_generate_image(image_client: ImageGenerationClient):
    async def generate_image(args: Dict[str, Any]) -> Dict[str, Any]:
        prompt = args.get("prompt") or ""
        if not isinstance(prompt, str) or len(prompt) < MIN_PROMPT_LENGTH:
            return {
                "success": False,
                "error": f"Image prompt must be at least {MIN_PROMPT_LENGTH} characters",
            }
        if len(prompt) > MAX_PROMPT_LENGTH:
            return {
                "success": False,
                "error": f"Image prompt must be {MAX_PROMPT_LENGTH} characters or less",
            }

        # professional/minimalist render as natural, creative as vivid
        style = "vivid" if args.get("style") == "creative" else "natural"
        size = args.get("size") or "1024x1024"
        return await image_client.generate(prompt, style=style, size=size)

    return generate_image


def _failure(message: str, code: str) -> Dict[str, Any]:
    return {"success": False, "message": message, "error": code}


def _validate_post(args: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    content = args.get("content")
    post_type = args.get("postType")

    if not isinstance(content, str) or not content.strip():
        return _failure("Post content cannot be empty", "CONTENT_EMPTY")
    if len(content) > MAX_POST_LENGTH:
        return _failure(
            f"Post content must be {MAX_POST_LENGTH} characters or less", "CONTENT_TOO_LONG"
        )
    if post_type == "image" and not args.get("imageUrl"):
        return _failure("Image URL is required for image posts", "IMAGE_REQUIRED")
    if post_type == "carousel":
        images = args.get("carouselImageUrls")
        if not isinstance(images, list):
            images = []
        if len(images) < MIN_CAROUSEL_IMAGES:
            return _failure(
                f"Carousel posts require at least {MIN_CAROUSEL_IMAGES} images",
                "CAROUSEL_TOO_FEW_IMAGES",
            )
        if len(images) > MAX_CAROUSEL_IMAGES:
            return _failure(
                f"Carousel posts support maximum {MAX_CAROUSEL_IMAGES} images",
                "CAROUSEL_TOO_MANY_IMAGES",
            )
    if post_type == "document" and not args.get("documentUrl"):
        return _failure("Document URL is required for document posts", "DOCUMENT_REQUIRED")
    return None


def make_publish_post(token_store: TokenStore):
    def publish_post(args: Dict[str, Any]) -> Dict[str, Any]:
        failure = _validate_post(args)
        if failure is not None:
            return failure

        if token_store.authenticated_user() is None:
            return _failure(
                "Not authenticated. Please authenticate with LinkedIn first.",
                "NOT_AUTHENTICATED",
            )

        # Publishing through the LinkedIn Posts API is not implemented
        logger.warning(f"publish_post for {args.get('accountId')} requested; publishing unavailable")
        return _failure(
            "Publishing to LinkedIn is not available on this server.",
            "PUBLISH_UNAVAILABLE",
        )

    return publish_post
